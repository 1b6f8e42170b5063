"""Render every diagram block of a markdown document and splice the results."""

from __future__ import annotations

import asyncio
import html
import logging
from collections.abc import Callable

from markdown_it import MarkdownIt

from markdoc.blocks import extract_code_blocks, filter_diagram_blocks
from markdoc.blocks.models import CodeBlock
from markdoc.document.models import DiagramOutcome
from markdoc.errors import DiagramError
from markdoc.registry import RendererRegistry

logger = logging.getLogger(__name__)

_PLACEHOLDER = "<!--markdoc-diagram-{index}-->"


def _container(outcome: DiagramOutcome) -> str:
    return (
        f'<div class="diagram diagram-{outcome.language}">'
        f"{outcome.svg}</div>"
    )


def _failure_comment(outcome: DiagramOutcome) -> str:
    # "--" cannot appear inside an HTML comment
    message = (outcome.error or "").replace("--", "- -")
    return f"<!-- markdoc: {outcome.language} diagram at line {outcome.line} failed: {message} -->"


class DocumentRenderer:
    """Renders the diagram blocks of a document through a registry.

    A failing block never aborts the document: its outcome carries the
    error message along with the block's language and line.
    """

    def __init__(self, registry: RendererRegistry, max_concurrency: int = 4) -> None:
        self._registry = registry
        self._semaphore = asyncio.Semaphore(max_concurrency)

    def diagram_blocks(self, markdown: str) -> list[CodeBlock]:
        """Blocks whose language has a registered renderer."""
        return filter_diagram_blocks(
            extract_code_blocks(markdown), self._registry.list_languages()
        )

    async def _render_one(self, markdown: str, block: CodeBlock) -> DiagramOutcome:
        line = block.line_number(markdown)
        async with self._semaphore:
            try:
                artifact = await self._registry.dispatch(block.language, block.code)
            except DiagramError as e:
                logger.warning("%s diagram at line %d failed: %s", block.language, line, e)
                return DiagramOutcome(block=block, line=line, error=str(e))
        return DiagramOutcome(block=block, line=line, svg=artifact.to_string())

    async def render_blocks(self, markdown: str) -> list[DiagramOutcome]:
        """Render all diagram blocks concurrently; results follow source order."""
        blocks = self.diagram_blocks(markdown)
        if not blocks:
            return []
        outcomes = await asyncio.gather(*(self._render_one(markdown, b) for b in blocks))
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("Rendered %d diagram(s), %d failed", len(outcomes) - failed, failed)
        return list(outcomes)

    @staticmethod
    def _splice(
        markdown: str,
        outcomes: list[DiagramOutcome],
        replace: Callable[[int, DiagramOutcome], str],
    ) -> str:
        parts: list[str] = []
        cursor = 0
        for index, outcome in enumerate(outcomes):
            block = outcome.block
            parts.append(markdown[cursor : block.start_index])
            parts.append(replace(index, outcome))
            cursor = block.end_index
        parts.append(markdown[cursor:])
        return "".join(parts)

    async def render_markdown(self, markdown: str) -> str:
        """Return *markdown* with rendered diagrams inlined as SVG.

        Failed blocks keep their original fence, preceded by an HTML comment
        describing the failure.
        """
        outcomes = await self.render_blocks(markdown)

        def replace(_: int, outcome: DiagramOutcome) -> str:
            if outcome.ok:
                return _container(outcome)
            return f"{_failure_comment(outcome)}\n{outcome.block.raw_match}"

        return self._splice(markdown, outcomes, replace)

    async def render_html(self, markdown: str, title: str | None = None) -> str:
        """Convert *markdown* to a standalone HTML document with inline diagrams."""
        outcomes = await self.render_blocks(markdown)

        def replace(index: int, outcome: DiagramOutcome) -> str:
            if outcome.ok:
                return _PLACEHOLDER.format(index=index)
            return f"{_failure_comment(outcome)}\n{outcome.block.raw_match}"

        body = MarkdownIt("commonmark", {"html": True}).render(
            self._splice(markdown, outcomes, replace)
        )
        for index, outcome in enumerate(outcomes):
            if outcome.ok:
                body = body.replace(_PLACEHOLDER.format(index=index), _container(outcome), 1)

        heading = html.escape(title or "Document")
        return (
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n"
            f"<title>{heading}</title>\n</head>\n<body>\n{body}</body>\n</html>\n"
        )

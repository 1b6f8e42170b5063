"""Diagram-language classification for extracted code blocks."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from markdoc.blocks.models import CodeBlock
from markdoc.blocks.scanner import extract_code_blocks

DIAGRAM_LANGUAGES: frozenset[str] = frozenset(
    {"mermaid", "dot", "graphviz", "nomnoml", "pikchr"}
)


def is_diagram_language(
    language: str | None, languages: Collection[str] | None = None
) -> bool:
    """Check whether *language* names a diagram renderer.

    ``languages`` defaults to DIAGRAM_LANGUAGES; pass a registry's
    ``list_languages()`` to follow runtime registrations instead.
    """
    if not language:
        return False
    known = DIAGRAM_LANGUAGES if languages is None else languages
    return language.strip().lower() in known


def filter_diagram_blocks(
    blocks: Iterable[CodeBlock], languages: Collection[str] | None = None
) -> list[CodeBlock]:
    """Keep only the diagram blocks, preserving order."""
    return [b for b in blocks if is_diagram_language(b.language, languages)]


def get_diagram_blocks(
    markdown: str, languages: Collection[str] | None = None
) -> list[CodeBlock]:
    """Extract code blocks from *markdown* and keep the diagram ones."""
    return filter_diagram_blocks(extract_code_blocks(markdown), languages)

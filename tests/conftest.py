"""Shared test fixtures for markdoc."""

import asyncio
import html

import pytest

from markdoc.config.models import MarkdocConfig
from markdoc.registry import RendererRegistry
from markdoc.renderers.base import DiagramRenderer

SVG_NS = "http://www.w3.org/2000/svg"


class FakeRenderer(DiagramRenderer):
    """In-memory renderer: wraps the source in a <text> element."""

    name = "fake"

    def __init__(self, fail_with: Exception | None = None) -> None:
        super().__init__()
        self.fail_with = fail_with
        self.init_calls = 0
        self.rendered: list[str] = []
        self.closed = 0

    async def initialize(self) -> None:
        self.init_calls += 1
        await asyncio.sleep(0)

    async def render(self, code: str):
        await self.ensure_initialized()
        if self.fail_with is not None:
            raise self.fail_with
        self.rendered.append(code)
        return self.svg_string_to_element(
            f'<svg xmlns="{SVG_NS}" width="10" height="10">'
            f"<text>{html.escape(code)}</text></svg>"
        )

    async def aclose(self) -> None:
        self.closed += 1


@pytest.fixture
def make_renderer():
    """Factory for FakeRenderer instances."""

    def _make(fail_with: Exception | None = None) -> FakeRenderer:
        return FakeRenderer(fail_with=fail_with)

    return _make


@pytest.fixture
def fake_registry(make_renderer):
    """Registry without built-ins: fake mermaid plus a shared dot/graphviz renderer."""
    registry = RendererRegistry(builtins=False)
    registry.register("mermaid", make_renderer())
    shared = make_renderer()
    registry.register("dot", shared)
    registry.register("graphviz", shared)
    return registry


@pytest.fixture
def sample_markdown():
    return (
        "# Architecture\n"
        "\n"
        "```mermaid\n"
        "graph TD\n"
        "A-->B\n"
        "```\n"
        "\n"
        "Some prose with `inline` code.\n"
        "\n"
        "```javascript\n"
        "console.log(1);\n"
        "```\n"
        "\n"
        "```dot\n"
        "digraph G { A -> B; }\n"
        "```\n"
    )


@pytest.fixture
def sample_config():
    return MarkdocConfig()

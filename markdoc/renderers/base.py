"""Abstract diagram renderer interface."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from markdoc.renderers.styles import ensure_inline_styles
from markdoc.renderers.svg import RenderedArtifact, parse_svg


@runtime_checkable
class SupportsRender(Protocol):
    """Minimum surface a registry entry must expose."""

    async def render(self, code: str) -> RenderedArtifact: ...


class DiagramRenderer(ABC):
    """Backend-agnostic interface for turning diagram source into SVG.

    Subclasses prepare their engine in ``initialize()`` and produce an
    artifact in ``render()``. Initialization is lazy: ``render()`` should
    call ``ensure_initialized()`` first, which runs ``initialize()`` once
    even when several renders start concurrently on the same instance.
    """

    name: str = "diagram"

    def __init__(self) -> None:
        self.initialized = False
        self._init_lock = asyncio.Lock()

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend. Raises InitializationError on failure."""
        ...

    @abstractmethod
    async def render(self, code: str) -> RenderedArtifact:
        """Render *code* to SVG. Raises RenderError on failure."""
        ...

    async def ensure_initialized(self) -> None:
        if self.initialized:
            return
        async with self._init_lock:
            if not self.initialized:
                await self.initialize()
                self.initialized = True

    async def aclose(self) -> None:
        """Release backend resources. No-op by default."""
        return None

    def svg_string_to_element(self, svg: str | bytes) -> RenderedArtifact:
        return parse_svg(svg)

    def ensure_inline_styles(self, artifact: RenderedArtifact) -> RenderedArtifact:
        return ensure_inline_styles(artifact)

"""Renderer registry: maps diagram languages to renderer instances."""

from __future__ import annotations

import logging

from markdoc.config.models import RenderingConfig
from markdoc.errors import ConfigurationError, NotFoundError, RenderError
from markdoc.renderers.base import DiagramRenderer, SupportsRender
from markdoc.renderers.builtin import (
    GraphvizRenderer,
    MermaidRenderer,
    NomnomlRenderer,
    PikchrRenderer,
)
from markdoc.renderers.svg import RenderedArtifact

logger = logging.getLogger(__name__)


class RendererRegistry:
    """Case-insensitive lookup table from diagram language to renderer.

    Several languages may share one renderer instance (``dot`` and
    ``graphviz`` do by default). The registry never serializes calls to a
    renderer; shared renderers guard their own state.
    """

    def __init__(self, config: RenderingConfig | None = None, *, builtins: bool = True) -> None:
        self._config = config or RenderingConfig()
        self._renderers: dict[str, SupportsRender] = {}
        if builtins:
            self._register_builtins()

    def _register_builtins(self) -> None:
        cfg = self._config
        inline = cfg.inline_styles

        self.register("mermaid", MermaidRenderer(cfg.mermaid, cfg.kroki, inline_styles=inline))

        graphviz = GraphvizRenderer(cfg.graphviz, cfg.kroki, inline_styles=inline)
        self.register("dot", graphviz)
        self.register("graphviz", graphviz)

        self.register("nomnoml", NomnomlRenderer(cfg.nomnoml, cfg.kroki, inline_styles=inline))
        self.register("pikchr", PikchrRenderer(cfg.pikchr, cfg.kroki, inline_styles=inline))

    @staticmethod
    def _key(language: str | None) -> str:
        return (language or "").strip().lower()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, language: str, renderer: SupportsRender | None) -> None:
        """Register *renderer* for *language*, replacing any previous entry."""
        key = self._key(language)
        if not key:
            raise ConfigurationError("Cannot register a renderer for an empty language")
        if renderer is None:
            raise ConfigurationError(
                f"Cannot register null renderer for language: {language}"
            )
        if not isinstance(renderer, SupportsRender) or not callable(renderer.render):
            raise ConfigurationError(
                f"Renderer must implement render() for language: {language}"
            )

        previous = self._renderers.get(key)
        self._renderers[key] = renderer
        if previous is not None and previous is not renderer:
            logger.debug("Replaced renderer for %s: %r -> %r", key, previous, renderer)
        else:
            logger.debug("Registered renderer for %s: %r", key, renderer)

    def unregister(self, language: str) -> bool:
        """Remove the renderer for *language*. Returns True if one existed."""
        return self._renderers.pop(self._key(language), None) is not None

    def clear(self) -> None:
        """Drop every registration, built-ins included."""
        self._renderers.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, language: str) -> SupportsRender | None:
        return self._renderers.get(self._key(language))

    def supports(self, language: str | None) -> bool:
        if not language:
            return False
        return self._key(language) in self._renderers

    def list_languages(self) -> set[str]:
        return set(self._renderers)

    def items(self) -> list[tuple[str, SupportsRender]]:
        """(language, renderer) pairs sorted by language."""
        return sorted(self._renderers.items())

    def __contains__(self, language: object) -> bool:
        return isinstance(language, str) and self.supports(language)

    def __len__(self) -> int:
        return len(self._renderers)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, language: str, code: str) -> RenderedArtifact:
        """Render *code* with the renderer registered for *language*.

        Raises NotFoundError if nothing is registered, or RenderError wrapping
        whatever the renderer raised (the original is kept as ``__cause__``).
        """
        renderer = self._renderers.get(self._key(language))
        if renderer is None:
            raise NotFoundError(language)

        try:
            return await renderer.render(code)
        except Exception as e:
            raise RenderError(
                f"Failed to render {language} diagram: {e}", language=self._key(language)
            ) from e

    async def aclose(self) -> None:
        """Close every distinct renderer that holds backend resources."""
        seen: set[int] = set()
        for renderer in self._renderers.values():
            if id(renderer) in seen:
                continue
            seen.add(id(renderer))
            if isinstance(renderer, DiagramRenderer):
                await renderer.aclose()

    async def __aenter__(self) -> RendererRegistry:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

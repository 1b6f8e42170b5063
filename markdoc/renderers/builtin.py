"""Built-in renderers for mermaid, graphviz, nomnoml and pikchr."""

from __future__ import annotations

import logging
from typing import ClassVar

from markdoc.config.models import BackendConfig, KrokiConfig
from markdoc.errors import InitializationError, RenderError
from markdoc.renderers.base import DiagramRenderer
from markdoc.renderers.engines import CommandEngine, DiagramEngine, KrokiEngine
from markdoc.renderers.svg import RenderedArtifact

logger = logging.getLogger(__name__)


class EngineRenderer(DiagramRenderer):
    """Renderer that delegates to a Kroki or local-command engine.

    Subclasses only declare the Kroki diagram type and the default local
    command line; the engine is built lazily on first render.
    """

    kroki_type: ClassVar[str]
    default_command: ClassVar[tuple[str, ...]]

    def __init__(
        self,
        backend: BackendConfig | None = None,
        kroki: KrokiConfig | None = None,
        *,
        inline_styles: bool = True,
        engine: DiagramEngine | None = None,
    ) -> None:
        super().__init__()
        self._backend = backend or BackendConfig()
        self._kroki = kroki or KrokiConfig()
        self._inline_styles = inline_styles
        self.engine = engine

    def _create_engine(self) -> DiagramEngine:
        if self._backend.backend == "local":
            command = self._backend.command or list(self.default_command)
            return CommandEngine(command, timeout=self._backend.timeout)
        return KrokiEngine(
            self.kroki_type,
            url=self._kroki.url,
            timeout=self._kroki.timeout,
        )

    async def initialize(self) -> None:
        if self.engine is None:
            self.engine = self._create_engine()
        await self.engine.start()
        logger.debug("%s renderer initialized with %s engine", self.name, self.engine.name)

    async def render(self, code: str) -> RenderedArtifact:
        await self.ensure_initialized()
        try:
            svg = await self.engine.to_svg(code)
        except (RenderError, InitializationError):
            raise
        except Exception as e:
            raise RenderError(f"{self.name} engine error: {e}") from e

        if "<svg" not in svg:
            raise RenderError(svg.strip()[:500] or f"{self.name} produced no SVG output")

        artifact = self.svg_string_to_element(svg)
        if self._inline_styles:
            self.ensure_inline_styles(artifact)
        return artifact

    async def aclose(self) -> None:
        if self.engine is not None:
            await self.engine.aclose()
        self.initialized = False


class MermaidRenderer(EngineRenderer):
    """Flowcharts, sequence diagrams and the rest of the mermaid family."""

    name = "mermaid"
    kroki_type = "mermaid"
    default_command = ("mmdc", "-i", "{input}", "-o", "{output}", "-b", "transparent")


class GraphvizRenderer(EngineRenderer):
    """DOT language graphs."""

    name = "graphviz"
    kroki_type = "graphviz"
    default_command = ("dot", "-Tsvg")


class NomnomlRenderer(EngineRenderer):
    """UML sketches."""

    name = "nomnoml"
    kroki_type = "nomnoml"
    default_command = ("nomnoml", "{input}", "{output}")


class PikchrRenderer(EngineRenderer):
    """PIC-like technical diagrams."""

    name = "pikchr"
    kroki_type = "pikchr"
    default_command = ("pikchr", "--svg-only", "{input}")

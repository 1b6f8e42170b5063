"""Diagram renderer interface, built-in renderers and SVG helpers."""

from markdoc.renderers.base import DiagramRenderer, SupportsRender
from markdoc.renderers.builtin import (
    EngineRenderer,
    GraphvizRenderer,
    MermaidRenderer,
    NomnomlRenderer,
    PikchrRenderer,
)
from markdoc.renderers.engines import CommandEngine, DiagramEngine, KrokiEngine
from markdoc.renderers.styles import INLINE_PROPERTIES, ensure_inline_styles
from markdoc.renderers.svg import RenderedArtifact, parse_svg

__all__ = [
    "CommandEngine",
    "DiagramEngine",
    "DiagramRenderer",
    "EngineRenderer",
    "GraphvizRenderer",
    "INLINE_PROPERTIES",
    "KrokiEngine",
    "MermaidRenderer",
    "NomnomlRenderer",
    "PikchrRenderer",
    "RenderedArtifact",
    "SupportsRender",
    "ensure_inline_styles",
    "parse_svg",
]

"""Language-to-renderer registry and dispatch."""

from markdoc.registry.registry import RendererRegistry

__all__ = ["RendererRegistry"]

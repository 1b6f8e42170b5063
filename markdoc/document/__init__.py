"""Document-level diagram rendering and splicing."""

from markdoc.document.models import DiagramOutcome
from markdoc.document.renderer import DocumentRenderer

__all__ = ["DiagramOutcome", "DocumentRenderer"]

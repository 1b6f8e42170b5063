"""Fenced code block extraction and diagram classification."""

from markdoc.blocks.classifier import (
    DIAGRAM_LANGUAGES,
    filter_diagram_blocks,
    get_diagram_blocks,
    is_diagram_language,
)
from markdoc.blocks.models import CodeBlock
from markdoc.blocks.scanner import extract_code_blocks, line_of

__all__ = [
    "CodeBlock",
    "DIAGRAM_LANGUAGES",
    "extract_code_blocks",
    "filter_diagram_blocks",
    "get_diagram_blocks",
    "is_diagram_language",
    "line_of",
]

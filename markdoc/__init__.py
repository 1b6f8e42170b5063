"""markdoc - render diagram code blocks in markdown documents to SVG."""

from markdoc.blocks import (
    CodeBlock,
    extract_code_blocks,
    filter_diagram_blocks,
    get_diagram_blocks,
    is_diagram_language,
)
from markdoc.config import MarkdocConfig, load_config
from markdoc.document import DiagramOutcome, DocumentRenderer
from markdoc.errors import (
    ConfigurationError,
    DiagramError,
    InitializationError,
    NotFoundError,
    RenderError,
)
from markdoc.registry import RendererRegistry
from markdoc.renderers import DiagramRenderer, RenderedArtifact

__version__ = "0.1.0"

__all__ = [
    "CodeBlock",
    "ConfigurationError",
    "DiagramError",
    "DiagramOutcome",
    "DiagramRenderer",
    "DocumentRenderer",
    "InitializationError",
    "MarkdocConfig",
    "NotFoundError",
    "RenderError",
    "RenderedArtifact",
    "RendererRegistry",
    "extract_code_blocks",
    "filter_diagram_blocks",
    "get_diagram_blocks",
    "is_diagram_language",
    "load_config",
]

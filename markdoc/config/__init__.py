from .loader import load_config
from .models import (
    BackendConfig,
    KrokiConfig,
    MarkdocConfig,
    OutputConfig,
    RenderingConfig,
)

__all__ = [
    "BackendConfig",
    "KrokiConfig",
    "MarkdocConfig",
    "OutputConfig",
    "RenderingConfig",
    "load_config",
]

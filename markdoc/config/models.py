from pydantic import BaseModel, Field
from typing import Literal


class KrokiConfig(BaseModel):
    url: str = "https://kroki.io"
    timeout: float = 30.0


class BackendConfig(BaseModel):
    backend: Literal["kroki", "local"] = "kroki"
    command: list[str] | None = None  # overrides the renderer's default local command
    timeout: float = 30.0


class RenderingConfig(BaseModel):
    kroki: KrokiConfig = Field(default_factory=KrokiConfig)
    mermaid: BackendConfig = Field(default_factory=BackendConfig)
    graphviz: BackendConfig = Field(default_factory=BackendConfig)
    nomnoml: BackendConfig = Field(default_factory=BackendConfig)
    pikchr: BackendConfig = Field(default_factory=BackendConfig)
    inline_styles: bool = True
    max_concurrency: int = Field(default=4, ge=1)


class OutputConfig(BaseModel):
    directory: str = "diagrams"
    format: Literal["html", "markdown"] = "html"


class MarkdocConfig(BaseModel):
    rendering: RenderingConfig = Field(default_factory=RenderingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MarkdocConfig

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def _search_paths() -> list[Path]:
    """Implicit locations, most specific first."""
    return [Path("markdoc.yaml"), Path.home() / ".markdoc" / "config.yaml"]


def _read_mapping(path: Path) -> dict | None:
    """Parse *path*; None for an empty document, ValueError for anything unusable."""
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(
            f"Invalid config in {path}: expected a mapping, got {type(raw).__name__}"
        )
    return raw


def load_config(cli_path: str | None = None) -> MarkdocConfig:
    """Resolve the active config.

    An explicit *cli_path* must exist. Otherwise ``./markdoc.yaml`` and then
    ``~/.markdoc/config.yaml`` are tried; empty files are skipped and the
    built-in defaults apply when nothing is found.
    """
    if cli_path:
        explicit = Path(cli_path)
        if not explicit.is_file():
            raise ValueError(f"Config file not found: {cli_path}")
        candidates = [explicit]
    else:
        candidates = [p for p in _search_paths() if p.is_file()]

    for path in candidates:
        raw = _read_mapping(path)
        if raw is None:
            continue
        try:
            return MarkdocConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return MarkdocConfig()


def _expand_env_vars(obj: object) -> object:
    """Replace ``${VAR}`` in every string of a parsed YAML tree; unset vars become ""."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    return obj


# Default YAML template for `markdoc config init`
DEFAULT_CONFIG_TEMPLATE = """\
# markdoc.yaml

# Diagram rendering
rendering:
  kroki:
    url: "https://kroki.io"    # or a self-hosted instance, e.g. ${KROKI_URL}
    timeout: 30
  mermaid:
    backend: "kroki"           # kroki | local
    # command: ["mmdc", "-i", "{input}", "-o", "{output}", "-b", "transparent"]
  graphviz:                    # shared by ```dot and ```graphviz blocks
    backend: "kroki"
    # command: ["dot", "-Tsvg"]
  nomnoml:
    backend: "kroki"
  pikchr:
    backend: "kroki"
    # command: ["pikchr", "--svg-only", "{input}"]
  inline_styles: true          # resolve CSS into inline styles for export
  max_concurrency: 4

# Output
output:
  directory: "diagrams"
  format: "html"               # html | markdown

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""

"""CLI entry point for markdoc."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from markdoc.blocks import extract_code_blocks, filter_diagram_blocks
from markdoc.config import MarkdocConfig, load_config
from markdoc.config.loader import DEFAULT_CONFIG_TEMPLATE
from markdoc.document import DiagramOutcome, DocumentRenderer
from markdoc.log import configure_logging
from markdoc.registry import RendererRegistry

app = typer.Typer(
    name="markdoc",
    help="Render diagram code blocks in markdown documents to SVG.",
)

config_app = typer.Typer(help="Manage markdoc configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: MarkdocConfig | None = None


def _get_config() -> MarkdocConfig:
    if _config is None:
        return load_config()
    return _config


def _build_registry(cfg: MarkdocConfig) -> RendererRegistry:
    return RendererRegistry(cfg.rendering)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to markdoc.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _read_markdown(file: str) -> str:
    path = Path(file)
    if not path.is_file():
        rprint(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _preview(code: str, width: int = 40) -> str:
    first = code.splitlines()[0] if code else ""
    return first if len(first) <= width else first[: width - 1] + "…"


@app.command()
def blocks(
    file: str = typer.Argument(..., help="Markdown file to scan"),
    all_blocks: bool = typer.Option(False, "--all", help="Include non-diagram code blocks"),
) -> None:
    """List the fenced code blocks of a markdown file."""
    cfg = _get_config()
    markdown = _read_markdown(file)
    registry = _build_registry(cfg)

    found = extract_code_blocks(markdown)
    diagram_ids = {id(b) for b in filter_diagram_blocks(found, registry.list_languages())}
    shown = found if all_blocks else [b for b in found if id(b) in diagram_ids]

    if not shown:
        rprint("[yellow]No matching code blocks found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Code Blocks ({len(shown)})")
    table.add_column("#", justify="right")
    table.add_column("Language", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Span", justify="right", style="dim")
    table.add_column("Diagram", justify="center")
    table.add_column("Preview")
    for i, b in enumerate(shown, 1):
        table.add_row(
            str(i),
            b.language or "-",
            str(b.line_number(markdown)),
            f"{b.start_index}-{b.end_index}",
            "[green]yes[/green]" if id(b) in diagram_ids else "no",
            escape(_preview(b.code)),
        )
    rprint(table)


@app.command()
def languages() -> None:
    """Show registered diagram languages and their renderers."""
    cfg = _get_config()
    registry = _build_registry(cfg)

    table = Table(title=f"Diagram Languages ({len(registry)})")
    table.add_column("Language", style="cyan")
    table.add_column("Renderer", style="green")
    table.add_column("Backend")
    for language, renderer in registry.items():
        backend_cfg = getattr(cfg.rendering, getattr(renderer, "name", ""), None)
        backend = backend_cfg.backend if backend_cfg is not None else "-"
        table.add_row(language, type(renderer).__name__, backend)
    rprint(table)


def _display_failures(outcomes: list[DiagramOutcome]) -> None:
    for o in outcomes:
        if not o.ok:
            rprint(f"  [red]line {o.line}[/red] ({o.language}): {escape(o.error or '')}")


async def _render_outcomes(
    registry: RendererRegistry, markdown: str, max_concurrency: int
) -> list[DiagramOutcome]:
    async with registry:
        return await DocumentRenderer(registry, max_concurrency).render_blocks(markdown)


@app.command()
def render(
    file: str = typer.Argument(..., help="Markdown file containing diagrams"),
    output_dir: Annotated[
        str | None, typer.Option("--output-dir", "-o", help="Directory for SVG files")
    ] = None,
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Only render this language")
    ] = None,
) -> None:
    """Render each diagram block to an SVG file."""
    cfg = _get_config()
    markdown = _read_markdown(file)
    registry = _build_registry(cfg)

    if language:
        if not registry.supports(language):
            rprint(f"[red]Error:[/red] No renderer registered for language: {language}")
            raise typer.Exit(1)
        chosen = registry.get(language)
        # aliases sharing the chosen renderer (dot/graphviz) stay registered
        for other, renderer in registry.items():
            if renderer is not chosen:
                registry.unregister(other)

    outcomes = asyncio.run(
        _render_outcomes(registry, markdown, cfg.rendering.max_concurrency)
    )
    if not outcomes:
        rprint("[yellow]No diagram blocks found.[/yellow]")
        raise typer.Exit(0)

    out = Path(output_dir or cfg.output.directory)
    out.mkdir(parents=True, exist_ok=True)
    written = 0
    for i, o in enumerate(outcomes, 1):
        if o.ok:
            target = out / f"diagram-{i}-{o.language}.svg"
            target.write_text(o.svg, encoding="utf-8")
            written += 1
            rprint(f"[green]Written[/green] {target}")

    failed = len(outcomes) - written
    rprint(
        Panel(
            f"[dim]Diagrams:[/dim]  {len(outcomes)}\n"
            f"[dim]Rendered:[/dim]  {written}\n"
            f"[dim]Failed:[/dim]    {failed}",
            title="Render Result",
            border_style="red" if failed else "green",
        )
    )
    if failed:
        _display_failures(outcomes)
        raise typer.Exit(1)


async def _export_document(
    registry: RendererRegistry,
    markdown: str,
    fmt: str,
    max_concurrency: int,
    title: str,
) -> str:
    async with registry:
        doc = DocumentRenderer(registry, max_concurrency)
        if fmt == "markdown":
            return await doc.render_markdown(markdown)
        return await doc.render_html(markdown, title=title)


@app.command()
def export(
    file: str = typer.Argument(..., help="Markdown file to export"),
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write result to file")
    ] = None,
    format: Annotated[
        str | None, typer.Option("--format", "-f", help="Output format: html or markdown")
    ] = None,
) -> None:
    """Export a markdown file with its diagrams rendered inline."""
    cfg = _get_config()
    fmt = format or cfg.output.format
    if fmt not in ("html", "markdown"):
        rprint(f"[red]Error:[/red] Unknown format '{fmt}': expected html or markdown")
        raise typer.Exit(1)

    markdown = _read_markdown(file)
    registry = _build_registry(cfg)
    result = asyncio.run(
        _export_document(
            registry, markdown, fmt, cfg.rendering.max_concurrency, Path(file).stem
        )
    )

    if output:
        Path(output).write_text(result, encoding="utf-8")
        rprint(f"[green]Written to[/green] {output}")
    else:
        typer.echo(result)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default markdoc.yaml in current directory."""
    target = Path("markdoc.yaml")
    if target.exists() and not force:
        rprint("[yellow]markdoc.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")

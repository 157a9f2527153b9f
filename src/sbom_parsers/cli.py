"""Command-line interface for sbom-parsers."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from sbom_parsers import __version__
from sbom_parsers.config import ParserConfig, load_config
from sbom_parsers.errors import SbomParserError
from sbom_parsers.registry import detect_plugin, list_modules
from sbom_parsers.reporter import create_reporter

console = Console(stderr=True)


def _setup_logging(config: ParserConfig, verbose: bool) -> None:
    """Route library logging through rich at the configured level."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(config_path: Optional[str], verbose: bool) -> ParserConfig:
    try:
        config = load_config(config_path)
    except SbomParserError as e:
        console.print(f"[red]Error: {e}[/red]", soft_wrap=True)
        sys.exit(1)
    _setup_logging(config, verbose)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="sbom-parsers")
def main() -> None:
    """sbom-parsers - Extract dependency metadata from package manager artifacts."""
    pass


@main.command()
def version() -> None:
    """Show version information."""
    click.echo(f"sbom-parsers version {__version__}")


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option("--config", "config_path", type=click.Path(), help="JSON config file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def detect(path: str, config_path: Optional[str], verbose: bool) -> None:
    """Show which package manager manages PATH."""
    config = _load(config_path, verbose)

    try:
        plugin = detect_plugin(path, config)
    except SbomParserError as e:
        console.print(f"[red]Error: {e}[/red]", soft_wrap=True)
        sys.exit(1)

    metadata = plugin.get_metadata()
    try:
        tool_version = plugin.get_version()
    except SbomParserError:
        tool_version = "unknown"

    click.echo(f"{metadata.slug} ({metadata.name}), version {tool_version}")


@main.command("list")
@click.argument("path", type=click.Path(exists=True, file_okay=False), default=".")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "table"]),
    default="table",
    help="Output format.",
)
@click.option("--flat", is_flag=True, help="List modules without dependency edges.")
@click.option("--dev", is_flag=True, help="Include development-only packages.")
@click.option("--config", "config_path", type=click.Path(), help="JSON config file.")
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    help="Output file path.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def list_command(
    path: str,
    format: str,
    flat: bool,
    dev: bool,
    config_path: Optional[str],
    output: Optional[str],
    verbose: bool,
) -> None:
    """List the modules used by the project at PATH."""
    config = _load(config_path, verbose)
    if dev:
        config.include_dev = True

    try:
        report = list_modules(path, config, with_deps=not flat)
    except (SbomParserError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]", soft_wrap=True)
        sys.exit(1)

    rendered = create_reporter(format, flat=flat).generate(report)
    if output:
        Path(output).write_text(rendered, encoding="utf-8")
        console.print(f"[green]Report written to {output}[/green]")
    else:
        click.echo(rendered)


if __name__ == "__main__":
    main()

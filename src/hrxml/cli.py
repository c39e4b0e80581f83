"""Click CLI for hrxml — parse resumes through the parsing service."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from hrxml.config.hierarchy import load_config_hierarchy
from hrxml.documents import SUPPORTED_EXTENSIONS, is_supported
from hrxml.errors.exceptions import HRXMLError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


@click.group()
@click.version_option(package_name="hrxml-client")
def cli() -> None:
    """hrxml — Concurrent resume parsing against an HR-XML web service."""


@cli.command()
@click.argument("input_path", type=click.Path(exists=True))
@click.option(
    "-o", "--output-dir", type=click.Path(), help="Write each result as <document>.xml here."
)
@click.option("--base-url", type=str, default=None, help="Parsing service base URL.")
@click.option("--slots", type=int, default=None, help="Maximum concurrent requests.")
@click.option("--timeout", type=float, default=None, help="Per-operation I/O timeout (seconds).")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def parse(
    input_path: str,
    output_dir: str | None,
    base_url: str | None,
    slots: int | None,
    timeout: float | None,
    verbose: int,
) -> None:
    """Parse a resume, or every supported resume in a directory."""
    _setup_logging(verbose)
    from hrxml.client import ResumeParser

    input_path_obj = Path(input_path)
    if input_path_obj.is_dir():
        files = [f for f in sorted(input_path_obj.iterdir()) if f.is_file() and is_supported(f)]
    else:
        files = [input_path_obj]

    if not files:
        supported = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        error_console.print(f"[yellow]No supported files found ({supported}).[/yellow]")
        return

    out_dir = Path(output_dir) if output_dir else None
    if out_dir:
        out_dir.mkdir(parents=True, exist_ok=True)

    table = Table(title="Parse Results", show_header=True)
    table.add_column("Document", style="cyan")
    table.add_column("Name")
    table.add_column("Email")
    table.add_column("Positions")
    table.add_column("Skills")

    failures = 0
    with ResumeParser(base_url=base_url, slots=slots, timeout=timeout) as parser:
        try:
            pending = parser.parse_resume_async({f.name: f for f in files})
        except (OSError, ValueError) as e:
            error_console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)

        while not pending.is_complete():
            try:
                resume, resource_id = pending.await_response()
            except (HRXMLError, httpx.HTTPError) as e:
                failures += 1
                error_console.print(f"[red]{pending.last_await_id} failed:[/red] {e}")
                continue
            if resume is None:
                break

            if out_dir:
                out_path = out_dir / f"{resource_id}.xml"
                out_path.write_text(resume.raw_xml, encoding="utf-8")
            table.add_row(
                str(resource_id),
                resume.name or "-",
                resume.email or "-",
                str(len(resume.positions)),
                ", ".join(resume.skills[:5]) or "-",
            )

    console.print(table)
    if out_dir:
        console.print(f"[green]Wrote results to {out_dir}[/green]")
    if failures:
        error_console.print(f"[red]{failures} of {len(files)} document(s) failed[/red]")
        sys.exit(1)


@cli.command("config")
def show_config() -> None:
    """Show the resolved configuration."""
    config = load_config_hierarchy()

    table = Table(title="Configuration", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key in sorted(config):
        value = config[key]
        if key == "api_key" and value:
            value = "****" + str(value)[-4:]
        table.add_row(key, "-" if value is None else str(value))

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    cli()

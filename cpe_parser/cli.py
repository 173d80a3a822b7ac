"""
CLI Interface
=============
Command-line interface for the transcript parser.

Usage:
    python -m cpe_parser parse <pdf_path> [options]
    python -m cpe_parser text <text_path>
    python -m cpe_parser batch <directory> [options]
    python -m cpe_parser info <pdf_path>
    python -m cpe_parser serve [options]
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from . import __version__
from .engine import ParserConfig, ParserEngine
from .pdf_text import PageTextExtractor, PdfTextError
from .transcript import extract_transcript
from .validator import ValidationEngine

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="cpe-parser")
def cli():
    """CPE Transcript Parser: CPE Monitor activity transcript extractor."""
    pass


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True))
@click.option(
    "--output-dir", "-o",
    default=None,
    help="Directory for the JSON output (defaults to the PDF's directory)",
)
@click.option(
    "--no-save",
    is_flag=True,
    default=False,
    help="Do not write the JSON output file",
)
@click.option(
    "--validation",
    is_flag=True,
    default=False,
    help="Also write <name>_validation.json",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only the transcript JSON to stdout (for programmatic use)",
)
def parse(
    pdf_path: str,
    output_dir: str,
    no_save: bool,
    validation: bool,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Parse a single transcript PDF into a structured record."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"

    config = ParserConfig(
        output_dir=output_dir,
        save_output=not no_save,
        save_validation=validation,
        log_level=log_level,
        log_file=log_file,
    )

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]CPE Transcript Parser v{__version__}[/]\n"
                f"[dim]Parsing: {os.path.basename(pdf_path)}[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        engine = ParserEngine(config)

        if not json_output:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                console=console,
            ) as progress:
                task = progress.add_task("Extracting pages...", total=None)

                def on_page(current, total):
                    progress.update(task, completed=current, total=total)

                result = engine.parse(pdf_path, progress_callback=on_page)

            _display_results(result)
        else:
            result = engine.parse(pdf_path)
            print(json.dumps(
                result.transcript.model_dump(),
                indent=2,
                ensure_ascii=False,
            ))

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)
    except RuntimeError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)


@cli.command()
@click.argument("text_path", type=click.Path(exists=True))
@click.option(
    "--validation",
    is_flag=True,
    default=False,
    help="Print the validation report after the record",
)
def text(text_path: str, validation: bool):
    """Extract a record from already-extracted transcript text."""

    raw_text = Path(text_path).read_text(encoding="utf-8")
    extraction = extract_transcript(raw_text)

    click.echo(json.dumps(
        extraction.record.model_dump(),
        indent=2,
        ensure_ascii=False,
    ))

    if validation:
        report = ValidationEngine().validate(extraction)
        _display_validation_table(report.model_dump())


@cli.command()
@click.argument("directory", type=click.Path(exists=True))
@click.option("--output-dir", "-o", default=None, help="Output directory")
@click.option("--log-level", default="WARNING", help="Logging level")
def batch(directory: str, output_dir: str, log_level: str):
    """Batch parse all transcript PDFs in a directory."""

    pdf_files = sorted(Path(directory).glob("*.pdf"))

    if not pdf_files:
        console.print(f"[yellow]No PDF files found in: {directory}[/]")
        return

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Batch Transcript Parser[/]\n"
            f"[dim]Found {len(pdf_files)} PDFs in: {directory}[/]",
            border_style="cyan",
        )
    )
    console.print()

    results = []
    errors = []

    config = ParserConfig(output_dir=output_dir, log_level=log_level)
    engine = ParserEngine(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(
            "Processing PDFs...", total=len(pdf_files)
        )

        for pdf_file in pdf_files:
            progress.update(
                task,
                description=f"Parsing: {pdf_file.name}",
            )

            try:
                result = engine.parse(str(pdf_file))
                results.append((pdf_file.name, result))
            except (FileNotFoundError, RuntimeError) as e:
                errors.append((pdf_file.name, str(e)))

            progress.advance(task)

    _display_batch_summary(results, errors)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Server host")
@click.option("--port", default=5000, type=int, help="Server port")
@click.option("--debug", is_flag=True, default=False, help="Debug mode")
def serve(host: str, port: int, debug: bool):
    """Start the HTTP microservice server."""
    from .server import run_server

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]CPE Transcript Parser Microservice[/]\n"
            f"[dim]Starting on {host}:{port}[/]",
            border_style="cyan",
        )
    )
    console.print()

    run_server(host=host, port=port, debug=debug)


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True))
def info(pdf_path: str):
    """Display PDF file information."""

    try:
        pdf_info = PageTextExtractor().get_info(pdf_path)
    except PdfTextError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print()
    table = Table(title="PDF Information", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")

    table.add_row("File", os.path.basename(pdf_path))
    table.add_row("Pages", str(pdf_info["page_count"]))
    table.add_row(
        "File Size",
        f"{os.path.getsize(pdf_path) / 1024:.1f} KB",
    )

    metadata = pdf_info["metadata"]
    for key in ["title", "author", "creator", "producer"]:
        if key in metadata:
            table.add_row(key.title(), metadata[key])

    console.print(table)
    console.print()


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_results(result):
    """Display parse results in formatted tables."""
    console.print()

    header = result.transcript.header
    table = Table(title="Participant", border_style="cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in header.model_dump().items():
        table.add_row(name, "[dim](not found)[/]" if value is None else str(value))
    console.print(table)
    console.print()

    activities = Table(title="Activities", border_style="cyan")
    activities.add_column("Date")
    activities.add_column("Activity #")
    activities.add_column("Credit")
    activities.add_column("Title")
    activities.add_column("Topic")
    activities.add_column("Live", justify="right")
    activities.add_column("Home", justify="right")
    for activity in result.transcript.activities:
        topic = activity.topic
        if activity.is_low_confidence:
            topic = f"[yellow]{topic} ?[/]"
        activities.add_row(
            activity.activity_date,
            activity.activity_number,
            f"{activity.credit_type}/{activity.source}",
            activity.title,
            topic,
            f"{activity.live_hours:.2f}",
            f"{activity.home_hours:.2f}",
        )
    console.print(activities)
    console.print()

    _display_validation_table(result.validation.model_dump())

    pv = result.parse_version
    console.print(
        f"[dim]Parser v{pv.parser_version} | "
        f"Pages: {result.document.total_pages} | "
        f"Activities: {pv.activity_count} | "
        f"Timestamp: {pv.parse_timestamp}[/]"
    )
    console.print()


def _display_validation_table(validation: dict):
    """Display validation report as a rich table."""
    table = Table(title="Validation Report", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    def status_icon(count, threshold=0):
        if count <= threshold:
            return "[green]✓[/]"
        return "[yellow]⚠[/]"

    parsed = validation.get("activities_parsed", 0)
    table.add_row(
        "Activities Parsed",
        f"{parsed} ({validation.get('success_rate', 0)}%)",
        "[green]✓[/]" if parsed > 0 else "[red]✗[/]",
    )

    rejected = validation.get("rejected_chunks", 0)
    table.add_row("Rejected Chunks", str(rejected), status_icon(rejected))

    low_confidence = validation.get("low_confidence_topics", [])
    table.add_row(
        "Low-Confidence Topics",
        str(len(low_confidence)),
        status_icon(len(low_confidence)),
    )

    missing = validation.get("missing_header_fields", [])
    table.add_row(
        "Missing Header Fields",
        ", ".join(missing) or "-",
        status_icon(len(missing)),
    )

    console.print(table)
    console.print()

    breakdown = validation.get("rejection_breakdown", {})
    if breakdown:
        reject_table = Table(
            title="Rejection Breakdown",
            border_style="yellow",
        )
        reject_table.add_column("Reason", style="bold")
        reject_table.add_column("Count", justify="right")

        for reason, count in sorted(breakdown.items()):
            reject_table.add_row(reason, str(count))

        console.print(reject_table)
        console.print()


def _display_batch_summary(results, errors):
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Processing Summary", border_style="cyan")
    table.add_column("PDF", style="bold")
    table.add_column("Participant")
    table.add_column("Activities", justify="right")
    table.add_column("Rejected", justify="right")
    table.add_column("Status", justify="center")

    total_activities = 0

    for name, result in results:
        count = len(result.transcript.activities)
        total_activities += count
        rejected = result.validation.rejected_chunks

        status = "[green]✓[/]" if count > 0 else "[yellow]⚠[/]"
        table.add_row(
            name,
            result.transcript.header.participant_name or "-",
            str(count),
            str(rejected),
            status,
        )

    for name, error in errors:
        table.add_row(name, "-", "-", "-", "[red]✗ FAILED[/]")

    console.print(table)
    console.print()
    console.print(
        f"[bold]Total:[/] {total_activities} activities from "
        f"{len(results)} PDFs, {len(errors)} failures"
    )
    console.print()


# ─── Entry point (for python -m cpe_parser.cli) ───────────────────────────────


if __name__ == "__main__":
    cli()

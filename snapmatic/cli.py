"""
Command-line interface for the Snapmatic converter.

This module provides the `snapmatic` entry point for listing Snapmatic
pictures and converting one, some, or all of them to JPEG.
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from snapmatic.config import ConverterSettings
from snapmatic.converter import SnapConverter
from snapmatic.models import BatchReport, ConversionResult, MarkerPolicy
from snapmatic.utils.errors import SnapmaticException
from snapmatic.utils.logging import LogContext, setup_logging

app = typer.Typer(
    name="snapmatic",
    help="Extract JPEG images from Snapmatic picture files",
    add_completion=False,
)
console = Console()


def load_settings(
    src: Optional[Path] = None,
    dst: Optional[Path] = None,
    base_dir: Optional[Path] = None,
    config: Optional[Path] = None,
    env_file: Optional[Path] = None,
    debug: Optional[bool] = None,
    workers: Optional[int] = None,
    passthrough: Optional[bool] = None,
    prefix: Optional[str] = None,
) -> ConverterSettings:
    """
    Merge settings sources.

    Precedence is command-line option, then JSON config file, then
    environment (including .env), then defaults.
    """
    values = ConverterSettings.env_values(env_file)
    if config:
        values.update(ConverterSettings.json_values(config))

    overrides = {
        "src_path": str(src) if src else None,
        "dst_path": str(dst) if dst else None,
        "base_dir": str(base_dir) if base_dir else None,
        "debug": debug,
        "workers": workers,
        "file_prefix": prefix,
    }
    if passthrough is not None:
        overrides["marker_policy"] = MarkerPolicy.PASSTHROUGH if passthrough else MarkerPolicy.STRICT
    values.update({key: value for key, value in overrides.items() if value is not None})

    return ConverterSettings.build(**values)


def _converter(ctx: typer.Context) -> SnapConverter:
    return ctx.obj["converter"]


def _print_results(results: List[ConversionResult], title: str) -> None:
    table = Table(title=title)
    table.add_column("File", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Offset", justify="right")
    table.add_column("Bytes", justify="right")
    table.add_column("Output / Error", style="dim")

    for result in results:
        if result.ok:
            table.add_row(
                result.filename,
                "[green]✓[/green]",
                str(result.marker_offset) if result.marker_offset is not None else "-",
                f"{result.bytes_written:,}",
                result.destination_path or "",
            )
        else:
            table.add_row(
                result.filename,
                "[red]✗[/red]",
                "-",
                "-",
                result.error or "",
            )

    console.print(table)


def _finish(report: BatchReport, title: str) -> None:
    if not report.total:
        console.print("[yellow]No Snapmatic pictures found.[/yellow]")
        return

    _print_results(report.results, title)
    console.print(
        f"Converted [green]{len(report.succeeded)}[/green] of {report.total} file(s)"
        + (f", [red]{len(report.failed)} failed[/red]" if report.failed else "")
    )
    if not report.all_ok:
        raise typer.Exit(1)


@app.command("list")
def list_files(ctx: typer.Context):
    """List Snapmatic pictures in the source directory."""
    converter = _converter(ctx)
    try:
        files = converter.list_files()
    except SnapmaticException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not files:
        console.print("[yellow]No Snapmatic pictures found.[/yellow]")
        return

    table = Table(title=f"Snapmatic pictures in {converter.src_path} ({len(files)} files)")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    for name in files:
        try:
            size = f"{os.path.getsize(os.path.join(converter.src_path, name)) / 1024:.1f} KB"
        except OSError:
            size = "-"
        table.add_row(name, size)
    console.print(table)


@app.command()
def convert(
    ctx: typer.Context,
    filename: str = typer.Argument(..., help="Snapmatic file name in the source directory"),
):
    """Convert one Snapmatic picture to JPEG."""
    converter = _converter(ctx)
    try:
        with LogContext(operation="convert"):
            result = converter.convert_single_file(filename)
    except SnapmaticException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _finish(BatchReport(results=[result]), "Conversion")


@app.command("convert-all")
def convert_all(ctx: typer.Context):
    """Convert every Snapmatic picture in the source directory."""
    converter = _converter(ctx)
    try:
        with LogContext(operation="convert-all"):
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Converting Snapmatic pictures...", total=None)
                report = converter.convert_all_files()
    except SnapmaticException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _finish(report, f"Converted into {converter.dst_path}")


@app.command("convert-some")
def convert_some(
    ctx: typer.Context,
    filenames: List[str] = typer.Argument(..., help="Snapmatic file names to convert"),
):
    """Convert the listed Snapmatic pictures."""
    converter = _converter(ctx)
    try:
        with LogContext(operation="convert-some"):
            report = converter.convert_some_files(filenames)
    except SnapmaticException as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    _finish(report, f"Converted into {converter.dst_path}")


@app.callback()
def main(
    ctx: typer.Context,
    src: Optional[Path] = typer.Option(None, "--src", "-s", help="Directory holding Snapmatic files"),
    dst: Optional[Path] = typer.Option(None, "--dst", "-d", help="Directory receiving JPEG files"),
    base_dir: Optional[Path] = typer.Option(
        None, "--base-dir", "-b", help="Base directory for default source/ and converted/"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON config file"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help=".env file to load"),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Enable debug logging"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Parallel conversions"),
    passthrough: Optional[bool] = typer.Option(
        None,
        "--passthrough/--strict",
        help="Write files without a JPEG marker unchanged instead of failing them",
    ),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Snapmatic file name prefix"),
):
    """Snapmatic converter - extract JPEG images from Snapmatic pictures."""
    try:
        settings = load_settings(
            src=src,
            dst=dst,
            base_dir=base_dir,
            config=config,
            env_file=env_file,
            debug=debug,
            workers=workers,
            passthrough=passthrough,
            prefix=prefix,
        )
    except SnapmaticException as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(
        log_level=settings.effective_log_level,
        log_file_path=settings.get_log_file_path(),
        dev_mode=settings.debug,
    )
    ctx.obj = {"settings": settings, "converter": SnapConverter(settings)}


if __name__ == "__main__":
    app()

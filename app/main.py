"""
Command-line interface for the translation manager.

Usage:
    i18n extract app resources/views
    i18n extract app --format source --output lang/extracted.py
    i18n extract app --namespace auth --show-stats
    i18n extract app --dry-run --pattern "__t\\(['\\"]([^'\\"]+)['\\"]" --show-stats
"""

import time
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from infrastructure.i18n import ExtractionOptions, FormatError, PackSerializer, create_extractor
from infrastructure.i18n.formats import OCCURRENCE_WRITERS, parse_format
from infrastructure.logging import (
    add_app_info,
    bind_operation_context,
    configure_logging,
    get_module_logger,
)
from infrastructure.services import get_settings

APP_NAME = "translation-manager"
__version__ = "0.1.0"

app = typer.Typer(
    name="i18n",
    help="Translation key extraction and language pack tooling.",
    add_completion=False,
)
console = Console()
logger = get_module_logger()


def version_callback(value: bool):
    if value:
        console.print(f"{APP_NAME} v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Translation manager: extract translation keys from source code."""
    configure_logging(
        settings=get_settings(),
        extra_processors=[add_app_info(APP_NAME, __version__)],
    )


@app.command()
def extract(
    paths: List[Path] = typer.Argument(..., help="Files or directories to scan"),
    export_format: str = typer.Option(
        "json", "--format", "-f", help="Export format (json, source, csv, pot)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file path (default: I18N_EXPORT_DIR)"
    ),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Only keep keys in this namespace"
    ),
    no_recursive: bool = typer.Option(
        False, "--no-recursive", help="Disable recursive directory scanning"
    ),
    show_stats: bool = typer.Option(
        False, "--show-stats", help="Display extraction statistics"
    ),
    patterns: Optional[List[str]] = typer.Option(
        None, "--pattern", "-p", help="Additional extraction pattern (repeatable)"
    ),
    pattern_kind: str = typer.Option(
        "php", "--pattern-kind", help="Source kind the additional patterns apply to"
    ),
    exclude: Optional[List[str]] = typer.Option(
        None, "--exclude", "-e", help="Additional directories to exclude (comma-separated)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be extracted without saving"
    ),
):
    """Extract translation keys from source code files."""
    settings = get_settings()
    console.print("[bold]Translation Key Extractor[/bold]\n")

    try:
        fmt = parse_format(export_format)
    except FormatError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    if fmt not in OCCURRENCE_WRITERS:
        console.print(f"[red]Format '{fmt.value}' cannot export extracted keys.[/red]")
        raise typer.Exit(code=1)

    valid_paths = []
    for path in paths:
        if path.exists():
            valid_paths.append(str(path))
            console.print(f"[green]✓[/green] Path: {escape(str(path))}")
        else:
            console.print(f"[yellow]✗ Invalid path: {escape(str(path))}[/yellow]")
    if not valid_paths:
        console.print("[red]No valid paths found to scan.[/red]")
        raise typer.Exit(code=1)

    extractor = create_extractor(settings)
    for pattern in patterns or []:
        try:
            extractor.add_pattern(pattern_kind, pattern)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(code=1)
        console.print(f"Added custom pattern: {escape(pattern)}")
    for entry in exclude or []:
        for name in entry.split(","):
            extractor.add_exclude_directory(name)

    options = ExtractionOptions(
        recursive=not no_recursive,
        namespace=namespace,
        sort=settings.extraction.sort_field,
    )

    console.print("Extracting translation keys...")
    started = time.perf_counter()
    with bind_operation_context(operation="extract_keys"):
        keys = extractor.extract(valid_paths, options)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    for warning in extractor.last_warnings:
        console.print(f"[yellow]Skipped {escape(str(warning.path))}: {escape(warning.reason)}[/yellow]")

    if not keys:
        console.print("[yellow]No translation keys found.[/yellow]")
        return

    stats = extractor.generate_stats(keys)
    _display_results(keys, stats, elapsed_ms)
    if show_stats:
        _display_statistics(stats)

    if dry_run:
        console.print("\nDRY RUN: Results not saved.")
    else:
        artifact = PackSerializer.export_occurrences(keys, fmt, statistics=stats)
        target = output or Path(settings.i18n.export_dir) / artifact.filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(artifact.content)
        except OSError as e:
            console.print(f"[red]Export failed: {e}[/red]")
            raise typer.Exit(code=1)
        logger.info("extracted_keys_exported", path=str(target), format=fmt.value)
        console.print(f"\nResults exported to: {target}")
        console.print(f"Format: {fmt.value}")
        console.print(f"Size: {format_bytes(len(artifact.content))}")

    console.print("\n[green]Extraction completed successfully![/green]")


def _display_results(keys, stats: Dict, elapsed_ms: float) -> None:
    console.print("\n[bold]Extraction Results[/bold]")
    console.print(f"Keys found: {len(keys)}")
    console.print(f"Unique keys: {stats['unique_keys']}")
    console.print(f"Files scanned: {stats['files_scanned']}")
    console.print(f"Execution time: {elapsed_ms}ms")

    if stats["file_types"]:
        console.print("\nFile types:")
        for kind, count in stats["file_types"].items():
            console.print(f"  {kind}: {count} keys")

    if len(keys) <= 20:
        table = Table(title="Sample keys")
        table.add_column("Key", style="cyan")
        table.add_column("Location")
        for key in keys[:10]:
            location = f"{Path(key.file).name}:{key.line}" if key.file else f"N/A:{key.line}"
            table.add_row(key.key, location)
        console.print(table)


def _display_statistics(stats: Dict) -> None:
    table = Table(title="Detailed Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for label, name in (
        ("Total keys", "total_keys"),
        ("Unique keys", "unique_keys"),
        ("Namespaces", "namespaces"),
        ("Files scanned", "files_scanned"),
    ):
        table.add_row(label, str(stats[name]))
    console.print(table)

    if stats["namespace_breakdown"]:
        console.print("\nNamespace breakdown:")
        for namespace, count in stats["namespace_breakdown"].items():
            console.print(f"  {namespace}: {count}")

    if stats["most_used_keys"]:
        console.print("\nMost frequently used keys:")
        for key, count in list(stats["most_used_keys"].items())[:5]:
            console.print(f"  {key}: {count} occurrences")


def format_bytes(size: int) -> str:
    """Human readable byte size, e.g. 1.5 KB."""
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value > 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2)} {units[index]}"


if __name__ == "__main__":
    app()

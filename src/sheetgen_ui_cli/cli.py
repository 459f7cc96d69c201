"""
Sheetgen CLI Application

Typer-based command-line interface for compiling sheet configurations to
Excel workbooks.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from sheetgen_engine.errors import ExportError
from sheetgen_io.delivery import DirectoryDelivery
from sheetgen_io.readers import read_request_file
from sheetgen_io.writers import export_csv, export_to_excel, export_xlsx
from sheetgen_io.xlsx_validation import load_exported_workbook, summarize_workbook
from sheetgen_ui_cli.display import (
    display_export_report,
    display_request_summary,
    display_workbook_summary,
)


app = typer.Typer(
    name="sheetgen",
    help="Compile declarative sheet configurations into styled Excel workbooks",
    add_completion=False,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_input_file(input_file: Optional[Path], input_option: Optional[Path]) -> Path:
    """Resolve input file from positional arg or --input option."""
    resolved = input_option or input_file
    if resolved is None:
        raise typer.BadParameter("Missing input file. Provide a positional INPUT_FILE or --input.")
    if not resolved.exists():
        raise typer.BadParameter(f"Input file not found: {resolved}")
    if not resolved.is_file():
        raise typer.BadParameter(f"Input path is not a file: {resolved}")
    return resolved


@app.command()
def export(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to export request (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to export request (YAML or JSON)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Output Excel file path (default: fileName from the request, in --output-dir)",
    ),
    output_dir: Path = typer.Option(
        Path("."),
        "--output-dir",
        help="Directory for the request's fileName when --output is not given",
    ),
    include_csv: bool = typer.Option(
        False,
        "--csv",
        help="Also export one CSV per sheet next to the workbook",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress report tables",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Log every compiler pass and skipped directive",
    ),
) -> None:
    """
    Compile an export request and write the workbook.

    Directives that cannot be resolved are skipped and listed as
    diagnostics; malformed requests abort with exit code 1.
    """
    _configure_logging(verbose)
    try:
        input_file = _resolve_input_file(input_file, input_option)
        console.print(f"[dim]Reading request: {input_file}[/dim]")
        request = read_request_file(input_file)

        if output is not None:
            report = export_xlsx(request, output)
            target = output
        else:
            report = asyncio.run(export_to_excel(request, DirectoryDelivery(output_dir)))
            target = output_dir / Path(request.file_name).name

        if not quiet:
            display_export_report(report)
        console.print(f"[green]✓ Exported to {target}[/green]")

        if include_csv:
            csv_dir = target.parent / "csv"
            files = export_csv(request, csv_dir)
            console.print(f"[green]✓ Exported {len(files)} CSV files to {csv_dir}[/green]")

    except (ExportError, ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def validate(
    input_file: Optional[Path] = typer.Argument(
        None,
        help="Path to export request (YAML or JSON)",
    ),
    input_option: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Path to export request (YAML or JSON)",
    ),
) -> None:
    """
    Validate an export request without writing a workbook.
    """
    try:
        input_file = _resolve_input_file(input_file, input_option)
        console.print(f"[dim]Validating: {input_file}[/dim]")
        request = read_request_file(input_file)

        console.print("[green]✓ Request is valid[/green]")
        display_request_summary(request)

    except (ExportError, ValueError, OSError) as e:
        console.print(f"[red]Validation failed: {e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def inspect(
    workbook: Path = typer.Argument(..., help="Path to an .xlsx file"),
) -> None:
    """
    Summarize an exported workbook: rows, validations, comments, panes, protection.
    """
    try:
        if not workbook.is_file():
            raise typer.BadParameter(f"Workbook not found: {workbook}")
        wb = load_exported_workbook(workbook)
        display_workbook_summary(summarize_workbook(wb))
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()

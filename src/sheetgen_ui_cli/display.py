"""
Sheetgen CLI Display

Rich table formatting for terminal output.
"""
from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sheetgen_engine.diagnostics import ExportReport
from sheetgen_engine.models import ExportRequest
from sheetgen_io.xlsx_validation import SheetSummary


console = Console()


def display_header(title: str) -> None:
    """Display a section header."""
    console.print()
    console.print(Panel(Text(title, style="bold white"), style="blue"))


def display_request_summary(request: ExportRequest) -> None:
    """Display the sheets a request describes."""
    display_header(f"Request: {request.file_name}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Sheet", style="dim")
    table.add_column("Columns", justify="right")
    table.add_column("Data", justify="right")
    table.add_column("Custom", justify="right")
    table.add_column("Dropdowns", justify="right")
    table.add_column("Locked", justify="right")
    table.add_column("Protected", justify="center")

    for sheet in request.sheets:
        table.add_row(
            sheet.sheet_name,
            str(len(sheet.columns)),
            str(len(sheet.data)),
            str(len(sheet.custom_rows)),
            str(len(sheet.dropdowns)),
            str(len(sheet.locked_columns)),
            "yes" if sheet.protect_sheet is not None or (sheet.locked_columns and sheet.has_columns) else "no",
        )

    console.print(table)


def display_export_report(report: ExportReport) -> None:
    """Display per-sheet results and any diagnostics."""
    display_header(f"Export: {report.file_name}")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Sheet", style="dim")
    table.add_column("Rows", justify="right")
    table.add_column("Protected", justify="center")
    table.add_column("Diagnostics", justify="right")

    for sheet in report.sheets:
        table.add_row(
            sheet.sheet_name,
            str(sheet.row_count),
            "yes" if sheet.protected else "no",
            str(len(sheet.diagnostics)),
        )
    console.print(table)

    if report.diagnostics:
        diag_table = Table(show_header=True, header_style="bold yellow")
        diag_table.add_column("Sheet", style="dim")
        diag_table.add_column("Pass")
        diag_table.add_column("Kind")
        diag_table.add_column("Message")
        for d in report.diagnostics:
            diag_table.add_row(d.sheet, d.pass_name, d.kind.value, d.message)
        console.print(diag_table)


def display_workbook_summary(summaries: list[SheetSummary]) -> None:
    """Display what an exported workbook actually contains."""
    display_header("Workbook")

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Sheet", style="dim")
    table.add_column("Rows", justify="right")
    table.add_column("Cols", justify="right")
    table.add_column("Validations", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Frozen at", justify="center")
    table.add_column("Protected", justify="center")

    for s in summaries:
        table.add_row(
            s.name,
            str(s.max_row),
            str(s.max_column),
            str(s.validations),
            str(s.comments),
            s.frozen_at or "-",
            "yes" if s.protected else "no",
        )
    console.print(table)

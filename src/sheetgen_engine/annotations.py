"""
Header Comments and Dropdown Validation

Passes 6 and 7. Both address columns by key and need the column schema.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from openpyxl.comments import Comment
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.cell_range import MultiCellRange
from openpyxl.worksheet.datavalidation import DataValidation

from sheetgen_engine.context import SheetContext
from sheetgen_engine.defaults import (
    DROPDOWN_ERROR_MESSAGE,
    DROPDOWN_ERROR_TITLE,
    LIST_FORMULA_MAX_LENGTH,
    MAX_ROW,
)
from sheetgen_engine.diagnostics import DiagnosticKind
from sheetgen_engine.layout import row_in_bounds
from sheetgen_engine.models import DropdownSpec


def add_header_comments(ctx: SheetContext) -> None:
    comments = ctx.config.comments
    if not comments:
        return
    if not ctx.has_columns:
        ctx.report.add(DiagnosticKind.REQUIRES_COLUMNS, "comments", "comments ignored without columns")
        return
    for spec in comments:
        col = ctx.column_number(spec.key, "comments")
        if col is None:
            continue
        ctx.cell(ctx.layout.header_row, col).comment = Comment(spec.text, spec.author)


def _option_text(option: Any) -> str:
    if isinstance(option, bool):
        return "true" if option else "false"
    return str(option)


def list_formula(options: Iterable[Any]) -> str:
    """Quoted, comma-joined inline list; embedded quotes are doubled."""
    escaped = [_option_text(option).replace('"', '""') for option in options]
    return '"' + ",".join(escaped) + '"'


def dropdown_rows(ctx: SheetContext, spec: DropdownSpec) -> range:
    """
    Rows covered by a dropdown.

    Without an explicit end row the range spans every data and custom row
    plus ``additional_rows`` of spare capacity for manual entry.
    """
    end_row = spec.end_row or (1 + ctx.config.total_data_rows + spec.additional_rows)
    return range(spec.start_row, end_row + 1)


def _row_runs(rows: Iterable[int]) -> list[tuple[int, int]]:
    """Collapse row numbers into inclusive ``(start, end)`` runs."""
    runs: list[list[int]] = []
    for row in sorted(rows):
        if runs and row == runs[-1][1] + 1:
            runs[-1][1] = row
        else:
            runs.append([row, row])
    return [(start, end) for start, end in runs]


def _column_sqref(letter: str, rows: Iterable[int]) -> str:
    return " ".join(f"{letter}{start}:{letter}{end}" for start, end in _row_runs(rows))


@dataclass(eq=False)
class _PlacedValidation:
    validation: DataValidation
    column: int
    rows: set[int]


def _release_rows(ws, placed: list[_PlacedValidation], column: int, rows: range) -> None:
    """
    Take ``rows`` of ``column`` away from earlier validations.

    A cell carries a single list rule, so a later dropdown replaces an
    earlier one wherever they overlap.
    """
    for entry in list(placed):
        if entry.column != column or entry.rows.isdisjoint(rows):
            continue
        entry.rows.difference_update(rows)
        if entry.rows:
            entry.validation.sqref = MultiCellRange(
                _column_sqref(get_column_letter(column), entry.rows)
            )
        else:
            # identity, not ==; DataValidation compares by value
            ws.data_validations.dataValidation = [
                dv for dv in ws.data_validations.dataValidation if dv is not entry.validation
            ]
            placed.remove(entry)


def add_dropdowns(ctx: SheetContext) -> None:
    dropdowns = ctx.config.dropdowns
    if not dropdowns:
        return
    if not ctx.has_columns:
        ctx.report.add(DiagnosticKind.REQUIRES_COLUMNS, "dropdowns", "dropdowns ignored without columns")
        return
    ws = ctx.worksheet
    placed: list[_PlacedValidation] = []
    for spec in dropdowns:
        col = ctx.column_number(spec.key, "dropdowns")
        if col is None:
            continue
        if not spec.options:
            ctx.report.add(DiagnosticKind.EMPTY_OPTIONS, "dropdowns", f"dropdown for {spec.key!r} has no options")
            continue
        rows = dropdown_rows(ctx, spec)
        if not rows:
            ctx.report.add(
                DiagnosticKind.UNRESOLVED_ADDRESS,
                "dropdowns",
                f"dropdown for {spec.key!r} ends before it starts (row {spec.start_row})",
            )
            continue
        if not (row_in_bounds(rows.start) and row_in_bounds(rows.stop - 1)):
            ctx.report.add(
                DiagnosticKind.UNRESOLVED_ADDRESS,
                "dropdowns",
                f"dropdown for {spec.key!r} covers rows {rows.start}..{rows.stop - 1}, "
                f"outside 1..{MAX_ROW}",
            )
            continue

        formula = list_formula(spec.options)
        if len(formula) > LIST_FORMULA_MAX_LENGTH:
            ctx.report.add(
                DiagnosticKind.FORMULA_TOO_LONG,
                "dropdowns",
                f"dropdown for {spec.key!r} is {len(formula)} characters "
                f"(limit {LIST_FORMULA_MAX_LENGTH}); Excel may reject it",
            )

        _release_rows(ws, placed, col, rows)
        validation = DataValidation(
            type="list",
            formula1=formula,
            allow_blank=True,
            showErrorMessage=True,
            errorStyle="stop",
            errorTitle=DROPDOWN_ERROR_TITLE,
            error=DROPDOWN_ERROR_MESSAGE,
        )
        ws.add_data_validation(validation)
        letter = get_column_letter(col)
        validation.add(f"{letter}{rows.start}:{letter}{rows.stop - 1}")
        placed.append(_PlacedValidation(validation, col, set(rows)))
        # Capacity rows become part of the sheet so later column passes reach them
        for row in rows:
            ctx.cell(row, col)

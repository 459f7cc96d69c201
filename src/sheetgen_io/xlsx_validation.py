"""Inspection helpers for exported workbooks."""
from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

from openpyxl import load_workbook
from openpyxl.utils import column_index_from_string


@dataclass(frozen=True)
class SheetSummary:
    name: str
    max_row: int
    max_column: int
    protected: bool
    validations: int
    comments: int
    frozen_at: Optional[str]


def load_exported_workbook(source: str | Path | bytes):
    if isinstance(source, bytes):
        return load_workbook(BytesIO(source))
    return load_workbook(source)


def validated_rows(ws, column: str) -> set[int]:
    """Rows of ``column`` (a letter) covered by any data validation."""
    col = column_index_from_string(column)
    rows: set[int] = set()
    for dv in ws.data_validations.dataValidation:
        for cell_range in dv.sqref.ranges:
            if cell_range.min_col <= col <= cell_range.max_col:
                rows.update(range(cell_range.min_row, cell_range.max_row + 1))
    return rows


def find_locked_cells(ws) -> list[str]:
    locked: list[str] = []
    for row in ws.iter_rows():
        for cell in row:
            if cell.protection.locked:
                locked.append(cell.coordinate)
    return locked


def summarize_workbook(wb) -> list[SheetSummary]:
    summaries: list[SheetSummary] = []
    for ws in wb.worksheets:
        comments = sum(1 for row in ws.iter_rows() for cell in row if cell.comment is not None)
        summaries.append(
            SheetSummary(
                name=ws.title,
                max_row=ws.max_row,
                max_column=ws.max_column,
                protected=bool(ws.protection.sheet),
                validations=len(ws.data_validations.dataValidation),
                comments=comments,
                frozen_at=ws.freeze_panes,
            )
        )
    return summaries

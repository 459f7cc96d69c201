"""
Column Schema and Row Materialization

Passes 1 and 2: register the column layout (schema mode only), then write
primary data rows followed by custom data rows.
"""
from __future__ import annotations

from typing import Any

from openpyxl.utils import get_column_letter

from sheetgen_engine.context import SheetContext
from sheetgen_engine.diagnostics import DiagnosticKind


def register_columns(ctx: SheetContext) -> None:
    """Write header text, set widths and build the key -> 0-based index map."""
    if not ctx.has_columns:
        return
    ws = ctx.worksheet
    for index, column in enumerate(ctx.config.columns):
        ctx.cell(ctx.layout.header_row, index + 1, column.header)
        ws.column_dimensions[get_column_letter(index + 1)].width = column.width
        ctx.key_map[column.key] = index


def _write_record(ctx: SheetContext, row: int, record: dict[str, Any]) -> None:
    if ctx.has_columns:
        # Every schema column is materialized so row styles cover the full width
        for key, index in ctx.key_map.items():
            ctx.cell(row, index + 1, record.get(key))
    else:
        # Headerless: values land in the record's own key order
        for col, value in enumerate(record.values(), start=1):
            ctx.cell(row, col, value)
    ctx.touch_row(row)


def materialize_rows(ctx: SheetContext) -> None:
    """Write ``data`` then ``customData``, contiguous, starting at the first data row."""
    config = ctx.config
    ctx.data_rows = ctx.layout.data_rows(len(config.data))
    ctx.custom_rows = ctx.layout.data_rows(len(config.custom_rows), offset=len(config.data))

    if not ctx.has_columns and config.data and not config.data[0]:
        ctx.report.add(
            DiagnosticKind.EMPTY_FIRST_ROW,
            "rows",
            "first data row is empty; column count of the headerless sheet is ambiguous",
        )

    for row, record in zip(ctx.data_rows, config.data):
        _write_record(ctx, row, record)
    for row, record in zip(ctx.custom_rows, config.custom_rows):
        _write_record(ctx, row, record)

"""
Styling Passes

Passes 3-5 and 8-10: data rows, custom rows, header, column colors, explicit
row overrides and explicit cell overrides, in that order.
"""
from __future__ import annotations

from typing import Optional

from openpyxl.cell.cell import Cell
from openpyxl.styles import Alignment, Font

from sheetgen_engine.context import SheetContext
from sheetgen_engine.defaults import (
    HEADER_ALIGNMENT,
    HEADER_BORDER_COLOR,
    HEADER_BORDER_STYLE,
    HEADER_FILL_COLOR,
    HEADER_FONT_SIZE,
    HEADER_TEXT_COLOR,
)
from sheetgen_engine.diagnostics import DiagnosticKind
from sheetgen_engine.layout import parse_cell_address, row_in_bounds
from sheetgen_engine.models import (
    CellAddress,
    CellList,
    CellRange,
    CellStyle,
    CellStyleRule,
    KeyedCell,
)
from sheetgen_engine.styles import (
    apply_cell_style,
    argb_color,
    build_alignment,
    build_border,
    build_fill,
    build_font,
    font_kwargs,
    merge_font,
    solid_fill,
    uniform_border,
)


def apply_row_style(ctx: SheetContext, row: int, style: CellStyle) -> None:
    """Merge ``style`` into every materialized cell of ``row``."""
    for cell in ctx.row_cells(row):
        apply_cell_style(cell, style)
    if style.height is not None:
        ctx.worksheet.row_dimensions[row].height = style.height


def apply_data_style(ctx: SheetContext) -> None:
    style = ctx.config.data_style
    if style is None or not ctx.config.data:
        return
    for row in ctx.data_rows:
        apply_row_style(ctx, row, style)


def apply_custom_style(ctx: SheetContext) -> None:
    """
    Style appended rows.

    Font, alignment and height are a full overwrite here, not a merge;
    fill and border are only touched when the style sets them.
    """
    style = ctx.config.custom_data.style
    if style is None:
        return
    font = build_font(style.font)
    alignment = build_alignment(style.alignment)
    fill = build_fill(style.fill) if style.fill is not None else None
    border = build_border(style.border) if style.border is not None else None
    for row in ctx.custom_rows:
        ctx.worksheet.row_dimensions[row].height = style.height
        for cell in ctx.row_cells(row):
            cell.font = font
            cell.alignment = alignment
            if fill is not None:
                cell.fill = fill
            if border is not None:
                cell.border = border


def style_header(ctx: SheetContext) -> None:
    if not ctx.has_columns:
        return
    header = ctx.config.header_style
    row = ctx.layout.header_row

    font_fields = {
        "bold": True,
        "size": HEADER_FONT_SIZE,
        "color": argb_color(header.text_color or HEADER_TEXT_COLOR),
    }
    if header.font is not None:
        font_fields.update(font_kwargs(header.font))
    font = Font(**font_fields)
    fill = solid_fill(header.background_color or HEADER_FILL_COLOR)
    if header.alignment is not None:
        alignment = build_alignment(header.alignment)
    else:
        alignment = Alignment(**HEADER_ALIGNMENT)
    if header.border is not None:
        border = build_border(header.border)
    else:
        border = uniform_border(
            header.border_color or HEADER_BORDER_COLOR,
            header.border_style or HEADER_BORDER_STYLE,
        )

    for cell in ctx.row_cells(row):
        cell.font = font
        cell.fill = fill
        cell.alignment = alignment
        cell.border = border
    if header.height is not None:
        ctx.worksheet.row_dimensions[row].height = header.height


def apply_column_colors(ctx: SheetContext) -> None:
    colors = ctx.config.column_colors
    if not colors:
        return
    if not ctx.has_columns:
        ctx.report.add(DiagnosticKind.REQUIRES_COLUMNS, "column_colors", "columnColors ignored without columns")
        return
    first_row = ctx.layout.header_row + 1
    last_row = max(ctx.last_row, ctx.worksheet.max_row)
    for key, color in colors.items():
        col = ctx.column_number(key, "column_colors")
        if col is None:
            continue
        fill = solid_fill(color.background_color) if color.background_color else None
        text = {"color": argb_color(color.text_color)} if color.text_color else None
        for row in range(first_row, last_row + 1):
            cell = ctx.cell(row, col)
            if fill is not None:
                cell.fill = fill
            if text is not None:
                cell.font = merge_font(cell.font, text)
            if color.num_fmt:
                cell.number_format = color.num_fmt


def apply_row_styles(ctx: SheetContext) -> None:
    for position, rule in enumerate(ctx.config.row_styles):
        selector = rule.selector
        if selector is None:
            ctx.report.add(DiagnosticKind.NO_SELECTOR, "row_styles", f"rowStyles[{position}] has no row, rows or startRow/endRow")
            continue
        for row in selector.row_numbers():
            if not row_in_bounds(row):
                ctx.report.add(DiagnosticKind.UNRESOLVED_ADDRESS, "row_styles", f"row {row} is out of range")
                continue
            apply_row_style(ctx, row, rule.style)


def _range_cells(ctx: SheetContext, start_cell: str, end_cell: str) -> Optional[list[Cell]]:
    start = parse_cell_address(start_cell)
    end = parse_cell_address(end_cell)
    if start is None or end is None:
        ctx.report.add(
            DiagnosticKind.UNRESOLVED_ADDRESS,
            "cell_styles",
            f"invalid range {start_cell!r}:{end_cell!r}",
        )
        return None
    # Only cells that already exist; a range never grows the sheet
    return [
        cell for cell in ctx.cells()
        if start[1] <= cell.row <= end[1] and start[0] <= cell.column <= end[0]
    ]


def _rule_targets(ctx: SheetContext, position: int, rule: CellStyleRule) -> list[Cell]:
    selector = rule.selector
    if selector is None:
        ctx.report.add(DiagnosticKind.NO_SELECTOR, "cell_styles", f"cellStyles[{position}] has no addressing mode")
        return []
    if isinstance(selector, CellAddress):
        cells = [ctx.cell_at(selector.cell, "cell_styles")]
    elif isinstance(selector, CellList):
        cells = [ctx.cell_at(address, "cell_styles") for address in selector.cells]
    elif isinstance(selector, KeyedCell):
        if not ctx.has_columns:
            ctx.report.add(DiagnosticKind.REQUIRES_COLUMNS, "cell_styles", f"cellStyles[{position}] uses a column key without columns")
            return []
        col = ctx.column_number(selector.column, "cell_styles")
        if col is None:
            return []
        if not row_in_bounds(selector.row):
            ctx.report.add(DiagnosticKind.UNRESOLVED_ADDRESS, "cell_styles", f"row {selector.row} is out of range")
            return []
        cells = [ctx.cell(selector.row, col)]
    elif isinstance(selector, CellRange):
        cells = _range_cells(ctx, selector.start_cell, selector.end_cell) or []
    else:
        raise TypeError(f"Unknown cell selector: {selector!r}")
    return [cell for cell in cells if cell is not None]


def apply_cell_styles(ctx: SheetContext) -> None:
    for position, rule in enumerate(ctx.config.cell_styles):
        for cell in _rule_targets(ctx, position, rule):
            apply_cell_style(cell, rule.style)

"""
Sheet Compiler

Turns each SheetConfig of an ExportRequest into a styled openpyxl worksheet
by running a fixed sequence of passes. Sheets are compiled independently
and in configuration order.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheetgen_engine.annotations import add_dropdowns, add_header_comments
from sheetgen_engine.context import SheetContext
from sheetgen_engine.defaults import WORKBOOK_CREATOR
from sheetgen_engine.diagnostics import ExportReport, SheetReport
from sheetgen_engine.errors import ConfigurationError
from sheetgen_engine.models import ExportRequest, SheetConfig
from sheetgen_engine.protection import apply_freeze, apply_sheet_protection, lock_columns
from sheetgen_engine.rows import materialize_rows, register_columns
from sheetgen_engine.styling import (
    apply_cell_styles,
    apply_column_colors,
    apply_custom_style,
    apply_data_style,
    apply_row_styles,
    style_header,
)


logger = logging.getLogger(__name__)

Pass = Callable[[SheetContext], None]


class SheetCompiler:
    """
    Compiles one sheet configuration onto a worksheet.

    Later passes read the layout and styles left by earlier ones, so the
    order below is part of the contract. Column colors deliberately run
    before the explicit row and cell overrides.
    """

    PASSES: tuple[tuple[str, Pass], ...] = (
        ("columns", register_columns),
        ("rows", materialize_rows),
        ("data_style", apply_data_style),
        ("custom_style", apply_custom_style),
        ("header", style_header),
        ("comments", add_header_comments),
        ("dropdowns", add_dropdowns),
        ("column_colors", apply_column_colors),
        ("row_styles", apply_row_styles),
        ("cell_styles", apply_cell_styles),
        ("freeze", apply_freeze),
        ("protection", apply_sheet_protection),
        ("lock_columns", lock_columns),
    )

    def __init__(self, config: SheetConfig):
        self.config = config

    def compile(self, worksheet: Worksheet) -> SheetReport:
        """
        Run every pass against ``worksheet``.

        Any exception raised by a pass propagates and aborts the sheet.
        """
        ctx = SheetContext.create(worksheet, self.config)
        for name, run_pass in self.PASSES:
            logger.debug("[%s] pass %s", self.config.sheet_name, name)
            run_pass(ctx)
        ctx.report.row_count = ctx.last_row
        ctx.report.protected = ctx.protected
        return ctx.report


def compile_workbook(request: ExportRequest) -> tuple[Workbook, ExportReport]:
    """Build a workbook holding one worksheet per configured sheet, in order."""
    if not request.sheets:
        raise ConfigurationError("Export request contains no sheets")

    wb = Workbook()
    wb.remove(wb.active)
    wb.properties.creator = WORKBOOK_CREATOR
    wb.properties.created = datetime.now()
    report = ExportReport(file_name=request.file_name)
    for config in request.sheets:
        ws = wb.create_sheet(title=config.sheet_name)
        sheet_report = SheetCompiler(config).compile(ws)
        report.sheets.append(sheet_report)
        logger.info(
            "Compiled sheet %r: %d rows, %d diagnostics",
            config.sheet_name,
            sheet_report.row_count,
            len(sheet_report.diagnostics),
        )
    return wb, report

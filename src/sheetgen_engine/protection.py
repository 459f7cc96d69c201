"""
Freeze Panes, Sheet Protection and Column Locking

Passes 11-13.
"""
from __future__ import annotations

from openpyxl.styles import Protection

from sheetgen_engine.context import SheetContext
from sheetgen_engine.diagnostics import DiagnosticKind
from sheetgen_engine.layout import SheetLayout
from sheetgen_engine.models import ProtectionOptions


LOCKED = Protection(locked=True)
UNLOCKED = Protection(locked=False)


def apply_freeze(ctx: SheetContext) -> None:
    freeze = ctx.config.freeze
    if freeze is None or (freeze.rows <= 0 and freeze.columns <= 0):
        return
    # The pane's top-left unfrozen cell; the sheet keeps its A1 active cell
    ctx.worksheet.freeze_panes = SheetLayout.cell(freeze.columns + 1, freeze.rows + 1)


def protect(ctx: SheetContext, options: ProtectionOptions) -> None:
    """
    Enable sheet protection.

    ``options`` says what stays allowed; openpyxl flags say what is
    protected, hence the inversion.
    """
    sp = ctx.worksheet.protection
    sp.sheet = True
    if options.password:
        sp.password = options.password
    sp.selectLockedCells = not options.select_locked_cells
    sp.selectUnlockedCells = not options.select_unlocked_cells
    sp.formatCells = not options.format_cells
    sp.formatColumns = not options.format_columns
    sp.formatRows = not options.format_rows
    sp.insertColumns = not options.insert_columns
    sp.insertRows = not options.insert_rows
    sp.deleteColumns = not options.delete_columns
    sp.deleteRows = not options.delete_rows
    sp.sort = not options.sort
    sp.autoFilter = not options.auto_filter
    ctx.protected = True


def apply_sheet_protection(ctx: SheetContext) -> None:
    if ctx.config.protect_sheet is not None:
        protect(ctx, ctx.config.protect_sheet)


def lock_columns(ctx: SheetContext) -> None:
    """
    Lock the configured columns and unlock everything else.

    Locking does nothing on an unprotected sheet, so protection is switched
    on with the default policy when the sheet is not protected yet.
    """
    locked = ctx.config.locked_columns
    if not locked:
        return
    if not ctx.has_columns:
        ctx.report.add(DiagnosticKind.REQUIRES_COLUMNS, "lock_columns", "lockedColumns ignored without columns")
        return
    if not ctx.protected:
        protect(ctx, ProtectionOptions())

    for cell in ctx.cells():
        cell.protection = UNLOCKED

    for key in locked:
        col = ctx.column_number(key, "lock_columns")
        if col is None:
            continue
        for row in range(1, ctx.last_row + 1):
            ctx.cell(row, col).protection = LOCKED

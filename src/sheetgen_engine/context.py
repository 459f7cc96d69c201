"""
Per-Sheet Compilation State

Everything one sheet's passes share: the worksheet, the resolved schema
flags, the key map and the set of cells materialized so far. Nothing here
outlives a single sheet.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from openpyxl.cell.cell import Cell
from openpyxl.worksheet.worksheet import Worksheet

from sheetgen_engine.diagnostics import DiagnosticKind, SheetReport
from sheetgen_engine.layout import SheetLayout, parse_cell_address
from sheetgen_engine.models import SheetConfig


_UNSET = object()


@dataclass
class SheetContext:
    worksheet: Worksheet
    config: SheetConfig
    report: SheetReport
    layout: SheetLayout
    key_map: dict[str, int] = field(default_factory=dict)
    data_rows: range = range(0)
    custom_rows: range = range(0)
    last_row: int = 0
    protected: bool = False
    _cells: dict[int, set[int]] = field(default_factory=dict)

    @classmethod
    def create(cls, worksheet: Worksheet, config: SheetConfig) -> "SheetContext":
        return cls(
            worksheet=worksheet,
            config=config,
            report=SheetReport(sheet_name=config.sheet_name),
            layout=SheetLayout(has_columns=config.has_columns),
        )

    @property
    def has_columns(self) -> bool:
        return self.layout.has_columns

    # ------------------------------------------------------------------
    # Addressing
    # ------------------------------------------------------------------

    def column_number(self, key: str, pass_name: str) -> Optional[int]:
        """1-based column for ``key``, or None (recorded as a skip)."""
        index = self.key_map.get(key)
        if index is None:
            self.report.add(DiagnosticKind.UNRESOLVED_KEY, pass_name, f"unknown column key {key!r}")
            return None
        return index + 1

    def cell(self, row: int, column: int, value: Any = _UNSET) -> Cell:
        """Get or create a cell and remember it as materialized."""
        if value is _UNSET:
            cell = self.worksheet.cell(row=row, column=column)
        else:
            cell = self.worksheet.cell(row=row, column=column, value=value)
        self._cells.setdefault(row, set()).add(column)
        self.touch_row(row)
        return cell

    def cell_at(self, address: str, pass_name: str) -> Optional[Cell]:
        coords = parse_cell_address(address)
        if coords is None:
            self.report.add(DiagnosticKind.UNRESOLVED_ADDRESS, pass_name, f"invalid cell address {address!r}")
            return None
        col, row = coords
        return self.cell(row, col)

    def touch_row(self, row: int) -> None:
        """Advance the row cursor; empty records still occupy their row."""
        if row > self.last_row:
            self.last_row = row

    # ------------------------------------------------------------------
    # Iteration over materialized cells
    # ------------------------------------------------------------------

    def row_cells(self, row: int) -> list[Cell]:
        return [self.worksheet.cell(row=row, column=col) for col in sorted(self._cells.get(row, ()))]

    def cells(self) -> Iterator[Cell]:
        for row in sorted(self._cells):
            yield from self.row_cells(row)

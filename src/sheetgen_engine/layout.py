"""
Sheet Layout and Addressing

Row numbering rules and A1-style address parsing shared by the passes.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from openpyxl.utils import column_index_from_string, get_column_letter

from sheetgen_engine.defaults import HEADER_ROW, MAX_ROW


_ADDRESS = re.compile(r"^([A-Z]+)(\d+)$")


@dataclass(frozen=True)
class SheetLayout:
    """Row numbering for a sheet in schema mode or headerless mode."""
    has_columns: bool
    header_row: int = HEADER_ROW

    @property
    def first_data_row(self) -> int:
        return self.header_row + 1 if self.has_columns else 1

    def data_rows(self, count: int, offset: int = 0) -> range:
        """Row numbers of ``count`` records written after ``offset`` earlier ones."""
        start = self.first_data_row + offset
        return range(start, start + count)

    @staticmethod
    def cell(col: int, row: int) -> str:
        return f"{get_column_letter(col)}{row}"


def row_in_bounds(row: int) -> bool:
    return 1 <= row <= MAX_ROW


def parse_cell_address(address: object) -> Optional[tuple[int, int]]:
    """
    Split an A1-style address into ``(column, row)``, both 1-based.

    Letters are read as base-26 (A=1 .. Z=26, AA=27). Returns None for
    anything that is not a plain address inside the worksheet bounds.
    """
    if not isinstance(address, str):
        return None
    match = _ADDRESS.match(address.strip().upper())
    if not match:
        return None
    letters, digits = match.groups()
    row = int(digits)
    if not row_in_bounds(row):
        return None
    try:
        col = column_index_from_string(letters)
    except ValueError:
        # past the last Excel column (XFD)
        return None
    return col, row


def cell_in_range(address: object, start_cell: object, end_cell: object) -> bool:
    """True when ``address`` lies inside the inclusive rectangle start..end."""
    cell = parse_cell_address(address)
    start = parse_cell_address(start_cell)
    end = parse_cell_address(end_cell)
    if cell is None or start is None or end is None:
        return False
    col, row = cell
    return start[1] <= row <= end[1] and start[0] <= col <= end[0]

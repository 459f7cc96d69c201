"""
Sheet Compiler Defaults

Fallback values used whenever a sheet configuration leaves a field unset.
"""
from __future__ import annotations


# ============================================================================
# REQUEST
# ============================================================================

DEFAULT_FILE_NAME = "export.xlsx"
DEFAULT_SHEET_NAME = "Sheet1"
DEFAULT_COLUMN_WIDTH = 15

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Excel caps sheet titles at 31 characters
MAX_SHEET_NAME_LENGTH = 31

# Last addressable row of an .xlsx worksheet
MAX_ROW = 1048576

WORKBOOK_CREATOR = "sheetgen"


# ============================================================================
# HEADER
# ============================================================================

HEADER_ROW = 1
HEADER_FONT_SIZE = 12
HEADER_TEXT_COLOR = "FFFFFFFF"
HEADER_FILL_COLOR = "FF4472C4"
HEADER_BORDER_COLOR = "FF000000"
HEADER_BORDER_STYLE = "thin"
HEADER_ALIGNMENT = {"vertical": "center", "horizontal": "center"}


# ============================================================================
# DROPDOWNS
# ============================================================================

DROPDOWN_START_ROW = 2
DROPDOWN_ADDITIONAL_ROWS = 100

# Inline list formulas longer than this are truncated or rejected by Excel
LIST_FORMULA_MAX_LENGTH = 255

DROPDOWN_ERROR_TITLE = "Invalid Selection"
DROPDOWN_ERROR_MESSAGE = "Please select a value from the dropdown"


# ============================================================================
# PROTECTION
# ============================================================================

# "Allowed" semantics: True means the user may still do it on a protected sheet
DEFAULT_PROTECTION_POLICY = {
    "password": "",
    "select_locked_cells": True,
    "select_unlocked_cells": True,
    "format_cells": False,
    "format_columns": False,
    "format_rows": False,
    "insert_columns": False,
    "insert_rows": False,
    "delete_columns": False,
    "delete_rows": False,
    "sort": False,
    "auto_filter": False,
}

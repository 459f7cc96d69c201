"""
Sheet Compiler Request Models

Pydantic models for export requests. Input documents use camelCase keys
(``sheetName``, ``customData`` ...); Python callers may pass snake_case
field names instead.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from sheetgen_engine.defaults import (
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_FILE_NAME,
    DEFAULT_PROTECTION_POLICY,
    DEFAULT_SHEET_NAME,
    DROPDOWN_ADDITIONAL_ROWS,
    DROPDOWN_START_ROW,
    MAX_SHEET_NAME_LENGTH,
)
from sheetgen_engine.errors import ConfigurationError


_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}([0-9A-Fa-f]{2})?$")
_INVALID_SHEET_CHARS = re.compile(r"[\\*?:/\[\]]")


def normalize_argb(color: str) -> str:
    """Return an 8-digit ARGB string, adding an opaque alpha to 6-digit RGB."""
    color = color.strip().lstrip("#")
    if not _HEX_COLOR.match(color):
        raise ValueError(f"Invalid color {color!r}: expected RRGGBB or AARRGGBB hex")
    if len(color) == 6:
        color = "FF" + color
    return color.upper()


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ============================================================================
# STYLE OBJECTS
# ============================================================================

class ColorSpec(_ConfigModel):
    """Color given as ARGB hex or as a theme index."""
    argb: Optional[str] = None
    theme: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def accept_bare_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"argb": data}
        return data

    @field_validator("argb")
    @classmethod
    def validate_argb(cls, v: Optional[str]) -> Optional[str]:
        return normalize_argb(v) if v is not None else None


class FontSpec(_ConfigModel):
    name: Optional[str] = None
    size: Optional[float] = Field(None, gt=0)
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[Union[bool, str]] = None
    strike: Optional[bool] = None
    color: Optional[ColorSpec] = None


class FillSpec(_ConfigModel):
    """Pattern fill. Gradient fills are not supported."""
    type: Literal["pattern"] = "pattern"
    pattern: str = "solid"
    fg_color: Optional[ColorSpec] = None
    bg_color: Optional[ColorSpec] = None


class SideSpec(_ConfigModel):
    style: Optional[str] = "thin"
    color: Optional[ColorSpec] = None


class BorderSpec(_ConfigModel):
    top: Optional[SideSpec] = None
    left: Optional[SideSpec] = None
    bottom: Optional[SideSpec] = None
    right: Optional[SideSpec] = None
    diagonal: Optional[SideSpec] = None


class AlignmentSpec(_ConfigModel):
    horizontal: Optional[str] = None
    vertical: Optional[str] = None
    wrap_text: Optional[bool] = None
    shrink_to_fit: Optional[bool] = None
    indent: Optional[float] = None
    text_rotation: Optional[int] = None

    @field_validator("vertical")
    @classmethod
    def map_middle(cls, v: Optional[str]) -> Optional[str]:
        # "middle" is accepted as another name for "center"
        return "center" if v == "middle" else v


class CellStyle(_ConfigModel):
    """Style applied to cells or rows by the data/custom/row/cell passes."""
    font: Optional[FontSpec] = None
    fill: Optional[FillSpec] = None
    border: Optional[BorderSpec] = None
    alignment: Optional[AlignmentSpec] = None
    num_fmt: Optional[str] = Field(
        None, validation_alias=AliasChoices("numFmt", "numberFormat", "num_fmt")
    )
    height: Optional[float] = Field(None, gt=0)


class HeaderStyle(_ConfigModel):
    """Header row styling. Unset fields fall back to sheetgen_engine.defaults."""
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    border_color: Optional[str] = None
    border_style: Optional[str] = None
    font: Optional[FontSpec] = None
    alignment: Optional[AlignmentSpec] = None
    border: Optional[BorderSpec] = None
    height: Optional[float] = Field(None, gt=0)

    @field_validator("background_color", "text_color", "border_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return normalize_argb(v) if v is not None else None


# ============================================================================
# SHEET DIRECTIVES
# ============================================================================

class ColumnDef(_ConfigModel):
    header: str
    key: str
    width: float = Field(DEFAULT_COLUMN_WIDTH, gt=0)


class CommentSpec(_ConfigModel):
    key: str
    text: str
    author: str = ""


class DropdownSpec(_ConfigModel):
    key: str
    options: list[Any] = Field(default_factory=list)
    start_row: int = DROPDOWN_START_ROW
    end_row: Optional[int] = Field(None, description="Last validated row; 0 or unset derives it from the data")
    additional_rows: int = Field(DROPDOWN_ADDITIONAL_ROWS, ge=0)


class FreezeSpec(_ConfigModel):
    rows: int = Field(0, ge=0)
    columns: int = Field(0, ge=0)


class ColumnColor(_ConfigModel):
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    num_fmt: Optional[str] = Field(
        None, validation_alias=AliasChoices("numFmt", "numberFormat", "num_fmt")
    )

    @field_validator("background_color", "text_color")
    @classmethod
    def validate_color(cls, v: Optional[str]) -> Optional[str]:
        return normalize_argb(v) if v is not None else None


class ProtectionOptions(_ConfigModel):
    """
    Sheet protection policy.

    Flags use "allowed" semantics: True means the action stays available to
    the user while the sheet is protected.
    """
    password: str = DEFAULT_PROTECTION_POLICY["password"]
    select_locked_cells: bool = DEFAULT_PROTECTION_POLICY["select_locked_cells"]
    select_unlocked_cells: bool = DEFAULT_PROTECTION_POLICY["select_unlocked_cells"]
    format_cells: bool = DEFAULT_PROTECTION_POLICY["format_cells"]
    format_columns: bool = DEFAULT_PROTECTION_POLICY["format_columns"]
    format_rows: bool = DEFAULT_PROTECTION_POLICY["format_rows"]
    insert_columns: bool = DEFAULT_PROTECTION_POLICY["insert_columns"]
    insert_rows: bool = DEFAULT_PROTECTION_POLICY["insert_rows"]
    delete_columns: bool = DEFAULT_PROTECTION_POLICY["delete_columns"]
    delete_rows: bool = DEFAULT_PROTECTION_POLICY["delete_rows"]
    sort: bool = DEFAULT_PROTECTION_POLICY["sort"]
    auto_filter: bool = DEFAULT_PROTECTION_POLICY["auto_filter"]

    @field_validator("password", mode="before")
    @classmethod
    def none_password(cls, v: Any) -> Any:
        return "" if v is None else v


class CustomDataBlock(_ConfigModel):
    """Rows appended after the primary data, with their own optional style."""
    data: list[dict[str, Any]] = Field(default_factory=list)
    style: Optional[CellStyle] = None


# ============================================================================
# ADDRESSING SELECTORS
# ============================================================================

@dataclass(frozen=True)
class SingleRow:
    row: int
    kind: Literal["row"] = "row"

    def row_numbers(self) -> list[int]:
        return [self.row]


@dataclass(frozen=True)
class RowSet:
    rows: tuple[int, ...]
    kind: Literal["rows"] = "rows"

    def row_numbers(self) -> list[int]:
        return list(self.rows)


@dataclass(frozen=True)
class RowSpan:
    start_row: int
    end_row: int
    kind: Literal["span"] = "span"

    def row_numbers(self) -> list[int]:
        return list(range(self.start_row, self.end_row + 1))


RowSelector = Union[SingleRow, RowSet, RowSpan]


@dataclass(frozen=True)
class CellAddress:
    cell: str
    kind: Literal["cell"] = "cell"


@dataclass(frozen=True)
class CellList:
    cells: tuple[str, ...]
    kind: Literal["cells"] = "cells"


@dataclass(frozen=True)
class KeyedCell:
    row: int
    column: str
    kind: Literal["keyed"] = "keyed"


@dataclass(frozen=True)
class CellRange:
    start_cell: str
    end_cell: str
    kind: Literal["range"] = "range"


CellSelector = Union[CellAddress, CellList, KeyedCell, CellRange]


class RowStyleRule(_ConfigModel):
    """Style for whole rows, addressed by ``row``, ``rows`` or ``startRow``..``endRow``."""
    row: Optional[int] = None
    rows: Optional[list[int]] = None
    start_row: Optional[int] = None
    end_row: Optional[int] = None
    style: CellStyle = Field(default_factory=CellStyle)

    @property
    def selector(self) -> Optional[RowSelector]:
        """First addressing mode present wins; None when no mode is given."""
        if self.row is not None:
            return SingleRow(self.row)
        if self.rows is not None:
            return RowSet(tuple(self.rows))
        if self.start_row is not None and self.end_row is not None:
            return RowSpan(self.start_row, self.end_row)
        return None


class CellStyleRule(_ConfigModel):
    """Style for individual cells, addressed by address, list, row+key or range."""
    cell: Optional[str] = None
    cells: Optional[list[str]] = None
    row: Optional[int] = None
    column: Optional[str] = None
    start_cell: Optional[str] = None
    end_cell: Optional[str] = None
    style: CellStyle = Field(default_factory=CellStyle)

    @property
    def selector(self) -> Optional[CellSelector]:
        if self.cell:
            return CellAddress(self.cell)
        if self.cells is not None:
            return CellList(tuple(self.cells))
        if self.row is not None and self.column is not None:
            return KeyedCell(self.row, self.column)
        if self.start_cell and self.end_cell:
            return CellRange(self.start_cell, self.end_cell)
        return None


# ============================================================================
# SHEET AND REQUEST
# ============================================================================

class SheetConfig(_ConfigModel):
    """Full configuration of one worksheet."""
    sheet_name: str = DEFAULT_SHEET_NAME
    columns: list[ColumnDef] = Field(default_factory=list)
    data: list[dict[str, Any]] = Field(default_factory=list)
    custom_data: CustomDataBlock = Field(default_factory=CustomDataBlock)
    header_style: HeaderStyle = Field(default_factory=HeaderStyle)
    data_style: Optional[CellStyle] = None
    freeze: Optional[FreezeSpec] = None
    dropdowns: list[DropdownSpec] = Field(default_factory=list)
    comments: list[CommentSpec] = Field(default_factory=list)
    locked_columns: list[str] = Field(default_factory=list)
    column_colors: dict[str, ColumnColor] = Field(default_factory=dict)
    row_styles: list[RowStyleRule] = Field(default_factory=list)
    cell_styles: list[CellStyleRule] = Field(default_factory=list)
    protect_sheet: Optional[ProtectionOptions] = None

    @field_validator("sheet_name")
    @classmethod
    def validate_sheet_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Sheet name must not be empty")
        if len(v) > MAX_SHEET_NAME_LENGTH:
            raise ValueError(f"Sheet name {v!r} exceeds {MAX_SHEET_NAME_LENGTH} characters")
        if _INVALID_SHEET_CHARS.search(v):
            raise ValueError(f"Sheet name {v!r} contains one of \\ * ? : / [ ]")
        return v

    @field_validator("custom_data", mode="before")
    @classmethod
    def normalize_custom_data(cls, v: Any) -> Any:
        if v is None:
            return {}
        if isinstance(v, list):
            return {"data": v}
        return v

    @field_validator("protect_sheet", mode="before")
    @classmethod
    def normalize_protect_sheet(cls, v: Any) -> Any:
        if v is True:
            return {}
        if v is False or v is None:
            return None
        return v

    @field_validator("locked_columns", mode="before")
    @classmethod
    def accept_key_set(cls, v: Any) -> Any:
        if isinstance(v, (set, frozenset, tuple)):
            return list(v)
        return v

    @field_validator("columns")
    @classmethod
    def validate_unique_keys(cls, v: list[ColumnDef]) -> list[ColumnDef]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for column in v:
            if column.key in seen:
                duplicates.append(column.key)
            seen.add(column.key)
        if duplicates:
            raise ValueError(f"Column keys must be unique, duplicated: {duplicates}")
        return v

    @property
    def has_columns(self) -> bool:
        return len(self.columns) > 0

    @property
    def custom_rows(self) -> list[dict[str, Any]]:
        return self.custom_data.data

    @property
    def total_data_rows(self) -> int:
        return len(self.data) + len(self.custom_data.data)


class ExportRequest(_ConfigModel):
    """Top-level export request: target file name and ordered sheets."""
    file_name: str = DEFAULT_FILE_NAME
    sheets: list[SheetConfig] = Field(default_factory=list)

    @field_validator("sheets")
    @classmethod
    def validate_unique_sheet_names(cls, v: list[SheetConfig]) -> list[SheetConfig]:
        names = [s.sheet_name.lower() for s in v]
        if len(names) != len(set(names)):
            raise ValueError("Sheet names must be unique (case-insensitive)")
        return v

    @classmethod
    def from_config(cls, data: Any) -> "ExportRequest":
        """
        Build a request from a plain mapping (parsed JSON/YAML).

        Raises ConfigurationError when the request is malformed.
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Export request must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid export request: {exc}") from exc

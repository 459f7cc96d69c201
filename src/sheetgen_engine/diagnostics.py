"""
Sheet Compiler Diagnostics

Non-fatal findings collected while compiling. A directive that cannot be
resolved is skipped and recorded here so callers can inspect what was
dropped without the export failing.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum


logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Category of a non-fatal compiler finding."""
    UNRESOLVED_KEY = "unresolved_key"          # column key not in the schema
    UNRESOLVED_ADDRESS = "unresolved_address"  # malformed A1-style address
    EMPTY_FIRST_ROW = "empty_first_row"        # headerless sheet starts with an empty record
    FORMULA_TOO_LONG = "formula_too_long"      # inline dropdown list over the length ceiling
    EMPTY_OPTIONS = "empty_options"            # dropdown without options
    NO_SELECTOR = "no_selector"                # style rule without any addressing mode
    REQUIRES_COLUMNS = "requires_columns"      # key-based directive on a headerless sheet


# Pure skips are expected in loosely written configs; keep them out of WARNING
_DEBUG_KINDS = {
    DiagnosticKind.UNRESOLVED_KEY,
    DiagnosticKind.EMPTY_OPTIONS,
    DiagnosticKind.NO_SELECTOR,
    DiagnosticKind.REQUIRES_COLUMNS,
}


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    sheet: str
    pass_name: str
    message: str

    def __str__(self) -> str:
        return f"[{self.sheet}] {self.pass_name}: {self.message}"


@dataclass
class SheetReport:
    """Outcome of compiling one sheet."""
    sheet_name: str
    row_count: int = 0
    protected: bool = False
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def add(self, kind: DiagnosticKind, pass_name: str, message: str) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, sheet=self.sheet_name, pass_name=pass_name, message=message)
        self.diagnostics.append(diagnostic)
        level = logging.DEBUG if kind in _DEBUG_KINDS else logging.WARNING
        logger.log(level, "%s", diagnostic)
        return diagnostic

    def count(self, kind: DiagnosticKind | None = None) -> int:
        if kind is None:
            return len(self.diagnostics)
        return sum(1 for d in self.diagnostics if d.kind == kind)


@dataclass
class ExportReport:
    """Outcome of a full export, one SheetReport per configured sheet."""
    file_name: str
    sheets: list[SheetReport] = field(default_factory=list)
    byte_size: int = 0

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for sheet in self.sheets for d in sheet.diagnostics]

    def sheet(self, name: str) -> SheetReport:
        for report in self.sheets:
            if report.sheet_name == name:
                return report
        raise KeyError(name)

"""
Sheet Compiler Errors

Fatal failures that abort an export. Recoverable problems are reported as
diagnostics instead (see sheetgen_engine.diagnostics).
"""
from __future__ import annotations


class ExportError(Exception):
    """Base class for failures that abort an export."""
    pass


class ConfigurationError(ExportError):
    """Raised when the export request itself is malformed."""
    pass


class SerializationError(ExportError):
    """Raised when the compiled workbook cannot be written to bytes."""
    pass


class DeliveryError(ExportError):
    """Raised when the delivery collaborator fails to hand over the file."""
    pass

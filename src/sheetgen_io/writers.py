"""
Sheet I/O Writers

Export compiled workbooks to XLSX (bytes, delivery collaborator or path)
and the raw sheet data to CSV.
"""
from __future__ import annotations

import asyncio
import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping

import pandas as pd
from openpyxl import Workbook

from sheetgen_engine.compiler import compile_workbook
from sheetgen_engine.defaults import XLSX_MIME_TYPE
from sheetgen_engine.diagnostics import ExportReport
from sheetgen_engine.errors import DeliveryError, ExportError, SerializationError
from sheetgen_engine.models import ExportRequest, SheetConfig
from sheetgen_io.delivery import DirectoryDelivery, FileDelivery


logger = logging.getLogger(__name__)


def serialize_workbook(wb: Workbook) -> bytes:
    """Write ``wb`` to an in-memory .xlsx buffer."""
    buffer = BytesIO()
    try:
        wb.save(buffer)
    except Exception as exc:
        raise SerializationError(f"Could not serialize workbook: {exc}") from exc
    return buffer.getvalue()


def build_xlsx(request: ExportRequest | Mapping[str, Any]) -> tuple[bytes, ExportReport]:
    """Compile and serialize a request without delivering it."""
    request = ExportRequest.from_config(request)
    wb, report = compile_workbook(request)
    payload = serialize_workbook(wb)
    report.byte_size = len(payload)
    return payload, report


def _deliver(delivery: FileDelivery, payload: bytes, file_name: str) -> None:
    try:
        delivery.deliver(payload, XLSX_MIME_TYPE, file_name)
    except ExportError:
        raise
    except Exception as exc:
        raise DeliveryError(f"Could not deliver {file_name!r}: {exc}") from exc


async def export_to_excel(
    request: ExportRequest | Mapping[str, Any],
    delivery: FileDelivery,
) -> ExportReport:
    """
    Compile ``request`` and hand the resulting .xlsx to ``delivery``.

    Compilation runs in the calling coroutine; serialization and delivery
    run in a worker thread. Failures raise an ExportError subclass and
    nothing is delivered.
    """
    request = ExportRequest.from_config(request)
    wb, report = compile_workbook(request)
    payload = await asyncio.to_thread(serialize_workbook, wb)
    report.byte_size = len(payload)
    await asyncio.to_thread(_deliver, delivery, payload, request.file_name)
    logger.info("Exported %s (%d bytes, %d sheets)", request.file_name, report.byte_size, len(report.sheets))
    return report


def export_xlsx(request: ExportRequest | Mapping[str, Any], path: str | Path) -> ExportReport:
    """Synchronous export to an explicit path; ``fileName`` is ignored."""
    path = Path(path)
    payload, report = build_xlsx(request)
    _deliver(DirectoryDelivery(path.parent), payload, path.name)
    return report


# ============================================================================
# CSV
# ============================================================================

def sheet_dataframe(config: SheetConfig) -> pd.DataFrame:
    """Primary and custom rows of one sheet as a DataFrame."""
    records = config.data + config.custom_rows
    if config.has_columns:
        df = pd.DataFrame.from_records(records, columns=[c.key for c in config.columns])
        return df.rename(columns={c.key: c.header for c in config.columns})
    return pd.DataFrame([list(record.values()) for record in records])


def export_csv(request: ExportRequest | Mapping[str, Any], output_dir: str | Path) -> list[Path]:
    """Export each sheet's rows to ``<n>_<sheetName>.csv``."""
    request = ExportRequest.from_config(request)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    created_files = []
    for idx, config in enumerate(request.sheets, start=1):
        file_path = output_dir / f"{idx}_{config.sheet_name}.csv"
        df = sheet_dataframe(config)
        df.to_csv(file_path, index=False, header=config.has_columns)
        created_files.append(file_path)

    return created_files

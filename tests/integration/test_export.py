"""
Integration Test - Full Export

Compiles the bundled example request end to end, writes real .xlsx files
and reads them back with openpyxl.
"""
import pandas as pd
import pytest
from openpyxl import Workbook

from sheetgen_engine.defaults import WORKBOOK_CREATOR, XLSX_MIME_TYPE
from sheetgen_engine.diagnostics import DiagnosticKind
from sheetgen_engine.errors import ConfigurationError, DeliveryError, SerializationError
from sheetgen_io.delivery import DirectoryDelivery, MemoryDelivery
from sheetgen_io.readers import read_request_file
from sheetgen_io.writers import build_xlsx, export_csv, export_to_excel, export_xlsx
from sheetgen_io.xlsx_validation import (
    find_locked_cells,
    load_exported_workbook,
    summarize_workbook,
    validated_rows,
)


@pytest.fixture
def example_request(example_request_path):
    return read_request_file(example_request_path)


@pytest.fixture
def exported(example_request, tmp_path):
    path = tmp_path / "out.xlsx"
    report = export_xlsx(example_request, path)
    return load_exported_workbook(path), report


class TestExampleWorkbook:
    """The bundled example exercises every directive."""

    def test_sheet_order(self, exported):
        wb, report = exported
        assert wb.sheetnames == ["Employees", "Summary", "Summary1"]
        assert [s.sheet_name for s in report.sheets] == wb.sheetnames
        assert report.byte_size > 0

    def test_employees_overrides(self, exported):
        wb, _ = exported
        ws = wb["Employees"]
        # row style beats the column color
        assert ws["D3"].fill.fgColor.rgb == "FFCCFFCC"
        assert ws["D2"].fill.fgColor.rgb == "FFFFEAA7"
        assert ws["E2"].number_format == "$#,##0.00"
        assert ws["B2"].font.bold is True
        assert ws["B2"].font.color.rgb == "FFFF0000"
        assert ws["A4"].fill.fgColor.rgb == "FFFFFF00"
        assert ws.row_dimensions[7].height == 20

    def test_employees_header(self, exported):
        ws = exported[0]["Employees"]
        assert ws["A1"].value == "ID"
        assert ws["A1"].fill.fgColor.rgb == "FF2E75B6"
        assert ws["A1"].font.size == 13
        assert ws["A1"].border.top.style == "medium"
        assert ws["C1"].comment.text == "Department: Sales, IT, HR, Finance"

    def test_employees_custom_rows(self, exported):
        ws = exported[0]["Employees"]
        assert ws["B8"].value == "David Lee"
        assert ws["B8"].font.italic is True
        assert ws["B8"].fill.fgColor.rgb == "FFE8F4F8"

    def test_employees_dropdowns(self, exported):
        ws = exported[0]["Employees"]
        assert validated_rows(ws, "C") == set(range(4, 21))
        # 5 data rows + 3 custom rows + 100 spare rows
        assert validated_rows(ws, "D") == set(range(2, 110))

    def test_employees_protection(self, exported):
        ws = exported[0]["Employees"]
        assert ws.freeze_panes == "A2"
        assert ws.protection.sheet is True
        locked = set(find_locked_cells(ws))
        assert {"A1", "A2", "B9"} <= locked
        assert "C2" not in locked

    def test_summary_freeze(self, exported):
        ws = exported[0]["Summary"]
        assert ws.freeze_panes == "B2"
        assert ws["A1"].fill.fgColor.rgb == "FF00B894"
        assert not ws.protection.sheet

    def test_headerless_protected_sheet(self, exported):
        wb, report = exported
        ws = wb["Summary1"]
        assert ws["A1"].value is None
        assert ws["B2"].value == "David Lee"
        assert ws.protection.sheet is True
        assert ws.protection.password
        assert report.sheet("Summary1").protected is True

    def test_summary(self, exported):
        wb, _ = exported
        summaries = {s.name: s for s in summarize_workbook(wb)}
        assert summaries["Employees"].validations == 2
        assert summaries["Employees"].comments == 3
        assert summaries["Summary"].frozen_at == "B2"
        assert summaries["Summary1"].protected is True


class TestAsyncExport:

    @pytest.mark.asyncio
    async def test_memory_delivery(self, example_request):
        delivery = MemoryDelivery()
        report = await export_to_excel(example_request, delivery)
        delivered = delivery.files["advanced_export.xlsx"]
        assert delivered.mime_type == XLSX_MIME_TYPE
        assert len(delivered.buffer) == report.byte_size
        wb = load_exported_workbook(delivered.buffer)
        assert wb.sheetnames == ["Employees", "Summary", "Summary1"]

    @pytest.mark.asyncio
    async def test_directory_delivery_strips_directories(self, tmp_path):
        request = {"fileName": "../nested/out.xlsx", "sheets": [{"sheetName": "A"}]}
        await export_to_excel(request, DirectoryDelivery(tmp_path / "exports"))
        assert (tmp_path / "exports" / "out.xlsx").is_file()

    @pytest.mark.asyncio
    async def test_empty_request(self):
        with pytest.raises(ConfigurationError):
            await export_to_excel({"sheets": []}, MemoryDelivery())

    @pytest.mark.asyncio
    async def test_failing_delivery(self):
        class BrokenDelivery:
            def deliver(self, buffer, mime_type, file_name):
                raise OSError("disk full")

        with pytest.raises(DeliveryError, match="disk full"):
            await export_to_excel({"sheets": [{"sheetName": "A"}]}, BrokenDelivery())

    @pytest.mark.asyncio
    async def test_serialization_failure_delivers_nothing(self, monkeypatch):
        def broken_save(self, filename):
            raise RuntimeError("boom")

        monkeypatch.setattr(Workbook, "save", broken_save)
        delivery = MemoryDelivery()
        with pytest.raises(SerializationError):
            await export_to_excel({"sheets": [{"sheetName": "A"}]}, delivery)
        assert delivery.files == {}


class TestBuildAndCsv:

    def test_build_xlsx_from_mapping(self):
        payload, report = build_xlsx({"sheets": [{"sheetName": "Only"}]})
        assert payload[:2] == b"PK"
        assert report.byte_size == len(payload)
        assert report.sheet("Only").row_count == 0

    def test_workbook_metadata(self):
        payload, _ = build_xlsx({"sheets": [{"sheetName": "Only"}]})
        wb = load_exported_workbook(payload)
        assert wb.properties.creator == WORKBOOK_CREATOR
        assert wb.properties.created is not None

    def test_bad_dropdown_row_does_not_abort_export(self):
        payload, report = build_xlsx({"sheets": [{
            "columns": [{"header": "ID", "key": "id"}],
            "data": [{"id": 1}],
            "dropdowns": [{"key": "id", "options": ["A"], "startRow": 0}],
            "cellStyles": [{"cell": "A1048577", "style": {"font": {"bold": True}}}],
        }]})
        assert payload
        assert report.sheets[0].count(DiagnosticKind.UNRESOLVED_ADDRESS) == 2

    def test_invalid_mapping(self):
        with pytest.raises(ConfigurationError):
            build_xlsx({"sheets": [{"columns": [{"header": "no key"}]}]})

    def test_csv_export(self, example_request, tmp_path):
        files = export_csv(example_request, tmp_path)
        assert [f.name for f in files] == ["1_Employees.csv", "2_Summary.csv", "3_Summary1.csv"]

        employees = pd.read_csv(files[0])
        assert list(employees.columns) == ["ID", "Name", "Department", "Status", "Salary"]
        assert len(employees) == 8
        assert employees["Name"].iloc[-1] == "Emma Davis"

        summary1 = pd.read_csv(files[2], header=None)
        assert len(summary1) == 3
        assert summary1.iloc[1, 1] == "David Lee"

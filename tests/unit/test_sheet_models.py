"""
Unit Tests for Export Request Models
"""
import pytest

from sheetgen_engine.errors import ConfigurationError
from sheetgen_engine.models import (
    CellAddress,
    CellList,
    CellRange,
    CellStyleRule,
    ColorSpec,
    ExportRequest,
    KeyedCell,
    ProtectionOptions,
    RowSet,
    RowSpan,
    RowStyleRule,
    SheetConfig,
    SingleRow,
    normalize_argb,
)


class TestSheetDefaults:
    """Tests for defaults applied to a bare sheet."""

    def test_empty_sheet(self):
        sheet = SheetConfig()
        assert sheet.sheet_name == "Sheet1"
        assert sheet.has_columns is False
        assert sheet.custom_data.data == []
        assert sheet.custom_data.style is None
        assert sheet.protect_sheet is None
        assert sheet.freeze is None

    def test_column_width_default(self):
        sheet = SheetConfig.model_validate({"columns": [{"header": "ID", "key": "id"}]})
        assert sheet.columns[0].width == 15
        assert sheet.has_columns is True

    def test_camel_case_and_snake_case(self):
        camel = SheetConfig.model_validate({"sheetName": "People", "lockedColumns": ["id"]})
        snake = SheetConfig(sheet_name="People", locked_columns=["id"])
        assert camel.sheet_name == snake.sheet_name == "People"
        assert camel.locked_columns == ["id"]

    def test_duplicate_column_keys_rejected(self):
        with pytest.raises(ValueError, match="unique"):
            SheetConfig.model_validate({
                "columns": [{"header": "A", "key": "k"}, {"header": "B", "key": "k"}],
            })

    def test_invalid_sheet_name(self):
        with pytest.raises(ValueError):
            SheetConfig(sheet_name="bad/name")


class TestCustomData:
    """customData accepts a bare list or a {data, style} block."""

    def test_bare_list(self):
        sheet = SheetConfig.model_validate({"customData": [{"id": 9}]})
        assert sheet.custom_rows == [{"id": 9}]
        assert sheet.custom_data.style is None

    def test_block_with_style(self):
        sheet = SheetConfig.model_validate({
            "customData": {"data": [{"id": 9}], "style": {"height": 20, "font": {"bold": True}}},
        })
        assert sheet.custom_rows == [{"id": 9}]
        assert sheet.custom_data.style.height == 20
        assert sheet.custom_data.style.font.bold is True

    def test_total_data_rows(self):
        sheet = SheetConfig.model_validate({"data": [{}, {}], "customData": [{}]})
        assert sheet.total_data_rows == 3


class TestProtectSheet:
    """protectSheet accepts a boolean or an options object."""

    def test_true_expands_to_defaults(self):
        sheet = SheetConfig.model_validate({"protectSheet": True})
        assert sheet.protect_sheet == ProtectionOptions()
        assert sheet.protect_sheet.password == ""
        assert sheet.protect_sheet.select_locked_cells is True
        assert sheet.protect_sheet.insert_rows is False

    def test_false_means_unprotected(self):
        assert SheetConfig.model_validate({"protectSheet": False}).protect_sheet is None

    def test_partial_object(self):
        sheet = SheetConfig.model_validate({"protectSheet": {"password": "pw", "sort": True}})
        assert sheet.protect_sheet.password == "pw"
        assert sheet.protect_sheet.sort is True
        assert sheet.protect_sheet.format_cells is False


class TestColors:

    def test_normalize_six_digits(self):
        assert normalize_argb("00ff00") == "FF00FF00"

    def test_normalize_keeps_alpha(self):
        assert normalize_argb("80123456") == "80123456"

    def test_invalid_color(self):
        with pytest.raises(ValueError):
            normalize_argb("blue")

    def test_bare_string_color(self):
        assert ColorSpec.model_validate("123456").argb == "FF123456"

    def test_middle_alignment_maps_to_center(self):
        sheet = SheetConfig.model_validate({"dataStyle": {"alignment": {"vertical": "middle"}}})
        assert sheet.data_style.alignment.vertical == "center"

    def test_number_format_aliases(self):
        sheet = SheetConfig.model_validate({
            "columnColors": {
                "a": {"numFmt": "0.00"},
                "b": {"numberFormat": "0%"},
            },
        })
        assert sheet.column_colors["a"].num_fmt == "0.00"
        assert sheet.column_colors["b"].num_fmt == "0%"


class TestSelectors:
    """Each style rule resolves to exactly one addressing variant."""

    def test_row_wins_over_rows(self):
        rule = RowStyleRule.model_validate({"row": 3, "rows": [4, 5]})
        assert rule.selector == SingleRow(3)

    def test_row_set(self):
        assert RowStyleRule.model_validate({"rows": [4, 5]}).selector == RowSet((4, 5))

    def test_row_span(self):
        selector = RowStyleRule.model_validate({"startRow": 2, "endRow": 4}).selector
        assert selector == RowSpan(2, 4)
        assert selector.row_numbers() == [2, 3, 4]

    def test_half_span_is_no_selector(self):
        assert RowStyleRule.model_validate({"startRow": 2}).selector is None

    def test_cell_selectors(self):
        assert CellStyleRule.model_validate({"cell": "A1"}).selector == CellAddress("A1")
        assert CellStyleRule.model_validate({"cells": ["A1", "B2"]}).selector == CellList(("A1", "B2"))
        assert CellStyleRule.model_validate({"row": 2, "column": "id"}).selector == KeyedCell(2, "id")
        assert CellStyleRule.model_validate(
            {"startCell": "A1", "endCell": "B2"}
        ).selector == CellRange("A1", "B2")
        assert CellStyleRule.model_validate({"row": 2}).selector is None


class TestExportRequest:

    def test_defaults(self):
        request = ExportRequest.from_config({})
        assert request.file_name == "export.xlsx"
        assert request.sheets == []

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            ExportRequest.from_config([{"sheetName": "A"}])

    def test_sheets_not_a_sequence(self):
        with pytest.raises(ConfigurationError):
            ExportRequest.from_config({"sheets": "Sheet1"})

    def test_duplicate_sheet_names(self):
        with pytest.raises(ConfigurationError, match="unique"):
            ExportRequest.from_config({"sheets": [{"sheetName": "A"}, {"sheetName": "a"}]})

    def test_request_is_frozen(self):
        request = ExportRequest.from_config({"fileName": "x.xlsx"})
        with pytest.raises(ValueError):
            request.file_name = "y.xlsx"

    def test_dropdown_start_row_is_not_bounded_at_parse_time(self):
        sheet = SheetConfig.model_validate({
            "columns": [{"header": "ID", "key": "id"}],
            "dropdowns": [{"key": "id", "options": ["A"], "startRow": 0}],
        })
        assert sheet.dropdowns[0].start_row == 0

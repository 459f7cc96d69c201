from pathlib import Path

import pytest
from openpyxl import Workbook

from sheetgen_engine.compiler import SheetCompiler
from sheetgen_engine.models import SheetConfig


EXAMPLE_REQUEST = Path(__file__).parent.parent / "examples" / "employees_request.yaml"


@pytest.fixture
def compile_sheet():
    """Compile one sheet config (camelCase dict) onto a fresh worksheet."""

    def _compile(**config):
        wb = Workbook()
        ws = wb.active
        sheet = SheetConfig.model_validate(config)
        report = SheetCompiler(sheet).compile(ws)
        return ws, report

    return _compile


@pytest.fixture
def example_request_path() -> Path:
    return EXAMPLE_REQUEST

"""
Sheet I/O Readers

YAML and JSON export-request parsing.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from sheetgen_engine.models import ExportRequest


def parse_request_dict(data: Any) -> ExportRequest:
    """
    Parse a request from already-loaded data.

    A bare list is read as the ``sheets`` of a request with the default
    file name.
    """
    if isinstance(data, list):
        data = {"sheets": data}
    return ExportRequest.from_config(data)


def read_yaml(path: str | Path) -> ExportRequest:
    """
    Read an export request from a YAML file.

    Args:
        path: Path to YAML file

    Returns:
        ExportRequest model
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return parse_request_dict(data)


def read_json(path: str | Path) -> ExportRequest:
    """
    Read an export request from a JSON file.

    Args:
        path: Path to JSON file

    Returns:
        ExportRequest model
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return parse_request_dict(data)


def read_request_file(path: str | Path) -> ExportRequest:
    """Read an export request, picking the parser from the file suffix."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        return read_yaml(path)
    elif suffix == ".json":
        return read_json(path)
    else:
        raise ValueError(f"Unsupported file format: {suffix}")

"""
File Delivery

Where finished workbook bytes go once compilation and serialization are done.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol


class FileDelivery(Protocol):
    """Hands a finished file to the caller's environment."""

    def deliver(self, buffer: bytes, mime_type: str, file_name: str) -> Optional[Path]: ...


@dataclass
class DirectoryDelivery:
    """Save delivered files into a directory, created on demand."""
    output_dir: Path

    def deliver(self, buffer: bytes, mime_type: str, file_name: str) -> Path:
        output_dir = Path(self.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        # Only the base name; a request cannot write outside output_dir
        path = output_dir / Path(file_name).name
        path.write_bytes(buffer)
        return path


@dataclass
class DeliveredFile:
    file_name: str
    mime_type: str
    buffer: bytes


@dataclass
class MemoryDelivery:
    """Keep delivered files in memory, keyed by file name."""
    files: dict[str, DeliveredFile] = field(default_factory=dict)

    def deliver(self, buffer: bytes, mime_type: str, file_name: str) -> None:
        self.files[file_name] = DeliveredFile(file_name=file_name, mime_type=mime_type, buffer=buffer)
        return None

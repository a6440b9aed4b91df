"""
Local file selected for upload.
"""

import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class LocalFile:
    """A file on disk, read one byte range at a time."""

    path: Path
    name: str
    size: int
    content_type: str = ""

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike], content_type: Optional[str] = None) -> "LocalFile":
        """
        Describe a file on disk.

        Args:
            path: File path
            content_type: Declared MIME type; guessed from the extension when omitted

        Returns:
            New LocalFile instance

        Raises:
            FileNotFoundError: If the path does not exist
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        if content_type is None:
            # Unknown types are sent as "" and resolved by the file service
            content_type = mimetypes.guess_type(file_path.name)[0] or ""

        return cls(
            path=file_path,
            name=file_path.name,
            size=file_path.stat().st_size,
            content_type=content_type
        )

    def read_range(self, start: int, end: int) -> bytes:
        """Return bytes [start, end)."""
        with open(self.path, "rb") as f:
            f.seek(start)
            return f.read(end - start)

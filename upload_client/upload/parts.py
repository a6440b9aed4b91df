"""
Accumulator for completion tokens of uploaded chunks.
"""

import math
from typing import List

from upload_schemas.files import CompletedPart


class PartAccumulator:
    """
    Ordered collection of completed parts plus the byte count behind them.

    Parts must arrive as 1, 2, 3, ... so the list handed to the file service
    is always contiguous and ascending.
    """

    def __init__(self, total_bytes: int):
        self.total_bytes = total_bytes
        self.bytes_uploaded = 0
        self._parts: List[CompletedPart] = []

    def add(self, part_number: int, etag: str, size: int) -> None:
        """Record a stored chunk."""
        expected = len(self._parts) + 1
        if part_number != expected:
            raise ValueError(f"Expected part {expected}, got part {part_number}")

        self._parts.append(CompletedPart(part_number=part_number, etag=etag))
        self.bytes_uploaded += size

    @property
    def parts(self) -> List[CompletedPart]:
        return list(self._parts)

    @property
    def percent(self) -> int:
        """Uploaded share of the file, rounded half up."""
        if self.total_bytes <= 0:
            return 0
        return math.floor(100 * self.bytes_uploaded / self.total_bytes + 0.5)

    def __len__(self) -> int:
        return len(self._parts)

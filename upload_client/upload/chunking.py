"""
File-to-chunk partitioning.
"""

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Chunk:
    """Byte range [start, end) uploaded as part `part_number`."""

    part_number: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def chunk_count(file_size: int, chunk_size: int) -> int:
    """ceil(file_size / chunk_size)"""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if file_size < 0:
        raise ValueError("file_size cannot be negative")
    return -(-file_size // chunk_size)


def iter_chunks(file_size: int, chunk_size: int) -> Iterator[Chunk]:
    """
    Yield chunks in ascending part order.

    Every chunk is chunk_size bytes except the last, which holds the remainder.
    """
    for index in range(chunk_count(file_size, chunk_size)):
        start = index * chunk_size
        yield Chunk(
            part_number=index + 1,
            start=start,
            end=min(file_size, start + chunk_size)
        )

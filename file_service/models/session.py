"""
Multipart session data models for internal use.
Nothing here is stored server side; S3 tracks the session by its UploadId.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ChunkTransferAuthorization:
    """Pre-signed URL allowing a PUT of exactly one part."""

    part_number: int
    url: str


@dataclass(frozen=True)
class UploadSession:
    """An open multipart upload and the authorizations minted for it."""

    session_id: str
    object_key: str
    content_type: str
    chunk_count: int
    authorizations: List[ChunkTransferAuthorization] = field(default_factory=list)

    @property
    def part_urls(self) -> List[str]:
        """URLs in ascending part order."""
        return [auth.url for auth in self.authorizations]

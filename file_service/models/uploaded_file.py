"""
Persisted metadata for finalized uploads.
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Integer, String

from file_service.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadedFileRecord(Base):
    """One row per successfully assembled object. Never updated after insert."""

    __tablename__ = "uploaded_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_name = Column(String, nullable=False)
    file_size = Column(BigInteger, nullable=False)
    s3_key = Column(String, nullable=False)
    upload_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    def __repr__(self) -> str:
        return f"<UploadedFileRecord {self.s3_key} ({self.file_size} bytes)>"

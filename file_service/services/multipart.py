"""
Multipart Session Manager - bridges upload clients to S3 multipart uploads.

Handles:
- Opening a multipart upload and minting one signed PUT URL per chunk
- Validating and submitting the reported part list to assemble the object
- Persisting the metadata record of finished uploads
- Listing finished uploads with fresh download URLs

The manager is stateless: S3 is the only source of truth for open sessions,
so two requests for the same session share nothing but the UploadId.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from botocore.exceptions import ClientError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from file_service.core.config import settings
from file_service.core.exceptions import (
    AssemblyError,
    ListingError,
    MetadataPersistenceError,
    MultipartError,
    SessionCreationError,
)
from file_service.models.session import ChunkTransferAuthorization, UploadSession
from file_service.models.uploaded_file import UploadedFileRecord
from file_service.s3.client import S3Client, s3_client
from file_service.s3.config import MAX_PART_NUMBER, MIN_PART_NUMBER
from file_service.utils.content_type import resolve_content_type
from upload_schemas.files import CompletedPart, UploadedFile

logger = logging.getLogger(__name__)


def validate_part_list(parts: Sequence[CompletedPart]) -> None:
    """
    Check that part numbers are exactly 1..N in ascending order.

    Raises:
        AssemblyError: On an empty list, duplicates, gaps or wrong ordering
    """
    if not parts:
        raise AssemblyError("No parts reported")

    if len(parts) > MAX_PART_NUMBER:
        raise AssemblyError(f"Too many parts: {len(parts)} (max {MAX_PART_NUMBER})")

    numbers = [part.part_number for part in parts]
    if len(set(numbers)) != len(numbers):
        raise AssemblyError("Duplicate part numbers in part list")

    expected = list(range(MIN_PART_NUMBER, len(numbers) + MIN_PART_NUMBER))
    if sorted(numbers) != expected:
        raise AssemblyError(f"Part numbers must be contiguous from {MIN_PART_NUMBER}, got {sorted(numbers)}")

    if numbers != expected:
        raise AssemblyError("Parts must be listed in ascending part number order")


class MultipartSessionManager:
    """
    Opens, finalizes and lists multipart uploads.
    """

    def __init__(self, s3: Optional[S3Client] = None, url_expiration: Optional[int] = None):
        self.s3 = s3 or s3_client
        self.url_expiration = url_expiration or settings.SIGNED_URL_EXPIRATION

    def create_session(self, name: str, content_type: str, chunk_count: int) -> UploadSession:
        """
        Open a multipart upload and sign one PUT URL per chunk.

        Args:
            name: Destination object key, unique per upload
            content_type: Declared MIME type of the whole object
            chunk_count: Number of chunks the client will send

        Returns:
            UploadSession with chunk_count authorizations numbered 1..chunk_count

        Raises:
            SessionCreationError: If S3 refuses the upload or signing fails
        """
        if not MIN_PART_NUMBER <= chunk_count <= MAX_PART_NUMBER:
            raise SessionCreationError(f"chunk_count must be between {MIN_PART_NUMBER} and {MAX_PART_NUMBER}")

        resolved_type = resolve_content_type(name, content_type)

        try:
            upload_id = self.s3.create_multipart_upload(key=name, content_type=resolved_type)
        except ClientError as e:
            raise SessionCreationError(f"Failed to create multipart upload for {name}: {e}") from e

        try:
            authorizations = [
                ChunkTransferAuthorization(
                    part_number=part_number,
                    url=self.s3.generate_upload_part_url(
                        key=name,
                        upload_id=upload_id,
                        part_number=part_number,
                        expiration=self.url_expiration
                    )
                )
                for part_number in range(MIN_PART_NUMBER, chunk_count + MIN_PART_NUMBER)
            ]
        except ClientError as e:
            raise SessionCreationError(f"Failed to sign part URLs for {name}: {e}") from e

        logger.info(f"Opened upload session {upload_id} for {name} ({chunk_count} parts, {resolved_type})")

        return UploadSession(
            session_id=upload_id,
            object_key=name,
            content_type=resolved_type,
            chunk_count=chunk_count,
            authorizations=authorizations
        )

    def complete_session(
        self,
        db: Session,
        name: str,
        session_id: str,
        parts: Sequence[CompletedPart],
        file_size: int
    ) -> str:
        """
        Assemble the object from its parts and record it.

        Args:
            db: Database session for the metadata record
            name: Object key used when the session was created
            session_id: S3 UploadId
            parts: Completion tokens in ascending part order
            file_size: Total size in bytes

        Returns:
            Presigned download URL for the finished object

        Raises:
            AssemblyError: If the part list is invalid or S3 rejects it
            MetadataPersistenceError: If the object exists but the record was not saved
            MultipartError: If the download URL cannot be signed
        """
        validate_part_list(parts)

        s3_parts = [{"PartNumber": part.part_number, "ETag": part.etag} for part in parts]

        try:
            self.s3.complete_multipart_upload(key=name, upload_id=session_id, parts=s3_parts)
        except ClientError as e:
            raise AssemblyError(
                f"S3 rejected part list for {name}: {e}",
                rejected_by_backend=True
            ) from e

        # A record is only written once its download URL is signed
        download_url = self._download_url(name)

        record = UploadedFileRecord(
            file_name=name,
            file_size=file_size,
            s3_key=name,
            upload_date=datetime.now(timezone.utc)
        )

        try:
            db.add(record)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            # The object is in S3 but will not show up in listings
            logger.error(f"Object {name} assembled but metadata was not saved: {e}")
            raise MetadataPersistenceError(f"Failed to save metadata for {name}", storage_key=name) from e

        logger.info(f"Recorded upload {name} ({file_size} bytes)")

        return download_url

    def list_files(self, db: Session) -> List[UploadedFile]:
        """
        List finished uploads, newest first, each with a freshly signed URL.

        Raises:
            ListingError: If the metadata store cannot be read
        """
        try:
            records = db.execute(
                select(UploadedFileRecord).order_by(
                    UploadedFileRecord.upload_date.desc(),
                    UploadedFileRecord.id.desc()
                )
            ).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read upload records: {e}")
            raise ListingError("Failed to retrieve files") from e

        return [
            UploadedFile(
                file_name=record.file_name,
                file_size=record.file_size,
                s3_key=record.s3_key,
                upload_date=record.upload_date,
                download_url=self._download_url(record.s3_key)
            )
            for record in records
        ]

    def _download_url(self, key: str) -> str:
        try:
            return self.s3.generate_presigned_url(key=key, expiration=self.url_expiration)
        except ClientError as e:
            raise MultipartError(f"Failed to sign download URL for {key}: {e}") from e


def get_session_manager() -> MultipartSessionManager:
    """FastAPI dependency returning a manager bound to the global S3 client."""
    return MultipartSessionManager()

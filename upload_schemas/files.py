"""
File service API schemas.
Type-safe contracts for the multipart upload endpoints.

Field names on the wire follow the browser client contract (camelCase request
bodies, S3-style ``PartNumber``/``ETag`` parts, snake_case persisted records),
so every model declares aliases and accepts either form on input.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "CreateMultipartRequest",
    "CreateMultipartResponse",
    "CompletedPart",
    "CompleteMultipartRequest",
    "CompleteMultipartResponse",
    "UploadedFile",
    "HealthCheckResponse",
]


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Create Multipart Upload
# ============================================================================

class CreateMultipartRequest(_WireModel):
    """Request to open a multipart upload session."""
    file_name: str = Field(alias="fileName", min_length=1)
    file_type: str = Field(default="", alias="fileType")
    chunk_count: int = Field(
        alias="chunkCount",
        ge=1,
        le=10000,
        description="Number of chunks; one pre-signed URL is minted per chunk"
    )


class CreateMultipartResponse(_WireModel):
    """Session id plus one pre-signed part URL per chunk, in part order."""
    upload_id: str = Field(alias="uploadId")
    pre_signed_urls: list[str] = Field(alias="preSignedUrls")


# ============================================================================
# Complete Multipart Upload
# ============================================================================

class CompletedPart(_WireModel):
    """Completion token for one stored chunk."""
    part_number: int = Field(alias="PartNumber", ge=1, le=10000)
    etag: str = Field(alias="ETag", min_length=1)


class CompleteMultipartRequest(_WireModel):
    """Request to assemble the uploaded chunks into the final object."""
    file_name: str = Field(alias="fileName", min_length=1)
    upload_id: str = Field(alias="uploadId", min_length=1)
    parts: list[CompletedPart] = Field(min_length=1)
    file_size: int = Field(alias="fileSize", ge=0)


class CompleteMultipartResponse(_WireModel):
    """Response from a finalized upload."""
    message: str
    download_url: str = Field(alias="downloadUrl")


# ============================================================================
# List Files
# ============================================================================

class UploadedFile(_WireModel):
    """Persisted upload record with a freshly minted download URL."""
    file_name: str
    file_size: int
    s3_key: str = Field(alias="s3Key")
    upload_date: datetime = Field(alias="uploadDate")
    download_url: str = Field(alias="downloadUrl")


# ============================================================================
# Health Check
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response."""
    status: str
    s3_connection: str
    database: str

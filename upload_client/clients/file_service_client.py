"""
File service client.
Opens, completes and lists multipart uploads through the file service API.
"""

import logging
from typing import List, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from upload_schemas.files import (
    CreateMultipartRequest,
    CreateMultipartResponse,
    CompletedPart,
    CompleteMultipartRequest,
    CompleteMultipartResponse,
    UploadedFile,
)
from upload_client.core.exceptions import FileServiceError

logger = logging.getLogger(__name__)

_uploaded_files = TypeAdapter(List[UploadedFile])


async def _post(client: httpx.AsyncClient, path: str, payload: dict, action: str) -> dict:
    try:
        response = await client.post(path, json=payload)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        logger.error(f"File service refused to {action}: {e.response.status_code} {e.response.text}")
        raise FileServiceError(f"Failed to {action}", status_code=e.response.status_code) from e
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"File service request to {action} failed: {e}")
        raise FileServiceError(f"Failed to {action}") from e


async def create_multipart(
    client: httpx.AsyncClient,
    file_name: str,
    file_type: str,
    chunk_count: int
) -> CreateMultipartResponse:
    """
    Open an upload session.

    Args:
        client: HTTP client whose base URL points at the file service
        file_name: Unique destination name
        file_type: Declared MIME type ("" when unknown)
        chunk_count: Number of chunks to sign URLs for

    Returns:
        Upload id and one pre-signed URL per chunk

    Raises:
        FileServiceError: If the service returns an error or cannot be reached
    """
    request = CreateMultipartRequest(file_name=file_name, file_type=file_type, chunk_count=chunk_count)
    data = await _post(client, "/files/create-multipart", request.model_dump(by_alias=True), "create multipart upload")

    try:
        return CreateMultipartResponse.model_validate(data)
    except ValidationError as e:
        raise FileServiceError("Malformed create-multipart response") from e


async def complete_multipart(
    client: httpx.AsyncClient,
    file_name: str,
    upload_id: str,
    parts: Sequence[CompletedPart],
    file_size: int
) -> CompleteMultipartResponse:
    """
    Finalize an upload session.

    Args:
        client: HTTP client whose base URL points at the file service
        file_name: The name used to open the session
        upload_id: Session id returned by create_multipart
        parts: Completion tokens in ascending part order
        file_size: Total size in bytes

    Returns:
        Success message and download URL

    Raises:
        FileServiceError: If the service returns an error or cannot be reached
    """
    request = CompleteMultipartRequest(
        file_name=file_name,
        upload_id=upload_id,
        parts=list(parts),
        file_size=file_size
    )
    data = await _post(
        client,
        "/files/complete-multipart",
        request.model_dump(mode="json", by_alias=True),
        "complete multipart upload"
    )

    try:
        return CompleteMultipartResponse.model_validate(data)
    except ValidationError as e:
        raise FileServiceError("Malformed complete-multipart response") from e


async def list_files(client: httpx.AsyncClient) -> List[UploadedFile]:
    """
    Fetch uploaded files, most recent first.

    Raises:
        FileServiceError: If the listing cannot be fetched
    """
    try:
        response = await client.get("/files")
        response.raise_for_status()
        return _uploaded_files.validate_python(response.json())
    except httpx.HTTPStatusError as e:
        logger.error(f"File service refused to list files: {e.response.status_code}")
        raise FileServiceError("Failed to fetch files", status_code=e.response.status_code) from e
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"File listing request failed: {e}")
        raise FileServiceError("Failed to fetch files") from e

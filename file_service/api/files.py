"""
Multipart upload API endpoints.
Clients open a session, PUT chunks straight to S3 with the returned URLs, then complete it.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from upload_schemas.files import (
    CreateMultipartRequest,
    CreateMultipartResponse,
    CompleteMultipartRequest,
    CompleteMultipartResponse,
    UploadedFile,
)
from file_service.core.database import get_db
from file_service.core.exceptions import (
    AssemblyError,
    MetadataPersistenceError,
    MultipartError,
    SessionCreationError,
)
from file_service.services.multipart import MultipartSessionManager, get_session_manager

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/files",
    tags=["files"]
)


@router.post("/create-multipart", response_model=CreateMultipartResponse)
async def create_multipart_upload(
    request: CreateMultipartRequest,
    manager: MultipartSessionManager = Depends(get_session_manager)
):
    """
    Open a multipart upload and return one pre-signed URL per chunk.

    Args:
        request: File name (unique object key), file type and chunk count

    Returns:
        Upload id and pre-signed part URLs ordered by part number
    """
    try:
        session = manager.create_session(
            name=request.file_name,
            content_type=request.file_type,
            chunk_count=request.chunk_count
        )

        return CreateMultipartResponse(
            upload_id=session.session_id,
            pre_signed_urls=session.part_urls
        )

    except SessionCreationError as e:
        logger.error(f"Error in create_multipart_upload: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create multipart upload"
        )


@router.post("/complete-multipart", response_model=CompleteMultipartResponse)
async def complete_multipart_upload(
    request: CompleteMultipartRequest,
    db: Session = Depends(get_db),
    manager: MultipartSessionManager = Depends(get_session_manager)
):
    """
    Assemble the uploaded parts and record the finished file.

    Args:
        request: File name, upload id, parts (PartNumber, ETag) and file size

    Returns:
        Success message and a download URL for the finished object
    """
    try:
        download_url = manager.complete_session(
            db=db,
            name=request.file_name,
            session_id=request.upload_id,
            parts=request.parts,
            file_size=request.file_size
        )

        return CompleteMultipartResponse(
            message="File uploaded successfully!",
            download_url=download_url
        )

    except AssemblyError as e:
        logger.error(f"Error completing multipart upload: {e}")
        if e.rejected_by_backend:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to complete multipart upload"
            )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except MetadataPersistenceError as e:
        logger.error(f"Upload {e.storage_key} stored but not recorded: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save file metadata"
        )
    except MultipartError as e:
        logger.error(f"Error completing multipart upload: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to complete multipart upload"
        )


@router.get("", response_model=List[UploadedFile])
async def get_uploaded_files(
    db: Session = Depends(get_db),
    manager: MultipartSessionManager = Depends(get_session_manager)
):
    """
    List uploaded files, most recent first, with fresh download URLs.
    """
    try:
        return manager.list_files(db)

    except MultipartError as e:
        logger.error(f"Error listing files: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve files"
        )

"""
Upload Coordinator - drives one file through the multipart upload protocol.

Handles:
- File selection and the busy guard (one upload at a time per coordinator)
- Splitting the file into chunks and uploading them strictly in order
- Progress and status notifications for any UI layer
- Finalizing the upload through the file service
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Callable, List, Optional

import httpx

from upload_client.clients import file_service_client
from upload_client.clients.storage_client import SleepFn, upload_chunk
from upload_client.core.config import settings
from upload_client.core.exceptions import (
    EmptyFileError,
    FileServiceError,
    UploadError,
    UploadInProgressError,
)
from upload_client.models.local_file import LocalFile
from upload_client.upload.chunking import chunk_count, iter_chunks
from upload_client.upload.parts import PartAccumulator

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "File uploaded successfully!"
FAILURE_MESSAGE = "Failed to upload file"

# Transfer progress stops short of 100 until the service has assembled the object
MAX_TRANSFER_PROGRESS = 99


class UploadStatus(str, Enum):
    """Lifecycle of the coordinator's current upload."""
    NOT_STARTED = "not_started"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ProgressListener = Callable[[Optional[int]], None]
StatusListener = Callable[[UploadStatus, str], None]


def make_object_key(file_name: str, timestamp_ms: int) -> str:
    """Destination name: creation time in milliseconds, then the original name."""
    return f"{timestamp_ms}_{file_name}"


class UploadCoordinator:
    """
    Uploads one file at a time and publishes progress and status changes.

    Progress is None before an upload starts and after a failure, 0..99
    while chunks are transferred, and 100 once the upload is finalized.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        chunk_size: Optional[int] = None,
        max_retry: Optional[int] = None,
        retry_delay: Optional[float] = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], float] = time.time
    ):
        self.client = client
        self.chunk_size = chunk_size or settings.CHUNK_SIZE
        self.max_retry = max_retry
        self.retry_delay = retry_delay
        self._sleep = sleep
        self._clock = clock

        self.file: Optional[LocalFile] = None
        self.progress: Optional[int] = None
        self.status = UploadStatus.NOT_STARTED
        self.message = ""

        self._busy = False
        self._progress_listeners: List[ProgressListener] = []
        self._status_listeners: List[StatusListener] = []

    @property
    def is_busy(self) -> bool:
        """True while an upload is in flight; selection and start are disabled."""
        return self._busy

    def add_progress_listener(self, listener: ProgressListener) -> None:
        self._progress_listeners.append(listener)

    def add_status_listener(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    def select_file(self, file: LocalFile) -> None:
        """
        Choose the file for the next upload and reset progress and status.

        Raises:
            UploadInProgressError: If an upload is running
        """
        if self._busy:
            raise UploadInProgressError("Cannot select a file while an upload is in progress")

        self.file = file
        self._set_progress(None)
        self._set_status(UploadStatus.NOT_STARTED, "")

    async def begin_upload(self, file: Optional[LocalFile] = None) -> Optional[str]:
        """
        Upload a file end to end.

        Args:
            file: File to upload; defaults to the selected file

        Returns:
            Download URL of the finished object, or None if nothing was
            selected or the upload failed (status carries the outcome)

        Raises:
            UploadInProgressError: If an upload is already running
        """
        file = file or self.file
        if file is None:
            return None

        if self._busy:
            raise UploadInProgressError("An upload is already in progress")

        self._busy = True
        try:
            self._set_status(UploadStatus.UPLOADING, "")
            self._set_progress(0)

            try:
                download_url = await self._upload(file)
            except (UploadError, OSError) as e:
                logger.error(f"Error uploading file {file.name}: {e}")
                self._set_progress(None)
                self._set_status(UploadStatus.FAILED, FAILURE_MESSAGE)
                return None
        finally:
            self._busy = False

        self.file = None
        self._set_progress(100)
        self._set_status(UploadStatus.SUCCEEDED, SUCCESS_MESSAGE)
        return download_url

    async def _upload(self, file: LocalFile) -> str:
        count = chunk_count(file.size, self.chunk_size)
        if count == 0:
            raise EmptyFileError(f"{file.name} is empty")

        # Used verbatim for both session creation and completion
        object_key = make_object_key(file.name, int(self._clock() * 1000))

        session = await file_service_client.create_multipart(
            self.client,
            file_name=object_key,
            file_type=file.content_type,
            chunk_count=count
        )
        if len(session.pre_signed_urls) != count:
            raise FileServiceError(
                f"Expected {count} part URLs, received {len(session.pre_signed_urls)}"
            )

        logger.info(f"Uploading {file.name} as {object_key} in {count} chunks (upload id {session.upload_id})")

        parts = PartAccumulator(file.size)
        for chunk in iter_chunks(file.size, self.chunk_size):
            data = file.read_range(chunk.start, chunk.end)
            etag = await upload_chunk(
                self.client,
                session.pre_signed_urls[chunk.part_number - 1],
                data,
                max_retry=self.max_retry,
                retry_delay=self.retry_delay,
                sleep=self._sleep
            )
            parts.add(chunk.part_number, etag, len(data))
            self._set_progress(min(parts.percent, MAX_TRANSFER_PROGRESS))

        result = await file_service_client.complete_multipart(
            self.client,
            file_name=object_key,
            upload_id=session.upload_id,
            parts=parts.parts,
            file_size=file.size
        )

        logger.info(f"Upload of {object_key} finalized")
        return result.download_url

    def _set_progress(self, value: Optional[int]) -> None:
        self.progress = value
        for listener in self._progress_listeners:
            self._notify(listener, value)

    def _set_status(self, status: UploadStatus, message: str) -> None:
        self.status = status
        self.message = message
        for listener in self._status_listeners:
            self._notify(listener, status, message)

    @staticmethod
    def _notify(listener: Callable, *args) -> None:
        # Listener errors are logged; coordinator state is already updated
        try:
            listener(*args)
        except Exception as e:
            logger.error(f"Upload listener {listener!r} failed: {e}")

"""
Errors raised by the upload client.
"""


class UploadError(Exception):
    """Base class for failures that abort an upload."""


class ChunkUploadError(UploadError):
    """A chunk could not be stored, after retries when raised by upload_chunk."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class FileServiceError(UploadError):
    """The file service rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyFileError(UploadError):
    """Zero-byte files have no parts to assemble."""


class UploadInProgressError(UploadError):
    """The coordinator is already running an upload."""

"""
Domain errors raised by the multipart session manager.
Routes translate them into HTTP errors; none of them is retried server side.
"""


class MultipartError(Exception):
    """Base class for multipart upload failures."""


class SessionCreationError(MultipartError):
    """S3 refused or could not open a multipart upload, or URL signing failed."""


class AssemblyError(MultipartError):
    """The reported part list was rejected, locally or by S3."""

    def __init__(self, message: str, *, rejected_by_backend: bool = False):
        super().__init__(message)
        self.rejected_by_backend = rejected_by_backend


class MetadataPersistenceError(MultipartError):
    """The object was assembled in S3 but its record could not be saved."""

    def __init__(self, message: str, storage_key: str):
        super().__init__(message)
        self.storage_key = storage_key


class ListingError(MultipartError):
    """The metadata store could not be read."""

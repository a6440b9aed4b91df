"""
Content-Type resolution for new multipart uploads.
"""

import mimetypes
from typing import Optional

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_content_type(file_name: str, declared_type: Optional[str] = None) -> str:
    """
    Pick the Content-Type stored with the object.

    The client's declared type always wins. Browsers report an empty string
    for unknown types, in which case the extension is consulted.

    Examples:
        >>> resolve_content_type("1700000000000_report.pdf", "application/pdf")
        'application/pdf'

        >>> resolve_content_type("1700000000000_photo.jpg", "")
        'image/jpeg'

        >>> resolve_content_type("1700000000000_blob.unknownext", "")
        'application/octet-stream'
    """
    if declared_type and declared_type.strip():
        return declared_type.strip()

    guessed_type, _ = mimetypes.guess_type(file_name)
    return guessed_type or DEFAULT_CONTENT_TYPE

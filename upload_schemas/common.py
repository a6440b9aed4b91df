"""
Common schemas shared by the service and the client.
"""

from pydantic import BaseModel

__all__ = ["ErrorResponse"]


class ErrorResponse(BaseModel):
    """Standard error response returned by the global exception handler."""
    success: bool = False
    detail: str
    error_code: str | None = None

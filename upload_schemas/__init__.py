"""
Shared API schemas for the chunked upload service and client.
Provides type-safe contracts for the file service HTTP API.
"""

__version__ = "1.0.0"

# Export commonly used schemas
from upload_schemas.common import *  # noqa: F403, F401
from upload_schemas.files import *  # noqa: F403, F401

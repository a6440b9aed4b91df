"""
HTTP client construction for the upload client.
"""

import httpx

from upload_client.core.config import settings


def create_http_client(base_url: str | None = None, **kwargs) -> httpx.AsyncClient:
    """
    Build the AsyncClient used for both file service calls and chunk PUTs.

    Relative paths resolve against the file service base URL; pre-signed
    chunk URLs are absolute and bypass it.
    """
    return httpx.AsyncClient(
        base_url=base_url or settings.API_ENDPOINT,
        timeout=settings.HTTP_TIMEOUT,
        follow_redirects=True,
        **kwargs
    )

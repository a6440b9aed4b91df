"""
Chunk transfer to pre-signed S3 part URLs.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from upload_client.core.config import settings
from upload_client.core.exceptions import ChunkUploadError

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


def clean_etag(etag: str) -> str:
    """Strip the quotes S3 puts around ETag values."""
    return etag.replace('"', '')


async def _put_chunk(client: httpx.AsyncClient, url: str, data: bytes) -> str:
    response = await client.put(url, content=data)

    if not response.is_success:
        raise ChunkUploadError(f"Failed to upload chunk: {response.status_code} {response.reason_phrase}")

    etag = response.headers.get("ETag")
    if not etag:
        # Happens when the bucket CORS rules do not expose ETag
        raise ChunkUploadError("Chunk stored but response carried no ETag header")

    return clean_etag(etag)


async def upload_chunk(
    client: httpx.AsyncClient,
    url: str,
    data: bytes,
    *,
    max_retry: Optional[int] = None,
    retry_delay: Optional[float] = None,
    sleep: SleepFn = asyncio.sleep
) -> str:
    """
    PUT one chunk to its pre-signed URL, retrying with linear backoff.

    Attempt n that fails waits n * retry_delay seconds before attempt n + 1.
    The function has no side effects beyond the HTTP calls; the caller
    records the returned token.

    Args:
        client: HTTP client
        url: Pre-signed upload_part URL
        data: Chunk bytes
        max_retry: Total attempts allowed (default: settings.MAX_RETRY)
        retry_delay: Backoff unit in seconds (default: settings.RETRY_DELAY_SECONDS)
        sleep: Awaitable sleep, replaceable in tests

    Returns:
        The chunk's ETag without quotes

    Raises:
        ChunkUploadError: After max_retry failed attempts
    """
    max_retry = max_retry if max_retry is not None else settings.MAX_RETRY
    retry_delay = retry_delay if retry_delay is not None else settings.RETRY_DELAY_SECONDS

    attempt = 1
    while True:
        try:
            return await _put_chunk(client, url, data)
        except (httpx.HTTPError, ChunkUploadError) as e:
            if attempt >= max_retry:
                logger.error(f"Giving up on chunk after {attempt} attempts: {e}")
                raise ChunkUploadError(f"Chunk upload failed after {attempt} attempts: {e}", attempts=attempt) from e

            delay = attempt * retry_delay
            logger.warning(f"Error uploading chunk: {e}. Retrying upload of chunk (retry {attempt}) in {delay:.0f}s")
            await sleep(delay)
            attempt += 1

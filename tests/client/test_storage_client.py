import httpx
import pytest

from upload_client.clients.storage_client import clean_etag, upload_chunk
from upload_client.core.exceptions import ChunkUploadError

PART_URL = "https://bucket.s3.test/key?uploadId=u1&partNumber=1"


class _Sleeps:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def _scripted(outcomes):
    """Handler replaying outcomes in order; the last one repeats.

    An outcome is an exception to raise or a (status, headers) pair.
    """
    calls = []

    def handler(request):
        calls.append(request)
        outcome = outcomes[min(len(calls), len(outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        status, headers = outcome
        return httpx.Response(status, headers=headers)

    return handler, calls


def _ok(etag='"d41d8cd98f00b204e9800998ecf8427e"'):
    return (200, {"ETag": etag})


def _fail(status=500):
    return (status, {})


def test_clean_etag():
    assert clean_etag('"abc"') == "abc"
    assert clean_etag("abc") == "abc"


@pytest.mark.anyio
async def test_first_attempt_success_strips_quotes():
    handler, calls = _scripted([_ok()])
    sleeps = _Sleeps()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        etag = await upload_chunk(client, PART_URL, b"data", max_retry=5, retry_delay=20, sleep=sleeps)

    assert etag == "d41d8cd98f00b204e9800998ecf8427e"
    assert len(calls) == 1
    assert calls[0].method == "PUT"
    assert calls[0].content == b"data"
    assert sleeps.delays == []


@pytest.mark.anyio
async def test_retries_with_linear_backoff_then_succeeds():
    handler, calls = _scripted([_fail(500), _fail(503), _ok('"abc"')])
    sleeps = _Sleeps()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        etag = await upload_chunk(client, PART_URL, b"data", max_retry=5, retry_delay=20, sleep=sleeps)

    assert etag == "abc"
    assert len(calls) == 3
    assert sleeps.delays == [20, 40]


@pytest.mark.anyio
async def test_four_failures_still_succeed():
    handler, calls = _scripted([_fail()] * 4 + [_ok('"abc"')])
    sleeps = _Sleeps()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        etag = await upload_chunk(client, PART_URL, b"data", max_retry=5, retry_delay=20, sleep=sleeps)

    assert etag == "abc"
    assert sleeps.delays == [20, 40, 60, 80]


@pytest.mark.anyio
async def test_gives_up_after_max_retry_attempts():
    handler, calls = _scripted([_fail()])
    sleeps = _Sleeps()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ChunkUploadError) as excinfo:
            await upload_chunk(client, PART_URL, b"data", max_retry=5, retry_delay=20, sleep=sleeps)

    assert excinfo.value.attempts == 5
    assert len(calls) == 5
    assert sleeps.delays == [20, 40, 60, 80]


@pytest.mark.anyio
async def test_transport_errors_and_missing_etag_are_retried():
    handler, calls = _scripted([
        httpx.ConnectError("connection reset"),
        (200, {}),                    # no ETag exposed
        _ok('"abc"'),
    ])
    sleeps = _Sleeps()

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        etag = await upload_chunk(client, PART_URL, b"data", max_retry=5, retry_delay=1, sleep=sleeps)

    assert etag == "abc"
    assert len(calls) == 3
    assert sleeps.delays == [1, 2]

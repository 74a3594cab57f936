"""HTTP download of remote thumbnails with a hard per-request deadline."""

from __future__ import annotations

import asyncio
import logging

import httpx

from video_catalog.errors import FetchTimeout, RemoteFetchError

DEFAULT_TIMEOUT_MS = 100_000

logger = logging.getLogger(__name__)


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    response = await client.get(url)
    if not response.is_success:
        reason = response.reason_phrase or f"HTTP {response.status_code}"
        raise RemoteFetchError(url, reason, status_code=response.status_code)
    return response


async def fetch(
    url: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """Download ``url`` and return the body.

    The whole exchange (connect, headers and body) must finish within
    ``timeout_ms``; otherwise the request is cancelled and ``FetchTimeout``
    is raised. Non-2xx responses and transport failures raise
    ``RemoteFetchError``. No retries happen here.

    A new client is opened for the request unless ``client`` is given.
    """

    timeout_s = timeout_ms / 1000

    try:
        if client is not None:
            response = await asyncio.wait_for(_get(client, url), timeout=timeout_s)
        else:
            async with httpx.AsyncClient(follow_redirects=True, timeout=None) as own_client:
                response = await asyncio.wait_for(_get(own_client, url), timeout=timeout_s)
    except asyncio.TimeoutError as exc:
        raise FetchTimeout(url, timeout_ms) from exc
    except httpx.HTTPError as exc:
        raise RemoteFetchError(url, str(exc) or type(exc).__name__) from exc
    except httpx.InvalidURL as exc:
        raise RemoteFetchError(url, f"invalid URL ({exc})") from exc

    logger.debug("[fetch] %s -> %d bytes", url, len(response.content))
    return response.content

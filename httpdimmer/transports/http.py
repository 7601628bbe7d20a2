"""HTTP transport implementation using aiohttp."""

from __future__ import annotations

import asyncio

import aiohttp

from httpdimmer.core.errors import TransportConnectError, TransportTimeoutError
from httpdimmer.core.model import HttpResponse


class HttpTransport:
    """Single-GET transport over aiohttp.

    Without a session the transport opens one lazily and drops it on `close()`,
    so it can be reused across event loops. A caller-supplied session is bound to
    the loop it was created on and is never closed here; do not pass one to
    `DimmerService` or `Client`, which run each operation in a fresh loop.
    """

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def get(self, url: str, *, timeout_s: float = 4.0) -> HttpResponse:
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=timeout_s)
        try:
            async with session.get(url, timeout=timeout) as response:
                body = await response.text(errors="replace")
                return HttpResponse(ok=200 <= response.status < 300, status=response.status, body=body)
        except asyncio.TimeoutError as exc:
            raise TransportTimeoutError(f"GET {url} timed out after {timeout_s:g}s") from exc
        except (aiohttp.ClientError, OSError, ValueError) as exc:
            raise TransportConnectError(f"GET {url} failed: {exc}") from exc

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

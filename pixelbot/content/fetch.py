"""HTTP fetch for remote device content."""

from __future__ import annotations

from typing import Awaitable, Callable

import httpx

from pixelbot.errors import TransportError

BytesFetcher = Callable[[str, float], Awaitable[bytes]]


class ContentFetcher:
    """Plain GET returning the body bytes; any failure becomes TransportError."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        fetcher: BytesFetcher | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout_seconds = max(0.2, float(timeout_seconds))
        self._transport = transport
        self._fetcher = fetcher or self._http_fetch_bytes

    async def fetch(self, url: str) -> bytes:
        target = str(url or "").strip()
        if not target:
            raise TransportError("content url is empty")
        try:
            return await self._fetcher(target, self.timeout_seconds)
        except TransportError:
            raise
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = e.response.reason_phrase
            raise TransportError(f"failed to fetch content: {status} {reason}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"failed to fetch content: {e}") from e

    async def _http_fetch_bytes(self, url: str, timeout_seconds: float) -> bytes:
        async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
            resp = await client.get(url, follow_redirects=True)
            resp.raise_for_status()
            return resp.content

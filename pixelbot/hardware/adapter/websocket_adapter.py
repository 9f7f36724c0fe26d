"""WebSocket transport: the hosting platform connects and exchanges JSON envelopes."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import parse_qs, urlparse

from loguru import logger
from websockets.asyncio.server import Server, ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from pixelbot.hardware.adapter.base import ChatTransport

_SENTINEL = object()


class WebSocketTransport(ChatTransport):
    """Accepts platform connections and multiplexes their units into one stream."""

    name = "websocket"

    def __init__(
        self,
        *,
        host: str = "0.0.0.0",
        port: int = 18792,
        require_token: bool = False,
        token: str = "",
    ) -> None:
        self.host = host
        self.port = port
        self.require_token = require_token
        self.token = token
        self._running = False
        self._queue: asyncio.Queue[dict[str, Any] | object] = asyncio.Queue()
        self._server: Server | None = None
        self._platform: ServerConnection | None = None

    async def start(self) -> None:
        self._running = True
        self._server = await serve(self._handle_connection, self.host, self.port)
        if not self.port:
            self.port = self._server.sockets[0].getsockname()[1]
        logger.info(f"Bot WS transport listening on ws://{self.host}:{self.port}")

    async def stop(self) -> None:
        self._running = False
        if self._platform is not None:
            try:
                await self._platform.close()
            except ConnectionClosed:
                pass
            self._platform = None
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        await self._queue.put(_SENTINEL)

    async def recv_units(self) -> AsyncIterator[dict[str, Any]]:
        while self._running:
            item = await self._queue.get()
            if item is _SENTINEL:
                break
            yield item

    async def send(self, envelope: dict[str, Any]) -> None:
        ws = self._platform
        if ws is None:
            raise ConnectionError("no platform connection")
        await ws.send(json.dumps(envelope, ensure_ascii=False))

    async def _handle_connection(self, websocket: ServerConnection) -> None:
        path = websocket.request.path if websocket.request else ""
        query = parse_qs(urlparse(path).query)
        token = (query.get("token") or query.get("authorization") or [""])[0]
        if token.startswith("Bearer "):
            token = token[7:]

        if self.require_token and self.token and token != self.token:
            await websocket.close(code=4401, reason="unauthorized")
            return

        previous = self._platform
        self._platform = websocket
        if previous is not None and previous is not websocket:
            logger.info("Bot WS transport replaced previous platform connection")

        try:
            async for message in websocket:
                try:
                    data = json.loads(message)
                except (TypeError, ValueError) as e:
                    logger.warning(f"WS transport dropped non-json frame: {e}")
                    continue
                if isinstance(data, list):
                    for item in data:
                        if isinstance(item, dict):
                            await self._queue.put(item)
                elif isinstance(data, dict):
                    await self._queue.put(data)
        except ConnectionClosed:
            pass
        except Exception as e:
            logger.warning(f"WS transport connection error: {e}")
        finally:
            if self._platform is websocket:
                self._platform = None

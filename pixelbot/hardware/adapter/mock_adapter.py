"""In-memory transport used for local simulation and tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from pixelbot.hardware.adapter.base import ChatTransport
from pixelbot.hardware.protocol import OutboundType

RpcResponder = Callable[[dict[str, Any]], Awaitable[list[Any] | None] | list[Any] | None]

_SENTINEL = object()


class MockTransport(ChatTransport):
    """Queue-backed transport that can be fed by tests or debug tooling.

    When ``rpc_responder`` is set, every outbound RPC request is answered by
    injecting an ``rpc.response`` unit built from the responder's result list.
    Returning ``None`` leaves the request unanswered.
    """

    name = "mock"

    def __init__(self, *, rpc_responder: RpcResponder | None = None, fail_sends: bool = False) -> None:
        self.rpc_responder = rpc_responder
        self.fail_sends = fail_sends
        self._running = False
        self._inbound: asyncio.Queue[dict[str, Any] | object] = asyncio.Queue()
        self._outbound: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self.sent: list[dict[str, Any]] = []

    async def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        self._running = False
        await self._inbound.put(_SENTINEL)

    async def recv_units(self) -> AsyncIterator[dict[str, Any]]:
        while self._running:
            unit = await self._inbound.get()
            if unit is _SENTINEL:
                break
            yield unit

    async def send(self, envelope: dict[str, Any]) -> None:
        if self.fail_sends:
            raise ConnectionError("mock transport is offline")
        self.sent.append(envelope)
        await self._outbound.put(envelope)
        if envelope.get("type") == OutboundType.RPC_REQUEST and self.rpc_responder is not None:
            result = self.rpc_responder(envelope)
            if asyncio.iscoroutine(result):
                result = await result
            if result is not None:
                await self.inject_unit({"rpc": {"response": {"id": envelope["id"], "result": result}}})

    async def inject_unit(self, unit: dict[str, Any]) -> dict[str, Any]:
        """Inject a raw inbound unit."""
        await self._inbound.put(unit)
        return unit

    async def next_outbound(self, timeout_s: float = 1.0) -> dict[str, Any]:
        """Await next outbound envelope sent by the runtime."""
        return await asyncio.wait_for(self._outbound.get(), timeout=timeout_s)

    def pending_outbound(self) -> list[dict[str, Any]]:
        """Drain all currently queued outbound envelopes."""
        items: list[dict[str, Any]] = []
        while True:
            try:
                items.append(self._outbound.get_nowait())
            except asyncio.QueueEmpty:
                break
        return items

    def messages(self) -> list[Any]:
        """Contents of every send_message envelope so far."""
        return [e.get("content") for e in self.sent if e.get("type") == OutboundType.SEND_MESSAGE]

    def rpc_requests(self) -> list[dict[str, Any]]:
        return [e for e in self.sent if e.get("type") == OutboundType.RPC_REQUEST]

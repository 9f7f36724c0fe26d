"""RPC bridge: send requests to bound devices and correlate their responses."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from loguru import logger

from pixelbot.errors import DeviceTimeoutError, TransportError
from pixelbot.hardware.adapter.base import ChatTransport
from pixelbot.hardware.device import Device
from pixelbot.hardware.protocol import RpcEnvelope, RpcRequest, RpcResponse
from pixelbot.hardware.registry import DeviceSessionRegistry
from pixelbot.observability import BotRuntimeMetrics

if TYPE_CHECKING:
    from pixelbot.session.manager import Session

DEFAULT_TIMEOUT_S = 10.0


class RpcBridge:
    """Routes device RPCs through the chat transport.

    Every call checks the binding first, so an unbound device never causes a
    send. Responses arrive as inbound units and are matched by request id in
    ``resolve``. Failed calls are reported once; retries belong to callers.
    """

    def __init__(
        self,
        *,
        transport: ChatTransport,
        registry: DeviceSessionRegistry,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        metrics: BotRuntimeMetrics | None = None,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")
        self.transport = transport
        self.registry = registry
        self.timeout_s = float(timeout_s)
        self.metrics = metrics or BotRuntimeMetrics()
        self._pending: dict[str, asyncio.Future[RpcResponse]] = {}

    async def call(
        self,
        session: Session,
        device: Device,
        request: RpcRequest,
        *,
        timeout_s: float | None = None,
    ) -> RpcResponse:
        return await self.call_batch(session, device, [request], timeout_s=timeout_s)

    async def call_batch(
        self,
        session: Session,
        device: Device,
        requests: Sequence[RpcRequest],
        *,
        timeout_s: float | None = None,
    ) -> RpcResponse:
        if not requests:
            raise ValueError("at least one request is required")
        self.registry.resolve_binding(session, device)
        self.registry.associate(device, session)

        wait_s = self.timeout_s if timeout_s is None else max(0.001, float(timeout_s))
        method = requests[0].method if len(requests) == 1 else "batch"
        envelope = RpcEnvelope(device_id=device.device_id, calls=list(requests), chat=session.chat)
        loop = asyncio.get_running_loop()
        future: asyncio.Future[RpcResponse] = loop.create_future()
        self._pending[envelope.request_id] = future
        started = time.perf_counter()
        logger.debug(
            f"rpc-send id={envelope.request_id} device_id={device.device_id} "
            f"chat_id={session.chat_id} method={method}"
        )
        try:
            try:
                await self.transport.send_rpc(envelope)
            except Exception as e:
                self._record(method, started, success=False)
                raise TransportError(f"{method} to {device.device_id}: {e}") from e
            try:
                response = await asyncio.wait_for(future, timeout=wait_s)
            except asyncio.TimeoutError:
                self._record(method, started, success=False, timed_out=True)
                raise DeviceTimeoutError(device.device_id, method, wait_s) from None
        finally:
            self._pending.pop(envelope.request_id, None)

        self._record(method, started, success=response.ok)
        return response

    def resolve(self, payload: Mapping[str, Any]) -> bool:
        """Complete the pending call matching an inbound response payload."""
        try:
            response = RpcResponse.from_dict(payload)
        except ValueError as e:
            logger.warning(f"Dropping rpc response without id: {e}")
            return False
        future = self._pending.get(response.request_id)
        if future is None or future.done():
            logger.debug(f"Dropping late or unknown rpc response id={response.request_id}")
            return False
        future.set_result(response)
        return True

    def pending_count(self) -> int:
        return len(self._pending)

    def cancel_all(self) -> None:
        for future in self._pending.values():
            if not future.done():
                future.cancel()
        self._pending.clear()

    def _record(self, method: str, started: float, *, success: bool, timed_out: bool = False) -> None:
        self.metrics.record_rpc(
            method,
            success=success,
            latency_ms=(time.perf_counter() - started) * 1000.0,
            timed_out=timed_out,
        )

"""RPC request/response/notify types and the JSON envelope carried by transports."""

from __future__ import annotations

import time
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


def now_ms() -> int:
    """Current timestamp in milliseconds."""
    return int(time.time() * 1000)


class OutboundType(StrEnum):
    """Outbound envelope types written by the runtime to a transport."""

    SEND_MESSAGE = "send_message"
    RPC_REQUEST = "rpc_request"
    SET_COMMANDS = "set_commands"
    ATTACH_DEVICES = "attach_devices"


@dataclass(frozen=True, slots=True)
class RpcRequest:
    """One device method invocation. Immutable once built."""

    method: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method, "params": dict(self.params)}


@dataclass(frozen=True, slots=True)
class RpcResult:
    """Result of one call inside a response."""

    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "RpcResult":
        if not isinstance(data, Mapping):
            return cls(ok=True, value=data)
        error = data.get("error")
        if error:
            if isinstance(error, Mapping):
                code = str(error.get("code") or "").strip()
                message = str(error.get("message") or "").strip()
                text = ": ".join(part for part in (code, message) if part) or "error"
            else:
                text = str(error)
            return cls(ok=False, error=text)
        result = data.get("result", data)
        if isinstance(result, Mapping) and "value" in result:
            return cls(ok=True, value=result.get("value"))
        return cls(ok=True, value=result)


@dataclass(frozen=True, slots=True)
class RpcResponse:
    """Ordered per-call results; order matches request submission order."""

    request_id: str
    results: tuple[RpcResult, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RpcResponse":
        request_id = str(data.get("id") or data.get("request_id") or "").strip()
        if not request_id:
            raise ValueError("response id is required")
        raw = data.get("result", data.get("results", []))
        if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
            raw = [raw]
        return cls(request_id=request_id, results=tuple(RpcResult.from_dict(item) for item in raw))

    @property
    def ok(self) -> bool:
        return bool(self.results) and all(r.ok for r in self.results)

    def first_value(self) -> Any:
        if not self.results or not self.results[0].ok:
            return None
        return self.results[0].value

    def number_value(self) -> float | int | None:
        value = self.first_value()
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        return value

    def bool_value(self) -> bool | None:
        value = self.first_value()
        return value if isinstance(value, bool) else None


@dataclass(frozen=True, slots=True)
class NotifyEvent:
    """Structured device notification."""

    name: str
    params: dict[str, Any] = field(default_factory=dict)

    @property
    def value(self) -> Any:
        return self.params.get("value")


@dataclass(slots=True)
class RpcEnvelope:
    """Outbound RPC frame: one or more calls for a single device."""

    device_id: str
    calls: list[RpcRequest]
    chat: Any = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    ts: int = field(default_factory=now_ms)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": OutboundType.RPC_REQUEST.value,
            "id": self.request_id,
            "device_id": self.device_id,
            "chat": self.chat,
            "ts": self.ts,
            "calls": [call.to_dict() for call in self.calls],
        }


def make_outbound(outbound_type: OutboundType | str, **fields: Any) -> dict[str, Any]:
    """Factory helper for non-RPC outbound envelopes."""
    data: dict[str, Any] = {"type": str(outbound_type), "ts": now_ms()}
    data.update(fields)
    return data

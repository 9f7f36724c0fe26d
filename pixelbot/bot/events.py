"""Inbound unit model.

A raw unit from the platform may carry several optional fields at once. It is
classified into exactly one variant, in precedence order: device notify frames,
then an interactive callback, then chat message text.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class NotifyUnit:
    chat: Any
    frames: tuple[Any, ...]
    device_id: str = ""
    kind: str = field(default="notify", init=False)


@dataclass(frozen=True, slots=True)
class CallbackUnit:
    chat: Any
    value: str
    kind: str = field(default="callback", init=False)


@dataclass(frozen=True, slots=True)
class MessageUnit:
    chat: Any
    text: str
    kind: str = field(default="message", init=False)


@dataclass(frozen=True, slots=True)
class UnknownUnit:
    chat: Any
    kind: str = field(default="unknown", init=False)


InboundUnit: TypeAlias = NotifyUnit | CallbackUnit | MessageUnit | UnknownUnit


def classify(raw: Mapping[str, Any]) -> InboundUnit:
    """Pick the single variant a raw unit is dispatched as."""
    chat = raw.get("chat")

    rpc = raw.get("rpc")
    notify = rpc.get("notify") if isinstance(rpc, Mapping) else None
    if notify:
        frames = tuple(notify) if isinstance(notify, (list, tuple)) else (notify,)
        device_id = str(raw.get("device_id") or raw.get("deviceId") or "").strip()
        return NotifyUnit(chat=chat, frames=frames, device_id=device_id)

    callback = raw.get("callback")
    value = callback.get("value") if isinstance(callback, Mapping) else callback
    if value not in (None, ""):
        return CallbackUnit(chat=chat, value=str(value))

    message = raw.get("message")
    content = message.get("content") if isinstance(message, Mapping) else message
    if content not in (None, ""):
        return MessageUnit(chat=chat, text=str(content))

    return UnknownUnit(chat=chat)


def rpc_response(raw: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """RPC response payload carried by a unit, if any."""
    rpc = raw.get("rpc")
    if not isinstance(rpc, Mapping):
        return None
    response = rpc.get("response")
    return response if isinstance(response, Mapping) else None

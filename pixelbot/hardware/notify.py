"""Decode raw device notify frames into structured events."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from pixelbot.errors import DecodeError
from pixelbot.hardware.protocol import NotifyEvent

NOTIFY_METHOD = "notify"


class NotificationDecoder:
    """Pure, stateless frame decoder. Malformed frames are dropped."""

    def decode(self, frames: Iterable[Any] | Any) -> list[NotifyEvent]:
        events: list[NotifyEvent] = []
        for frame in _iter_frames(frames):
            try:
                events.extend(self.decode_frame(frame))
            except DecodeError as e:
                logger.debug(f"Dropping malformed notify frame: {e}")
        return events

    def decode_frame(self, frame: Any) -> list[NotifyEvent]:
        """Decode one frame, raising DecodeError when it is malformed."""
        if isinstance(frame, (bytes, bytearray)):
            try:
                frame = frame.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"frame is not utf-8: {e}") from e
        if isinstance(frame, str):
            try:
                frame = json.loads(frame)
            except json.JSONDecodeError as e:
                raise DecodeError(f"frame is not json: {e.msg}") from e
        if isinstance(frame, list):
            return self.decode(frame)
        if not isinstance(frame, Mapping):
            raise DecodeError(f"unsupported frame type {type(frame).__name__}")

        name = frame.get("name")
        params: Any = frame.get("params")
        method = frame.get("method")
        if not name and method == NOTIFY_METHOD and isinstance(params, Mapping):
            name = params.get("name")
            params = params.get("params", params.get("value", {}))
            if not isinstance(params, Mapping):
                params = {"value": params}
        elif not name and isinstance(method, str):
            name = method

        if not isinstance(name, str) or not name.strip():
            raise DecodeError("frame has no event name")
        return [NotifyEvent(name=name.strip(), params=_as_params(params))]


def _iter_frames(frames: Iterable[Any] | Any) -> Iterable[Any]:
    if frames is None:
        return []
    if isinstance(frames, (str, bytes, bytearray, Mapping)):
        return [frames]
    if isinstance(frames, Iterable):
        return frames
    return [frames]


def _as_params(params: Any) -> dict[str, Any]:
    if params is None:
        return {}
    if isinstance(params, Mapping):
        return dict(params)
    return {"value": params}


_default_decoder = NotificationDecoder()


def decode(frames: Iterable[Any] | Any) -> list[NotifyEvent]:
    """Module-level shortcut around a shared decoder."""
    return _default_decoder.decode(frames)

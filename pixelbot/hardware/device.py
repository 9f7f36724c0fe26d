"""Device handles and their RPC method catalogues."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from pixelbot.hardware.notify import NotificationDecoder
from pixelbot.hardware.protocol import NotifyEvent, RpcRequest


class Device:
    """Opaque handle to a controllable peripheral.

    Subclasses declare the method names their firmware accepts in ``METHODS``.
    Requests for anything outside the catalogue are rejected before they can
    reach the bridge.
    """

    kind: ClassVar[str] = "device"
    METHODS: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, device_id: str | None = None, *, name: str = "") -> None:
        self.device_id = str(device_id or f"{self.kind}-{uuid.uuid4().hex[:8]}")
        self.name = name or self.device_id
        self._decoder = NotificationDecoder()

    def request(self, method: str, params: Mapping[str, Any] | None = None) -> RpcRequest:
        if method not in self.METHODS:
            raise ValueError(f"{self.kind} has no RPC method {method!r}")
        return RpcRequest(method=method, params=dict(params or {}))

    def parse_notify(self, frames: Iterable[Any] | Any) -> list[NotifyEvent]:
        return self._decoder.decode(frames)

    def describe(self) -> dict[str, Any]:
        return {
            "device_id": self.device_id,
            "kind": self.kind,
            "name": self.name,
            "methods": sorted(self.METHODS),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(device_id={self.device_id!r})"


class PixelMug(Device):
    """Mug with a 32x16 pixel display."""

    kind = "pixelmug"
    METHODS = frozenset(
        {
            "talGetCupTemperature",
            "talGetBrightness",
            "talSetBrightness",
            "talGetBatteryLevel",
            "talGetWifiInfo",
            "talGetSwitch",
            "talSetDisplayOnOff",
            "talSetHomeSwipeEnable",
            "talRebootDevice",
            "talReturn2Home",
            "talPlayGif",
            "talShowText",
        }
    )

    # Notify names pushed by the firmware.
    CHARGING_STATE = "CurChargingState"

    DISPLAY_WIDTH = 32
    DISPLAY_HEIGHT = 16

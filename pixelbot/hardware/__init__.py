"""Device handles, bindings and the RPC bridge."""

from pixelbot.hardware.bridge import RpcBridge
from pixelbot.hardware.device import Device, PixelMug
from pixelbot.hardware.notify import NotificationDecoder
from pixelbot.hardware.registry import Binding, DeviceSessionRegistry

__all__ = [
    "Binding",
    "Device",
    "DeviceSessionRegistry",
    "NotificationDecoder",
    "PixelMug",
    "RpcBridge",
]

"""Transports that connect the bot runtime to its hosting chat platform."""

from pixelbot.hardware.adapter.base import ChatTransport
from pixelbot.hardware.adapter.mock_adapter import MockTransport
from pixelbot.hardware.adapter.websocket_adapter import WebSocketTransport

__all__ = [
    "ChatTransport",
    "MockTransport",
    "WebSocketTransport",
]

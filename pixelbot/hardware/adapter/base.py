"""Transport contract between the bot runtime and the hosting chat platform."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import Any

from pixelbot.hardware.device import Device
from pixelbot.hardware.protocol import OutboundType, RpcEnvelope, make_outbound


class ChatTransport(ABC):
    """Abstract transport used by the bot runtime.

    Inbound units are plain dicts in the pixelbot JSON envelope. Device RPCs
    are routed through the chat platform, so the same transport carries both
    chat traffic and device traffic.
    """

    name: str = "base"

    @abstractmethod
    async def start(self) -> None:
        """Start transport resources and begin ingesting platform traffic."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop transport resources."""

    @abstractmethod
    def recv_units(self) -> AsyncIterator[dict[str, Any]]:
        """Yield raw inbound units."""

    @abstractmethod
    async def send(self, envelope: dict[str, Any]) -> None:
        """Deliver one outbound envelope. Raise on delivery failure."""

    async def send_message(self, chat: Any, content: Any) -> None:
        await self.send(make_outbound(OutboundType.SEND_MESSAGE, chat=chat, content=content))

    async def send_rpc(self, envelope: RpcEnvelope) -> None:
        await self.send(envelope.to_dict())

    async def set_commands(self, commands: Sequence[dict[str, str]]) -> None:
        await self.send(make_outbound(OutboundType.SET_COMMANDS, commands=list(commands)))

    async def attach_devices(self, devices: Sequence[Device]) -> None:
        """Ask the platform to start its device attach flow."""
        await self.send(
            make_outbound(
                OutboundType.ATTACH_DEVICES,
                devices=[device.describe() for device in devices],
            )
        )

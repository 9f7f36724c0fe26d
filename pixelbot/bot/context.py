"""Per-dispatch context handed to bot handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pixelbot.bot.events import CallbackUnit, InboundUnit, MessageUnit
from pixelbot.hardware.protocol import NotifyEvent, RpcRequest, RpcResponse

if TYPE_CHECKING:
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.hardware.device import Device
    from pixelbot.session.manager import Session


@dataclass(slots=True)
class BotContext:
    runtime: BotRuntime
    session: Session
    unit: InboundUnit
    events: list[NotifyEvent] = field(default_factory=list)

    @property
    def chat(self) -> Any:
        return self.session.chat

    @property
    def chat_id(self) -> str:
        return self.session.chat_id

    @property
    def text(self) -> str:
        return self.unit.text if isinstance(self.unit, MessageUnit) else ""

    @property
    def args(self) -> str:
        """Message text after the leading command token."""
        parts = self.text.strip().split(maxsplit=1)
        return parts[1] if len(parts) > 1 else ""

    @property
    def callback_value(self) -> str:
        return self.unit.value if isinstance(self.unit, CallbackUnit) else ""

    async def reply(self, content: Any) -> None:
        await self.runtime.send_message(self.session, content)

    async def call(self, device: Device, request: RpcRequest) -> RpcResponse:
        return await self.runtime.set_dev_message(self.session, device, request)

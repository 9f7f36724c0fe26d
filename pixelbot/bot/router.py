"""Single entry point that dispatches each inbound unit to one handler path."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger

from pixelbot.bot.context import BotContext
from pixelbot.bot.events import CallbackUnit, MessageUnit, NotifyUnit
from pixelbot.hardware.notify import NotificationDecoder

Handler = Callable[[BotContext], Awaitable[None]]


class DispatchOutcome(StrEnum):
    NOTIFY = "notify"
    CALLBACK = "callback"
    COMMAND = "command"
    MESSAGE = "message"
    IGNORED = "ignored"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CommandSpec:
    command: str
    description: str
    handler: Handler | None = None


def parse_command(text: str) -> str | None:
    """Return the command name of a leading ``/token``, without any ``@bot`` suffix."""
    parts = str(text or "").strip().split(maxsplit=1)
    if not parts or not parts[0].startswith("/") or len(parts[0]) < 2:
        return None
    return parts[0][1:].split("@", 1)[0] or None


class EventRouter:
    """Registration tables plus precedence dispatch.

    Precedence is notify > callback > message: a unit that carries notify
    frames never also reaches callback or command handlers. Unmatched callback
    values are ignored silently; unmatched text goes to the free-form handler
    when one is registered.
    """

    def __init__(self, *, decoder: NotificationDecoder | None = None) -> None:
        self.decoder = decoder or NotificationDecoder()
        self._commands: dict[str, CommandSpec] = {}
        self._callbacks: dict[str, Handler] = {}
        self._notify_handlers: list[Handler] = []
        self._message_handler: Handler | None = None

    def command(
        self,
        name: str,
        handler: Handler | None = None,
        *,
        description: str = "",
    ) -> Callable[[Handler], Handler] | Handler:
        """Register a command handler. Last registration for a name wins.

        Usable directly or as a decorator (``@router.command("start")``).
        """
        token = str(name).strip().lstrip("/")
        if not token:
            raise ValueError("command name is required")

        def register(fn: Handler) -> Handler:
            previous = self._commands.get(token)
            desc = description or (previous.description if previous else "")
            self._commands[token] = CommandSpec(command=token, description=desc, handler=fn)
            return fn

        if handler is None:
            return register
        return register(handler)

    def describe_command(self, name: str, description: str) -> None:
        """Record a command description without changing its handler."""
        token = str(name).strip().lstrip("/")
        previous = self._commands.get(token)
        self._commands[token] = CommandSpec(
            command=token,
            description=str(description),
            handler=previous.handler if previous else None,
        )

    def callback(self, value: str, handler: Handler | None = None) -> Callable[[Handler], Handler] | Handler:
        """Register a handler for one callback value (directly or as a decorator)."""

        def register(fn: Handler) -> Handler:
            self._callbacks[str(value)] = fn
            return fn

        if handler is None:
            return register
        return register(handler)

    def callbacks(self, table: Mapping[str, Handler]) -> None:
        for value, handler in table.items():
            self._callbacks[str(value)] = handler

    def on_message(self, handler: Handler) -> Handler:
        self._message_handler = handler
        return handler

    def on_notify(self, handler: Handler) -> Handler:
        self._notify_handlers.append(handler)
        return handler

    def commands(self) -> list[dict[str, str]]:
        return [
            {"command": spec.command, "description": spec.description}
            for spec in self._commands.values()
        ]

    async def dispatch(self, ctx: BotContext) -> DispatchOutcome:
        match ctx.unit:
            case NotifyUnit(frames=frames):
                ctx.events = self.decoder.decode(frames)
                if not ctx.events:
                    return DispatchOutcome.NOTIFY
                for handler in list(self._notify_handlers):
                    await handler(ctx)
                return DispatchOutcome.NOTIFY

            case CallbackUnit(value=value):
                handler = self._callbacks.get(value)
                if handler is None:
                    logger.debug(f"Ignoring unknown callback value={value!r} chat_id={ctx.chat_id}")
                    return DispatchOutcome.IGNORED
                await handler(ctx)
                return DispatchOutcome.CALLBACK

            case MessageUnit(text=text):
                name = parse_command(text)
                spec = self._commands.get(name) if name else None
                if spec is not None and spec.handler is not None:
                    await spec.handler(ctx)
                    return DispatchOutcome.COMMAND
                if self._message_handler is not None:
                    await self._message_handler(ctx)
                    return DispatchOutcome.MESSAGE
                return DispatchOutcome.IGNORED

            case _:
                return DispatchOutcome.IGNORED

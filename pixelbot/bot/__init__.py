"""Bot-facing runtime: unit routing, handler context and outbound content."""

from pixelbot.bot.context import BotContext
from pixelbot.bot.events import CallbackUnit, InboundUnit, MessageUnit, NotifyUnit, UnknownUnit, classify
from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.bot.router import DispatchOutcome, EventRouter
from pixelbot.bot.runtime import BotRuntime

__all__ = [
    "BotContext",
    "BotRuntime",
    "CallbackUnit",
    "DispatchOutcome",
    "EventRouter",
    "InboundUnit",
    "InlineKeyboard",
    "MessageUnit",
    "NotifyUnit",
    "UnknownUnit",
    "classify",
]

"""Power notify bot: forwards charging state changes to the subscribed chat.

Device notifications are not tied to a chat, so one chat at a time holds the
``power_state`` subscription. Subscribing from another chat takes it over.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.hardware.device import PixelMug

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config

TOPIC = "power_state"


def charging_label(value: object) -> str:
    return "Charging Now" if value else "Not Charging"


class PowerNotifyBot:
    def __init__(self, bot: BotRuntime, mug: PixelMug) -> None:
        self.bot = bot
        self.mug = mug
        bot.on_notify(self.on_notify)
        bot.callback("y", self.on_subscribe)
        bot.callback("n", self.on_subscribe)
        bot.on_message(self.on_message)

    async def on_notify(self, ctx: BotContext) -> None:
        for event in ctx.events:
            if event.name != PixelMug.CHARGING_STATE:
                continue
            subscriber = self.bot.subscriptions.subscriber(TOPIC)
            if subscriber is None:
                logger.debug(f"No subscriber for {TOPIC}, dropping {event.name}")
                continue
            await self.bot.send_message(subscriber, f"[Power State] {charging_label(event.value)}")

    async def on_subscribe(self, ctx: BotContext) -> None:
        yes = ctx.callback_value == "y"
        self.bot.subscriptions.set(TOPIC, ctx.session, yes)
        await ctx.reply(
            "✅ Subscribed. I will report power state changes." if yes else "❎ Unsubscribed."
        )

    async def on_message(self, ctx: BotContext) -> None:
        if ctx.session.is_subscribed(TOPIC):
            await ctx.reply("You're subscribed. Waiting for device reports…")
            return
        await ctx.reply(
            InlineKeyboard("Subscribe to Power State Reporting?").text("Yes", "y").text("No", "n")
        )


def setup(bot: BotRuntime, config: Config) -> PowerNotifyBot:
    mug = PixelMug("pixelmug-1")
    bot.bind_devices(mug)
    return PowerNotifyBot(bot, mug)

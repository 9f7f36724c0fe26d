"""Hello bot: ``/start`` shows a button that writes "Hi Mug" on the mug."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.hardware.device import PixelMug
from pixelbot.hardware.text import TextSize, text_request

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config


class HelloBot:
    def __init__(self, bot: BotRuntime, mug: PixelMug) -> None:
        self.mug = mug
        bot.set_my_commands([{"command": "start", "description": "Show hello bot keyboard"}])
        bot.command("start", self.on_start)
        bot.callback("hi_bot", self.on_hi)

    async def on_start(self, ctx: BotContext) -> None:
        await ctx.reply(InlineKeyboard("Click to show on PixelMug").text("Hello bot", "hi_bot"))

    async def on_hi(self, ctx: BotContext) -> None:
        await ctx.call(self.mug, text_request("Hi Mug", TextSize.SMALL, "#00ff00", direction=0))
        await ctx.reply("Displayed on PixelMug!")


def setup(bot: BotRuntime, config: Config) -> HelloBot:
    mug = PixelMug("pixelmug-1")
    bot.bind_devices(mug)
    return HelloBot(bot, mug)

"""Wordby bot: the first word goes to one mug, the second to the other."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.hardware.device import PixelMug
from pixelbot.hardware.text import TextSize, text_request
from pixelbot.utils.helpers import first_two_words

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config

PAIRS: dict[str, tuple[str, str]] = {
    "pair_boy_girl": ("Boy", "Girl"),
    "pair_bride_groom": ("Bride", "Groom"),
    "pair_dad_mom": ("Dad", "Mom"),
}


def build_keyboard() -> InlineKeyboard:
    return (
        InlineKeyboard("Try wordby")
        .text("Boy Girl", "pair_boy_girl")
        .row()
        .text("Bride Groom", "pair_bride_groom")
        .row()
        .text("Dad Mom", "pair_dad_mom")
        .row()
        .text("Clear Display", "clear_display")
    )


class WordbyBot:
    def __init__(self, bot: BotRuntime, first: PixelMug, second: PixelMug) -> None:
        self.first = first
        self.second = second
        bot.set_my_commands([{"command": "start", "description": "Open wordby"}])
        bot.command("start", self.on_start)
        for value in PAIRS:
            bot.callback(value, self.on_pair)
        bot.callback("clear_display", self.on_clear)
        bot.on_message(self.on_text)

    async def show_pair(self, ctx: BotContext, a: str, b: str) -> None:
        await ctx.call(self.first, text_request(a, TextSize.SMALL, direction=0, speed=1))
        await ctx.call(self.second, text_request(b, TextSize.SMALL, direction=0, speed=1))

    async def on_start(self, ctx: BotContext) -> None:
        await ctx.reply(build_keyboard())

    async def on_pair(self, ctx: BotContext) -> None:
        await self.show_pair(ctx, *PAIRS[ctx.callback_value])

    async def on_clear(self, ctx: BotContext) -> None:
        await ctx.call(self.first, self.first.request("talReturn2Home"))
        await ctx.call(self.second, self.second.request("talReturn2Home"))

    async def on_text(self, ctx: BotContext) -> None:
        content = ctx.text.strip()
        if not content:
            return
        w1, w2 = first_two_words(content)
        if not w1 or not w2:
            await ctx.reply("Please send at least two words (e.g., `Boy Girl`).")
            return
        await self.show_pair(ctx, w1, w2)
        await ctx.reply(f'Displayed: "{w1}" on one mug, "{w2}" on the other.')


def setup(bot: BotRuntime, config: Config) -> WordbyBot:
    first = PixelMug("pixelmug-1")
    second = PixelMug("pixelmug-2")
    bot.bind_devices(first, second)
    return WordbyBot(bot, first, second)

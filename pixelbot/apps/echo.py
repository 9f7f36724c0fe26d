"""Echo bot: replies to every message with its own text."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config


async def echo(ctx: BotContext) -> None:
    await ctx.reply(f"Echo your message: {ctx.text}")


def setup(bot: BotRuntime, config: Config) -> None:
    bot.on_message(echo)

"""Scoreboard bot: home / visit counters rendered as static red text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.hardware.device import PixelMug
from pixelbot.hardware.text import TextSize, text_request

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config
    from pixelbot.session.manager import Session

SCORE_COLOR = "#ff0000"


def score_text(scores: dict[str, int]) -> str:
    return f"{scores['home']} : {scores['visit']}"


class ScoreboardBot:
    def __init__(self, bot: BotRuntime, mug: PixelMug) -> None:
        self.mug = mug
        bot.set_my_commands([{"command": "start", "description": "Scoreboard demo"}])
        bot.command("start", self.on_start)
        bot.callback("score_home", self.on_score)
        bot.callback("score_visit", self.on_score)
        bot.callback("score_reset", self.on_reset)
        bot.callback("exit_game", self.on_exit)

    @staticmethod
    def scores(session: Session) -> dict[str, int]:
        return session.state.setdefault("scoreboard", {"home": 0, "visit": 0})

    async def show(self, ctx: BotContext) -> None:
        text = score_text(self.scores(ctx.session))
        await ctx.call(self.mug, text_request(text, TextSize.SMALL, SCORE_COLOR, direction=0))
        await ctx.reply(f"Score updated: `{text}`")

    async def on_start(self, ctx: BotContext) -> None:
        keyboard = (
            InlineKeyboard("Scoreboard")
            .text("Home", "score_home")
            .text("Visit", "score_visit")
            .row()
            .text("Reset", "score_reset")
            .row()
            .text("Exit", "exit_game")
        )
        await ctx.reply(keyboard)
        await self.show(ctx)

    async def on_score(self, ctx: BotContext) -> None:
        side = "home" if ctx.callback_value == "score_home" else "visit"
        self.scores(ctx.session)[side] += 1
        await self.show(ctx)

    async def on_reset(self, ctx: BotContext) -> None:
        ctx.session.state["scoreboard"] = {"home": 0, "visit": 0}
        await self.show(ctx)

    async def on_exit(self, ctx: BotContext) -> None:
        await ctx.call(self.mug, self.mug.request("talReturn2Home"))
        await ctx.reply("Game exited.")


def setup(bot: BotRuntime, config: Config) -> ScoreboardBot:
    mug = PixelMug("pixelmug-1")
    bot.bind_devices(mug)
    return ScoreboardBot(bot, mug)

"""GIF player: rotates a playlist of remote GIFs on a PixelMug.

Keyboard rows: interval (query / long / medium / short), order (query /
random / sequential), manual prev / next, and clear display.

* ``/start`` shows the keyboard and starts rotation.
* Changing interval or order restarts rotation so the new setting applies now.
* Query buttons, prev / next and clear never touch the timer.
* Every GIF is fetched and validated (size, header, 32x16) before it is sent.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.content.fetch import ContentFetcher
from pixelbot.content.validation import ContentValidator
from pixelbot.errors import PixelBotError
from pixelbot.hardware.device import PixelMug
from pixelbot.scheduler.playlist import PlayOrder

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config
    from pixelbot.session.manager import Session

DEFAULT_PLAYLIST: tuple[str, ...] = (
    "https://storage.jeejio.com/im/artifact/gif/01JSKMV3ZZ7ZCYZ5KPA5X8Q7B2/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JSKSA3PC6GT7Q57F12K397ZV/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JSXQRXC5QCMKZ46EA9P5NTPE/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JTMPHDK3SKRDSREGGGFH92G4/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JV70YCWVNFM91HBHPGZHA42N/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JXM50F7C2KS4ZJG91JQ7FBVH/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JXM509MNV3SCNJQBYGSMACJZ/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWTCMMQH6RNZQXKRK8CB2Y7V/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6MHKRNR6GNNW9SWJMZPA4/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6MAQNC4HEK0TY1KC1NSHQ/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6KJ787S11JPCE48ZA452C/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6KBF3S57A1W7YQ6JDA2W4/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6K579JN41TQN44S5130FY/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6JC521TE4MY6887W6H9FM/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JWG6HXS6HGRQCVYS4RBZN2YJ/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JW8P8SX6ADERJ574GG3TA9EA/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JW5V40MDEVG6RSAXTR3FTMZM/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JTMPHJX3PC20MZXW5E0369M9/jeejio.gif",
    "https://storage.jeejio.com/im/artifact/gif/01JTJATT79JK6J1FKHK4XXB2XT/jeejio.gif",
)

LONG_MS = 5 * 60 * 1000
MEDIUM_MS = 2 * 60 * 1000
SHORT_MS = 30 * 1000

_STATE_KEY = "gif_player"


def build_keyboard() -> InlineKeyboard:
    return (
        InlineKeyboard("GIF Player")
        .text("Interval", "get_interval")
        .text("Long", "gif_int_5m")
        .text("Medium", "gif_int_2m")
        .text("Short", "gif_int_30s")
        .row()
        .text("Order", "get_order")
        .text("Random", "gif_order_random")
        .text("Sequential", "gif_order_seq")
        .row()
        .text("Prev", "gif_prev")
        .text("Next", "gif_next")
        .row()
        .text("Clear Display", "gif_clear")
    )


class GifPlayerBot:
    def __init__(
        self,
        bot: BotRuntime,
        mug: PixelMug,
        *,
        playlist: Sequence[str] = DEFAULT_PLAYLIST,
        fetcher: ContentFetcher | None = None,
        validator: ContentValidator | None = None,
        long_ms: int = LONG_MS,
        medium_ms: int = MEDIUM_MS,
        short_ms: int = SHORT_MS,
        default_interval_ms: int = MEDIUM_MS,
        default_order: PlayOrder = PlayOrder.SEQUENTIAL,
    ) -> None:
        self.bot = bot
        self.mug = mug
        self.playlist = list(playlist)
        if not self.playlist:
            raise ValueError("GIF playlist must contain at least one URL")
        self.fetcher = fetcher or ContentFetcher()
        self.validator = validator or ContentValidator(
            width=PixelMug.DISPLAY_WIDTH,
            height=PixelMug.DISPLAY_HEIGHT,
        )
        self.presets = {"gif_int_5m": long_ms, "gif_int_2m": medium_ms, "gif_int_30s": short_ms}
        self.labels = {long_ms: "Long", medium_ms: "Medium", short_ms: "Short"}
        self.default_interval_ms = default_interval_ms
        self.default_order = PlayOrder(default_order)
        self.controller = bot.scheduler(self.play_next, on_error=self._report_failure)

        bot.set_my_commands(
            [
                {"command": "start", "description": "Open GIF Player"},
                {"command": "stop", "description": "Stop GIF rotation"},
            ]
        )
        bot.command("start", self.on_start)
        bot.command("stop", self.on_stop)
        bot.callback("get_interval", self.on_get_interval)
        bot.callback("get_order", self.on_get_order)
        for value in self.presets:
            bot.callback(value, self.on_set_interval)
        bot.callback("gif_order_random", self.on_set_order)
        bot.callback("gif_order_seq", self.on_set_order)
        bot.callback("gif_next", self.on_next)
        bot.callback("gif_prev", self.on_prev)
        bot.callback("gif_clear", self.on_clear)

    def interval_label(self, ms: int) -> str:
        name = self.labels.get(ms)
        if name is None:
            return f"{ms}ms"
        return f"{name} ({_short_duration(ms)})"

    def prepare(self, session: Session) -> None:
        """Give a session its own copy of the playlist on first use."""
        if session.state.get(_STATE_KEY):
            return
        session.playlist.items = list(self.playlist)
        session.playlist.cursor = 0
        session.playlist.interval_ms = self.default_interval_ms
        session.playlist.order = self.default_order
        session.state[_STATE_KEY] = True

    # -- playback ---------------------------------------------------------

    async def play_next(self, session: Session) -> None:
        self.prepare(session)
        await self.play_index(session, session.playlist.pick_next())

    async def play_prev(self, session: Session) -> None:
        self.prepare(session)
        await self.play_index(session, session.playlist.pick_prev())

    async def play_index(self, session: Session, index: int) -> None:
        url = session.playlist.item(index)
        content = self.validator(await self.fetcher.fetch(url))
        request = self.mug.request(
            "talPlayGif",
            {"gifContent": {"size": content.size, "type": content.content_type, "url": url}},
        )
        await self.bot.set_dev_message(session, self.mug, request)

    async def _report_failure(self, session: Session, error: Exception) -> None:
        detail = error.describe() if isinstance(error, PixelBotError) else str(error)
        await self.bot.send_message(session, f"GIF play failed: {detail}")

    # -- handlers ---------------------------------------------------------

    async def on_start(self, ctx: BotContext) -> None:
        self.prepare(ctx.session)
        await ctx.reply(build_keyboard())
        self.controller.start(ctx.session)
        playlist = ctx.session.playlist
        await ctx.reply(
            f"GIF Player started. Interval: {self.interval_label(playlist.interval_ms)}. "
            f"Order: {playlist.order.value}."
        )

    async def on_stop(self, ctx: BotContext) -> None:
        stopped = self.controller.stop(ctx.session)
        await ctx.reply("GIF Player stopped." if stopped else "GIF Player is not running.")

    async def on_get_interval(self, ctx: BotContext) -> None:
        self.prepare(ctx.session)
        await ctx.reply(f"Current interval: {self.interval_label(ctx.session.playlist.interval_ms)}.")

    async def on_get_order(self, ctx: BotContext) -> None:
        self.prepare(ctx.session)
        await ctx.reply(f"Current order: {ctx.session.playlist.order.value}.")

    async def on_set_interval(self, ctx: BotContext) -> None:
        self.prepare(ctx.session)
        ctx.session.playlist.interval_ms = self.presets[ctx.callback_value]
        self.controller.restart(ctx.session)
        await ctx.reply(f"Updated interval: {self.interval_label(ctx.session.playlist.interval_ms)}.")

    async def on_set_order(self, ctx: BotContext) -> None:
        self.prepare(ctx.session)
        if ctx.callback_value == "gif_order_random":
            ctx.session.playlist.order = PlayOrder.RANDOM
        else:
            ctx.session.playlist.order = PlayOrder.SEQUENTIAL
        self.controller.restart(ctx.session)
        await ctx.reply(f"Updated order: {ctx.session.playlist.order.value}.")

    async def on_next(self, ctx: BotContext) -> None:
        await self.play_next(ctx.session)

    async def on_prev(self, ctx: BotContext) -> None:
        await self.play_prev(ctx.session)

    async def on_clear(self, ctx: BotContext) -> None:
        await ctx.call(self.mug, self.mug.request("talReturn2Home"))
        await ctx.reply("Display cleared (returned to home).")


def _short_duration(ms: int) -> str:
    seconds = ms // 1000
    if seconds and seconds % 60 == 0:
        return f"{seconds // 60}m"
    return f"{seconds}s"


def setup(bot: BotRuntime, config: Config) -> GifPlayerBot:
    mug = PixelMug("pixelmug-1")
    bot.bind_devices(mug)
    return GifPlayerBot(
        bot,
        mug,
        playlist=config.gif_player.playlist or DEFAULT_PLAYLIST,
        fetcher=ContentFetcher(timeout_seconds=config.content.fetch_timeout_seconds),
        validator=ContentValidator.from_config(config),
        long_ms=config.scheduler.long_interval_ms,
        medium_ms=config.scheduler.medium_interval_ms,
        short_ms=config.scheduler.short_interval_ms,
        default_interval_ms=config.scheduler.default_interval_ms,
        default_order=PlayOrder(config.scheduler.default_order),
    )

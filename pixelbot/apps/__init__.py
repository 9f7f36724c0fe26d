"""Bundled bots. Each module exposes ``setup(bot, config)``."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pixelbot.apps import control_panel, echo, gif_player, hello, power_notify, scoreboard, wordby

if TYPE_CHECKING:
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config

AppSetup = Callable[["BotRuntime", "Config"], Any]

APPS: dict[str, AppSetup] = {
    "echo": echo.setup,
    "hello": hello.setup,
    "power_notify": power_notify.setup,
    "control_panel": control_panel.setup,
    "gif_player": gif_player.setup,
    "scoreboard": scoreboard.setup,
    "wordby": wordby.setup,
}

APP_DESCRIPTIONS: dict[str, str] = {
    "echo": "Echo every message back",
    "hello": "Show 'Hi Mug' on a PixelMug",
    "power_notify": "Forward charging state changes to a subscribed chat",
    "control_panel": "Read and set PixelMug state from a keyboard",
    "gif_player": "Rotate a GIF playlist on a PixelMug",
    "scoreboard": "Home / visit scoreboard",
    "wordby": "Show two words on two mugs",
}

__all__ = ["APPS", "APP_DESCRIPTIONS", "AppSetup"]

"""Control panel bot: get/set methods of a PixelMug behind one keyboard."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.hardware.device import PixelMug
from pixelbot.hardware.protocol import RpcResponse
from pixelbot.utils.retry import retry_async

if TYPE_CHECKING:
    from pixelbot.bot.context import BotContext
    from pixelbot.bot.runtime import BotRuntime
    from pixelbot.config.schema import Config

BRIGHTNESS_MIN = 20
BRIGHTNESS_MAX = 100
BRIGHTNESS_STEP = 10


def build_keyboard() -> InlineKeyboard:
    return (
        InlineKeyboard("Control Panel")
        .text("Water Temperature", "cp_temp")
        .row()
        .text("Brightness", "cp_brightness_get")
        .text("UP+", "cp_brightness_inc")
        .text("Down-", "cp_brightness_dec")
        .row()
        .text("Battery Level", "cp_battery")
        .text("WiFi Info", "cp_wifi")
        .row()
        .text("Clear Display", "cp_clear")
        .row()
        .text("Display", "cp_display_get")
        .text("Turn on", "cp_display_on")
        .text("Turn off", "cp_display_off")
        .row()
        .text("Enable Swipe", "cp_swipe_on")
        .text("Disable Swipe", "cp_swipe_off")
        .row()
        .text("Reboot", "cp_reboot")
    )


def step_brightness(current: int | float, up: bool) -> int:
    if up:
        return int(min(BRIGHTNESS_MAX, current + BRIGHTNESS_STEP))
    return int(max(BRIGHTNESS_MIN, current - BRIGHTNESS_STEP))


class ControlPanelBot:
    """Brightness and display state are cached per session in ``device_state``."""

    def __init__(self, bot: BotRuntime, mug: PixelMug, *, read_attempts: int = 2) -> None:
        self.mug = mug
        self.read_attempts = read_attempts
        bot.set_my_commands([{"command": "start", "description": "Open control panel"}])
        bot.command("start", self.on_start)
        bot.router.callbacks(
            {
                "cp_temp": self.on_temperature,
                "cp_brightness_get": self.on_brightness_get,
                "cp_brightness_inc": self.on_brightness_step,
                "cp_brightness_dec": self.on_brightness_step,
                "cp_battery": self.on_battery,
                "cp_wifi": self.on_wifi,
                "cp_clear": self.on_clear,
                "cp_display_get": self.on_display_get,
                "cp_display_on": self.on_display_set,
                "cp_display_off": self.on_display_set,
                "cp_swipe_on": self.on_swipe,
                "cp_swipe_off": self.on_swipe,
                "cp_reboot": self.on_reboot,
            }
        )

    async def _get(self, ctx: BotContext, method: str) -> RpcResponse:
        return await ctx.call(self.mug, self.mug.request(method))

    async def on_start(self, ctx: BotContext) -> None:
        await ctx.reply(build_keyboard())

    async def on_temperature(self, ctx: BotContext) -> None:
        value = (await self._get(ctx, "talGetCupTemperature")).number_value()
        if value is None:
            await ctx.reply("Failed to read water temperature.")
            return
        await ctx.reply(f"Water Temperature: {value}°F")

    async def on_brightness_get(self, ctx: BotContext) -> None:
        value = (await self._get(ctx, "talGetBrightness")).number_value()
        if value is None:
            await ctx.reply("Failed to read brightness.")
            return
        ctx.session.device_state["brightness"] = value
        await ctx.reply(f"Brightness: {value}")

    async def on_brightness_step(self, ctx: BotContext) -> None:
        state = ctx.session.device_state
        if state.get("brightness") is None:
            resp = await retry_async(
                lambda: self._get(ctx, "talGetBrightness"),
                attempts=self.read_attempts,
                accept=lambda r: r.number_value() is not None,
            )
            if resp is not None:
                state["brightness"] = resp.number_value()
        current = state.get("brightness")
        if current is None:
            current = BRIGHTNESS_MIN
        target = step_brightness(current, up=ctx.callback_value == "cp_brightness_inc")
        state["brightness"] = target
        await ctx.call(self.mug, self.mug.request("talSetBrightness", {"percent": target}))
        await ctx.reply(f"Brightness set to {target}")

    async def on_battery(self, ctx: BotContext) -> None:
        value = (await self._get(ctx, "talGetBatteryLevel")).number_value()
        if value is None:
            await ctx.reply("Failed to read battery level.")
            return
        await ctx.reply(f"Battery Level: {value}%")

    async def on_wifi(self, ctx: BotContext) -> None:
        info = (await self._get(ctx, "talGetWifiInfo")).first_value()
        await ctx.reply(f"WiFi: {info}")

    async def on_clear(self, ctx: BotContext) -> None:
        await self._get(ctx, "talReturn2Home")
        await ctx.reply("Display cleared.")

    async def on_display_get(self, ctx: BotContext) -> None:
        value = (await self._get(ctx, "talGetSwitch")).bool_value()
        if value is None:
            await ctx.reply("Failed to read display state.")
            return
        ctx.session.device_state["display_on"] = value
        await ctx.reply(f"Display State: {'ON' if value else 'OFF'}")

    async def on_display_set(self, ctx: BotContext) -> None:
        onoff = ctx.callback_value == "cp_display_on"
        ctx.session.device_state["display_on"] = onoff
        await ctx.call(self.mug, self.mug.request("talSetDisplayOnOff", {"onoff": onoff}))
        await ctx.reply("Display turned ON." if onoff else "Display turned OFF.")

    async def on_swipe(self, ctx: BotContext) -> None:
        enabled = ctx.callback_value == "cp_swipe_on"
        await ctx.call(self.mug, self.mug.request("talSetHomeSwipeEnable", {"isSwipe": enabled}))
        if enabled:
            await ctx.reply("You can now switch apps by swiping at the bottom of the screen.")
        else:
            await ctx.reply("Bottom swipe app switching has been turned off.")

    async def on_reboot(self, ctx: BotContext) -> None:
        await self._get(ctx, "talRebootDevice")
        await ctx.reply("PixelMug is rebooting…")


def setup(bot: BotRuntime, config: Config) -> ControlPanelBot:
    mug = PixelMug("pixelmug-1")
    bot.bind_devices(mug)
    return ControlPanelBot(bot, mug, read_attempts=config.rpc.get_retry_attempts)

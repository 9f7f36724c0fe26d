from typing import Any

import pytest

from pixelbot.bot.context import BotContext
from pixelbot.bot.events import CallbackUnit, MessageUnit, NotifyUnit, UnknownUnit, classify
from pixelbot.bot.router import DispatchOutcome, EventRouter, parse_command
from pixelbot.session.manager import Session


def _ctx(raw: dict[str, Any]) -> BotContext:
    return BotContext(runtime=None, session=Session(chat_id="c1"), unit=classify(raw))  # type: ignore[arg-type]


def test_classify_prefers_notify_then_callback_then_message() -> None:
    raw = {
        "chat": {"id": "c1"},
        "message": {"content": "/start"},
        "callback": {"value": "hi_bot"},
        "rpc": {"notify": [{"name": "CurChargingState", "params": {"value": True}}]},
        "device_id": "mug-1",
    }

    assert isinstance(classify(raw), NotifyUnit)
    assert classify(raw).device_id == "mug-1"
    raw["rpc"] = {}
    assert classify(raw) == CallbackUnit(chat={"id": "c1"}, value="hi_bot")
    raw.pop("callback")
    assert classify(raw) == MessageUnit(chat={"id": "c1"}, text="/start")
    raw.pop("message")
    assert isinstance(classify(raw), UnknownUnit)


def test_parse_command_strips_bot_suffix_and_args() -> None:
    assert parse_command("/start") == "start"
    assert parse_command("/start@pixel_bot extra words") == "start"
    assert parse_command("start") is None
    assert parse_command("/") is None
    assert parse_command("") is None


@pytest.mark.asyncio
async def test_notify_unit_never_reaches_callback_or_command_handlers() -> None:
    router = EventRouter()
    seen: list[str] = []

    async def _notify(ctx: BotContext) -> None:
        seen.append(f"notify:{ctx.events[0].name}")

    async def _callback(ctx: BotContext) -> None:
        seen.append("callback")

    async def _start(ctx: BotContext) -> None:
        seen.append("command")

    router.on_notify(_notify)
    router.callback("hi_bot", _callback)
    router.command("start", _start)

    outcome = await router.dispatch(
        _ctx(
            {
                "chat": {"id": "c1"},
                "message": {"content": "/start"},
                "callback": {"value": "hi_bot"},
                "rpc": {"notify": [{"name": "CurChargingState", "params": {"value": True}}]},
            }
        )
    )

    assert outcome == DispatchOutcome.NOTIFY
    assert seen == ["notify:CurChargingState"]


@pytest.mark.asyncio
async def test_notify_with_only_malformed_frames_runs_no_handler() -> None:
    router = EventRouter()
    seen: list[str] = []

    async def _notify(ctx: BotContext) -> None:
        seen.append("notify")

    router.on_notify(_notify)
    outcome = await router.dispatch(_ctx({"rpc": {"notify": ["garbage"]}}))

    assert outcome == DispatchOutcome.NOTIFY
    assert seen == []


@pytest.mark.asyncio
async def test_unknown_callback_value_is_ignored() -> None:
    router = EventRouter()
    seen: list[str] = []

    async def _message(ctx: BotContext) -> None:
        seen.append("message")

    router.on_message(_message)
    outcome = await router.dispatch(_ctx({"chat": {"id": "c1"}, "callback": {"value": "nope"}}))

    assert outcome == DispatchOutcome.IGNORED
    assert seen == []


@pytest.mark.asyncio
async def test_command_registration_last_write_wins() -> None:
    router = EventRouter()
    seen: list[str] = []

    @router.command("start", description="Open")
    async def _first(ctx: BotContext) -> None:
        seen.append("first")

    @router.command("/start")
    async def _second(ctx: BotContext) -> None:
        seen.append(f"second:{ctx.args}")

    outcome = await router.dispatch(_ctx({"chat": {"id": "c1"}, "message": {"content": "/start now"}}))

    assert outcome == DispatchOutcome.COMMAND
    assert seen == ["second:now"]
    assert router.commands() == [{"command": "start", "description": "Open"}]


@pytest.mark.asyncio
async def test_unregistered_command_falls_back_to_message_handler() -> None:
    router = EventRouter()
    seen: list[str] = []

    async def _message(ctx: BotContext) -> None:
        seen.append(ctx.text)

    router.on_message(_message)
    router.describe_command("help", "Describe only")

    assert await router.dispatch(_ctx({"chat": {"id": "c1"}, "message": {"content": "/help"}})) == (
        DispatchOutcome.MESSAGE
    )
    assert seen == ["/help"]


@pytest.mark.asyncio
async def test_message_without_handler_is_ignored() -> None:
    router = EventRouter()

    assert await router.dispatch(_ctx({"chat": {"id": "c1"}, "message": {"content": "hi"}})) == (
        DispatchOutcome.IGNORED
    )

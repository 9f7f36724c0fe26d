import asyncio
from typing import Any

import pytest

from pixelbot.bot.context import BotContext
from pixelbot.bot.keyboard import InlineKeyboard
from pixelbot.bot.runtime import DEVICE_CHAT_ID, BotRuntime
from pixelbot.hardware.adapter.mock_adapter import MockTransport
from pixelbot.hardware.device import PixelMug
from pixelbot.hardware.protocol import OutboundType


def _ok_responder(envelope: dict[str, Any]) -> list[Any]:
    return [{"result": {"value": True}} for _ in envelope["calls"]]


def _unit(chat_id: str, *, text: str | None = None, callback: str | None = None) -> dict[str, Any]:
    unit: dict[str, Any] = {"chat": {"id": chat_id}}
    if text is not None:
        unit["message"] = {"content": text}
    if callback is not None:
        unit["callback"] = {"value": callback}
    return unit


@pytest.mark.asyncio
async def test_start_publishes_commands_and_requests_device_attach() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)
    runtime.bind_devices(PixelMug("mug-1"))
    runtime.set_my_commands([{"command": "start", "description": "Open"}])

    await runtime.start()
    await runtime.stop()

    types = [e["type"] for e in transport.sent]
    assert OutboundType.ATTACH_DEVICES in types
    assert OutboundType.SET_COMMANDS in types
    attach = next(e for e in transport.sent if e["type"] == OutboundType.ATTACH_DEVICES)
    assert attach["devices"][0]["device_id"] == "mug-1"
    commands = next(e for e in transport.sent if e["type"] == OutboundType.SET_COMMANDS)
    assert commands["commands"] == [{"command": "start", "description": "Open"}]


@pytest.mark.asyncio
async def test_units_for_one_chat_run_one_at_a_time() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)
    order: list[str] = []

    async def _slow(ctx: BotContext) -> None:
        order.append(f"start:{ctx.text}")
        await asyncio.sleep(0.02)
        order.append(f"end:{ctx.text}")

    runtime.on_message(_slow)
    await runtime.start()
    await runtime.handle_unit(_unit("c1", text="a"))
    await runtime.handle_unit(_unit("c1", text="b"))
    await runtime.drain()
    await runtime.stop()

    assert order == ["start:a", "end:a", "start:b", "end:b"]
    snapshot = runtime.metrics.snapshot()
    assert snapshot["units_by_kind"] == {"message": 2}
    assert snapshot["dispatch_by_outcome"] == {"message": 2}


@pytest.mark.asyncio
async def test_different_chats_get_separate_sessions() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)

    async def _count(ctx: BotContext) -> None:
        ctx.session.state["n"] = ctx.session.state.get("n", 0) + 1

    runtime.on_message(_count)
    await runtime.start()
    for chat_id in ("c1", "c1", "c2"):
        await runtime.handle_unit(_unit(chat_id, text="x"))
    await runtime.drain()
    await runtime.stop()

    assert runtime.sessions.get("c1").state["n"] == 2
    assert runtime.sessions.get("c2").state["n"] == 1


@pytest.mark.asyncio
async def test_handler_rpc_round_trips_through_transport() -> None:
    transport = MockTransport(rpc_responder=lambda env: [{"result": {"value": 41}}])
    runtime = BotRuntime(transport=transport, rpc_timeout_s=1.0)
    mug = PixelMug("mug-1")
    runtime.bind_devices(mug)

    async def _temp(ctx: BotContext) -> None:
        resp = await ctx.call(mug, mug.request("talGetCupTemperature"))
        await ctx.reply(f"temp={resp.number_value()}")

    runtime.callback("temp", _temp)
    await runtime.start()
    await runtime.handle_unit(_unit("c1", callback="temp"))
    await runtime.drain()
    await runtime.stop()

    assert transport.messages() == ["temp=41"]
    assert transport.rpc_requests()[0]["chat"] == {"id": "c1"}


@pytest.mark.asyncio
async def test_unbound_device_is_reported_in_chat_without_sending_rpc() -> None:
    transport = MockTransport(rpc_responder=_ok_responder)
    runtime = BotRuntime(transport=transport)
    stray = PixelMug("mug-x")

    async def _show(ctx: BotContext) -> None:
        await ctx.call(stray, stray.request("talReturn2Home"))
        await ctx.reply("unreachable")

    runtime.callback("show", _show)
    await runtime.start()
    await runtime.handle_unit(_unit("c1", callback="show"))
    await runtime.drain()
    await runtime.stop()

    assert transport.rpc_requests() == []
    assert len(transport.messages()) == 1
    assert transport.messages()[0].startswith("⚠️ Device is not attached to this bot")
    assert runtime.metrics.handler_errors_total == 1


@pytest.mark.asyncio
async def test_unexpected_handler_error_does_not_stop_the_session() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)

    async def _flaky(ctx: BotContext) -> None:
        if ctx.text == "boom":
            raise RuntimeError("boom")
        await ctx.reply(f"ok:{ctx.text}")

    runtime.on_message(_flaky)
    await runtime.start()
    await runtime.handle_unit(_unit("c1", text="boom"))
    await runtime.handle_unit(_unit("c1", text="after"))
    await runtime.drain()
    await runtime.stop()

    assert transport.messages() == ["ok:after"]
    assert runtime.metrics.dispatch_by_outcome["failed"] == 1


@pytest.mark.asyncio
async def test_send_message_failure_is_logged_not_raised() -> None:
    transport = MockTransport(fail_sends=True)
    runtime = BotRuntime(transport=transport)

    await runtime.send_message({"id": "c1"}, "hello")

    assert runtime.metrics.messages_sent == 0


@pytest.mark.asyncio
async def test_keyboard_is_sent_as_structured_content() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)

    await runtime.send_message({"id": "c1"}, InlineKeyboard("Pick").text("Yes", "y").text("No", "n"))

    assert transport.messages() == [
        {
            "type": "inline_keyboard",
            "title": "Pick",
            "rows": [[{"text": "Yes", "value": "y"}, {"text": "No", "value": "n"}]],
        }
    ]


@pytest.mark.asyncio
async def test_chatless_notify_goes_to_device_session() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)
    seen: list[str] = []

    async def _notify(ctx: BotContext) -> None:
        seen.append(ctx.chat_id)

    runtime.on_notify(_notify)
    await runtime.start()
    await runtime.handle_unit({"rpc": {"notify": [{"name": "CurChargingState", "params": {"value": 1}}]}})
    await runtime.drain()
    await runtime.stop()

    assert seen == [DEVICE_CHAT_ID]


@pytest.mark.asyncio
async def test_pure_rpc_response_is_not_dispatched() -> None:
    transport = MockTransport()
    runtime = BotRuntime(transport=transport)

    await runtime.start()
    await runtime.handle_unit({"chat": {"id": "c1"}, "rpc": {"response": {"id": "nobody", "result": []}}})
    await runtime.stop()

    assert runtime.metrics.units_total == 0
    assert len(runtime.sessions) == 0

import asyncio
from typing import Any

import pytest

from pixelbot.apps.gif_player import GifPlayerBot
from pixelbot.bot.runtime import BotRuntime
from pixelbot.content.fetch import ContentFetcher
from pixelbot.hardware.adapter.mock_adapter import MockTransport
from pixelbot.hardware.device import PixelMug
from pixelbot.scheduler.playlist import PlayOrder

PLAYLIST = ["https://cdn.example.com/A.gif", "https://cdn.example.com/B.gif", "https://cdn.example.com/C.gif"]


def _gif(width: int = 32, height: int = 16) -> bytes:
    return b"GIF89a" + width.to_bytes(2, "little") + height.to_bytes(2, "little") + b"\x00" * 54


def _ok_responder(envelope: dict[str, Any]) -> list[Any]:
    return [{"result": {"value": True}} for _ in envelope["calls"]]


def _player(bodies: dict[str, bytes] | None = None) -> tuple[BotRuntime, MockTransport, GifPlayerBot]:
    async def _fetch(url: str, timeout: float) -> bytes:
        return (bodies or {}).get(url, _gif())

    transport = MockTransport(rpc_responder=_ok_responder)
    runtime = BotRuntime(transport=transport, rpc_timeout_s=1.0)
    mug = PixelMug("mug-1")
    runtime.bind_devices(mug)
    player = GifPlayerBot(runtime, mug, playlist=PLAYLIST, fetcher=ContentFetcher(fetcher=_fetch))
    return runtime, transport, player


async def _send(runtime: BotRuntime, *, text: str | None = None, callback: str | None = None) -> None:
    unit: dict[str, Any] = {"chat": {"id": "c1"}}
    if text is not None:
        unit["message"] = {"content": text}
    if callback is not None:
        unit["callback"] = {"value": callback}
    await runtime.handle_unit(unit)
    await runtime.drain()


def _played(transport: MockTransport) -> list[str]:
    return [
        call["params"]["gifContent"]["url"].rsplit("/", 1)[-1]
        for envelope in transport.rpc_requests()
        for call in envelope["calls"]
        if call["method"] == "talPlayGif"
    ]


@pytest.mark.asyncio
async def test_start_plays_first_gif_then_manual_next_cycles() -> None:
    runtime, transport, player = _player()
    await runtime.start()

    await _send(runtime, text="/start")
    session = runtime.sessions.get("c1")
    await player.controller.handle(session).first_run
    for _ in range(3):
        await _send(runtime, callback="gif_next")
    await runtime.stop()

    assert _played(transport) == ["A.gif", "B.gif", "C.gif", "A.gif"]
    messages = transport.messages()
    assert messages[0]["title"] == "GIF Player"
    assert messages[1] == "GIF Player started. Interval: Medium (2m). Order: sequential."
    gif = transport.rpc_requests()[0]["calls"][0]["params"]["gifContent"]
    assert gif["type"] == "image/gif"
    assert gif["size"] == 64


@pytest.mark.asyncio
async def test_start_next_then_timer_tick_walks_playlist() -> None:
    runtime, transport, player = _player()
    await runtime.start()

    await _send(runtime, text="/start")
    session = runtime.sessions.get("c1")
    await player.controller.handle(session).first_run
    assert session.playlist.cursor == 1

    await _send(runtime, callback="gif_next")
    assert session.playlist.cursor == 2

    assert await player.controller.tick(session) is True
    await runtime.stop()

    assert _played(transport) == ["A.gif", "B.gif", "C.gif"]
    assert session.playlist.cursor == 0


@pytest.mark.asyncio
async def test_interval_change_queued_behind_start_keeps_both_first_plays() -> None:
    runtime, transport, player = _player()
    await runtime.start()

    await runtime.handle_unit({"chat": {"id": "c1"}, "message": {"content": "/start"}})
    await runtime.handle_unit({"chat": {"id": "c1"}, "callback": {"value": "gif_int_30s"}})
    await runtime.drain()
    session = runtime.sessions.get("c1")
    await player.controller.handle(session).first_run
    await runtime.stop()

    assert _played(transport) == ["A.gif", "B.gif"]
    assert "GIF Player started. Interval: Medium (2m). Order: sequential." in transport.messages()
    assert "Updated interval: Short (30s)." in transport.messages()


@pytest.mark.asyncio
async def test_queries_leave_timer_alone_and_interval_change_restarts() -> None:
    runtime, transport, player = _player()
    await runtime.start()

    await _send(runtime, text="/start")
    session = runtime.sessions.get("c1")
    original = player.controller.handle(session)
    armed_at = original.armed_at_ms
    await _send(runtime, callback="get_interval")
    await _send(runtime, callback="get_order")
    await _send(runtime, callback="gif_prev")

    assert player.controller.handle(session) is original
    assert not original.cancelled
    assert original.armed_at_ms == armed_at
    assert original.interval_ms == 120_000

    await _send(runtime, callback="gif_int_30s")
    replacement = player.controller.handle(session)
    await runtime.stop()

    assert original.cancelled
    assert replacement is not original
    assert replacement.interval_ms == 30_000
    assert player.controller.active_count() == 0
    assert "Current interval: Medium (2m)." in transport.messages()
    assert "Current order: sequential." in transport.messages()
    assert "Updated interval: Short (30s)." in transport.messages()


@pytest.mark.asyncio
async def test_order_change_restarts_with_random_order() -> None:
    runtime, transport, player = _player()
    await runtime.start()

    await _send(runtime, text="/start")
    session = runtime.sessions.get("c1")
    original = player.controller.handle(session)
    await _send(runtime, callback="gif_order_random")
    await asyncio.sleep(0)

    assert session.playlist.order == PlayOrder.RANDOM
    assert original.cancelled
    assert player.controller.active_count() == 1
    await runtime.stop()

    assert "Updated order: random." in transport.messages()


@pytest.mark.asyncio
async def test_rejected_gif_on_tick_is_reported_and_not_sent() -> None:
    runtime, transport, player = _player({PLAYLIST[0]: _gif(64, 32)})
    await runtime.start()
    session = runtime.sessions.get_or_create({"id": "c1"})

    assert await player.controller.tick(session) is False
    assert await player.controller.tick(session) is True
    await runtime.stop()

    assert transport.messages()[0] == "GIF play failed: Content rejected: 64x32 (expected 32x16)"
    assert _played(transport) == ["B.gif"]


@pytest.mark.asyncio
async def test_manual_next_with_bad_content_replies_with_warning() -> None:
    runtime, transport, player = _player({PLAYLIST[0]: b"\x89PNG" + b"\x00" * 20})
    await runtime.start()

    await _send(runtime, callback="gif_next")
    await runtime.stop()

    assert transport.rpc_requests() == []
    assert transport.messages()[0].startswith("⚠️ Content rejected")


@pytest.mark.asyncio
async def test_clear_returns_home_without_touching_timer() -> None:
    runtime, transport, player = _player()
    await runtime.start()

    await _send(runtime, callback="gif_clear")
    await _send(runtime, text="/stop")
    await runtime.stop()

    assert transport.rpc_requests()[0]["calls"][0]["method"] == "talReturn2Home"
    assert transport.messages() == ["Display cleared (returned to home).", "GIF Player is not running."]


def test_interval_labels() -> None:
    runtime, _transport, player = _player()

    assert player.interval_label(5 * 60 * 1000) == "Long (5m)"
    assert player.interval_label(2 * 60 * 1000) == "Medium (2m)"
    assert player.interval_label(30 * 1000) == "Short (30s)"
    assert player.interval_label(1234) == "1234ms"


def test_empty_playlist_is_rejected_at_setup() -> None:
    runtime = BotRuntime(transport=MockTransport())

    with pytest.raises(ValueError, match="at least one URL"):
        GifPlayerBot(runtime, PixelMug("mug-1"), playlist=[])

    assert runtime.router.commands() == []

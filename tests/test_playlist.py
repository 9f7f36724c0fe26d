import random

import pytest

from pixelbot.scheduler.playlist import PlaylistState, PlayOrder


def test_sequential_next_cycles_and_wraps() -> None:
    playlist = PlaylistState(items=["A", "B", "C"])

    picks = [playlist.item(playlist.pick_next()) for _ in range(4)]

    assert picks == ["A", "B", "C", "A"]
    assert playlist.cursor == 1


def test_sequential_prev_steps_back_from_cursor() -> None:
    playlist = PlaylistState(items=["A", "B", "C"])

    assert playlist.item(playlist.pick_prev()) == "C"
    assert playlist.item(playlist.pick_prev()) == "B"
    assert playlist.cursor == 1


def test_random_next_leaves_cursor_alone() -> None:
    playlist = PlaylistState(items=["A", "B", "C"], order=PlayOrder.RANDOM, rng=random.Random(7))

    for _ in range(10):
        assert 0 <= playlist.pick_next() < 3

    assert playlist.cursor == 0


def test_random_prev_still_moves_cursor_back() -> None:
    playlist = PlaylistState(items=["A", "B", "C"], order=PlayOrder.RANDOM, rng=random.Random(7))

    playlist.pick_prev()
    assert playlist.cursor == 2

    playlist.order = PlayOrder.SEQUENTIAL
    assert playlist.item(playlist.pick_next()) == "C"


def test_empty_playlist_picks_zero_and_item_rejects_it() -> None:
    playlist = PlaylistState()

    assert playlist.pick_next() == 0
    assert playlist.pick_prev() == 0
    with pytest.raises(IndexError):
        playlist.item(0)


def test_status_reports_rotation_settings() -> None:
    playlist = PlaylistState(items=["A"], interval_ms=30_000, order=PlayOrder.RANDOM)

    assert playlist.to_status() == {"size": 1, "cursor": 0, "order": "random", "interval_ms": 30_000}

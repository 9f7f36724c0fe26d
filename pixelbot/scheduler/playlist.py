"""Playlist cursor and ordering for content rotation."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEFAULT_INTERVAL_MS = 2 * 60 * 1000


class PlayOrder(StrEnum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"


@dataclass(slots=True)
class PlaylistState:
    """Ordered content references plus the rotation settings for one session.

    Forward picks advance ``cursor`` only in sequential order. ``pick_prev``
    always steps the cursor back, even in random order, so switching back to
    sequential resumes from the retreated position.
    """

    items: list[str] = field(default_factory=list)
    cursor: int = 0
    order: PlayOrder = PlayOrder.SEQUENTIAL
    interval_ms: int = DEFAULT_INTERVAL_MS
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def __len__(self) -> int:
        return len(self.items)

    def pick_next(self) -> int:
        n = len(self.items)
        if n <= 0:
            return 0
        if self.order == PlayOrder.RANDOM:
            return self.rng.randrange(n)
        index = self.cursor % n
        self.cursor = (self.cursor + 1) % n
        return index

    def pick_prev(self) -> int:
        n = len(self.items)
        if n <= 0:
            return 0
        self.cursor = (self.cursor - 1 + n) % n
        if self.order == PlayOrder.RANDOM:
            return self.rng.randrange(n)
        return self.cursor

    def item(self, index: int) -> str:
        if not 0 <= index < len(self.items):
            raise IndexError(f"invalid playlist index: {index}")
        return self.items[index]

    def to_status(self) -> dict[str, Any]:
        return {
            "size": len(self.items),
            "cursor": self.cursor,
            "order": self.order.value,
            "interval_ms": self.interval_ms,
        }

"""Inline keyboard descriptor sent as structured message content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Button:
    text: str
    value: str


@dataclass(slots=True)
class InlineKeyboard:
    """Titled rows of labeled buttons; each click comes back as a callback value.

    Built fluently::

        InlineKeyboard("Scoreboard").text("Home", "score_home").row().text("Reset", "score_reset")
    """

    title: str
    rows: list[list[Button]] = field(default_factory=lambda: [[]])

    def text(self, label: str, value: str) -> "InlineKeyboard":
        self.rows[-1].append(Button(text=str(label), value=str(value)))
        return self

    def row(self) -> "InlineKeyboard":
        if self.rows[-1]:
            self.rows.append([])
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "inline_keyboard",
            "title": self.title,
            "rows": [
                [{"text": b.text, "value": b.value} for b in row]
                for row in self.rows
                if row
            ],
        }

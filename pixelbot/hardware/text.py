"""Text-to-device request building.

Rendering text into device pixels happens on the device side; this module only
builds the ``talShowText`` request the firmware consumes.
"""

from __future__ import annotations

from enum import StrEnum

from pixelbot.hardware.protocol import RpcRequest


class TextSize(StrEnum):
    SMALL = "small"
    LARGE = "large"


def text_request(
    text: str,
    size: TextSize = TextSize.SMALL,
    color: str = "#00ff00",
    *,
    direction: int = 0,
    speed: int = 1,
) -> RpcRequest:
    """Build a text display request. ``direction=0`` keeps the text static."""
    color = str(color or "#00ff00").strip()
    if not color.startswith("#") or len(color) != 7:
        raise ValueError(f"color must be #rrggbb, got {color!r}")
    return RpcRequest(
        method="talShowText",
        params={
            "text": str(text),
            "size": TextSize(size).value,
            "color": color.lower(),
            "direction": int(direction),
            "speed": max(1, int(speed)),
        },
    )

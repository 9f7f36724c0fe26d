"""Checks applied to fetched content before it is sent to a device."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pixelbot.errors import BadDimensionsError, BadSignatureError, TooLargeError

if TYPE_CHECKING:
    from pixelbot.config.schema import Config

MAX_CONTENT_BYTES = 40 * 1024
GIF_SIGNATURES: tuple[bytes, ...] = (b"GIF87a", b"GIF89a")
REQUIRED_WIDTH = 32
REQUIRED_HEIGHT = 16


@dataclass(frozen=True, slots=True)
class ValidatedContent:
    data: bytes
    size: int
    width: int
    height: int
    signature: bytes
    content_type: str = "image/gif"


def validate(
    buffer: bytes | bytearray | memoryview,
    *,
    max_bytes: int = MAX_CONTENT_BYTES,
    signatures: Sequence[bytes] = GIF_SIGNATURES,
    width: int = REQUIRED_WIDTH,
    height: int = REQUIRED_HEIGHT,
    content_type: str = "image/gif",
) -> ValidatedContent:
    """Validate size, then signature, then declared dimensions.

    Width and height are little-endian u16 fields immediately after the
    signature. A header too short to hold them is reported as a bad signature.
    """
    data = bytes(buffer)
    size = len(data)
    if size > max_bytes:
        raise TooLargeError(f"{size} bytes (max {max_bytes} bytes)")

    signature = next((sig for sig in signatures if data.startswith(sig)), None)
    if signature is None:
        raise BadSignatureError(f"unrecognized header {data[:6]!r}")
    offset = len(signature)
    if size < offset + 4:
        raise BadSignatureError(f"truncated header ({size} bytes)")

    declared_w = int.from_bytes(data[offset : offset + 2], "little")
    declared_h = int.from_bytes(data[offset + 2 : offset + 4], "little")
    if declared_w != width or declared_h != height:
        raise BadDimensionsError(f"{declared_w}x{declared_h} (expected {width}x{height})")

    return ValidatedContent(
        data=data,
        size=size,
        width=declared_w,
        height=declared_h,
        signature=signature,
        content_type=content_type,
    )


class ContentValidator:
    """Validation limits bound once from configuration."""

    def __init__(
        self,
        *,
        max_bytes: int = MAX_CONTENT_BYTES,
        signatures: Sequence[bytes] = GIF_SIGNATURES,
        width: int = REQUIRED_WIDTH,
        height: int = REQUIRED_HEIGHT,
    ) -> None:
        self.max_bytes = max(1, int(max_bytes))
        self.signatures = tuple(bytes(sig) for sig in signatures)
        self.width = int(width)
        self.height = int(height)

    def __call__(self, buffer: bytes | bytearray | memoryview) -> ValidatedContent:
        return validate(
            buffer,
            max_bytes=self.max_bytes,
            signatures=self.signatures,
            width=self.width,
            height=self.height,
        )

    @classmethod
    def from_config(cls, config: Config) -> "ContentValidator":
        content = config.content
        return cls(
            max_bytes=content.max_bytes,
            signatures=[sig.encode("ascii") for sig in content.signatures],
            width=content.width,
            height=content.height,
        )

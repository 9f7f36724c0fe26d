"""Error taxonomy shared by the bridge, validation pipeline and runtime."""

from __future__ import annotations

from enum import StrEnum


class PixelBotError(Exception):
    """Base class for errors surfaced to handlers and converted into chat replies."""

    user_message: str = "Request failed"

    def describe(self) -> str:
        detail = str(self).strip()
        return f"{self.user_message}: {detail}" if detail else self.user_message


class UnboundDeviceError(PixelBotError):
    """An RPC targeted a device that is not bound for the calling session."""

    user_message = "Device is not attached to this bot"

    def __init__(self, device_id: str, session_id: str | None = None) -> None:
        self.device_id = device_id
        self.session_id = session_id
        scope = f" for session {session_id}" if session_id else ""
        super().__init__(f"device {device_id} is not bound{scope}")


class TransportError(PixelBotError):
    """The underlying channel could not deliver a request or fetch content."""

    user_message = "Transport failure"


class DeviceTimeoutError(PixelBotError):
    """No RPC response arrived within the bounded wait."""

    user_message = "Device did not respond"

    def __init__(self, device_id: str, method: str, timeout_s: float) -> None:
        self.device_id = device_id
        self.method = method
        self.timeout_s = timeout_s
        super().__init__(f"{method} on {device_id} timed out after {timeout_s:g}s")


class ValidationErrorKind(StrEnum):
    TOO_LARGE = "too_large"
    BAD_SIGNATURE = "bad_signature"
    BAD_DIMENSIONS = "bad_dimensions"


class ValidationError(PixelBotError):
    """Remote content rejected before it reaches a device."""

    user_message = "Content rejected"
    kind: ValidationErrorKind


class TooLargeError(ValidationError):
    kind = ValidationErrorKind.TOO_LARGE


class BadSignatureError(ValidationError):
    kind = ValidationErrorKind.BAD_SIGNATURE


class BadDimensionsError(ValidationError):
    kind = ValidationErrorKind.BAD_DIMENSIONS


class DecodeError(PixelBotError):
    """Malformed notify frame. Dropped by the decoder, never raised to handlers."""

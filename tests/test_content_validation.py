import pytest

from pixelbot.config.schema import Config
from pixelbot.content.validation import MAX_CONTENT_BYTES, ContentValidator, validate
from pixelbot.errors import (
    BadDimensionsError,
    BadSignatureError,
    TooLargeError,
    ValidationError,
    ValidationErrorKind,
)


def _gif(width: int = 32, height: int = 16, *, total: int = 64, signature: bytes = b"GIF89a") -> bytes:
    header = signature + width.to_bytes(2, "little") + height.to_bytes(2, "little")
    return header + b"\x00" * max(0, total - len(header))


def test_validate_accepts_exact_size_limit() -> None:
    content = validate(_gif(total=MAX_CONTENT_BYTES))

    assert content.size == 40 * 1024
    assert (content.width, content.height) == (32, 16)
    assert content.signature == b"GIF89a"
    assert content.content_type == "image/gif"


def test_validate_accepts_gif87a_signature() -> None:
    content = validate(_gif(signature=b"GIF87a"))

    assert content.signature == b"GIF87a"


def test_validate_rejects_oversized_before_checking_header() -> None:
    with pytest.raises(TooLargeError) as exc_info:
        validate(b"PNG" + b"\x00" * (41 * 1024))

    assert exc_info.value.kind == ValidationErrorKind.TOO_LARGE
    assert "max 40960 bytes" in str(exc_info.value)


def test_validate_rejects_unknown_signature() -> None:
    with pytest.raises(BadSignatureError):
        validate(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)


def test_validate_treats_truncated_header_as_bad_signature() -> None:
    with pytest.raises(BadSignatureError):
        validate(b"GIF89a\x20")


def test_validate_rejects_wrong_dimensions() -> None:
    with pytest.raises(BadDimensionsError) as exc_info:
        validate(_gif(64, 32))

    assert "64x32" in str(exc_info.value)
    assert isinstance(exc_info.value, ValidationError)
    assert exc_info.value.describe().startswith("Content rejected")


def test_content_validator_from_config_uses_configured_limits() -> None:
    config = Config.model_validate({"content": {"max_bytes": 100, "width": 64, "height": 32}})
    validator = ContentValidator.from_config(config)

    assert validator(_gif(64, 32, total=100)).width == 64
    with pytest.raises(TooLargeError):
        validator(_gif(64, 32, total=101))
    with pytest.raises(BadDimensionsError):
        validator(_gif(32, 16))

"""Utility helpers."""

from pixelbot.utils.helpers import ensure_dir, get_data_path
from pixelbot.utils.retry import retry_async

__all__ = ["ensure_dir", "get_data_path", "retry_async"]

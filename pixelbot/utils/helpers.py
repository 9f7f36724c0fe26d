"""Utility functions for pixelbot runtime paths and helpers."""

import os
from pathlib import Path

DATA_DIR_NAME = ".pixelbot"


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_path() -> Path:
    """
    Get the runtime data directory.

    `PIXELBOT_DATA_DIR` overrides the default `~/.pixelbot`.
    """
    env_path = str(os.environ.get("PIXELBOT_DATA_DIR") or "").strip()
    if env_path:
        return ensure_dir(Path(env_path).expanduser())
    return ensure_dir(Path.home() / DATA_DIR_NAME)


def first_two_words(text: str) -> tuple[str | None, str | None]:
    """Split on whitespace and return the first two words, if present."""
    words = [w for w in str(text or "").split() if w]
    return (
        words[0] if len(words) >= 1 else None,
        words[1] if len(words) >= 2 else None,
    )

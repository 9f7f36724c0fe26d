"""Bounded retry for idempotent device reads."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger

from pixelbot.errors import DeviceTimeoutError, TransportError

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 2,
    backoff_s: float = 0.0,
    accept: Callable[[T], bool] | None = None,
    retry_on: tuple[type[BaseException], ...] = (TransportError, DeviceTimeoutError),
) -> T | None:
    """Run ``operation`` up to ``attempts`` times.

    A result rejected by ``accept`` or an exception listed in ``retry_on``
    counts as a failed attempt. Returns ``None`` when every attempt failed so
    callers can apply their own fallback. Other exceptions, including
    ``UnboundDeviceError``, propagate on the first attempt.
    """
    max_attempts = max(1, int(attempts))
    for attempt in range(max_attempts):
        try:
            result = await operation()
        except retry_on as e:
            logger.debug(f"retry attempt {attempt + 1}/{max_attempts} failed: {e}")
        else:
            if accept is None or accept(result):
                return result
            logger.debug(f"retry attempt {attempt + 1}/{max_attempts} returned unusable result")
        if attempt < max_attempts - 1 and backoff_s > 0:
            await asyncio.sleep(backoff_s * (attempt + 1))
    return None

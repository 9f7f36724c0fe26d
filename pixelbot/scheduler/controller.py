"""Per-session repeating timer that drives autonomous device activity."""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from pixelbot.observability import BotRuntimeMetrics

if TYPE_CHECKING:
    from pixelbot.session.manager import Session

Action = Callable[["Session"], Awaitable[None]]
ErrorReporter = Callable[["Session", Exception], Awaitable[None]]
IntervalResolver = Callable[["Session"], int]

MIN_INTERVAL_MS = 10


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True, eq=False)
class TimerHandle:
    """One armed schedule. Cancelled handles never start another timer tick."""

    chat_id: str
    interval_ms: int
    generation: int
    armed_at_ms: int = field(default_factory=_now_ms)
    ticks: int = 0
    cancelled: bool = False
    task: asyncio.Task | None = field(default=None, repr=False)
    first_run: asyncio.Task | None = field(default=None, repr=False)
    active: asyncio.Task | None = field(default=None, repr=False)

    @property
    def in_flight(self) -> bool:
        return self.active is not None


class ScheduledActivityController:
    """Owns at most one active timer per session.

    ``start``/``restart`` cancel the previous handle before arming a new one
    and schedule one immediate action without waiting for it. Once scheduled
    that action always runs; a later stop or restart only cancels the
    repeating loop. Every action runs under the session lock, the same lock
    the runtime holds while a handler runs, so a timer tick and a manual
    action never interleave RPCs.
    A failing action is reported and the schedule keeps running.
    """

    def __init__(
        self,
        action: Action,
        *,
        on_error: ErrorReporter | None = None,
        interval_resolver: IntervalResolver | None = None,
        metrics: BotRuntimeMetrics | None = None,
    ) -> None:
        self._action = action
        self._on_error = on_error
        self._interval_resolver = interval_resolver or (lambda session: session.playlist.interval_ms)
        self.metrics = metrics or BotRuntimeMetrics()
        self._timers: dict[str, TimerHandle] = {}
        self._immediate: dict[asyncio.Task, TimerHandle] = {}
        self._generation = 0

    def start(self, session: Session) -> TimerHandle:
        self.stop(session)
        interval_ms = max(MIN_INTERVAL_MS, int(self._interval_resolver(session)))
        self._generation += 1
        handle = TimerHandle(
            chat_id=session.chat_id,
            interval_ms=interval_ms,
            generation=self._generation,
        )
        self._timers[session.chat_id] = handle
        handle.first_run = asyncio.create_task(self._run_action(session, handle, immediate=True))
        self._immediate[handle.first_run] = handle
        handle.first_run.add_done_callback(self._immediate.pop)
        handle.task = asyncio.create_task(self._timer_loop(session, handle))
        logger.debug(
            f"scheduler armed chat_id={session.chat_id} interval_ms={interval_ms} "
            f"generation={handle.generation}"
        )
        return handle

    def restart(self, session: Session) -> TimerHandle:
        return self.start(session)

    def stop(self, session: Session) -> bool:
        handle = self._timers.pop(session.chat_id, None)
        if handle is None:
            return False
        self._invalidate(handle)
        logger.debug(f"scheduler stopped chat_id={session.chat_id} generation={handle.generation}")
        return True

    def handle(self, session: Session) -> TimerHandle | None:
        return self._timers.get(session.chat_id)

    def is_running(self, session: Session) -> bool:
        return session.chat_id in self._timers

    def active_count(self) -> int:
        return len(self._timers)

    async def tick(self, session: Session) -> bool:
        """Run one action now under the session lock, outside the timer cadence."""
        return await self._run_action(session, None)

    async def shutdown(self) -> None:
        # Stopped handles may still own a scheduled immediate action.
        handles = list(dict.fromkeys([*self._timers.values(), *self._immediate.values()]))
        self._timers.clear()
        for handle in handles:
            self._invalidate(handle, keep_first_run=False)
        for handle in handles:
            for task in (handle.first_run, handle.task):
                if task is None:
                    continue
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    async def _timer_loop(self, session: Session, handle: TimerHandle) -> None:
        interval_s = handle.interval_ms / 1000.0
        while not handle.cancelled:
            await asyncio.sleep(interval_s)
            if handle.cancelled:
                break
            await self._run_action(session, handle)

    async def _run_action(
        self, session: Session, handle: TimerHandle | None, *, immediate: bool = False
    ) -> bool:
        async with session.lock:
            if handle is not None:
                if handle.cancelled and not immediate:
                    return False
                handle.active = asyncio.current_task()
            try:
                await self._action(session)
            except Exception as e:
                self.metrics.record_tick(success=False)
                logger.warning(f"scheduled action failed chat_id={session.chat_id}: {e}")
                await self._report(session, e)
                return False
            else:
                self.metrics.record_tick(success=True)
                return True
            finally:
                if handle is not None:
                    handle.active = None
                    handle.ticks += 1

    async def _report(self, session: Session, error: Exception) -> None:
        if self._on_error is None:
            return
        try:
            await self._on_error(session, error)
        except Exception as e:
            logger.error(f"scheduler error reporter failed chat_id={session.chat_id}: {e}")

    def _invalidate(self, handle: TimerHandle, *, keep_first_run: bool = True) -> None:
        handle.cancelled = True
        tasks = [handle.task] if keep_first_run else [handle.first_run, handle.task]
        for task in tasks:
            # An action that already started is allowed to finish.
            if task is None or task.done() or task is handle.active:
                continue
            task.cancel()

"""Runtime counters for dispatch, RPC and scheduler activity."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(slots=True)
class BotRuntimeMetrics:
    """In-memory counters for bot runtime observability."""

    started_at_ms: int = field(default_factory=now_ms)
    units_total: int = 0
    units_by_kind: Counter[str] = field(default_factory=Counter)
    dispatch_by_outcome: Counter[str] = field(default_factory=Counter)
    handler_errors_total: int = 0
    rpc_total: int = 0
    rpc_failed: int = 0
    rpc_timeouts: int = 0
    rpc_by_method: Counter[str] = field(default_factory=Counter)
    rpc_total_latency_ms: float = 0.0
    rpc_max_latency_ms: float = 0.0
    ticks_total: int = 0
    ticks_failed: int = 0
    messages_sent: int = 0

    def record_unit(self, kind: str) -> None:
        self.units_total += 1
        self.units_by_kind[str(kind)] += 1

    def record_dispatch(self, outcome: str) -> None:
        self.dispatch_by_outcome[str(outcome)] += 1

    def record_handler_error(self) -> None:
        self.handler_errors_total += 1

    def record_rpc(self, method: str, *, success: bool, latency_ms: float, timed_out: bool = False) -> None:
        self.rpc_total += 1
        self.rpc_by_method[str(method)] += 1
        if not success:
            self.rpc_failed += 1
        if timed_out:
            self.rpc_timeouts += 1
        latency = max(0.0, float(latency_ms))
        self.rpc_total_latency_ms += latency
        self.rpc_max_latency_ms = max(self.rpc_max_latency_ms, latency)

    def record_tick(self, *, success: bool) -> None:
        self.ticks_total += 1
        if not success:
            self.ticks_failed += 1

    def record_message(self) -> None:
        self.messages_sent += 1

    def snapshot(self) -> dict[str, Any]:
        rpc_total = max(0, int(self.rpc_total))
        return {
            "started_at_ms": self.started_at_ms,
            "units_total": self.units_total,
            "units_by_kind": dict(self.units_by_kind),
            "dispatch_by_outcome": dict(self.dispatch_by_outcome),
            "handler_errors_total": self.handler_errors_total,
            "rpc_total": rpc_total,
            "rpc_failed": int(self.rpc_failed),
            "rpc_timeouts": int(self.rpc_timeouts),
            "rpc_by_method": dict(self.rpc_by_method),
            "rpc_avg_latency_ms": round(
                float(self.rpc_total_latency_ms) / float(rpc_total) if rpc_total > 0 else 0.0,
                2,
            ),
            "rpc_max_latency_ms": round(float(self.rpc_max_latency_ms), 2),
            "ticks_total": self.ticks_total,
            "ticks_failed": self.ticks_failed,
            "messages_sent": self.messages_sent,
        }

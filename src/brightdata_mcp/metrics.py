"""Metrics tracking for tool invocations."""

from __future__ import annotations

import threading
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

SUCCEEDED = "succeeded"
FAILED = "failed"
UNAUTHORIZED = "unauthorized"
UNKNOWN_TOOL = "unknown_tool"
RATE_LIMITED = "rate_limited"

OUTCOMES = (SUCCEEDED, FAILED, UNAUTHORIZED, UNKNOWN_TOOL, RATE_LIMITED)


@dataclass
class InvocationRecord:
    """Metrics for a single dispatch."""

    tool: str
    timestamp: datetime
    outcome: str
    elapsed_ms: float | None = None
    error: str | None = None


@dataclass
class ServerMetrics:
    """Process-wide invocation metrics, kept in memory only."""

    start_time: datetime = field(default_factory=datetime.now)
    outcomes: Counter[str] = field(default_factory=Counter)
    per_tool: Counter[str] = field(default_factory=Counter)
    recent_invocations: deque[InvocationRecord] = field(default_factory=lambda: deque(maxlen=50))
    recent_errors: deque[InvocationRecord] = field(default_factory=lambda: deque(maxlen=20))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(
        self,
        tool: str,
        outcome: str,
        elapsed_ms: float | None = None,
        error: str | None = None,
    ) -> None:
        """Record one dispatch outcome.

        Args:
            tool: Requested tool name
            outcome: One of OUTCOMES
            elapsed_ms: Execution time in milliseconds, when the tool ran
            error: Error message for anything but a success
        """
        record = InvocationRecord(
            tool=tool,
            timestamp=datetime.now(),
            outcome=outcome,
            elapsed_ms=elapsed_ms,
            error=error,
        )
        with self._lock:
            self.outcomes[outcome] += 1
            self.per_tool[tool] += 1
            self.recent_invocations.append(record)
            if outcome != SUCCEEDED:
                self.recent_errors.append(record)

    @property
    def total(self) -> int:
        return sum(self.outcomes.values())

    def get_uptime_seconds(self) -> float:
        return (datetime.now() - self.start_time).total_seconds()

    def get_success_rate(self) -> float:
        """Get success rate as percentage."""
        if self.total == 0:
            return 0.0
        return (self.outcomes[SUCCEEDED] / self.total) * 100

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary for JSON serialization."""
        uptime_seconds = self.get_uptime_seconds()

        with self._lock:
            recent = list(self.recent_invocations)[-10:][::-1]
            errors = list(self.recent_errors)[-10:][::-1]
            outcomes = {outcome: self.outcomes[outcome] for outcome in OUTCOMES}
            per_tool = dict(self.per_tool)

        return {
            "status": "healthy",
            "uptime": {
                "seconds": uptime_seconds,
                "formatted": self._format_uptime(uptime_seconds),
            },
            "start_time": self.start_time.isoformat(),
            "invocations": {
                "total": sum(outcomes.values()),
                "success_rate": round(self.get_success_rate(), 2),
                **outcomes,
            },
            "per_tool": per_tool,
            "recent_invocations": [self._record_dict(r) for r in recent],
            "recent_errors": [self._record_dict(r) for r in errors],
        }

    @staticmethod
    def _record_dict(record: InvocationRecord) -> dict[str, Any]:
        return {
            "tool": record.tool,
            "timestamp": record.timestamp.isoformat(),
            "outcome": record.outcome,
            "elapsed_ms": record.elapsed_ms,
            "error": record.error,
        }

    @staticmethod
    def _format_uptime(seconds: float) -> str:
        """Format uptime in human-readable format."""
        if seconds < 60:
            return f"{int(seconds)}s"
        elif seconds < 3600:
            return f"{int(seconds / 60)}m {int(seconds % 60)}s"
        elif seconds < 86400:
            return f"{int(seconds / 3600)}h {int((seconds % 3600) / 60)}m"
        else:
            return f"{int(seconds / 86400)}d {int((seconds % 86400) / 3600)}h"


# Global metrics instance
_metrics = ServerMetrics()


def get_metrics() -> ServerMetrics:
    """Get the global metrics instance."""
    return _metrics

"""Data models for tracing infrastructure.

Run records are plain data so any history backend can store them as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class RunRecord:
    """Record of a single scheduled invocation.

    Attributes:
        run: 1-based sequence number of the invocation.
        started_at: Unix timestamp when the invocation began.
        duration_ms: Time from start until the invocation settled.
        interval_ms: Interval in force when the invocation began.
        error: repr() of the failure, None if the work succeeded.

    Example:
        record = RunRecord(
            run=3,
            started_at=1704067200.0,
            duration_ms=12.5,
            interval_ms=1000.0,
        )
    """

    run: int
    started_at: float
    duration_ms: float
    interval_ms: float = 0.0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "run": self.run,
            "started_at": self.started_at,
            "duration_ms": self.duration_ms,
            "interval_ms": self.interval_ms,
        }
        if self.error is not None:
            result["error"] = self.error
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunRecord:
        """Create from dictionary (for deserialization)."""
        return cls(
            run=data["run"],
            started_at=data["started_at"],
            duration_ms=data["duration_ms"],
            interval_ms=data.get("interval_ms", 0.0),
            error=data.get("error"),
        )

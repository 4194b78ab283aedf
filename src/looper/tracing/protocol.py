"""Protocols for tracing infrastructure.

These protocols define the interface for run history backends, allowing
different implementations (in-memory, file, database).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from looper.tracing.models import RunRecord


@runtime_checkable
class RunHistory(Protocol):
    """Protocol for storing and retrieving invocation history.

    A RecurringInvoker given a history records one RunRecord per scheduled
    invocation once it settles, including failed and superseded runs.

    Usage:
        history = InMemoryRunHistory(max_runs=100)
        invoker = RecurringInvoker(poll, interval=500, history=history)

        # Later, inspect what happened
        failures = [r for r in history.recent() if not r.succeeded]

    Thread Safety:
        Records are written from the event loop thread only.
    """

    def record_run(self, record: RunRecord) -> None:
        """Record a settled invocation.

        Args:
            record: Complete record of the invocation to store.

        Note:
            Implementations may have bounded storage (e.g., last N runs).
            Older records may be evicted when the limit is reached.
        """
        ...

    def get_run(self, run: int) -> RunRecord | None:
        """Get the record for a run number, None if not in storage."""
        ...

    def recent(self, limit: int | None = None) -> list[RunRecord]:
        """Get stored records, oldest first.

        Args:
            limit: Return at most this many of the newest records.

        Returns:
            List of records in the order they were recorded.
        """
        ...

    def clear(self) -> None:
        """Clear all stored history."""
        ...

    @property
    def run_count(self) -> int:
        """Number of records currently stored."""
        ...

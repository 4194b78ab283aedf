"""Bounded in-memory run history."""

from __future__ import annotations

from collections import deque

from looper.tracing.models import RunRecord


class InMemoryRunHistory:
    """Keeps the last ``max_runs`` run records in memory.

    Args:
        max_runs: Maximum number of records kept. Oldest are evicted first.
    """

    def __init__(self, max_runs: int = 1000) -> None:
        if max_runs < 1:
            raise ValueError(f"max_runs must be positive, got {max_runs}")
        self._records: deque[RunRecord] = deque(maxlen=max_runs)

    @property
    def max_runs(self) -> int:
        return self._records.maxlen or 0

    def record_run(self, record: RunRecord) -> None:
        self._records.append(record)

    def get_run(self, run: int) -> RunRecord | None:
        for record in reversed(self._records):
            if record.run == run:
                return record
        return None

    def recent(self, limit: int | None = None) -> list[RunRecord]:
        records = list(self._records)
        if limit is not None:
            records = records[-limit:] if limit > 0 else []
        return records

    def clear(self) -> None:
        self._records.clear()

    @property
    def run_count(self) -> int:
        return len(self._records)

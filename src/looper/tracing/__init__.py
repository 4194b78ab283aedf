"""Tracing infrastructure for recording invocation history.

This module provides a protocol and data structures for capturing what each
scheduled invocation did, enabling debugging and monitoring of a loop.

Usage:
    from looper.tracing import InMemoryRunHistory, RunRecord

    history = InMemoryRunHistory(max_runs=100)
    invoker = RecurringInvoker(poll, interval=1000, history=history)

    # Or implement RunHistory for your storage backend
    class MyRunHistory:
        def record_run(self, record: RunRecord) -> None:
            ...
"""

from looper.tracing.memory import InMemoryRunHistory
from looper.tracing.models import RunRecord
from looper.tracing.protocol import RunHistory

__all__ = [
    "InMemoryRunHistory",
    "RunHistory",
    "RunRecord",
]

"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import time

import pytest

from looper import RecurringInvoker


class RecordingWork:
    """Async unit of work that records how and when it was invoked.

    Args:
        duration: Seconds each invocation takes.
        fail: Raise RuntimeError at the end of every invocation.
        gated: Block every invocation until ``release()`` is called.
    """

    def __init__(self, duration: float = 0.0, fail: bool = False, gated: bool = False) -> None:
        self.duration = duration
        self.fail = fail
        self.gate: asyncio.Event | None = asyncio.Event() if gated else None
        self.calls = 0
        self.active = 0
        self.max_active = 0
        self.starts: list[float] = []

    async def __call__(self) -> str:
        self.calls += 1
        self.starts.append(time.monotonic())
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.gate is not None:
                await self.gate.wait()
            elif self.duration:
                await asyncio.sleep(self.duration)
            if self.fail:
                raise RuntimeError(f"work failed on call {self.calls}")
            return "done"
        finally:
            self.active -= 1

    def release(self) -> None:
        assert self.gate is not None
        self.gate.set()

    async def wait_for_calls(self, count: int, timeout: float = 2.0) -> None:
        async def _poll() -> None:
            while self.calls < count:
                await asyncio.sleep(0.001)

        await asyncio.wait_for(_poll(), timeout)


async def wait_until_idle(invoker: RecurringInvoker, timeout: float = 2.0) -> None:
    """Wait until no invocation is in flight."""

    async def _poll() -> None:
        while invoker.running:
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def work_cls() -> type[RecordingWork]:
    return RecordingWork


@pytest.fixture
def idle():
    return wait_until_idle

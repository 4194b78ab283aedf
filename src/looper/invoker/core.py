"""Self-rescheduling invoker with single-flight guarantee.

Usage:
    async def poll() -> None:
        ...

    invoker = RecurringInvoker(poll, interval=5000)
    invoker.start()            # first run happens right away
    invoker.now()              # skip the remaining wait
    invoker.change_interval(1000)
    await invoker.stop()       # waits for an in-flight run if there is one

    # Retry transient failures inside a cycle (uses tenacity)
    from looper.invoker import RetryPolicy
    invoker = RecurringInvoker(poll, interval=5000, retry_policy=RetryPolicy(max_attempts=3))

Control methods are synchronous. When they have to wait for an in-flight
invocation they return an asyncio.Future that resolves once the deferred
operation was applied; otherwise they return None.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import tenacity

from looper.invoker.models import InvokerState, RetryPolicy, WorkFunction
from looper.tracing.models import RunRecord

if TYPE_CHECKING:
    from looper.config.settings import InvokerSettings
    from looper.tracing.protocol import RunHistory

logger = logging.getLogger(__name__)

ControlResult = asyncio.Future[None] | None
"""What start/stop/now return: None if applied immediately, else a future."""


def _check_interval(milliseconds: float) -> float:
    if milliseconds < 0:
        raise ValueError(f"Interval must be non-negative, got {milliseconds}")
    return float(milliseconds)


def _resolve(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)


class RecurringInvoker:
    """Repeatedly invokes a unit of work, at most once per interval.

    The interval is measured from the start of one invocation to the start
    of the next, so a slow invocation eats into the following wait instead
    of adding to it. Only one invocation is ever in flight. Failures of the
    work are logged and absorbed; they never stop the loop.

    Args:
        work: Callable invoked each cycle. May return an awaitable.
        interval: Minimum milliseconds between invocation starts.
        retry_policy: Retries for failed scheduled invocations. Default: none.
        history: Optional store receiving a RunRecord per scheduled invocation.
    """

    def __init__(
        self,
        work: WorkFunction,
        *,
        interval: float = 0,
        retry_policy: RetryPolicy | None = None,
        history: RunHistory | None = None,
    ) -> None:
        if not callable(work):
            raise TypeError(f"work must be callable, got {type(work).__name__}")
        self._work = work
        self._interval = _check_interval(interval)
        self._retry_policy = retry_policy or RetryPolicy()
        self._history = history
        self._timer: asyncio.TimerHandle | None = None
        self._current: asyncio.Task[None] | None = None
        self._timestamp: datetime | None = None
        self._started_at: float | None = None  # time.monotonic() of last start
        self._run_count = 0

    @classmethod
    def from_settings(
        cls, work: WorkFunction, settings: InvokerSettings | None = None
    ) -> RecurringInvoker:
        """Build an invoker from InvokerSettings (read from LOOPER_* env vars by default)."""
        from looper.config.settings import InvokerSettings
        from looper.tracing.memory import InMemoryRunHistory

        settings = settings or InvokerSettings()
        history = InMemoryRunHistory(settings.history_size) if settings.history_size else None
        return cls(
            work,
            interval=settings.interval_ms,
            retry_policy=settings.retry_policy(),
            history=history,
        )

    # Observable state

    @property
    def interval(self) -> float:
        """Minimum number of milliseconds between invocation starts."""
        return self._interval

    @property
    def timestamp(self) -> datetime | None:
        """Time the last scheduled invocation started, None if never."""
        return self._timestamp

    @property
    def lastrun(self) -> float:
        """Milliseconds since the last invocation started, inf if never."""
        if self._started_at is None:
            return math.inf
        return (time.monotonic() - self._started_at) * 1000

    @property
    def running(self) -> bool:
        """True while a scheduled invocation is in flight."""
        return self._current is not None and not self._current.done()

    @property
    def started(self) -> bool:
        """True while a timer is armed (including while its cycle runs)."""
        return self._timer is not None

    @property
    def stopped(self) -> bool:
        return self._timer is None

    @property
    def state(self) -> InvokerState:
        return InvokerState.from_flags(self.started, self.running)

    @property
    def run_count(self) -> int:
        """Number of scheduled invocations begun so far."""
        return self._run_count

    @property
    def history(self) -> RunHistory | None:
        return self._history

    # Control

    def run_once(self) -> Any:
        """Invoke the work once and return its result, leaving the schedule alone."""
        return self._work()

    def change_interval(self, milliseconds: float) -> ControlResult:
        """Change the interval. If started, run now so the new cadence applies at once."""
        self._interval = _check_interval(milliseconds)
        logger.debug("Interval changed to %sms", self._interval)
        if self.started:
            return self.now()
        return None

    def start(self) -> ControlResult:
        """Begin the loop. The first invocation happens without delay."""
        if self.started:
            return None
        if self.running:
            return self._when_settled(self.start)
        self._arm(0.0)
        return None

    def stop(self) -> ControlResult:
        """Stop the loop. Never interrupts an in-flight invocation."""
        if not self.started:
            return None
        if self.running:
            return self._when_settled(self.stop)
        self._disarm()
        return None

    def now(self) -> ControlResult:
        """Run an invocation immediately and schedule later ones from it."""
        if self.started and self.running:
            # the run in progress satisfies "now"
            return None
        if self.started:
            self.stop()
            return self.start()
        if self.running:
            return self._when_settled(self.start)
        return self.start()

    async def aclose(self) -> None:
        """Disarm the timer and wait for any in-flight invocation to settle."""
        self._disarm()
        current = self._current
        if current is not None and not current.done():
            await asyncio.wait([current])

    async def __aenter__(self) -> RecurringInvoker:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # Scheduling internals

    def _arm(self, delay_ms: float) -> None:
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay_ms / 1000, self._fire)
        logger.debug("Armed next invocation in %.1fms", delay_ms)

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        started_at = self._started_at = time.monotonic()
        timestamp = self._timestamp = datetime.now(UTC)
        self._run_count += 1
        run = self._run_count
        loop = asyncio.get_running_loop()
        self._current = loop.create_task(
            self._cycle(run, started_at, timestamp),
            name=f"recurring-invocation-{run}",
        )

    async def _cycle(self, run: int, started_at: float, timestamp: datetime) -> None:
        """One scheduled invocation followed by a rearm if it is still current."""
        interval = self._interval
        error: str | None = None

        task = asyncio.current_task()

        try:
            await self._invoke()
        except asyncio.CancelledError as e:
            if task is not None and task.cancelling():
                # the cycle itself is being cancelled, not just something the work awaited
                self._abandon(run, task)
                raise
            error = repr(e)
            logger.warning("Recurring invocation %d was cancelled", run, exc_info=True)
        except Exception as e:
            error = repr(e)
            logger.warning("Recurring invocation %d failed", run, exc_info=True)

        self._record(
            RunRecord(
                run=run,
                started_at=timestamp.timestamp(),
                duration_ms=(time.monotonic() - started_at) * 1000,
                interval_ms=interval,
                error=error,
            )
        )

        if self._current is not task:
            logger.debug("Invocation %d superseded, not rearming", run)
            return

        self._current = None
        if self._timer is None:
            return
        self._arm(max(0.0, self._interval - self.lastrun))

    def _record(self, record: RunRecord) -> None:
        """Hand a record to the history. Backend failures never reach the schedule."""
        if self._history is None:
            return
        try:
            self._history.record_run(record)
        except Exception:
            logger.warning("Failed to record invocation %d", record.run, exc_info=True)

    def _abandon(self, run: int, task: asyncio.Task[Any]) -> None:
        """Drop scheduling state for a cycle task cancelled from outside."""
        logger.debug("Invocation %d task cancelled, stopping loop", run)
        if self._current is task:
            self._current = None
            self._disarm()

    async def _invoke(self) -> None:
        """Invoke the work, retrying per policy. Raises the final failure."""
        policy = self._retry_policy

        if policy.max_attempts <= 1:
            await self._settle(self.run_once())
            return

        async for attempt in self._build_retryer(policy):
            with attempt:
                await self._settle(self.run_once())

    @staticmethod
    async def _settle(result: Any) -> Any:
        if inspect.isawaitable(result):
            return await result
        return result

    def _build_retryer(self, policy: RetryPolicy) -> tenacity.AsyncRetrying:
        """Build a tenacity retryer from RetryPolicy configuration."""
        stop = tenacity.stop_after_attempt(policy.max_attempts)

        wait: tenacity.wait.wait_base
        if policy.backoff == "exponential":
            wait = tenacity.wait_exponential(multiplier=policy.base_delay, min=policy.base_delay)
        elif policy.backoff == "linear":
            wait = tenacity.wait_incrementing(start=policy.base_delay, increment=policy.base_delay)
        else:
            wait = tenacity.wait_none()

        return tenacity.AsyncRetrying(
            stop=stop,
            wait=wait,
            before_sleep=tenacity.before_sleep_log(logger, logging.DEBUG),
            reraise=True,
        )

    def _when_settled(self, action: Callable[[], ControlResult]) -> asyncio.Future[None]:
        """Apply action once the in-flight invocation settles.

        Runs as a done-callback of the invocation task, ahead of any timer
        that task armed on its way out.
        """
        current = self._current
        if current is None:
            raise RuntimeError("No invocation in flight to wait for")
        settled: asyncio.Future[None] = current.get_loop().create_future()
        logger.debug("Deferring %s until in-flight invocation settles", action.__name__)

        def _resume(_: asyncio.Task[None]) -> None:
            try:
                follow_up = action()
            except Exception as e:
                if not settled.done():
                    settled.set_exception(e)
                return
            if follow_up is None:
                _resolve(settled)
            else:
                follow_up.add_done_callback(lambda _: _resolve(settled))

        current.add_done_callback(_resume)
        return settled

"""Invoker models and configuration.

Types for describing invoker state and retry behavior.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Literal


class InvokerState(Enum):
    """Combination of the two independent axes of a RecurringInvoker.

    "Armed" means a timer is pending (or has fired and its cycle is still
    running). "Running" means an invocation has begun and not yet settled.
    """

    STOPPED_IDLE = auto()
    """No timer, no invocation. Initial state."""

    ARMED_IDLE = auto()
    """Timer pending, nothing running."""

    STOPPED_RUNNING = auto()
    """No timer, but an earlier invocation has not settled yet."""

    ARMED_RUNNING = auto()
    """Scheduled invocation in progress; next timer armed once it settles."""

    @classmethod
    def from_flags(cls, started: bool, running: bool) -> InvokerState:
        if started:
            return cls.ARMED_RUNNING if running else cls.ARMED_IDLE
        return cls.STOPPED_RUNNING if running else cls.STOPPED_IDLE

    @property
    def started(self) -> bool:
        return self in (InvokerState.ARMED_IDLE, InvokerState.ARMED_RUNNING)

    @property
    def running(self) -> bool:
        return self in (InvokerState.STOPPED_RUNNING, InvokerState.ARMED_RUNNING)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retrying a failed scheduled invocation.

    Useful for work that calls external services with transient failures.
    Retries happen inside a single cycle, so their waits count towards the
    cycle's duration.
    """

    max_attempts: int = 1
    """Maximum attempts (1 = no retry). Default: no retry."""

    backoff: Literal["none", "linear", "exponential"] = "none"
    """Backoff strategy between retries."""

    base_delay: float = 0.1
    """Base delay in seconds for backoff calculation."""

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be non-negative, got {self.base_delay}")


# Type for units of work
WorkFunction = Callable[[], Awaitable[Any] | Any]
"""Signature: () -> awaitable (async work) or plain value (sync work)"""

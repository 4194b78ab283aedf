"""Recurring invocation and its models."""

from looper.invoker.core import ControlResult, RecurringInvoker
from looper.invoker.models import InvokerState, RetryPolicy, WorkFunction

__all__ = [
    # Invoker
    "RecurringInvoker",
    "ControlResult",
    # Models
    "InvokerState",
    "RetryPolicy",
    "WorkFunction",
]

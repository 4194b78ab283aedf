"""looper: self-rescheduling async invocation loop.

Usage:
    import asyncio
    from looper import RecurringInvoker

    async def refresh() -> None:
        ...

    async def main() -> None:
        async with RecurringInvoker(refresh, interval=60_000) as invoker:
            ...
            invoker.now()  # refresh right away, then every minute again

    asyncio.run(main())
"""

__version__ = "0.1.0"

# Invoker
from looper.invoker import (
    ControlResult,
    InvokerState,
    RecurringInvoker,
    RetryPolicy,
)

# Configuration
from looper.config import InvokerSettings

# Tracing
from looper.tracing import (
    InMemoryRunHistory,
    RunHistory,
    RunRecord,
)

__all__ = [
    # Version
    "__version__",
    # Invoker
    "RecurringInvoker",
    "ControlResult",
    "InvokerState",
    "RetryPolicy",
    # Configuration
    "InvokerSettings",
    # Tracing
    "InMemoryRunHistory",
    "RunHistory",
    "RunRecord",
]

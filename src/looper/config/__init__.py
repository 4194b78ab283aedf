"""Configuration module using Pydantic Settings.

Usage:
    from looper.config import InvokerSettings

    settings = InvokerSettings(interval_ms=1000)
"""

from looper.config.settings import InvokerSettings

__all__ = [
    "InvokerSettings",
]

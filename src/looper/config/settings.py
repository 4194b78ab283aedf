"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for invokers.

Usage:
    from looper.config import InvokerSettings

    # Load from environment variables (LOOPER_*)
    settings = InvokerSettings()

    # Or override with explicit values
    settings = InvokerSettings(interval_ms=30_000, retry_attempts=3)
    invoker = RecurringInvoker.from_settings(poll, settings)
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from looper.invoker.models import RetryPolicy


class InvokerSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a RecurringInvoker.

    Attributes:
        interval_ms: Minimum milliseconds between invocation starts.
        retry_attempts: Attempts per scheduled invocation (1 = no retry).
        retry_backoff: Backoff between retries (none, linear, exponential).
        retry_base_delay: Base delay in seconds for backoff.
        history_size: Run records kept in memory (0 disables history).

    Environment Variables:
        LOOPER_INTERVAL_MS
        LOOPER_RETRY_ATTEMPTS
        LOOPER_RETRY_BACKOFF
        LOOPER_RETRY_BASE_DELAY
        LOOPER_HISTORY_SIZE
    """

    model_config = SettingsConfigDict(
        env_prefix="LOOPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    interval_ms: float = Field(default=0.0, ge=0)
    retry_attempts: int = Field(default=1, ge=1)
    retry_backoff: Literal["none", "linear", "exponential"] = "none"
    retry_base_delay: float = Field(default=0.1, ge=0)
    history_size: int = Field(default=0, ge=0)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            backoff=self.retry_backoff,
            base_delay=self.retry_base_delay,
        )

"""Tests for environment-driven invoker settings."""

import pytest
from pydantic import ValidationError

from looper.config import InvokerSettings
from looper.invoker import RetryPolicy


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Run without a stray .env file or LOOPER_* variables."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "LOOPER_INTERVAL_MS",
        "LOOPER_RETRY_ATTEMPTS",
        "LOOPER_RETRY_BACKOFF",
        "LOOPER_RETRY_BASE_DELAY",
        "LOOPER_HISTORY_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = InvokerSettings()
    assert settings.interval_ms == 0
    assert settings.history_size == 0
    assert settings.retry_policy() == RetryPolicy()


def test_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("LOOPER_INTERVAL_MS", "2500")
    monkeypatch.setenv("LOOPER_RETRY_ATTEMPTS", "4")
    monkeypatch.setenv("LOOPER_RETRY_BACKOFF", "exponential")
    monkeypatch.setenv("LOOPER_HISTORY_SIZE", "50")

    settings = InvokerSettings()

    assert settings.interval_ms == 2500
    assert settings.history_size == 50
    assert settings.retry_policy() == RetryPolicy(max_attempts=4, backoff="exponential")


def test_reads_env_file(tmp_path) -> None:
    (tmp_path / ".env").write_text("LOOPER_INTERVAL_MS=125\n", encoding="utf-8")
    assert InvokerSettings().interval_ms == 125


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LOOPER_INTERVAL_MS", "-1"),
        ("LOOPER_RETRY_ATTEMPTS", "0"),
        ("LOOPER_RETRY_BACKOFF", "random"),
    ],
)
def test_rejects_invalid_values(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        InvokerSettings()

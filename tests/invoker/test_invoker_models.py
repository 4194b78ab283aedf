"""Tests for invoker models."""

import pytest

from looper.invoker import InvokerState, RetryPolicy


@pytest.mark.parametrize(
    ("started", "running", "expected"),
    [
        (False, False, InvokerState.STOPPED_IDLE),
        (True, False, InvokerState.ARMED_IDLE),
        (False, True, InvokerState.STOPPED_RUNNING),
        (True, True, InvokerState.ARMED_RUNNING),
    ],
)
def test_state_from_flags(started, running, expected) -> None:
    state = InvokerState.from_flags(started, running)
    assert state is expected
    assert state.started is started
    assert state.running is running


def test_retry_policy_defaults_to_no_retry() -> None:
    policy = RetryPolicy()
    assert policy.max_attempts == 1
    assert policy.backoff == "none"


@pytest.mark.parametrize(
    "kwargs",
    [{"max_attempts": 0}, {"base_delay": -1.0}],
    ids=["no-attempts", "negative-delay"],
)
def test_retry_policy_rejects_invalid_values(kwargs) -> None:
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)

import threading
import time

import pytest

from image_registrar.utils.wait_until import WaitUntilCancelledError, WaitUntilTimeoutError, wait_until


def test_returns_once_predicate_holds():
    results = iter([False, False, True])
    calls = []

    def chk():
        calls.append(1)
        return next(results)

    wait_until(chk, timeout=5, retry_interval=0.001)

    assert len(calls) == 3


def test_predicate_runs_at_least_once_with_zero_timeout():
    wait_until(lambda: True, timeout=0, retry_interval=1)


def test_timeout_raises():
    with pytest.raises(WaitUntilTimeoutError):
        wait_until(lambda: False, timeout=0.05, retry_interval=0.01)


def test_predicate_errors_propagate():
    def chk():
        raise RuntimeError("image failed: failed")

    with pytest.raises(RuntimeError, match="image failed"):
        wait_until(chk, timeout=5, retry_interval=0.01)


def test_already_cancelled_never_polls():
    event = threading.Event()
    event.set()
    calls = []

    with pytest.raises(WaitUntilCancelledError):
        wait_until(lambda: calls.append(1) or True, timeout=5, retry_interval=1, cancel_event=event)

    assert calls == []


def test_cancellation_unblocks_a_long_sleep():
    event = threading.Event()
    timer = threading.Timer(0.05, event.set)
    start = time.monotonic()
    timer.start()
    try:
        with pytest.raises(WaitUntilCancelledError):
            wait_until(lambda: False, timeout=60, retry_interval=30, cancel_event=event)
    finally:
        timer.cancel()

    assert time.monotonic() - start < 5


def test_max_attempts_bounds_polls_with_zero_interval():
    calls = []

    with pytest.raises(WaitUntilTimeoutError, match="after 3 attempts"):
        wait_until(lambda: calls.append(1) and False, retry_interval=0, max_attempts=3)

    assert len(calls) == 3


def test_success_wins_over_cancellation_during_the_poll():
    event = threading.Event()

    def chk():
        event.set()
        return True

    wait_until(chk, timeout=5, retry_interval=1, cancel_event=event)

    assert event.is_set()

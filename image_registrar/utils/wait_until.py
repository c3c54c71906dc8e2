import threading
import time
from typing import Callable, Optional


class WaitUntilTimeoutError(Exception):
    pass


class WaitUntilCancelledError(Exception):
    pass


def wait_until(
    predicate: Callable[[], bool],
    *,
    retry_interval: float,
    timeout: Optional[float] = None,
    max_attempts: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> None:
    """Poll ``predicate`` until it returns True.

    Gives up after ``max_attempts`` polls or once ``timeout`` seconds have
    passed, whichever comes first; with neither set it polls forever. The
    predicate always runs at least once. Cancellation is checked before
    every poll, and the sleep between polls waits on ``cancel_event`` so a
    cancellation wakes the caller immediately. A poll that already returned
    True is never overridden by a later cancellation.
    """
    deadline = time.monotonic() + timeout if timeout is not None else None
    attempts = 0
    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise WaitUntilCancelledError("cancelled while waiting")

        attempts += 1
        if predicate():
            return

        if max_attempts is not None and attempts >= max_attempts:
            raise WaitUntilTimeoutError(f"condition not met after {attempts} attempts")

        interval = retry_interval
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise WaitUntilTimeoutError(f"condition not met within {timeout} seconds")
            interval = min(interval, remaining)

        if cancel_event is not None:
            cancel_event.wait(interval)
        else:
            time.sleep(interval)

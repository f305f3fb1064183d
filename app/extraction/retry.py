import threading
import time
from collections.abc import Callable
from typing import TypeVar

from tenacity import RetryCallState, Retrying, stop_after_attempt, wait_fixed

from app.extraction.exceptions import StrategyTimeoutError

T = TypeVar("T")


def with_retry(
    fn: Callable[[int], T],
    *,
    max_attempts: int,
    backoff_seconds: float = 0.0,
    on_failure: Callable[[int, Exception], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``fn(attempt)`` sequentially until it succeeds or attempts run out.

    Sleeps ``backoff_seconds`` between attempts, never after the last one.
    Only ``Exception`` subclasses are retried; the final error is re-raised.
    """

    def _report(retry_state: RetryCallState) -> None:
        if on_failure is None or retry_state.outcome is None:
            return
        exc = retry_state.outcome.exception()
        if isinstance(exc, Exception):
            on_failure(retry_state.attempt_number, exc)

    retrying = Retrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_fixed(max(0.0, backoff_seconds)),
        sleep=sleep,
        after=_report,
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            return fn(attempt.retry_state.attempt_number)
    raise AssertionError("unreachable")


def run_with_deadline(fn: Callable[[], T], timeout_seconds: float) -> T:
    """Run ``fn`` in a worker thread and give up on it after ``timeout_seconds``.

    The abandoned call keeps running in its daemon thread until its own
    client-side deadline fires; its result is discarded.

    Raises:
        StrategyTimeoutError: if ``fn`` does not finish in time.
    """
    result: list[T] = []
    error: list[BaseException] = []
    done = threading.Event()

    def _target() -> None:
        try:
            result.append(fn())
        except BaseException as exc:  # noqa: BLE001
            error.append(exc)
        finally:
            done.set()

    worker = threading.Thread(target=_target, name="strategy-call", daemon=True)
    worker.start()
    if not done.wait(timeout_seconds):
        raise StrategyTimeoutError(f"Timed out after {timeout_seconds:g}s")
    if error:
        raise error[0]
    return result[0]

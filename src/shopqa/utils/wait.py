"""Polling helpers used by verifications and cart settling.

Example:
    >>> from shopqa.utils.wait import poll_until
    >>>
    >>> count = poll_until(
    ...     fetcher=lambda: page.locator("#cart_info_table tbody tr").count(),
    ...     condition=lambda n: n == 0,
    ...     timeout=10,
    ...     interval=0.25,
    ...     description="cart to become empty",
    ... )
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from shopqa.errors import TimeoutExceededError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def poll_until(
    fetcher: Callable[[], T],
    condition: Callable[[T], bool],
    timeout: float = 10.0,
    interval: float = 0.25,
    description: str | None = None,
    ignore: tuple[type[Exception], ...] = (Exception,),
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Fetch a value repeatedly until condition(value) holds.

    The fetcher is always called at least once, even with a zero timeout.
    Exceptions listed in ``ignore`` count as a failed poll; the last one is
    attached as the cause of the timeout error.

    Returns:
        The fetched value that satisfied the condition.

    Raises:
        TimeoutExceededError: If the condition did not hold within timeout.
    """
    start_time = clock()
    attempts = 0
    last_value: T | None = None
    last_error: Exception | None = None

    while True:
        attempts += 1
        try:
            value = fetcher()
            last_value = value
            last_error = None
            if condition(value):
                if attempts > 1:
                    logger.debug(
                        f"Condition met after {attempts} polls: {description or 'condition'}"
                    )
                return value
        except ignore as e:
            last_error = e

        elapsed = clock() - start_time
        if elapsed + interval > timeout:
            raise TimeoutExceededError(
                condition_description=description or "condition to be met",
                timeout_seconds=timeout,
                elapsed_seconds=elapsed,
                poll_attempts=attempts,
                poll_interval=interval,
                last_value=last_value,
                cause=last_error,
            )

        sleep(interval)


def wait_for(
    condition: Callable[[], bool],
    timeout: float = 10.0,
    interval: float = 0.25,
    description: str | None = None,
    raise_on_timeout: bool = True,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Wait for a zero-argument condition to become true.

    Returns:
        True if the condition was met, False on timeout when
        raise_on_timeout is False.
    """
    try:
        poll_until(
            fetcher=condition,
            condition=bool,
            timeout=timeout,
            interval=interval,
            description=description or "condition to be true",
            sleep=sleep,
        )
    except TimeoutExceededError:
        if raise_on_timeout:
            raise
        return False
    return True


def wait_for_stable_value(
    fetcher: Callable[[], T],
    stable_polls: int = 2,
    timeout: float = 10.0,
    interval: float = 0.5,
    description: str | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Wait until fetcher returns the same value for stable_polls polls in a row.

    Used to detect that an asynchronous page update has finished when
    there is no specific target value to wait for.
    """
    history: list[T] = []

    def fetch() -> list[T]:
        history.append(fetcher())
        return history[-stable_polls:]

    def is_stable(window: list[T]) -> bool:
        return len(window) >= stable_polls and all(v == window[0] for v in window)

    window = poll_until(
        fetcher=fetch,
        condition=is_stable,
        timeout=timeout,
        interval=interval,
        description=description or "value to stabilise",
        sleep=sleep,
    )
    return window[-1]

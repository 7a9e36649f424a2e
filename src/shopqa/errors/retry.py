"""Retry policies with backoff.

Flaky browser steps and API calls are wrapped in a RetryPolicy (or the
retry_with_backoff shortcut). Unlike a generic retry wrapper, the last
failure is re-raised unchanged once attempts run out so assertions keep
their original type and message.

Example:
    >>> from shopqa.errors.retry import RetryConfig, RetryPolicy
    >>>
    >>> config = RetryConfig.from_yaml({
    ...     "max_attempts": 3,
    ...     "backoff": "exponential",
    ...     "initial_delay": 1.0,
    ... })
    >>> policy = RetryPolicy(config)
    >>> products = policy.execute(lambda: session.run("get_products_api"))
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from shopqa.errors.base import ShopQAError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackoffStrategy(Enum):
    """Available backoff strategies.

    Attributes:
        FIXED: Same delay between each retry.
        LINEAR: Delay increases linearly (delay * attempt).
        EXPONENTIAL: Delay doubles each retry.
    """

    FIXED = "fixed"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"

    @classmethod
    def from_string(cls, value: str) -> BackoffStrategy:
        """Create BackoffStrategy from string value.

        Raises:
            ValueError: If strategy name is not recognized.
        """
        value_lower = value.lower().replace("-", "_").replace(" ", "_")
        mapping = {
            "fixed": cls.FIXED,
            "linear": cls.LINEAR,
            "exponential": cls.EXPONENTIAL,
            "exp": cls.EXPONENTIAL,
        }
        if value_lower not in mapping:
            valid = ", ".join(sorted(mapping.keys()))
            raise ValueError(f"Unknown backoff strategy: {value}. Valid: {valid}")
        return mapping[value_lower]


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of invocations allowed (at least 1).
        base_delay: Delay before the first retry (seconds).
        max_delay: Upper bound for any single delay (seconds).
        backoff_strategy: Strategy for calculating retry delays.
        exponential_base: Base for exponential backoff.
        retryable_exceptions: Exception types worth retrying.
        on_retry: Callback invoked before each retry with
            (attempt, exception, delay).
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    backoff_strategy: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    exponential_base: float = 2.0
    retryable_exceptions: tuple[type[BaseException], ...] = (Exception,)
    on_retry: Callable[[int, BaseException, float], None] | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")

    @classmethod
    def from_yaml(cls, config: dict[str, Any]) -> RetryConfig:
        """Create RetryConfig from YAML/dict configuration.

        Supports the following YAML format:
            retry:
              max_attempts: 3
              backoff: exponential  # or linear, fixed
              initial_delay: 1.0
              max_delay: 30.0
        """
        if "retry" in config:
            config = config["retry"]

        backoff_str = config.get("backoff", config.get("backoff_strategy", "exponential"))
        if isinstance(backoff_str, BackoffStrategy):
            backoff = backoff_str
        else:
            backoff = BackoffStrategy.from_string(str(backoff_str))

        return cls(
            max_attempts=config.get("max_attempts", 3),
            base_delay=config.get("initial_delay", config.get("base_delay", 1.0)),
            max_delay=config.get("max_delay", 60.0),
            backoff_strategy=backoff,
            exponential_base=config.get("exponential_base", 2.0),
        )

    def to_yaml(self) -> dict[str, Any]:
        """Convert to YAML-compatible dictionary."""
        return {
            "max_attempts": self.max_attempts,
            "backoff": self.backoff_strategy.value,
            "initial_delay": self.base_delay,
            "max_delay": self.max_delay,
        }


class RetryPolicy:
    """Configurable retry policy with various backoff strategies.

    The policy holds no per-call state, so one instance can be shared and
    nested calls to execute() count their attempts independently.
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or RetryConfig()
        self._sleep = sleep

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay after the given failed attempt (0-indexed)."""
        strategy = self.config.backoff_strategy

        if strategy == BackoffStrategy.FIXED:
            delay = self.config.base_delay
        elif strategy == BackoffStrategy.LINEAR:
            delay = self.config.base_delay * (attempt + 1)
        else:
            delay = self.config.base_delay * (self.config.exponential_base**attempt)

        return min(delay, self.config.max_delay)

    def should_retry(self, exception: BaseException, attempt: int) -> bool:
        """Determine if the operation should be retried."""
        if attempt >= self.config.max_attempts - 1:
            return False

        if isinstance(exception, ShopQAError) and not exception.recoverable:
            return False

        return isinstance(exception, self.config.retryable_exceptions)

    def execute(self, operation: Callable[[], T]) -> T:
        """Execute an operation with retry logic.

        Returns the first successful result. When every attempt fails the
        exception from the last attempt propagates unchanged.
        """
        attempt = 0
        while True:
            try:
                return operation()
            except Exception as e:
                if not self.should_retry(e, attempt):
                    if attempt > 0:
                        logger.warning(
                            f"Giving up after {attempt + 1}/{self.config.max_attempts} attempts: {e}"
                        )
                    raise

                delay = self.calculate_delay(attempt)

                if self.config.on_retry:
                    self.config.on_retry(attempt + 1, e, delay)

                logger.warning(
                    f"Retry {attempt + 1}/{self.config.max_attempts} "
                    f"after {delay:.2f}s due to: {e}"
                )
                self._sleep(delay)
                attempt += 1


def retry_with_backoff(
    operation: Callable[[], T],
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run operation until it succeeds or max_attempts invocations have failed.

    The wait before retry k is initial_delay * 2**(k-1). After the final
    failure the original exception is re-raised.

    Example:
        >>> retry_with_backoff(lambda: page.verify_element_visible("#cartModal"),
        ...                    max_attempts=3, initial_delay=0.5)
    """
    policy = RetryPolicy(
        RetryConfig(
            max_attempts=max_attempts,
            base_delay=initial_delay,
            max_delay=float("inf"),
            backoff_strategy=BackoffStrategy.EXPONENTIAL,
        ),
        sleep=sleep,
    )
    return policy.execute(operation)


def create_default_retry_policy(retries: int = 2, initial_delay: float = 1.0) -> RetryPolicy:
    """Create a policy from an environment's retry count.

    The environment bundle counts retries after the first attempt.
    """
    return RetryPolicy(RetryConfig(max_attempts=retries + 1, base_delay=initial_delay))

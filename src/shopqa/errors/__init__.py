"""Error handling for shopqa."""

from shopqa.errors.base import (
    AssertionFailedError,
    ConfigValidationError,
    ElementNotFoundError,
    ErrorCode,
    ErrorContext,
    ShopQAError,
    TimeoutExceededError,
    TransportError,
    UnknownCommandError,
    UnknownSectionError,
)
from shopqa.errors.retry import (
    BackoffStrategy,
    RetryConfig,
    RetryPolicy,
    create_default_retry_policy,
    retry_with_backoff,
)

__all__ = [
    "AssertionFailedError",
    "BackoffStrategy",
    "ConfigValidationError",
    "ElementNotFoundError",
    "ErrorCode",
    "ErrorContext",
    "RetryConfig",
    "RetryPolicy",
    "ShopQAError",
    "TimeoutExceededError",
    "TransportError",
    "UnknownCommandError",
    "UnknownSectionError",
    "create_default_retry_policy",
    "retry_with_backoff",
]

"""Exception hierarchy for shopqa.

Every error raised by the page objects, commands and API client derives
from ShopQAError and carries:
- error_code: an ErrorCode used for programmatic handling and reports
- context: ErrorContext describing where the failure happened
- suggestions: actionable hints for fixing the failing scenario
- recoverable: whether the retry utility is allowed to try again

Example:
    try:
        session.run("navigate_to", "checkout")
    except UnknownSectionError as e:
        print(e.format_verbose())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes.

    Codes are grouped by category:
    - E0xx: Transport errors
    - E1xx: Element and timeout errors
    - E2xx: Assertion errors
    - E3xx: Lookup errors (sections, commands)
    - E4xx: Configuration errors
    - E9xx: Unknown/internal errors
    """

    TRANSPORT_FAILED = "E001"
    BODY_DECODE_FAILED = "E002"

    ELEMENT_NOT_FOUND = "E101"
    TIMEOUT_EXCEEDED = "E102"

    ASSERTION_FAILED = "E201"

    UNKNOWN_SECTION = "E301"
    UNKNOWN_COMMAND = "E302"

    INVALID_CONFIG = "E401"

    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 100:
            return "transport"
        elif code_num < 200:
            return "element"
        elif code_num < 300:
            return "assertion"
        elif code_num < 400:
            return "lookup"
        elif code_num < 500:
            return "config"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Structured context captured when an error occurs.

    Attributes:
        page: Page object class name the failure happened on.
        command: Registered command being executed, if any.
        selector: Locator string involved in the failure.
        url: Browser or request URL at the time of failure.
        request: HTTP request details (method, url, body).
        response: HTTP response details (status, body).
        extra: Additional context-specific information.
        timestamp: When the error occurred.
    """

    page: str | None = None
    command: str | None = None
    selector: str | None = None
    url: str | None = None
    request: dict[str, Any] | None = None
    response: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "page": self.page,
            "command": self.command,
            "selector": self.selector,
            "url": self.url,
            "request": self.request,
            "response": self.response,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.page:
            parts.append(f"page={self.page}")
        if self.command:
            parts.append(f"command={self.command}")
        if self.selector:
            parts.append(f"selector={self.selector}")
        return " > ".join(parts) if parts else "unknown location"


class ShopQAError(Exception):
    """Base exception for all shopqa errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with execution details
        suggestions: List of actionable steps to resolve the issue
        recoverable: Whether the error can be retried
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        recoverable: bool | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        if recoverable is not None:
            self.recoverable = recoverable
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
            "",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.context.url:
            lines.append(f"URL: {self.context.url}")

        if self.context.request:
            method = self.context.request.get("method", "?")
            url = self.context.request.get("url", "?")
            lines.append(f"Request: {method} {url}")

        if self.context.response:
            status = self.context.response.get("status", "?")
            lines.append(f"Response: HTTP {status}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class ElementNotFoundError(ShopQAError):
    """No element matched a locator within the timeout.

    Raised by the element primitives when a wait for existence or
    visibility runs out. The failing selector and the timeout are kept on
    the instance.
    """

    error_code = ErrorCode.ELEMENT_NOT_FOUND
    default_message = "Element not found"
    default_suggestions = [
        "Check the selector against the current page markup",
        "Increase the command timeout (SHOPQA_TIMEOUT) if the page is slow",
        "Make sure the previous step navigated to the expected page",
    ]

    def __init__(
        self,
        message: str | None = None,
        selector: str | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        self.selector = selector
        self.timeout = timeout
        if message is None and selector is not None:
            message = f"Element '{selector}' not found"
            if timeout is not None:
                message += f" within {timeout:.1f}s"
        context = kwargs.pop("context", None) or ErrorContext()
        if selector and not context.selector:
            context.selector = selector
        super().__init__(message=message, context=context, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["selector"] = self.selector
        result["timeout"] = self.timeout
        return result


class TimeoutExceededError(ShopQAError):
    """A poll or wait ran out of time.

    Carries the condition being waited for together with polling
    statistics so a failed wait can be diagnosed from the message alone.
    """

    error_code = ErrorCode.TIMEOUT_EXCEEDED
    default_message = "Wait operation timed out"
    default_suggestions = [
        "Increase the timeout for this wait",
        "Check whether the condition can ever be satisfied",
    ]

    def __init__(
        self,
        message: str | None = None,
        condition_description: str | None = None,
        timeout_seconds: float | None = None,
        elapsed_seconds: float | None = None,
        poll_attempts: int = 0,
        poll_interval: float | None = None,
        last_value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.condition_description = condition_description
        self.timeout_seconds = timeout_seconds
        self.elapsed_seconds = elapsed_seconds
        self.poll_attempts = poll_attempts
        self.poll_interval = poll_interval
        self.last_value = last_value

        if message is None:
            message = self._build_message()

        super().__init__(message=message, **kwargs)

    def _build_message(self) -> str:
        parts = ["Timeout"]

        if self.elapsed_seconds is not None:
            parts.append(f"after {self.elapsed_seconds:.1f}s")

        if self.condition_description:
            parts.append(f"waiting for: {self.condition_description}")

        if self.poll_attempts > 0:
            parts.append(f"({self.poll_attempts} attempts)")

        if self.last_value is not None:
            parts.append(f"[last value: {self.last_value!r}]")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update({
            "condition_description": self.condition_description,
            "timeout_seconds": self.timeout_seconds,
            "elapsed_seconds": self.elapsed_seconds,
            "poll_attempts": self.poll_attempts,
            "poll_interval": self.poll_interval,
            "last_value": repr(self.last_value) if self.last_value is not None else None,
        })
        return result


class AssertionFailedError(ShopQAError, AssertionError):
    """A verification did not hold.

    Subclasses AssertionError so pytest reports it as a test failure
    rather than an error.
    """

    error_code = ErrorCode.ASSERTION_FAILED
    default_message = "Assertion failed"

    def __init__(
        self,
        message: str | None = None,
        expected: Any = None,
        actual: Any = None,
        **kwargs: Any,
    ) -> None:
        self.expected = expected
        self.actual = actual
        if message is None:
            message = f"Expected {expected!r}, got {actual!r}"
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["expected"] = repr(self.expected)
        result["actual"] = repr(self.actual)
        return result


class UnknownSectionError(ShopQAError):
    """Navigation was asked for a section the site does not have."""

    error_code = ErrorCode.UNKNOWN_SECTION
    default_message = "Unknown section"
    recoverable = False

    def __init__(
        self,
        section: str,
        known_sections: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.section = section
        self.known_sections = known_sections or []
        kwargs.setdefault("message", f"Unknown section: {section}")
        if self.known_sections:
            kwargs.setdefault(
                "suggestions",
                [f"Use one of: {', '.join(self.known_sections)}"],
            )
        super().__init__(**kwargs)


class UnknownCommandError(ShopQAError):
    """A command name was looked up that nobody registered."""

    error_code = ErrorCode.UNKNOWN_COMMAND
    default_message = "Unknown command"
    recoverable = False

    def __init__(self, name: str, **kwargs: Any) -> None:
        self.name = name
        kwargs.setdefault("message", f"Command '{name}' is not registered")
        context = kwargs.pop("context", None) or ErrorContext(command=name)
        super().__init__(context=context, **kwargs)


class TransportError(ShopQAError):
    """HTTP request failed or returned a body that could not be decoded."""

    error_code = ErrorCode.TRANSPORT_FAILED
    default_message = "HTTP request failed"
    default_suggestions = [
        "Verify api_url points at the running storefront API",
        "Check network connectivity to the target host",
    ]

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        self.status_code = status_code
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status_code"] = self.status_code
        return result


class ConfigValidationError(ShopQAError):
    """Configuration value failed validation."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"
    recoverable = False
    default_suggestions = [
        "Check the field name and value mentioned in the error",
        "Run 'shopqa config' to print the resolved settings",
    ]

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message=message, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        result["value"] = repr(self.value)
        return result

"""Tests for the shopqa error hierarchy."""

from __future__ import annotations

import pytest

from shopqa.errors import (
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


class TestErrorCode:
    """Tests for ErrorCode categories."""

    @pytest.mark.parametrize(
        "code,category",
        [
            (ErrorCode.TRANSPORT_FAILED, "transport"),
            (ErrorCode.BODY_DECODE_FAILED, "transport"),
            (ErrorCode.ELEMENT_NOT_FOUND, "element"),
            (ErrorCode.TIMEOUT_EXCEEDED, "element"),
            (ErrorCode.ASSERTION_FAILED, "assertion"),
            (ErrorCode.UNKNOWN_SECTION, "lookup"),
            (ErrorCode.UNKNOWN_COMMAND, "lookup"),
            (ErrorCode.INVALID_CONFIG, "config"),
            (ErrorCode.UNKNOWN, "unknown"),
        ],
    )
    def test_category(self, code: ErrorCode, category: str) -> None:
        """Each code maps to its hundred-block category."""
        assert code.category == category


class TestShopQAError:
    """Tests for the base error."""

    def test_defaults(self) -> None:
        """Test default message, code and recoverability."""
        error = ShopQAError()
        assert error.message == "An unexpected error occurred"
        assert error.error_code is ErrorCode.UNKNOWN
        assert error.recoverable is True
        assert error.suggestions == []

    def test_str_includes_code_and_location(self) -> None:
        """Test string form carries the code and formatted location."""
        error = ShopQAError(
            "boom",
            context=ErrorContext(page="CartPage", selector="#cart_info_table"),
        )
        assert str(error) == "[E999] boom | at page=CartPage > selector=#cart_info_table"

    def test_extra_context_is_merged(self) -> None:
        """Test keyword arguments land in context.extra."""
        error = ShopQAError("boom", attempt=2)
        assert error.context.extra == {"attempt": 2}

    def test_recoverable_override(self) -> None:
        """Test the recoverable flag can be set per instance."""
        assert ShopQAError("x", recoverable=False).recoverable is False

    def test_format_verbose(self) -> None:
        """Test verbose formatting lists request, response and suggestions."""
        error = TransportError(
            "down",
            status_code=503,
            context=ErrorContext(
                url="https://automationexercise.com/api/productsList",
                request={"method": "GET", "url": "/api/productsList"},
                response={"status": 503},
            ),
        )
        text = error.format_verbose()
        assert "Error [E001]: down" in text
        assert "Request: GET /api/productsList" in text
        assert "Response: HTTP 503" in text
        assert "Suggestions:" in text

    def test_to_dict(self) -> None:
        """Test serialization includes type, cause and context."""
        cause = ValueError("bad")
        data = ShopQAError("boom", cause=cause).to_dict()
        assert data["error_type"] == "ShopQAError"
        assert data["cause"] == "bad"
        assert "timestamp" in data["context"]


class TestElementNotFoundError:
    """Tests for ElementNotFoundError."""

    def test_message_from_selector_and_timeout(self) -> None:
        """Test the message is built from the selector and timeout."""
        error = ElementNotFoundError(selector=".logo img", timeout=10)
        assert error.message == "Element '.logo img' not found within 10.0s"
        assert error.context.selector == ".logo img"
        assert error.error_code is ErrorCode.ELEMENT_NOT_FOUND

    def test_explicit_message_wins(self) -> None:
        """Test an explicit message is not replaced."""
        error = ElementNotFoundError("custom", selector="#x")
        assert error.message == "custom"


class TestTimeoutExceededError:
    """Tests for TimeoutExceededError."""

    def test_message_includes_poll_details(self) -> None:
        """Test the built message mentions elapsed time, attempts and last value."""
        error = TimeoutExceededError(
            condition_description="cart to become empty",
            timeout_seconds=2,
            elapsed_seconds=2.05,
            poll_attempts=9,
            last_value=1,
        )
        assert "after 2.0s" in error.message
        assert "waiting for: cart to become empty" in error.message
        assert "(9 attempts)" in error.message
        assert "[last value: 1]" in error.message

    def test_to_dict(self) -> None:
        """Test poll statistics are serialized."""
        data = TimeoutExceededError(condition_description="x", poll_attempts=3).to_dict()
        assert data["poll_attempts"] == 3
        assert data["condition_description"] == "x"


class TestAssertionFailedError:
    """Tests for AssertionFailedError."""

    def test_is_an_assertion_error(self) -> None:
        """Test pytest sees it as an assertion failure."""
        with pytest.raises(AssertionError):
            raise AssertionFailedError(expected=1300.0, actual=1200.0)

    def test_default_message(self) -> None:
        """Test the message is derived from expected and actual."""
        error = AssertionFailedError(expected="Rs. 1300", actual="Rs. 1200")
        assert error.message == "Expected 'Rs. 1300', got 'Rs. 1200'"
        assert error.to_dict()["expected"] == "'Rs. 1300'"


class TestLookupErrors:
    """Tests for unknown section and command errors."""

    def test_unknown_section(self) -> None:
        """Test unknown sections are non-recoverable and list the options."""
        error = UnknownSectionError("checkout", known_sections=["home", "cart"])
        assert error.message == "Unknown section: checkout"
        assert error.recoverable is False
        assert error.suggestions == ["Use one of: home, cart"]

    def test_unknown_command(self) -> None:
        """Test unknown commands record the name in context."""
        error = UnknownCommandError("fly")
        assert error.message == "Command 'fly' is not registered"
        assert error.context.command == "fly"
        assert error.recoverable is False


class TestConfigValidationError:
    """Tests for ConfigValidationError."""

    def test_fields(self) -> None:
        """Test field and value are kept and serialized."""
        error = ConfigValidationError("bad env", field="environment", value="qa")
        assert error.recoverable is False
        data = error.to_dict()
        assert data["field"] == "environment"
        assert data["value"] == "'qa'"

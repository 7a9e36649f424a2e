"""HTTP client for the storefront API with history tracking."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from shopqa.errors import (
    AssertionFailedError,
    ErrorCode,
    ErrorContext,
    RetryPolicy,
    TimeoutExceededError,
    TransportError,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass
class RequestRecord:
    """Record of an HTTP request/response."""

    method: str
    url: str
    request_body: Any | None
    response_status: int
    response_text: str | None
    headers: dict[str, str]
    duration_ms: float
    timestamp: datetime = field(default_factory=datetime.now)
    error: str | None = None


@dataclass
class ApiResponse:
    """Status, headers and raw text of a response.

    The storefront serves JSON with an HTML content type, so the body is
    decoded from text on first access rather than trusted from headers.
    """

    status_code: int
    text: str
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""
    duration_ms: float = 0.0
    _decoded: Any = field(default=None, init=False, repr=False)
    _is_decoded: bool = field(default=False, init=False, repr=False)

    @property
    def body(self) -> Any:
        """Decoded JSON body.

        Raises:
            TransportError: If the text is not valid JSON.
        """
        if not self._is_decoded:
            self._decoded = decode_body(self.text, status_code=self.status_code, url=self.url)
            self._is_decoded = True
        return self._decoded

    def as_model(self, model: type[M]) -> M:
        """Validate the decoded body against a pydantic model.

        Raises:
            TransportError: If the body is not JSON.
            AssertionFailedError: If the body does not match the model.
        """
        try:
            return model.model_validate(self.body)
        except ValidationError as e:
            raise AssertionFailedError(
                message=f"Response from {self.url} does not match {model.__name__}: {e.error_count()} error(s)",
                expected=model.__name__,
                actual=self.body,
                context=ErrorContext(url=self.url, response={"status": self.status_code}),
                cause=e,
            ) from e

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


def decode_body(text: str, status_code: int | None = None, url: str | None = None) -> Any:
    """Parse JSON text, mapping decode failures to TransportError."""
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        snippet = (text or "")[:80]
        raise TransportError(
            message=f"Response body is not valid JSON: {snippet!r}",
            status_code=status_code,
            error_code=ErrorCode.BODY_DECODE_FAILED,
            context=ErrorContext(url=url, response={"status": status_code}),
            cause=e,
        ) from e


class ApiClient:
    """HTTP client that captures request history.

    Non-2xx responses are returned to the caller unless fail_on_status is
    set, so negative-path scenarios can assert on them.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        default_headers: dict[str, str] | None = None,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self.retry_policy = retry_policy
        self.history: list[RequestRecord] = []
        self._transport = transport
        self._client: httpx.Client | None = None

    def connect(self) -> None:
        """Initialize the HTTP client."""
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self.default_headers,
            transport=self._transport,
        )
        logger.info(f"API client connected to {self.base_url}")

    def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> ApiClient:
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.disconnect()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}" if path.startswith("/") else f"{self.base_url}/{path}"

    def request(
        self,
        method: str,
        path: str,
        fail_on_status: bool = False,
        **kwargs: Any,
    ) -> ApiResponse:
        """Make an HTTP request and record it in history.

        Raises:
            TimeoutExceededError: If the request timed out.
            TransportError: On network failure, or on a non-2xx status
                when fail_on_status is set.
        """
        if not self._client:
            self.connect()

        method = method.upper()
        headers = dict(kwargs.pop("headers", None) or {})
        url = self.url_for(path)
        request_body = kwargs.get("json") or kwargs.get("data") or kwargs.get("content")

        def send() -> httpx.Response:
            return self._client.request(method, path, headers=headers, **kwargs)

        logger.debug(f"{method} {url}")
        start_time = time.perf_counter()
        try:
            if self.retry_policy is not None:
                response = self.retry_policy.execute(send)
            else:
                response = send()
        except httpx.TimeoutException as e:
            self._record_failure(method, url, request_body, headers, start_time, e)
            raise TimeoutExceededError(
                condition_description=f"response from {method} {url}",
                timeout_seconds=self.timeout,
                elapsed_seconds=time.perf_counter() - start_time,
                context=ErrorContext(url=url, request={"method": method, "url": url}),
                cause=e,
            ) from e
        except httpx.RequestError as e:
            self._record_failure(method, url, request_body, headers, start_time, e)
            raise TransportError(
                message=f"{method} {url} failed: {e}",
                context=ErrorContext(url=url, request={"method": method, "url": url}),
                cause=e,
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        self.history.append(
            RequestRecord(
                method=method,
                url=url,
                request_body=request_body,
                response_status=response.status_code,
                response_text=response.text,
                headers=headers,
                duration_ms=duration_ms,
            )
        )
        logger.debug(f"{method} {url} -> {response.status_code} ({duration_ms:.0f}ms)")

        if fail_on_status and not response.is_success:
            raise TransportError(
                message=f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                context=ErrorContext(
                    url=url,
                    request={"method": method, "url": url},
                    response={"status": response.status_code},
                ),
            )

        return ApiResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
            url=url,
            duration_ms=duration_ms,
        )

    def get(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> ApiResponse:
        return self.request("POST", path, **kwargs)

    def _record_failure(
        self,
        method: str,
        url: str,
        request_body: Any,
        headers: dict[str, str],
        start_time: float,
        error: Exception,
    ) -> None:
        logger.error(f"Request error: {method} {url}: {error}")
        self.history.append(
            RequestRecord(
                method=method,
                url=url,
                request_body=request_body,
                response_status=0,
                response_text=None,
                headers=headers,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                error=str(error),
            )
        )

    def get_history(self) -> list[RequestRecord]:
        """Get all request history."""
        return self.history.copy()

    def clear_history(self) -> None:
        self.history.clear()

    def last_request(self) -> RequestRecord | None:
        """Get the most recent request record."""
        return self.history[-1] if self.history else None

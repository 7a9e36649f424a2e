"""API commands for the storefront catalogue endpoints.

Requests go through ``session.api`` and never fail on a non-2xx status
unless asked to; the catalogue commands check the status and the
``responseCode`` themselves and return typed bodies.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from shopqa.api.client import ApiResponse
from shopqa.api.models import BrandsResponse, ProductsResponse
from shopqa.errors import AssertionFailedError, ErrorContext

if TYPE_CHECKING:
    from shopqa.commands.registry import CommandRegistry
    from shopqa.session import Session

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


def _endpoint(session: Session, key: str) -> str:
    return session.config.api_endpoints[key]


def _check_catalogue(response: ApiResponse, expected_status: int, require_code: bool = True) -> Any:
    """Check the HTTP status, decode the body and look for responseCode."""
    context = ErrorContext(url=response.url, response={"status": response.status_code})
    if response.status_code != expected_status:
        raise AssertionFailedError(
            message=f"Unexpected HTTP status from {response.url}",
            expected=expected_status,
            actual=response.status_code,
            context=context,
        )
    body = response.body
    if require_code and not (isinstance(body, dict) and "responseCode" in body):
        raise AssertionFailedError(
            message=f"Response from {response.url} has no responseCode",
            expected="body with responseCode",
            actual=body,
            context=context,
        )
    return body


def get_products_api(session: Session, expected_status: int = 200) -> ProductsResponse:
    logger.info("Getting products via API")
    response = session.api.get(_endpoint(session, "products"))
    _check_catalogue(response, expected_status)
    return response.as_model(ProductsResponse)


def get_brands_api(session: Session, expected_status: int = 200) -> BrandsResponse:
    logger.info("Getting brands via API")
    response = session.api.get(_endpoint(session, "brands"))
    _check_catalogue(response, expected_status)
    return response.as_model(BrandsResponse)


def search_products_api(session: Session, search_term: str, expected_status: int = 200) -> ProductsResponse:
    logger.info(f"Searching products via API: {search_term}")
    response = session.api.post(
        _endpoint(session, "search_product"),
        data={"search_product": search_term},
    )
    _check_catalogue(response, expected_status)
    return response.as_model(ProductsResponse)


def api_request(
    session: Session,
    method: str = "GET",
    endpoint: str = "/",
    body: Mapping[str, Any] | str | None = None,
    headers: Mapping[str, str] | None = None,
    form: bool = False,
    fail_on_status: bool = False,
) -> ApiResponse:
    """Send an arbitrary request relative to the API base URL.

    A mapping body is sent form-encoded when ``form`` is set and as JSON
    otherwise; a string body is sent verbatim. GET requests and empty
    bodies carry no payload.
    """
    method = method.upper()
    logger.info(f"API Request: {method} {endpoint}")
    merged = {"Content-Type": FORM_CONTENT_TYPE if form else JSON_CONTENT_TYPE}
    merged.update(headers or {})

    kwargs: dict[str, Any] = {}
    if method != "GET" and body:
        if isinstance(body, str):
            kwargs["content"] = body
        elif form:
            kwargs["data"] = dict(body)
        else:
            kwargs["content"] = json.dumps(dict(body))
    return session.api.request(method, endpoint, fail_on_status=fail_on_status, headers=merged, **kwargs)


def validate_api_response(
    session: Session,
    response: ApiResponse,
    status_code: int | None = None,
    properties: Iterable[str] | None = None,
    response_code: int | None = None,
    has_data: bool = False,
) -> ApiResponse:
    """Check a response against the expected status, keys and responseCode.

    ``has_data`` requires a ``products`` list in the body.
    """
    context = ErrorContext(url=response.url, response={"status": response.status_code})

    def fail(message: str, expected: Any, actual: Any) -> None:
        raise AssertionFailedError(message=message, expected=expected, actual=actual, context=context)

    if status_code is not None and response.status_code != status_code:
        fail("Unexpected HTTP status", status_code, response.status_code)

    needs_body = bool(properties) or response_code is not None or has_data
    body = response.body if needs_body else None
    if needs_body and not isinstance(body, dict):
        fail("Response body is not a JSON object", "object", body)

    for prop in properties or ():
        if prop not in body:
            fail(f"Response body is missing '{prop}'", prop, sorted(body))
    if response_code is not None and body.get("responseCode") != response_code:
        fail("Unexpected responseCode", response_code, body.get("responseCode"))
    if has_data and not isinstance(body.get("products"), list):
        fail("Response body has no products list", "products: list", body.get("products"))
    return response


def register_api_commands(registry: CommandRegistry) -> None:
    for func in (
        get_products_api,
        get_brands_api,
        search_products_api,
        api_request,
        validate_api_response,
    ):
        registry.register(func.__name__, func, category="api")

"""Live checks against the storefront catalogue API.

Run with ``pytest --live tests/e2e``.
"""

from __future__ import annotations

import time

import pytest

from shopqa.data import FixtureLoader
from shopqa.session import Session

pytestmark = pytest.mark.live

SEARCH_TERMS = FixtureLoader().load("api")["search_terms"]


class TestProductsList:
    """Tests for GET /productsList."""

    def test_products(self, api_session: Session) -> None:
        """Test the catalogue is non-empty with unique ids."""
        body = api_session.run("get_products_api")
        assert body.responseCode == 200
        assert body.products
        assert len(set(body.product_ids())) == len(body.products)

    def test_repeated_reads_agree(self, api_session: Session) -> None:
        """Test back-to-back reads return the same code and count."""
        first = api_session.run("get_products_api")
        second = api_session.run("get_products_api")
        assert first.responseCode == second.responseCode
        assert len(first.products) == len(second.products)

    def test_post_not_supported(self, api_session: Session) -> None:
        """Test POST to the list reports 405 in the body."""
        response = api_session.run("api_request", method="POST", endpoint="/productsList")
        api_session.run("validate_api_response", response, status_code=200, response_code=405)

    def test_response_time(self, api_session: Session) -> None:
        """Test the list answers within the configured budget."""
        limit_ms = FixtureLoader().load("api")["limits"]["max_response_ms"]
        start = time.perf_counter()
        api_session.run("get_products_api")
        assert (time.perf_counter() - start) * 1000 < limit_ms


class TestBrandsList:
    """Tests for GET /brandsList."""

    def test_brands(self, api_session: Session) -> None:
        """Test every brand has a name."""
        body = api_session.run("get_brands_api")
        assert body.responseCode == 200
        assert all(body.brand_names())

    def test_put_not_supported(self, api_session: Session) -> None:
        """Test PUT reports 405 in the body."""
        response = api_session.run("api_request", method="PUT", endpoint="/brandsList")
        assert response.body["responseCode"] == 405


class TestSearchProduct:
    """Tests for POST /searchProduct."""

    def test_valid_term(self, api_session: Session) -> None:
        """Test a common term finds products."""
        body = api_session.run("search_products_api", SEARCH_TERMS["valid"])
        assert body.responseCode == 200
        assert body.products

    def test_empty_term(self, api_session: Session) -> None:
        """Test an empty term is answered with 200 or 400, never a server error."""
        body = api_session.run("search_products_api", "")
        assert body.responseCode in (200, 400)

    def test_no_matches(self, api_session: Session) -> None:
        """Test a nonsense term returns an empty list."""
        body = api_session.run("search_products_api", SEARCH_TERMS["nonexistent"])
        assert body.responseCode == 200
        assert body.products == []

    @pytest.mark.parametrize("term", [SEARCH_TERMS["sql_injection"], SEARCH_TERMS["xss"]])
    def test_hostile_terms(self, api_session: Session, term: str) -> None:
        """Test hostile input is handled as an ordinary search."""
        body = api_session.run("search_products_api", term)
        assert body.responseCode in (200, 400)

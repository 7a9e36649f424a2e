"""Shopping cart page."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeVar

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator

from shopqa.errors import AssertionFailedError
from shopqa.pages.base import BasePage
from shopqa.utils.helpers import parse_currency
from shopqa.utils.wait import poll_until, wait_for_stable_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOTAL_TOLERANCE = 0.01
TABLE_HEADERS = ("Item", "Description", "Price", "Quantity", "Total")
MOBILE_VIEWPORT = (375, 667)
DESKTOP_VIEWPORT = (1280, 720)


@dataclass
class CartLine:
    """One row of the cart table as rendered."""

    name: str
    price: str
    quantity: int
    total: str

    @property
    def unit_price(self) -> float:
        return parse_currency(self.price)

    @property
    def line_total(self) -> float:
        return parse_currency(self.total)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "price": self.price, "quantity": self.quantity, "total": self.total}


class CartPage(BasePage):
    url = "/view_cart"
    selectors = MappingProxyType({
        "page_title": ".breadcrumb li.active",
        "cart_table": "#cart_info_table",
        "cart_table_header": ".cart_info thead",
        "cart_table_body": ".cart_info tbody",
        "cart_rows": "#cart_info_table tbody tr",
        "product_image": ".cart_product img",
        "product_description": ".cart_description h4 a",
        "product_price": ".cart_price p",
        "product_quantity": ".cart_quantity_input",
        "product_total": ".cart_total_price",
        "delete_button": ".cart_quantity_delete",
        "proceed_checkout_button": ".btn.btn-default.check_out",
        "empty_cart_message": "#empty_cart",
        "recommended_items": "#recommended-item-carousel",
        "recommended_add_button": ".item .productinfo .btn",
        "breadcrumb": ".breadcrumb",
    })

    def visit_cart_page(self) -> CartPage:
        return self.visit().verify_cart_page()

    def verify_cart_page(self) -> CartPage:
        self.verify_element_visible(self.sel("cart_table"))
        return self.verify_url_contains("/view_cart")

    # Reading rows

    def _rows(self) -> Locator:
        return self.page.locator(self.sel("cart_rows"))

    def get_cart_items_count(self) -> int:
        return self._rows().count()

    def _read_quantity(self, row: Locator) -> int:
        field = self._within(row, self.sel("product_quantity"))
        try:
            raw = field.input_value(timeout=self._timeout_ms())
        except PlaywrightError:
            # Rendered as a button on some deployments.
            raw = field.inner_text(timeout=self._timeout_ms())
        digits = "".join(ch for ch in raw if ch.isdigit())
        return int(digits) if digits else 0

    def _read_line(self, row: Locator) -> CartLine:
        def text(key: str) -> str:
            return self._within(row, self.sel(key)).inner_text(timeout=self._timeout_ms()).strip()

        return CartLine(
            name=text("product_description"),
            price=text("product_price"),
            quantity=self._read_quantity(row),
            total=text("product_total"),
        )

    def get_cart_lines(self) -> list[CartLine]:
        rows = self._rows()
        return [self._read_line(rows.nth(i)) for i in range(rows.count())]

    def get_product_details(self, product_index: int = 0) -> CartLine:
        return self._read_line(self._nth(self.sel("cart_rows"), product_index))

    def _find_index(self, product_name: str) -> int:
        names = [line.name for line in self.get_cart_lines()]
        if product_name not in names:
            raise AssertionFailedError(
                message=f"Product '{product_name}' is not in the cart",
                expected=product_name,
                actual=names,
                context=self._context(self.sel("cart_rows")),
            )
        return names.index(product_name)

    def verify_cart_is_empty(self) -> CartPage:
        if self.has_element(self.sel("empty_cart_message")):
            return self.verify_element_visible(self.sel("empty_cart_message"))
        self._expect(
            fetcher=self.get_cart_items_count,
            condition=lambda count: count == 0,
            expected=0,
            description="cart to have no rows",
            selector=self.sel("cart_rows"),
        )
        return self

    def verify_cart_is_not_empty(self) -> CartPage:
        self._expect(
            fetcher=self.get_cart_items_count,
            condition=lambda count: count > 0,
            expected="> 0 rows",
            description="cart to have at least one row",
            selector=self.sel("cart_rows"),
        )
        return self

    def verify_product_in_cart(
        self,
        product_name: str,
        price: str | None = None,
        quantity: int | None = None,
        total: str | None = None,
    ) -> CartPage:
        """Check a row by product name, and optionally its price, quantity and total."""
        line = self.get_product_details(self._find_index(product_name))
        checks = [
            ("price", price, line.price, price is not None and price in line.price),
            ("quantity", quantity, line.quantity, quantity is not None and line.quantity == int(quantity)),
            ("total", total, line.total, total is not None and total in line.total),
        ]
        for label, expected, actual, ok in checks:
            if expected is not None and not ok:
                raise AssertionFailedError(
                    message=f"'{product_name}' {label} mismatch",
                    expected=expected,
                    actual=actual,
                    context=self._context(self.sel("cart_rows")),
                )
        return self

    # Mutations

    def _settle(
        self,
        fetcher: Callable[[], T],
        condition: Callable[[T], bool],
        description: str,
        fixed_delay: float | None = None,
    ) -> T | None:
        """Wait for an asynchronous cart update to land.

        In ``fixed`` mode sleeps for the configured delay instead of
        polling the page.
        """
        if self.config.settle_mode == "fixed":
            self.wait((self.config.settle_delay if fixed_delay is None else fixed_delay) * 1000)
            return None
        start = time.monotonic()
        value = poll_until(
            fetcher=fetcher,
            condition=condition,
            timeout=self.config.settle_timeout,
            interval=self.config.settle_interval,
            description=description,
            sleep=self._pause,
        )
        logger.debug(f"Settled '{description}' in {time.monotonic() - start:.2f}s")
        return value

    def update_product_quantity(self, product_index: int, new_quantity: int) -> CartPage:
        row = self._nth(self.sel("cart_rows"), product_index)
        field = self._within(row, self.sel("product_quantity"), "visible")
        field.fill(str(new_quantity), timeout=self._timeout_ms())
        field.blur()
        self._settle(
            fetcher=lambda: self.get_product_details(product_index).quantity,
            condition=lambda quantity: quantity == int(new_quantity),
            description=f"row {product_index} quantity to become {new_quantity}",
        )
        if self.config.settle_mode == "poll":
            wait_for_stable_value(
                self.get_cart_total,
                timeout=self.config.settle_timeout,
                interval=self.config.settle_interval,
                description="cart total to stop changing",
                sleep=self._pause,
            )
        return self

    def remove_product_from_cart(self, product_index: int) -> CartPage:
        before = self.get_cart_items_count()
        row = self._nth(self.sel("cart_rows"), product_index)
        self._within(row, self.sel("delete_button"), "visible").click(timeout=self._timeout_ms())
        self._settle(
            fetcher=self.get_cart_items_count,
            condition=lambda count: count < before,
            description=f"cart to drop below {before} rows",
        )
        return self

    def remove_product_by_name(self, product_name: str) -> CartPage:
        return self.remove_product_from_cart(self._find_index(product_name))

    def clear_cart(self) -> CartPage:
        """Delete rows one by one until the cart is empty."""
        initial = self.get_cart_items_count()
        for _ in range(initial):
            if self.get_cart_items_count() == 0:
                break
            before = self.get_cart_items_count()
            self._locate(self.sel("delete_button")).click(timeout=self._timeout_ms())
            self._settle(
                fetcher=self.get_cart_items_count,
                condition=lambda count, before=before: count < before,
                description=f"cart to drop below {before} rows",
                fixed_delay=1.0,
            )
        logger.info(f"Cleared {initial} row(s) from cart")
        return self

    # Totals

    def get_cart_total(self) -> float:
        """Sum of the rendered row totals."""
        return sum(line.line_total for line in self.get_cart_lines())

    def calculate_cart_total(self) -> float:
        """Sum of unit price times quantity over all rows."""
        return sum(line.unit_price * line.quantity for line in self.get_cart_lines())

    def verify_cart_total_calculation(self) -> CartPage:
        """Recomputed total must match the displayed total within 0.01."""
        calculated = self.calculate_cart_total()
        displayed = self.get_cart_total()
        if abs(calculated - displayed) > TOTAL_TOLERANCE:
            raise AssertionFailedError(
                message=f"Cart total mismatch: calculated {calculated:.2f}, displayed {displayed:.2f}",
                expected=displayed,
                actual=calculated,
                context=self._context(self.sel("product_total")),
            )
        return self

    # Checkout

    def proceed_to_checkout(self) -> CartPage:
        return self.click_element(self.sel("proceed_checkout_button"))

    def verify_checkout_button(self) -> CartPage:
        self.verify_element_visible(self.sel("proceed_checkout_button"))
        return self.verify_element_contains_text(self.sel("proceed_checkout_button"), "Proceed To Checkout")

    # Layout

    def verify_cart_table_headers(self) -> CartPage:
        for header in TABLE_HEADERS:
            self.verify_element_contains_text(self.sel("cart_table_header"), header)
        return self

    def verify_mobile_layout(self) -> CartPage:
        self.set_viewport(*MOBILE_VIEWPORT)
        return self.verify_element_visible(self.sel("cart_table"))

    def verify_desktop_layout(self) -> CartPage:
        self.set_viewport(*DESKTOP_VIEWPORT)
        self.verify_element_visible(self.sel("cart_table"))
        return self.verify_cart_table_headers()

    # Recommended items and breadcrumb

    def verify_recommended_items(self) -> CartPage:
        self.scroll_to_element(self.sel("recommended_items"))
        return self.verify_element_visible(self.sel("recommended_items"))

    def add_recommended_item(self, item_index: int = 0) -> CartPage:
        buttons = f"{self.sel('recommended_items')} {self.sel('recommended_add_button')}"
        self._nth(buttons, item_index).click(timeout=self._timeout_ms())
        return self

    def verify_breadcrumb(self) -> CartPage:
        self.verify_element_visible(self.sel("breadcrumb"))
        return self.verify_element_contains_text(self.sel("breadcrumb"), "Shopping Cart")

    def click_breadcrumb_home(self) -> CartPage:
        return self.click_text_within(self.sel("breadcrumb"), "Home")

    # Persistence and performance

    def verify_cart_persistence(self) -> CartPage:
        """Row count must survive navigating away and back."""
        initial = self.get_cart_items_count()
        self.visit("/")
        self.visit(self.url)
        self.verify_element_exists("body")
        final = self.get_cart_items_count()
        if final != initial:
            raise AssertionFailedError(
                message="Cart contents changed after navigating away",
                expected=initial,
                actual=final,
                context=self._context(self.sel("cart_rows")),
            )
        return self

    def verify_page_load_time(self, max_seconds: float = 3.0) -> CartPage:
        start = time.perf_counter()
        self.visit()
        elapsed = time.perf_counter() - start
        logger.info(f"Cart page loaded in {elapsed * 1000:.0f}ms")
        if elapsed >= max_seconds:
            raise AssertionFailedError(
                message=f"Cart page took {elapsed:.2f}s to load (limit {max_seconds:.2f}s)",
                expected=f"< {max_seconds}s",
                actual=round(elapsed, 3),
                context=self._context(),
            )
        return self

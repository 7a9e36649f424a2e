"""Tests for CartPage."""

from __future__ import annotations

import pytest

from shopqa.config import QAConfig
from shopqa.errors import AssertionFailedError, ElementNotFoundError, TimeoutExceededError
from shopqa.pages import CartLine, CartPage
from tests.conftest import BASE_URL, FakeElement, FakePage, build_cart, cart_row


@pytest.fixture
def cart(fake_page: FakePage, qa_config: QAConfig) -> CartPage:
    return CartPage(fake_page, qa_config)  # type: ignore[arg-type]


@pytest.fixture
def two_rows(fake_page: FakePage) -> list[FakeElement]:
    return build_cart(
        fake_page,
        [
            cart_row("Blue Top", "Rs. 500", 2, "Rs. 1000"),
            cart_row("Men Tshirt", "Rs. 300", 1, "Rs. 300"),
        ],
    )


class TestReadingRows:
    """Tests for reading the cart table."""

    def test_lines(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test every row is read with its quantity."""
        assert cart.get_cart_lines() == [
            CartLine("Blue Top", "Rs. 500", 2, "Rs. 1000"),
            CartLine("Men Tshirt", "Rs. 300", 1, "Rs. 300"),
        ]
        assert cart.get_cart_items_count() == 2

    def test_quantity_from_input(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test an input-rendered quantity is read from its value."""
        row = cart_row("Blue Top", "Rs. 500", 0, "Rs. 1500")
        row.children[".cart_quantity_input"] = [FakeElement(is_input=True, value="3")]
        build_cart(fake_page, [row])
        assert cart.get_product_details(0).quantity == 3

    def test_product_details_out_of_range(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test asking for a row that does not exist."""
        with pytest.raises(ElementNotFoundError):
            cart.get_product_details(5)

    def test_verify_product(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test price, quantity and total checks."""
        cart.verify_product_in_cart("Men Tshirt", price="Rs. 300", quantity=1, total="Rs. 300")
        with pytest.raises(AssertionFailedError, match="price") as exc_info:
            cart.verify_product_in_cart("Men Tshirt", price="Rs. 400")
        assert exc_info.value.actual == "Rs. 300"

    def test_verify_missing_product(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test a name that is not in the cart."""
        with pytest.raises(AssertionFailedError, match="not in the cart") as exc_info:
            cart.verify_product_in_cart("Sleeveless Dress")
        assert exc_info.value.actual == ["Blue Top", "Men Tshirt"]

    def test_row_missing_price_cell(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test a row without its price cell reports the missing element."""
        row = cart_row("Blue Top", "Rs. 500", 2, "Rs. 1000")
        del row.children[".cart_price p"]
        build_cart(fake_page, [row])
        with pytest.raises(ElementNotFoundError) as exc_info:
            cart.verify_cart_total_calculation()
        assert exc_info.value.selector == ".cart_price p"

    def test_row_missing_quantity_cell(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test a row without a quantity cell reports the missing element."""
        row = cart_row("Blue Top", "Rs. 500", 2, "Rs. 1000")
        del row.children[".cart_quantity_input"]
        build_cart(fake_page, [row])
        with pytest.raises(ElementNotFoundError) as exc_info:
            cart.get_product_details(0)
        assert exc_info.value.selector == ".cart_quantity_input"


class TestTotals:
    """Tests for total calculation."""

    def test_rendered_and_calculated_total(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test 500 x 2 + 300 x 1 matches the rendered 1300."""
        assert cart.get_cart_total() == 1300
        assert cart.calculate_cart_total() == 1300
        cart.verify_cart_total_calculation()

    def test_mismatch(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test a row total that disagrees with price times quantity."""
        build_cart(fake_page, [cart_row("Blue Top", "Rs. 500", 2, "Rs. 900")])
        with pytest.raises(AssertionFailedError, match="mismatch") as exc_info:
            cart.verify_cart_total_calculation()
        assert exc_info.value.expected == 900
        assert exc_info.value.actual == 1000

    def test_empty_cart_total(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test an empty cart totals zero."""
        build_cart(fake_page, [])
        assert cart.get_cart_total() == 0
        cart.verify_cart_total_calculation()


class TestMutations:
    """Tests for updating and removing rows."""

    def test_update_quantity_waits_for_cart(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test the new quantity is polled for until the page shows it."""
        row = cart_row("Blue Top", "Rs. 500", 1, "Rs. 500")
        build_cart(fake_page, [row])
        quantity = row.children[".cart_quantity_input"][0]
        total = row.children[".cart_total_price"][0]
        ticks = []

        def update_later(_: FakePage) -> None:
            ticks.append(1)
            if len(ticks) == 3:
                quantity.text = quantity.value
                total.text = f"Rs. {500 * int(quantity.value)}"

        fake_page.tick_hooks.append(update_later)
        cart.update_product_quantity(0, 2)
        assert cart.get_product_details(0).quantity == 2
        assert cart.get_cart_total() == 1000
        assert len(ticks) >= 3

    def test_update_quantity_never_lands(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test a cart that ignores the change times out."""
        build_cart(fake_page, [cart_row("Blue Top", "Rs. 500", 1, "Rs. 500")])
        with pytest.raises(TimeoutExceededError) as exc_info:
            cart.update_product_quantity(0, 4)
        assert "quantity to become 4" in str(exc_info.value)

    def test_remove_by_name(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test the named row is deleted."""
        cart.remove_product_by_name("Blue Top")
        assert [line.name for line in cart.get_cart_lines()] == ["Men Tshirt"]

    def test_remove_unknown_name(self, cart: CartPage, two_rows: list[FakeElement], fake_page: FakePage) -> None:
        """Test removing a product that is not in the cart fails without clicking."""
        with pytest.raises(AssertionFailedError):
            cart.remove_product_by_name("Sleeveless Dress")
        assert fake_page.clicks == []

    def test_remove_row_without_delete_button(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test a row with no delete button fails without clicking."""
        row = cart_row("Blue Top", "Rs. 500", 1, "Rs. 500")
        build_cart(fake_page, [row])
        del row.children[".cart_quantity_delete"]
        with pytest.raises(ElementNotFoundError, match="cart_quantity_delete"):
            cart.remove_product_from_cart(0)
        assert fake_page.clicks == []

    def test_clear_cart(self, cart: CartPage, two_rows: list[FakeElement], fake_page: FakePage) -> None:
        """Test every row is deleted and the cart verified empty."""
        cart.clear_cart().verify_cart_is_empty()
        assert fake_page.clicks == ["delete:Blue Top", "delete:Men Tshirt"]

    def test_clear_cart_fixed_mode(self, fake_page: FakePage, qa_config: QAConfig, two_rows: list[FakeElement]) -> None:
        """Test fixed settling waits one second per deletion."""
        config = qa_config.model_copy(update={"settle_mode": "fixed"})
        CartPage(fake_page, config).clear_cart()  # type: ignore[arg-type]
        assert fake_page.waits == [1000, 1000]
        assert two_rows == []

    def test_clear_empty_cart(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test clearing an empty cart clicks nothing."""
        build_cart(fake_page, [])
        cart.clear_cart()
        assert fake_page.clicks == []


class TestEmptyState:
    """Tests for empty and non-empty checks."""

    def test_empty_message(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test the empty-cart banner satisfies the check."""
        fake_page.add("#empty_cart", FakeElement(text="Cart is empty!"))
        cart.verify_cart_is_empty()

    def test_not_empty(self, cart: CartPage, two_rows: list[FakeElement]) -> None:
        """Test rows present fail the empty check."""
        cart.verify_cart_is_not_empty()
        with pytest.raises(AssertionFailedError):
            cart.verify_cart_is_empty()


class TestLayout:
    """Tests for layout, checkout and persistence checks."""

    def test_headers_and_desktop_layout(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test every column header is present."""
        fake_page.add("#cart_info_table", FakeElement())
        fake_page.add(".cart_info thead", FakeElement(text="Item Description Price Quantity Total"))
        cart.verify_desktop_layout()
        assert fake_page.viewport_size == {"width": 1280, "height": 720}

    def test_missing_header(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test a missing column fails."""
        fake_page.add(".cart_info thead", FakeElement(text="Item Description Price"))
        with pytest.raises(AssertionFailedError, match="Quantity"):
            cart.verify_cart_table_headers()

    def test_mobile_layout(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test the table stays visible at 375x667."""
        fake_page.add("#cart_info_table", FakeElement())
        cart.verify_mobile_layout()
        assert fake_page.viewport_size == {"width": 375, "height": 667}

    def test_checkout_button(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test the checkout button label."""
        fake_page.add(".btn.btn-default.check_out", FakeElement(text="Proceed To Checkout"))
        cart.verify_checkout_button()

    def test_persistence(self, cart: CartPage, fake_page: FakePage, two_rows: list[FakeElement]) -> None:
        """Test the row count is compared after leaving and returning."""
        fake_page.add("body", FakeElement())
        cart.verify_cart_persistence()
        assert fake_page.visits == [f"{BASE_URL}/", f"{BASE_URL}/view_cart"]

    def test_persistence_lost(self, cart: CartPage, fake_page: FakePage, two_rows: list[FakeElement]) -> None:
        """Test a cart emptied by navigation fails."""
        fake_page.add("body", FakeElement())
        fake_page.routes["/view_cart"] = lambda p: two_rows.clear()
        with pytest.raises(AssertionFailedError, match="changed"):
            cart.verify_cart_persistence()

    def test_breadcrumb(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test the breadcrumb reads Shopping Cart and links home."""
        home_link = FakeElement(name="home", text="Home")
        fake_page.add(".breadcrumb", FakeElement(text="Home Shopping Cart", children={"li a": [home_link]}))
        cart.verify_breadcrumb().click_breadcrumb_home()
        assert fake_page.clicks == ["home"]

    def test_add_recommended_item(self, cart: CartPage, fake_page: FakePage) -> None:
        """Test the chosen recommended item's add button is clicked."""
        fake_page.add(
            "#recommended-item-carousel .item .productinfo .btn",
            FakeElement(name="add:Stylish Dress"),
            FakeElement(name="add:Winter Top"),
        )
        cart.add_recommended_item(1)
        assert fake_page.clicks == ["add:Winter Top"]
        with pytest.raises(ElementNotFoundError, match="index 4"):
            cart.add_recommended_item(4)

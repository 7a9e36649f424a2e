"""Cart commands.

Adding goes through the product details page; everything that reads or
changes existing rows delegates to CartPage.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shopqa.commands.registry import CommandRegistry
    from shopqa.session import Session

logger = logging.getLogger(__name__)

ADD_TO_CART_BUTTON = ".btn.btn-default.cart"
CART_MODAL = "#cartModal"
CONTINUE_SHOPPING = ".modal-footer .btn.btn-success"
CART_LINK = 'a[href="/view_cart"]:visible'
BETWEEN_ITEMS_MS = 1000


def add_to_cart(session: Session, product_id: int | str, quantity: int = 1) -> Session:
    """Add a product from its details page and continue shopping."""
    logger.info(f"Adding product {product_id} to cart (quantity: {quantity})")
    browser = session.browser.visit(f"/product_details/{product_id}")
    if quantity > 1:
        browser.type_text("#quantity", str(quantity))
    (
        browser.click_element(ADD_TO_CART_BUTTON)
        .verify_element_visible(CART_MODAL)
        .click_element(CONTINUE_SHOPPING)
        .verify_element_hidden(CART_MODAL)
    )
    return session


def add_multiple_to_cart(session: Session, products: Sequence[Mapping[str, Any]]) -> Session:
    """Add each ``{"productId": ..., "quantity": ...}`` entry in order.

    ``id`` is accepted in place of ``productId``. Consecutive additions
    are spaced one second apart.
    """
    logger.info(f"Adding {len(products)} products to cart")
    for index, product in enumerate(products):
        product_id = product.get("productId", product.get("id"))
        if product_id is None:
            raise ValueError(f"Cart entry {index} has no 'productId': {dict(product)!r}")
        add_to_cart(session, product_id, int(product.get("quantity") or 1))
        if index < len(products) - 1:
            session.browser.wait(BETWEEN_ITEMS_MS)
    return session


def view_cart(session: Session) -> Session:
    logger.info("Viewing cart")
    (
        session.browser.click_element(CART_LINK)
        .verify_url_contains("/view_cart")
        .verify_element_visible(".cart_info")
    )
    return session


def remove_from_cart(session: Session, product: int | str = 0) -> Session:
    """Delete a cart row by index, or by product name when given a string."""
    logger.info(f"Removing product from cart: {product}")
    cart = session.cart()
    if isinstance(product, str):
        cart.remove_product_by_name(product)
    else:
        cart.remove_product_from_cart(product)
    return session


def update_cart_quantity(session: Session, product_index: int, new_quantity: int) -> Session:
    logger.info(f"Updating cart quantity for row {product_index} to {new_quantity}")
    session.cart().update_product_quantity(product_index, new_quantity)
    return session


def get_cart_total(session: Session) -> float:
    return session.cart().get_cart_total()


def verify_cart_item(
    session: Session,
    product_name: str,
    price: str | None = None,
    quantity: int | None = None,
    total: str | None = None,
) -> Session:
    session.cart().verify_product_in_cart(product_name, price=price, quantity=quantity, total=total)
    return session


def clear_cart(session: Session) -> Session:
    """Open the cart and delete every row."""
    logger.info("Clearing cart")
    view_cart(session)
    session.cart().clear_cart()
    return session


def proceed_to_checkout(session: Session) -> Session:
    logger.info("Proceeding to checkout")
    session.cart().proceed_to_checkout()
    return session


def register_cart_commands(registry: CommandRegistry) -> None:
    for func in (
        add_to_cart,
        add_multiple_to_cart,
        view_cart,
        remove_from_cart,
        update_cart_quantity,
        get_cart_total,
        verify_cart_item,
        clear_cart,
        proceed_to_checkout,
    ):
        registry.register(func.__name__, func, category="cart")

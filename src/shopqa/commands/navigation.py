"""Navigation commands.

Example:
    >>> session.run("navigate_to", "products")
    >>> session.run("search_products", "dress")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopqa.errors import AssertionFailedError, UnknownSectionError

if TYPE_CHECKING:
    from shopqa.commands.registry import CommandRegistry
    from shopqa.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    """A top-level site section reachable from the navigation bar.

    ``path`` is the fragment the URL must contain after arrival; the home
    section instead requires the path to be exactly ``/``.
    """

    link: str
    path: str
    exact: bool = False


SECTIONS: dict[str, Section] = {
    "home": Section(link='a[href="/"]', path="/", exact=True),
    "products": Section(link='a[href="/products"]', path="/products"),
    "cart": Section(link='a[href="/view_cart"]:visible', path="/view_cart"),
    "contact": Section(link='a[href="/contact_us"]', path="/contact_us"),
    "test cases": Section(link='a[href="/test_cases"]', path="/test_cases"),
}

MODAL_ACTIONS = {
    "close": ".modal .close, .modal-header .close",
    "confirm": ".modal-footer .btn-primary, .modal-footer .btn-success",
    "ok": ".modal-footer .btn-primary, .modal-footer .btn-success",
    "cancel": ".modal-footer .btn-secondary, .modal-footer .btn-default",
}


def resolve_section(section: str) -> Section:
    """Look up a section by case-insensitive name.

    Raises:
        UnknownSectionError: If the name is not a known section.
    """
    key = " ".join(section.strip().lower().split())
    if key not in SECTIONS:
        raise UnknownSectionError(section, known_sections=list(SECTIONS))
    return SECTIONS[key]


def navigate_to(session: Session, section: str) -> Session:
    """Click through to a site section and check the browser arrived."""
    target = resolve_section(section)
    logger.info(f"Navigating to: {section}")
    browser = session.browser
    browser.click_element(target.link)
    if target.exact:
        browser.verify_path(target.path)
    else:
        browser.verify_url_contains(target.path)
    return session


def search_products(session: Session, search_term: str) -> Session:
    logger.info(f"Searching for: {search_term}")
    navigate_to(session, "products")
    (
        session.browser.type_text("#search_product", search_term)
        .click_element("#submit_search")
        .verify_element_visible(".features_items")
        .verify_element_contains_text("h2", "Searched Products")
    )
    return session


def filter_by_category(session: Session, category: str, subcategory: str | None = None) -> Session:
    logger.info(f"Filtering by category: {category}" + (f" > {subcategory}" if subcategory else ""))
    navigate_to(session, "products")
    browser = session.browser.click_text_within(".panel-group", category)
    if subcategory:
        browser.click_text_within(".panel-body", subcategory)
    browser.verify_element_visible(".features_items")
    return session


def filter_by_brand(session: Session, brand: str) -> Session:
    logger.info(f"Filtering by brand: {brand}")
    navigate_to(session, "products")
    session.browser.click_text_within(".brands_products", brand).verify_element_visible(".features_items")
    return session


def view_product_details(session: Session, product_id: int | str) -> Session:
    logger.info(f"Viewing product details for ID: {product_id}")
    session.browser.visit(f"/product_details/{product_id}").verify_element_visible(".product-information")
    return session


def go_to_page(session: Session, page_number: int) -> Session:
    logger.info(f"Navigating to page: {page_number}")
    session.browser.click_text_within(".pagination", str(page_number)).wait_for_page_load()
    return session


def scroll_to_element(session: Session, selector: str) -> Session:
    session.browser.scroll_to_element(selector)
    return session


def click_breadcrumb(session: Session, breadcrumb_text: str) -> Session:
    logger.info(f"Clicking breadcrumb: {breadcrumb_text}")
    session.browser.click_text_within(".breadcrumb", breadcrumb_text)
    return session


def handle_modal(session: Session, action: str = "close") -> Session:
    """Dismiss the open modal with close, confirm/ok or cancel.

    Unrecognised actions fall back to the close button.
    """
    logger.info(f"Handling modal with action: {action}")
    button = MODAL_ACTIONS.get(action.lower(), ".modal .close")
    (
        session.browser.verify_element_visible(".modal")
        .click_element(button)
        .verify_element_hidden(".modal")
    )
    return session


def is_in_viewport(session: Session, selector: str) -> bool:
    """Whether the element's bounding box lies fully inside the viewport."""
    browser = session.browser
    browser.verify_element_exists(selector)
    box = session.page.locator(selector).first.bounding_box()
    viewport = session.page.viewport_size or session.config.viewport
    if box is None:
        return False
    return (
        box["y"] >= 0
        and box["x"] >= 0
        and box["y"] + box["height"] <= viewport["height"]
        and box["x"] + box["width"] <= viewport["width"]
    )


def verify_in_viewport(session: Session, selector: str) -> Session:
    if not is_in_viewport(session, selector):
        raise AssertionFailedError(
            message=f"'{selector}' is not fully inside the viewport",
            expected="in viewport",
            actual="outside viewport",
        )
    return session


def register_navigation_commands(registry: CommandRegistry) -> None:
    for func in (
        navigate_to,
        search_products,
        filter_by_category,
        filter_by_brand,
        view_product_details,
        go_to_page,
        scroll_to_element,
        click_breadcrumb,
        handle_modal,
        is_in_viewport,
        verify_in_viewport,
    ):
        registry.register(func.__name__, func, category="navigation")

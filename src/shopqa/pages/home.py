"""Storefront landing page."""

from __future__ import annotations

import logging
from types import MappingProxyType

from shopqa.errors import AssertionFailedError
from shopqa.pages.base import BasePage

logger = logging.getLogger(__name__)

KNOWN_CATEGORIES = ("WOMEN", "MEN", "KIDS")
MODAL_BUTTONS = {
    "continue": ".modal-footer .btn-success",
    "view_cart": ".modal-footer .btn-info",
}


class HomePage(BasePage):
    url = "/"
    selectors = MappingProxyType({
        "logo": ".logo img",
        "navigation_menu": ".navbar-nav",
        "home_link": 'a[href="/"]',
        "products_link": 'a[href="/products"]',
        "cart_link": 'a[href="/view_cart"]',
        "contact_link": 'a[href="/contact_us"]',
        "test_cases_link": 'a[href="/test_cases"]',
        "logout_link": 'a[href="/logout"]',
        "delete_account_link": 'a[href="/delete_account"]',
        "hero_section": ".carousel",
        "hero_slide": ".carousel-inner .item",
        "next_slide": ".carousel-control-next",
        "prev_slide": ".carousel-control-prev",
        "features_section": ".features_items",
        "feature_products": ".features_items .col-sm-4",
        "product_item": ".productinfo",
        "product_name": ".productinfo p",
        "product_price": ".productinfo h2",
        "add_to_cart_button": ".productinfo .btn",
        "view_product_button": ".choose .nav-pills li a",
        "categories_panel": ".left-sidebar .category-products",
        "category_links": ".panel-body ul li a",
        "brands_panel": ".brands_products",
        "brand_links": ".brands_products ul li a",
        "footer": "#footer",
        "footer_links": "#footer a",
        "subscription_email": "#susbscribe_email",
        "subscribe_button": "#subscribe",
        "scroll_up_button": "#scrollUp",
        "search_input": "#search_product",
        "search_button": "#submit_search",
        "cart_modal": "#cartModal",
        "recommended_items": "#recommended-item-carousel",
    })

    def visit_home_page(self) -> HomePage:
        return self.visit().verify_home_page()

    def verify_home_page(self) -> HomePage:
        self.verify_element_visible(self.sel("logo"))
        self.verify_element_visible(self.sel("features_section"))
        return self.verify_url_not_contains("/login")

    # Navigation bar

    def click_products(self) -> HomePage:
        return self.click_element(self.sel("products_link"))

    def click_cart(self) -> HomePage:
        return self.click_element(self.sel("cart_link"))

    def click_contact(self) -> HomePage:
        return self.click_element(self.sel("contact_link"))

    def click_logout(self) -> HomePage:
        return self.click_element(self.sel("logout_link"))

    # Featured products

    def get_products_count(self) -> int:
        return self.page.locator(self.sel("feature_products")).count()

    def click_product_by_index(self, index: int) -> HomePage:
        card = self._nth(self.sel("feature_products"), index)
        self._within(card, self.sel("view_product_button"), "visible").click(timeout=self._timeout_ms())
        return self

    def add_product_to_cart_by_index(self, index: int) -> HomePage:
        card = self._nth(self.sel("feature_products"), index)
        self._within(card, self.sel("add_to_cart_button"), "visible").click(timeout=self._timeout_ms())
        return self

    def get_product_name_by_index(self, index: int) -> str:
        card = self._nth(self.sel("feature_products"), index)
        return self._within(card, self.sel("product_name")).inner_text(timeout=self._timeout_ms()).strip()

    def get_product_price_by_index(self, index: int) -> str:
        card = self._nth(self.sel("feature_products"), index)
        return self._within(card, self.sel("product_price")).inner_text(timeout=self._timeout_ms()).strip()

    # Carousel

    def verify_hero_carousel(self) -> HomePage:
        return self.verify_element_visible(self.sel("hero_section"))

    def click_next_slide(self) -> HomePage:
        return self.click_element(self.sel("next_slide"))

    def click_prev_slide(self) -> HomePage:
        return self.click_element(self.sel("prev_slide"))

    # Sidebar

    def click_category(self, category_name: str) -> HomePage:
        return self.click_text_within(self.sel("categories_panel"), category_name)

    def click_subcategory(self, subcategory_name: str) -> HomePage:
        return self.click_text_within(self.sel("category_links"), subcategory_name)

    def verify_category_section(self) -> HomePage:
        """The sidebar must list at least one of WOMEN, MEN or KIDS."""
        panel = self.sel("categories_panel")
        self.verify_element_visible(panel)
        text = " ".join(self.page.locator(panel).all_inner_texts()).upper()
        if not any(category in text for category in KNOWN_CATEGORIES):
            raise AssertionFailedError(
                message=f"Sidebar should contain at least one known category: {', '.join(KNOWN_CATEGORIES)}",
                expected=list(KNOWN_CATEGORIES),
                actual=text,
                context=self._context(panel),
            )
        return self

    def click_brand(self, brand_name: str) -> HomePage:
        return self.click_text_within(self.sel("brands_panel"), brand_name)

    def verify_brands_section(self) -> HomePage:
        self.verify_element_visible(self.sel("brands_panel"))
        return self.verify_element_contains_text(self.sel("brands_panel"), "Brands")

    # Footer

    def subscribe_to_newsletter(self, email: str) -> HomePage:
        self.type_text(self.sel("subscription_email"), email)
        return self.click_element(self.sel("subscribe_button"))

    def verify_footer(self) -> HomePage:
        return self.verify_element_visible(self.sel("footer"))

    def click_footer_link(self, link_text: str) -> HomePage:
        return self.click_text_within(self.sel("footer"), link_text)

    def click_scroll_up_button(self) -> HomePage:
        return self.click_element(self.sel("scroll_up_button"))

    def verify_scroll_up_button(self) -> HomePage:
        self.scroll_to_bottom()
        return self.verify_element_visible(self.sel("scroll_up_button"))

    # Account

    def verify_logged_in_user(self, username: str) -> HomePage:
        return self.verify_element_contains_text(self.sel("navigation_menu"), f"Logged in as {username}")

    def delete_account(self) -> HomePage:
        return self.click_element(self.sel("delete_account_link"))

    # Search and modal

    def search_product(self, search_term: str) -> HomePage:
        """Search from the current page; does nothing when there is no search box."""
        if not self.has_element(self.sel("search_input")):
            logger.debug("No search box on this page, skipping search")
            return self
        self.type_text(self.sel("search_input"), search_term)
        return self.click_element(self.sel("search_button"))

    def handle_add_to_cart_modal(self, action: str = "continue") -> HomePage:
        """Dismiss the add-to-cart modal by continuing shopping or opening the cart."""
        if action not in MODAL_BUTTONS:
            raise ValueError(f"Unknown modal action: {action}. Valid: {', '.join(MODAL_BUTTONS)}")
        self.verify_element_visible(self.sel("cart_modal"))
        self.click_element(MODAL_BUTTONS[action])
        return self.verify_element_hidden(self.sel("cart_modal"))

    # Sections

    def verify_featured_products_section(self) -> HomePage:
        self.verify_element_visible(self.sel("features_section"))
        self.verify_element_contains_text(self.sel("features_section"), "Features Items")
        self.verify_element_exists(self.sel("feature_products"))
        return self

    def verify_recommended_items_section(self) -> HomePage:
        self.scroll_to_element(self.sel("recommended_items"))
        return self.verify_element_visible(self.sel("recommended_items"))

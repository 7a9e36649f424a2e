"""shopqa - storefront test toolkit.

shopqa drives end-to-end and API checks against the automationexercise.com
demo storefront. Page objects wrap a Playwright page, named commands
compose them into reusable steps, and a Faker-backed generator supplies
test data.

Key Features:
    - Page Objects: chainable primitives plus home and cart pages
    - Commands: navigation, cart and API steps in an explicit registry
    - Retry: exponential backoff that re-raises the last error unchanged
    - Test Data: seedable users, addresses, cards and unique e-mails
    - pytest Plugin: config, browser, session and data fixtures

Example:
    >>> from shopqa import Session
    >>> with Session(page) as session:
    ...     session.run("add_to_cart", 1, quantity=2)
    ...     session.run("view_cart")
    ...     session.cart().verify_cart_total_calculation()

Core Types:
    Session: Browser page, API client and command registry for one scenario
    BasePage: Element action primitives shared by every page object
    CommandRegistry: Name-keyed table of commands
    TestDataGenerator: Faker-backed record generator
"""

from shopqa.api import ApiClient, ApiResponse
from shopqa.commands import CommandRegistry, create_default_registry
from shopqa.config import QAConfig, load_config
from shopqa.data import TestDataGenerator, fake
from shopqa.errors import (
    AssertionFailedError,
    ConfigValidationError,
    ElementNotFoundError,
    RetryPolicy,
    ShopQAError,
    TimeoutExceededError,
    TransportError,
    UnknownCommandError,
    UnknownSectionError,
    retry_with_backoff,
)
from shopqa.pages import BasePage, CartPage, HomePage
from shopqa.session import Session

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ApiResponse",
    "AssertionFailedError",
    "BasePage",
    "CartPage",
    "CommandRegistry",
    "ConfigValidationError",
    "ElementNotFoundError",
    "HomePage",
    "QAConfig",
    "RetryPolicy",
    "Session",
    "ShopQAError",
    "TestDataGenerator",
    "TimeoutExceededError",
    "TransportError",
    "UnknownCommandError",
    "UnknownSectionError",
    "create_default_registry",
    "fake",
    "load_config",
    "retry_with_backoff",
    "__version__",
]

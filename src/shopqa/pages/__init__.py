"""Page objects for the storefront."""

from shopqa.pages.base import BasePage, Interception, RecordedRequest
from shopqa.pages.cart import CartLine, CartPage
from shopqa.pages.home import HomePage

__all__ = [
    "BasePage",
    "CartLine",
    "CartPage",
    "HomePage",
    "Interception",
    "RecordedRequest",
]

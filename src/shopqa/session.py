"""Per-scenario session tying together the browser, API client and commands.

Example:
    >>> with Session(page, config) as session:
    ...     session.run("navigate_to", "cart")
    ...     session.cart().verify_cart_is_empty()
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import urlparse

from playwright.sync_api import Page

from shopqa.api.client import ApiClient
from shopqa.commands import CommandRegistry, create_default_registry
from shopqa.config import QAConfig
from shopqa.data.generators import TestDataGenerator
from shopqa.errors import ConfigValidationError, RetryPolicy, create_default_retry_policy
from shopqa.pages import BasePage, CartPage, HomePage

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Session:
    """State for one logical actor in a scenario.

    The browser page is optional so API-only scenarios can run without
    launching a browser; page objects raise when asked for without one.
    The API client is created on first use.
    """

    def __init__(
        self,
        page: Page | None = None,
        config: QAConfig | None = None,
        api: ApiClient | None = None,
        commands: CommandRegistry | None = None,
        data: TestDataGenerator | None = None,
    ) -> None:
        self.page = page
        self.config = config or QAConfig()
        self.commands = commands or create_default_registry()
        self.data = data or TestDataGenerator(seed=self.config.data_seed, locale=self.config.data_locale)
        self._api = api
        self._browser: BasePage | None = None

    def __repr__(self) -> str:
        return f"Session(environment={self.config.environment!r}, browser={self.page is not None})"

    def require_page(self) -> Page:
        if self.page is None:
            raise ConfigValidationError(
                message="This session has no browser page",
                field="page",
                suggestions=["Use the 'session' fixture, or pass a Playwright page to Session()"],
            )
        return self.page

    @property
    def browser(self) -> BasePage:
        """Generic page object for primitives that are not tied to one page."""
        if self._browser is None:
            self._browser = BasePage(self.require_page(), self.config)
        return self._browser

    def home(self) -> HomePage:
        return HomePage(self.require_page(), self.config)

    def cart(self) -> CartPage:
        return CartPage(self.require_page(), self.config)

    @property
    def api(self) -> ApiClient:
        if self._api is None:
            self._api = ApiClient(
                str(self.config.api_url),
                timeout=self.config.request_timeout,
            )
        return self._api

    def run(self, name: str, /, *args: Any, **kwargs: Any) -> Any:
        """Run a registered command against this session."""
        return self.commands.run(name, self, *args, **kwargs)

    def retry_policy(self) -> RetryPolicy:
        return create_default_retry_policy(retries=int(self.config.retries or 0))

    def retry(self, operation: Callable[[], T]) -> T:
        """Run operation under the environment's retry budget."""
        return self.retry_policy().execute(operation)

    def capture_failure(self, name: str) -> Path | None:
        """Save a full-page screenshot; returns None without a browser."""
        if self.page is None:
            return None
        return self.browser.take_screenshot(name).last_screenshot

    def backup_state(self, path: str | Path) -> Path:
        """Write cookies and local storage of the browser context to path."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.require_page().context.storage_state(path=str(path))
        logger.info(f"Saved browser state to {path}")
        return path

    def restore_state(self, path: str | Path) -> Session:
        """Load cookies and local storage saved by backup_state."""
        with open(path) as f:
            state = json.load(f)
        page = self.require_page()
        cookies = state.get("cookies") or []
        if cookies:
            page.context.add_cookies(cookies)
        for origin in state.get("origins") or []:
            if origin.get("origin") != _origin(page.url):
                continue
            for item in origin.get("localStorage") or []:
                self.browser.set_local_storage(item["name"], item["value"])
        logger.info(f"Restored browser state from {path}")
        return self

    def close(self) -> None:
        if self._api is not None:
            self._api.disconnect()
            self._api = None

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"

"""Element action primitives shared by every page object.

A page object wraps one Playwright ``Page`` for the duration of a test.
Mutating and verifying primitives return the page object itself so steps
chain::

    HomePage(page, config).visit().verify_element_visible(".logo img").scroll_to_bottom()

Waits use the configured command timeout. A missing element surfaces as
ElementNotFoundError; a text, attribute or URL check that never holds
surfaces as AssertionFailedError with the expected and last observed
values.
"""

from __future__ import annotations

import fnmatch
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, TypeVar
from urllib.parse import urljoin, urlparse

from playwright.sync_api import Dialog, Locator, Page, Request
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from shopqa.config import QAConfig
from shopqa.errors import (
    AssertionFailedError,
    ElementNotFoundError,
    ErrorContext,
    TimeoutExceededError,
)
from shopqa.utils.helpers import timestamped_name
from shopqa.utils.wait import poll_until

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="BasePage")
T = TypeVar("T")

VERIFY_INTERVAL = 0.1
DIALOG_ACTIONS = ("accept", "dismiss")


@dataclass
class RecordedRequest:
    method: str
    url: str
    post_data: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class Interception:
    """Requests seen for one alias registered with intercept_request."""

    method: str
    pattern: str
    requests: list[RecordedRequest] = field(default_factory=list)
    consumed: int = 0

    def matches(self, method: str, url: str) -> bool:
        if self.method not in ("*", method.upper()):
            return False
        return fnmatch.fnmatchcase(url, self.pattern) or self.pattern in url


class BasePage:
    """Common browser primitives.

    Subclasses set ``url`` (relative to the configured base URL) and a
    ``selectors`` mapping of symbolic names to locator strings.
    """

    url: str = "/"
    selectors: Mapping[str, str] = MappingProxyType({})

    def __init__(self, page: Page, config: QAConfig | None = None) -> None:
        self.page = page
        self.config = config or QAConfig()
        self.timeout = float(self.config.timeout or 10.0)
        self.last_screenshot: Path | None = None
        self._interceptions: dict[str, Interception] = {}
        self._listening = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.url!r})"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.url == self.url  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.url))

    def sel(self, key: str) -> str:
        """Look up a selector by symbolic name (KeyError when unknown)."""
        return self.selectors[key]

    # Internals

    def _timeout_ms(self, timeout: float | None = None) -> float:
        return (self.timeout if timeout is None else timeout) * 1000

    def _pause(self, seconds: float) -> None:
        # Lets Playwright dispatch page events while we wait.
        self.page.wait_for_timeout(seconds * 1000)

    def _context(self, selector: str | None = None) -> ErrorContext:
        return ErrorContext(page=self.__class__.__name__, selector=selector, url=self.page.url)

    def _locate(self, selector: str, state: str = "visible", timeout: float | None = None) -> Locator:
        """Return the first element matching selector once it reaches state."""
        locator = self.page.locator(selector).first
        self._wait(locator, selector, state, timeout)
        return locator

    def _wait(self, locator: Locator, selector: str, state: str, timeout: float | None = None) -> None:
        wait_seconds = self.timeout if timeout is None else timeout
        try:
            locator.wait_for(state=state, timeout=wait_seconds * 1000)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(
                selector=selector,
                timeout=wait_seconds,
                context=self._context(selector),
                cause=e,
                state=state,
            ) from e

    def _nth(self, selector: str, index: int) -> Locator:
        """Return the index-th match of selector, waiting for the first one to exist."""
        self._locate(selector, "attached")
        matches = self.page.locator(selector)
        count = matches.count()
        if index < 0 or index >= count:
            raise ElementNotFoundError(
                message=f"No element at index {index} for '{selector}' ({count} found)",
                selector=selector,
                context=self._context(selector),
            )
        return matches.nth(index)

    def _within(self, parent: Locator, selector: str, state: str = "attached") -> Locator:
        """Return the first match of selector inside parent once it reaches state."""
        locator = parent.locator(selector).first
        self._wait(locator, selector, state)
        return locator

    def _expect(
        self,
        fetcher: Callable[[], T],
        condition: Callable[[T], bool],
        expected: Any,
        description: str,
        selector: str | None = None,
        timeout: float | None = None,
    ) -> T:
        """Poll until condition holds, failing as an assertion."""
        try:
            return poll_until(
                fetcher=fetcher,
                condition=condition,
                timeout=self.timeout if timeout is None else timeout,
                interval=VERIFY_INTERVAL,
                description=description,
                sleep=self._pause,
            )
        except TimeoutExceededError as e:
            raise AssertionFailedError(
                message=f"Expected {description}",
                expected=expected,
                actual=e.last_value,
                context=self._context(selector),
                cause=e,
            ) from e

    # Navigation

    def resolve_url(self, path: str | None = None) -> str:
        return urljoin(f"{str(self.config.base_url).rstrip('/')}/", (path or self.url).lstrip("/"))

    def visit(self: P, path: str | None = None) -> P:
        target = self.resolve_url(path)
        logger.info(f"Visiting {target}")
        self.page.goto(target, timeout=self.config.page_load_timeout * 1000)
        return self

    def get_title(self) -> str:
        return self.page.title()

    def get_current_url(self) -> str:
        return self.page.url

    # Waits

    def wait_for_page_load(self: P, timeout: float | None = None) -> P:
        try:
            self.page.wait_for_load_state("load", timeout=self._timeout_ms(timeout))
        except PlaywrightTimeoutError as e:
            raise TimeoutExceededError(
                condition_description="page load",
                timeout_seconds=self.timeout if timeout is None else timeout,
                context=self._context(),
                cause=e,
            ) from e
        return self.wait_for_element("body", timeout)

    def wait_for_element(self: P, selector: str, timeout: float | None = None) -> P:
        self._locate(selector, "visible", timeout)
        return self

    def wait(self: P, milliseconds: float) -> P:
        logger.debug(f"Waiting {milliseconds:.0f}ms")
        self.page.wait_for_timeout(milliseconds)
        return self

    # Interaction

    def click_element(self: P, selector: str) -> P:
        logger.debug(f"Click {selector}")
        self._locate(selector).click(timeout=self._timeout_ms())
        return self

    def click_text_within(self: P, container: str, text: str) -> P:
        """Click the element inside container whose text contains text."""
        self._locate(container, "attached")
        description = f"{container} >> text={text}"
        target = self.page.locator(container).get_by_text(text).first
        self._wait(target, description, "visible")
        logger.debug(f"Click {description}")
        target.click(timeout=self._timeout_ms())
        return self

    def type_text(self: P, selector: str, text: str) -> P:
        """Clear the field, then enter text."""
        logger.debug(f"Type into {selector}")
        self._locate(selector).fill(str(text), timeout=self._timeout_ms())
        return self

    def select_option(self: P, selector: str, option: str) -> P:
        self._locate(selector).select_option(option, timeout=self._timeout_ms())
        return self

    def check_checkbox(self: P, selector: str) -> P:
        self._locate(selector).check(timeout=self._timeout_ms())
        return self

    # Verification

    def has_element(self, selector: str) -> bool:
        """Whether selector matches anything right now, without waiting."""
        return self.page.locator(selector).count() > 0

    def verify_element_exists(self: P, selector: str) -> P:
        self._locate(selector, "attached")
        return self

    def verify_element_visible(self: P, selector: str) -> P:
        self._locate(selector, "visible")
        return self

    def verify_element_hidden(self: P, selector: str) -> P:
        self._wait(self.page.locator(selector).first, selector, "hidden")
        return self

    def verify_element_contains_text(self: P, selector: str, text: str) -> P:
        self._locate(selector, "attached")
        locator = self.page.locator(selector)
        self._expect(
            fetcher=lambda: " ".join(locator.all_inner_texts()),
            condition=lambda actual: text in actual,
            expected=text,
            description=f"'{selector}' to contain {text!r}",
            selector=selector,
        )
        return self

    def verify_element_has_attribute(self: P, selector: str, attribute: str, value: str) -> P:
        """Check the element's attribute equals value."""
        locator = self._locate(selector, "attached")
        self._expect(
            fetcher=lambda: locator.get_attribute(attribute),
            condition=lambda actual: actual == value,
            expected=value,
            description=f"'{selector}' to have attribute {attribute}={value!r}",
            selector=selector,
        )
        return self

    def verify_url_contains(self: P, fragment: str) -> P:
        self._expect(
            fetcher=lambda: self.page.url,
            condition=lambda url: fragment in url,
            expected=fragment,
            description=f"URL to contain {fragment!r}",
        )
        return self

    def verify_path(self: P, path: str) -> P:
        """Check the URL path, ignoring a trailing slash and any query string."""
        wanted = path.rstrip("/") or "/"
        self._expect(
            fetcher=lambda: urlparse(self.page.url).path.rstrip("/") or "/",
            condition=lambda actual: actual == wanted,
            expected=wanted,
            description=f"URL path to be {wanted!r}",
        )
        return self

    def verify_url_not_contains(self: P, fragment: str) -> P:
        self._expect(
            fetcher=lambda: self.page.url,
            condition=lambda url: fragment not in url,
            expected=f"not {fragment}",
            description=f"URL not to contain {fragment!r}",
        )
        return self

    # Scrolling

    def scroll_to_element(self: P, selector: str) -> P:
        self._locate(selector, "attached").scroll_into_view_if_needed(timeout=self._timeout_ms())
        return self

    def scroll_to_top(self: P) -> P:
        self.page.evaluate("() => window.scrollTo(0, 0)")
        return self

    def scroll_to_bottom(self: P) -> P:
        self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")
        return self

    def set_viewport(self: P, width: int, height: int) -> P:
        self.page.set_viewport_size({"width": width, "height": height})
        return self

    # Capture

    def take_screenshot(self: P, name: str = "screenshot") -> P:
        directory = Path(self.config.screenshot_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{timestamped_name(name)}.png"
        self.page.screenshot(path=str(path), full_page=True)
        self.last_screenshot = path
        logger.info(f"Screenshot saved to {path}")
        return self

    # Cookies and storage

    def set_cookie(self: P, name: str, value: str) -> P:
        self.page.context.add_cookies([{"name": name, "value": value, "url": self.resolve_url("/")}])
        return self

    def get_cookie(self, name: str) -> str | None:
        for cookie in self.page.context.cookies():
            if cookie.get("name") == name:
                return cookie.get("value")
        return None

    def clear_cookies(self: P) -> P:
        self.page.context.clear_cookies()
        return self

    def set_local_storage(self: P, key: str, value: str) -> P:
        self.page.evaluate("([k, v]) => window.localStorage.setItem(k, v)", [key, value])
        return self

    def get_local_storage(self, key: str) -> str | None:
        return self.page.evaluate("(k) => window.localStorage.getItem(k)", key)

    def clear_local_storage(self: P) -> P:
        self.page.evaluate("() => window.localStorage.clear()")
        return self

    # Dialogs

    def handle_alert(self: P, action: str = "accept") -> P:
        """Answer the next alert/confirm dialog with accept or dismiss."""
        if action not in DIALOG_ACTIONS:
            raise ValueError(f"Unknown dialog action: {action}. Valid: {', '.join(DIALOG_ACTIONS)}")

        def respond(dialog: Dialog) -> None:
            logger.debug(f"Dialog '{dialog.message}' -> {action}")
            if action == "accept":
                dialog.accept()
            else:
                dialog.dismiss()

        self.page.once("dialog", respond)
        return self

    # Network

    def intercept_request(self: P, method: str, pattern: str, alias: str) -> P:
        """Record requests matching method and URL glob under alias."""
        self._interceptions[alias] = Interception(method=method.upper(), pattern=pattern)
        if not self._listening:
            self.page.on("request", self._on_request)
            self._listening = True
        return self

    def _on_request(self, request: Request) -> None:
        for interception in self._interceptions.values():
            if interception.matches(request.method, request.url):
                interception.requests.append(
                    RecordedRequest(method=request.method, url=request.url, post_data=request.post_data)
                )

    def wait_for_request(self, alias: str, timeout: float | None = None) -> RecordedRequest:
        """Wait for the next unconsumed request recorded under alias.

        Raises:
            AssertionFailedError: If alias was never registered.
            TimeoutExceededError: If no matching request arrives in time.
        """
        interception = self._interceptions.get(alias)
        if interception is None:
            raise AssertionFailedError(
                message=f"No request interception registered as '{alias}'",
                expected=alias,
                actual=sorted(self._interceptions),
                context=self._context(),
                suggestions=["Call intercept_request(method, pattern, alias) before waiting on it"],
            )
        poll_until(
            fetcher=lambda: len(interception.requests),
            condition=lambda seen: seen > interception.consumed,
            timeout=self.timeout if timeout is None else timeout,
            interval=VERIFY_INTERVAL,
            description=f"request @{alias} ({interception.method} {interception.pattern})",
            sleep=self._pause,
        )
        request = interception.requests[interception.consumed]
        interception.consumed += 1
        return request

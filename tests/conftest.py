"""Pytest fixtures for shopqa tests.

FakePage stands in for a Playwright page. Its DOM is a mapping of
selector strings to FakeElement lists (or callables returning one), and
``tick_hooks`` run on every ``wait_for_timeout`` so tests can model the
storefront updating asynchronously while a page object polls.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from shopqa.api.client import ApiClient
from shopqa.commands import create_default_registry
from shopqa.config import QAConfig
from shopqa.data.generators import TestDataGenerator
from shopqa.session import Session

BASE_URL = "https://automationexercise.com"


@dataclass
class FakeElement:
    """One element of the fake DOM."""

    name: str = ""
    text: str = ""
    value: str = ""
    is_input: bool = False
    visible: bool = True
    checked: bool = False
    attrs: dict[str, str] = field(default_factory=dict)
    children: dict[str, list[FakeElement]] = field(default_factory=dict)
    box: dict[str, float] | None = None
    on_click: Callable[[FakePage], None] | None = None
    on_blur: Callable[[FakePage], None] | None = None

    def descendants(self) -> list[FakeElement]:
        found: list[FakeElement] = []
        for elements in self.children.values():
            for element in elements:
                found.append(element)
                found.extend(element.descendants())
        return found


class FakeLocator:
    """Subset of playwright.sync_api.Locator used by shopqa."""

    def __init__(self, page: FakePage, resolve: Callable[[], list[FakeElement]], description: str) -> None:
        self._page = page
        self._resolve = resolve
        self.description = description

    def _elements(self) -> list[FakeElement]:
        return list(self._resolve())

    def _one(self) -> FakeElement:
        elements = self._elements()
        if not elements:
            raise PlaywrightTimeoutError(f"Timeout exceeded waiting for {self.description}")
        return elements[0]

    @property
    def first(self) -> FakeLocator:
        return FakeLocator(self._page, lambda: self._elements()[:1], f"{self.description} >> nth=0")

    def nth(self, index: int) -> FakeLocator:
        def resolve() -> list[FakeElement]:
            elements = self._elements()
            return [elements[index]] if 0 <= index < len(elements) else []

        return FakeLocator(self._page, resolve, f"{self.description} >> nth={index}")

    def locator(self, selector: str) -> FakeLocator:
        def resolve() -> list[FakeElement]:
            return [child for el in self._elements() for child in el.children.get(selector, [])]

        return FakeLocator(self._page, resolve, f"{self.description} >> {selector}")

    def get_by_text(self, text: str) -> FakeLocator:
        def resolve() -> list[FakeElement]:
            return [d for el in self._elements() for d in el.descendants() if text in d.text]

        return FakeLocator(self._page, resolve, f"{self.description} >> text={text}")

    def count(self) -> int:
        return len(self._elements())

    def all_inner_texts(self) -> list[str]:
        return [el.text for el in self._elements()]

    def inner_text(self, timeout: float | None = None) -> str:
        return self._one().text

    def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        elements = self._elements()
        if state == "attached":
            ok = bool(elements)
        elif state == "visible":
            ok = bool(elements) and elements[0].visible
        elif state == "hidden":
            ok = not elements or not elements[0].visible
        else:
            ok = not elements
        if not ok:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.description} ({state})")

    def is_visible(self) -> bool:
        elements = self._elements()
        return bool(elements) and elements[0].visible

    def click(self, timeout: float | None = None) -> None:
        element = self._one()
        self._page.clicks.append(element.name or self.description)
        if element.on_click is not None:
            element.on_click(self._page)

    def fill(self, value: str, timeout: float | None = None) -> None:
        element = self._one()
        element.value = value
        self._page.fills.append((element.name or self.description, value))

    def blur(self, timeout: float | None = None) -> None:
        element = self._one()
        if element.on_blur is not None:
            element.on_blur(self._page)

    def input_value(self, timeout: float | None = None) -> str:
        element = self._one()
        if not element.is_input:
            raise PlaywrightError("Error: Node is not an <input>, <textarea> or <select> element")
        return element.value

    def select_option(self, value: str, timeout: float | None = None) -> list[str]:
        self._one().value = value
        return [value]

    def check(self, timeout: float | None = None) -> None:
        self._one().checked = True

    def get_attribute(self, name: str, timeout: float | None = None) -> str | None:
        return self._one().attrs.get(name)

    def scroll_into_view_if_needed(self, timeout: float | None = None) -> None:
        self._page.scrolled_to.append(self._one().name or self.description)

    def bounding_box(self, timeout: float | None = None) -> dict[str, float] | None:
        return self._one().box


class FakeContext:
    """Subset of playwright.sync_api.BrowserContext."""

    def __init__(self) -> None:
        self._cookies: list[dict[str, Any]] = []
        self.origins: list[dict[str, Any]] = []

    def add_cookies(self, cookies: list[dict[str, Any]]) -> None:
        for cookie in cookies:
            self._cookies = [c for c in self._cookies if c["name"] != cookie["name"]]
            self._cookies.append(dict(cookie))

    def cookies(self) -> list[dict[str, Any]]:
        return [dict(c) for c in self._cookies]

    def clear_cookies(self) -> None:
        self._cookies.clear()

    def storage_state(self, path: str | None = None) -> dict[str, Any]:
        state = {"cookies": self.cookies(), "origins": self.origins}
        if path:
            Path(path).write_text(json.dumps(state))
        return state


class FakeDialog:
    def __init__(self, message: str) -> None:
        self.message = message
        self.response: str | None = None

    def accept(self) -> None:
        self.response = "accept"

    def dismiss(self) -> None:
        self.response = "dismiss"


@dataclass
class FakeRequest:
    method: str
    url: str
    post_data: str | None = None


class FakePage:
    """Subset of playwright.sync_api.Page backed by a selector map."""

    def __init__(self, url: str = f"{BASE_URL}/", title: str = "Automation Exercise") -> None:
        self.url = url
        self._title = title
        self.dom: dict[str, Any] = {}
        self.routes: dict[str, Callable[[FakePage], None]] = {}
        self.context = FakeContext()
        self.local_storage: dict[str, str] = {}
        self.viewport_size: dict[str, int] | None = {"width": 1280, "height": 720}
        self.visits: list[str] = []
        self.clicks: list[str] = []
        self.fills: list[tuple[str, str]] = []
        self.scrolled_to: list[str] = []
        self.scripts: list[str] = []
        self.waits: list[float] = []
        self.screenshots: list[str] = []
        self.tick_hooks: list[Callable[[FakePage], None]] = []
        self.load_state_fails = False
        self._handlers: dict[str, list[Callable[[Any], None]]] = {}
        self._once: dict[str, list[Callable[[Any], None]]] = {}

    # DOM helpers for tests

    def add(self, selector: str, *elements: FakeElement) -> FakeElement:
        self.dom.setdefault(selector, []).extend(elements)
        return elements[0] if elements else FakeElement()

    def remove(self, selector: str) -> None:
        self.dom.pop(selector, None)

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler(payload)
        for handler in self._once.pop(event, []):
            handler(payload)

    # Page API

    def locator(self, selector: str) -> FakeLocator:
        def resolve() -> list[FakeElement]:
            entry = self.dom.get(selector, [])
            return list(entry() if callable(entry) else entry)

        return FakeLocator(self, resolve, selector)

    def goto(self, url: str, timeout: float | None = None, **kwargs: Any) -> None:
        self.url = url
        self.visits.append(url)
        for path, setup in self.routes.items():
            if url.endswith(path):
                setup(self)

    def title(self) -> str:
        return self._title

    def wait_for_load_state(self, state: str = "load", timeout: float | None = None) -> None:
        if self.load_state_fails:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for load state")

    def wait_for_timeout(self, timeout: float) -> None:
        self.waits.append(timeout)
        for hook in list(self.tick_hooks):
            hook(self)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        self.scripts.append(script)
        if "localStorage.setItem" in script:
            key, value = arg
            self.local_storage[key] = value
        elif "localStorage.getItem" in script:
            return self.local_storage.get(arg)
        elif "localStorage.clear" in script:
            self.local_storage.clear()
        return None

    def screenshot(self, path: str | None = None, full_page: bool = False) -> bytes:
        data = b"\x89PNG fake"
        if path:
            Path(path).write_bytes(data)
            self.screenshots.append(path)
        return data

    def set_viewport_size(self, viewport_size: dict[str, int]) -> None:
        self.viewport_size = dict(viewport_size)

    def on(self, event: str, handler: Callable[[Any], None]) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def once(self, event: str, handler: Callable[[Any], None]) -> None:
        self._once.setdefault(event, []).append(handler)


def cart_row(name: str, price: str, quantity: int, total: str) -> FakeElement:
    """A cart table row laid out like the storefront renders it."""
    return FakeElement(
        name=f"row:{name}",
        children={
            ".cart_description h4 a": [FakeElement(name=f"name:{name}", text=name)],
            ".cart_price p": [FakeElement(text=price)],
            ".cart_quantity_input": [FakeElement(name=f"qty:{name}", text=str(quantity))],
            ".cart_total_price": [FakeElement(text=total)],
            ".cart_quantity_delete": [FakeElement(name=f"delete:{name}")],
        },
    )


def build_cart(page: FakePage, rows: list[FakeElement]) -> list[FakeElement]:
    """Install rows as the cart table; delete buttons remove their row."""
    page.dom["#cart_info_table"] = [FakeElement(name="cart_table")]
    page.dom["#cart_info_table tbody tr"] = rows
    page.dom[".cart_quantity_delete"] = lambda: [
        r.children[".cart_quantity_delete"][0] for r in rows
    ]

    def make_delete(row: FakeElement) -> Callable[[FakePage], None]:
        def delete(_: FakePage) -> None:
            rows.remove(row)

        return delete

    for row in rows:
        row.children[".cart_quantity_delete"][0].on_click = make_delete(row)
    return rows


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def qa_config(tmp_path: Path) -> QAConfig:
    """Config with short waits so failing verifications return quickly."""
    return QAConfig(
        environment="staging",
        timeout=0.2,
        settle_timeout=0.2,
        settle_interval=0.01,
        screenshot_dir=str(tmp_path / "screens"),
    )


@pytest.fixture
def make_session(fake_page: FakePage, qa_config: QAConfig) -> Callable[..., Session]:
    """Build a Session over fake_page, optionally with a mocked API handler."""

    def build(handler: Callable[[httpx.Request], httpx.Response] | None = None) -> Session:
        api = None
        if handler is not None:
            api = ApiClient(str(qa_config.api_url), transport=httpx.MockTransport(handler))
        return Session(
            page=fake_page,  # type: ignore[arg-type]
            config=qa_config,
            api=api,
            commands=create_default_registry(),
            data=TestDataGenerator(seed=1234),
        )

    return build

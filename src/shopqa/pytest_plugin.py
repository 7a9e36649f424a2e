"""pytest plugin providing shopqa fixtures.

Registered through the ``pytest11`` entry point, so installing shopqa is
enough to use the fixtures:

    @pytest.mark.live
    def test_empty_cart(session):
        session.cart().visit_cart_page().verify_cart_is_empty()

Tests marked ``live`` talk to the real storefront and are skipped unless
pytest runs with ``--live``. Every test that asks for ``page`` gets a
fresh browser context, so cookies and storage never leak between tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

import pytest
from playwright.sync_api import sync_playwright

from shopqa.api.client import ApiClient
from shopqa.commands import CommandRegistry, create_default_registry
from shopqa.config import QAConfig, load_config
from shopqa.data.generators import TestDataGenerator
from shopqa.pages import BasePage
from shopqa.session import Session

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    """Add shopqa command line options."""
    group = parser.getgroup("shopqa")
    group.addoption(
        "--shopqa-env",
        action="store",
        default=None,
        help="Target environment: staging, production or local",
    )
    group.addoption(
        "--shopqa-config",
        action="store",
        default=None,
        help="Path to a shopqa YAML config file",
    )
    group.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests marked 'live' against the real storefront",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom markers."""
    config.addinivalue_line("markers", "live: talks to the real storefront (needs --live)")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--live"):
        return
    skip_live = pytest.mark.skip(reason="live storefront test, run with --live")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: Any) -> Iterator[None]:
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


def config_from_options(pytestconfig: pytest.Config) -> QAConfig:
    """Load QAConfig using the --shopqa-config and --shopqa-env options."""
    return load_config(
        pytestconfig.getoption("--shopqa-config"),
        environment=pytestconfig.getoption("--shopqa-env"),
    )


@pytest.fixture(scope="session")
def qa_config(pytestconfig: pytest.Config) -> QAConfig:
    """Resolved configuration for the run."""
    return config_from_options(pytestconfig)


@pytest.fixture(scope="session")
def commands() -> CommandRegistry:
    return create_default_registry()


@pytest.fixture
def fake(qa_config: QAConfig) -> TestDataGenerator:
    """Test data generator, reproducible when data_seed is set."""
    return TestDataGenerator(seed=qa_config.data_seed, locale=qa_config.data_locale)


@pytest.fixture(scope="session")
def playwright_browser(qa_config: QAConfig) -> Iterator[Any]:
    """One browser process shared by the whole run."""
    playwright = sync_playwright().start()
    browser = getattr(playwright, qa_config.browser_name).launch(headless=qa_config.headless)
    logger.info(f"Launched {qa_config.browser_name} (headless={qa_config.headless})")
    try:
        yield browser
    finally:
        browser.close()
        playwright.stop()


@pytest.fixture
def page(request: pytest.FixtureRequest, playwright_browser: Any, qa_config: QAConfig) -> Iterator[Any]:
    """A page in a fresh browser context sized to the configured viewport."""
    context = playwright_browser.new_context(
        viewport=qa_config.viewport,
        base_url=qa_config.base_url,
    )
    context.set_default_timeout(qa_config.timeout_ms)
    new_page = context.new_page()
    try:
        yield new_page
    finally:
        report = getattr(request.node, "rep_call", None)
        if qa_config.screenshot_on_failure and report is not None and report.failed:
            _capture(new_page, qa_config, request.node.name)
        context.close()


def _capture(page: Any, config: QAConfig, name: str) -> None:
    try:
        path = BasePage(page, config).take_screenshot(f"failed_{name}").last_screenshot
    except Exception as e:
        logger.warning(f"Could not capture failure screenshot for {name}: {e}")
        return
    logger.info(f"Failure screenshot for {name}: {path}")


@pytest.fixture
def api_client(qa_config: QAConfig) -> Iterator[ApiClient]:
    with ApiClient(str(qa_config.api_url), timeout=qa_config.request_timeout) as client:
        yield client


@pytest.fixture
def session(
    page: Any,
    qa_config: QAConfig,
    commands: CommandRegistry,
    fake: TestDataGenerator,
    api_client: ApiClient,
) -> Iterator[Session]:
    """Session driving a browser page in a fresh context."""
    with Session(page=page, config=qa_config, api=api_client, commands=commands, data=fake) as s:
        yield s


@pytest.fixture
def api_session(
    qa_config: QAConfig,
    commands: CommandRegistry,
    fake: TestDataGenerator,
    api_client: ApiClient,
) -> Iterator[Session]:
    """Browserless session for API-only tests."""
    with Session(config=qa_config, api=api_client, commands=commands, data=fake) as s:
        yield s

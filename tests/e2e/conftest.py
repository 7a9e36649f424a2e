"""Fixtures for the live storefront suite."""

from __future__ import annotations

import pytest

from shopqa.config import QAConfig
from shopqa.pytest_plugin import config_from_options


@pytest.fixture(scope="session")
def qa_config(pytestconfig: pytest.Config) -> QAConfig:
    """Real configuration, replacing the short-timeout unit test config."""
    return config_from_options(pytestconfig)

"""Named environment bundles and test user accounts.

Each bundle fixes the storefront base URL, its API root, the command
timeout and the retry count for one deployment. Unknown names fall back to
staging.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "staging"


@dataclass
class EnvironmentConfig:
    """Configuration for a single environment.

    Attributes:
        name: Environment name ("staging", "production", "local").
        base_url: Storefront root URL.
        api_url: Root of the JSON API.
        timeout: Command timeout in seconds.
        retries: Retries after the first attempt for flaky steps.
        api_endpoints: Catalogue endpoint paths relative to api_url.
    """

    name: str
    base_url: str
    api_url: str
    timeout: float = 10.0
    retries: int = 2
    api_endpoints: dict[str, str] = field(
        default_factory=lambda: {
            "products": "/productsList",
            "brands": "/brandsList",
            "search_product": "/searchProduct",
        }
    )

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> EnvironmentConfig:
        """Create EnvironmentConfig from dictionary."""
        base_url = data.get("base_url", "http://localhost:3000")
        kwargs: dict[str, Any] = {}
        if "api_endpoints" in data:
            kwargs["api_endpoints"] = dict(data["api_endpoints"])
        return cls(
            name=name,
            base_url=base_url,
            api_url=data.get("api_url", f"{base_url.rstrip('/')}/api"),
            timeout=data.get("timeout", 10.0),
            retries=data.get("retries", 2),
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "base_url": self.base_url,
            "api_url": self.api_url,
            "timeout": self.timeout,
            "retries": self.retries,
            "api_endpoints": dict(self.api_endpoints),
        }


ENVIRONMENTS: dict[str, EnvironmentConfig] = {
    "staging": EnvironmentConfig(
        name="staging",
        base_url="https://automationexercise.com",
        api_url="https://automationexercise.com/api",
        timeout=10.0,
        retries=2,
    ),
    "production": EnvironmentConfig(
        name="production",
        base_url="https://automationexercise.com",
        api_url="https://automationexercise.com/api",
        timeout=15.0,
        retries=3,
    ),
    "local": EnvironmentConfig(
        name="local",
        base_url="http://localhost:3000",
        api_url="http://localhost:3000/api",
        timeout=5.0,
        retries=1,
    ),
}


TEST_USERS: dict[str, dict[str, dict[str, str]]] = {
    "staging": {
        "admin": {
            "email": "admin.staging@example.com",
            "password": "AdminStaging123!",
            "name": "Admin User",
        },
        "regular": {
            "email": "testuser.staging@example.com",
            "password": "TestStaging123!",
            "name": "Test User",
        },
    },
    "production": {
        "admin": {
            "email": "admin.prod@example.com",
            "password": "AdminProd123!",
            "name": "Admin User",
        },
        "regular": {
            "email": "testuser.prod@example.com",
            "password": "TestProd123!",
            "name": "Test User",
        },
    },
}


def get_environment_config(name: str | None = None) -> EnvironmentConfig:
    """Return the bundle for name, falling back to staging."""
    key = (name or DEFAULT_ENVIRONMENT).lower()
    if key not in ENVIRONMENTS:
        logger.warning(f"Unknown environment '{name}', using {DEFAULT_ENVIRONMENT}")
        key = DEFAULT_ENVIRONMENT
    return ENVIRONMENTS[key]


def get_test_user(user_type: str = "regular", environment: str = DEFAULT_ENVIRONMENT) -> dict[str, str]:
    """Return credentials for a seeded account.

    Unknown environments or user types fall back to the staging regular
    user.
    """
    users = TEST_USERS.get(environment.lower(), {})
    user = users.get(user_type.lower())
    if user is None:
        return dict(TEST_USERS[DEFAULT_ENVIRONMENT]["regular"])
    return dict(user)

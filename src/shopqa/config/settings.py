"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopqa.config.environments import get_environment_config
from shopqa.errors import ConfigValidationError, ErrorContext

VALID_ENVIRONMENTS = {"staging", "production", "local"}
VALID_BROWSERS = {"chromium", "firefox", "webkit"}
VALID_SETTLE_MODES = {"poll", "fixed"}


class QAConfig(BaseSettings):
    """Configuration for a shopqa run.

    Timeouts are in seconds. URL fields left unset are filled from the
    selected environment bundle.
    """

    model_config = SettingsConfigDict(
        env_prefix="SHOPQA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "staging"
    base_url: str | None = None
    api_url: str | None = None

    timeout: float | None = Field(default=None, description="Command timeout for element waits")
    retries: int | None = None
    request_timeout: float = 10.0
    response_timeout: float = 30.0
    page_load_timeout: float = 30.0

    viewport_width: int = 1280
    viewport_height: int = 720
    mobile: bool = Field(default=False, description="Use the 375x667 mobile viewport")
    headless: bool = True
    browser_name: str = "chromium"

    screenshot_dir: str = "screenshots"
    screenshot_on_failure: bool = True
    fixtures_dir: str | None = None

    settle_mode: str = Field(default="poll", description="'poll' waits for the cart to update, 'fixed' sleeps")
    settle_timeout: float = 10.0
    settle_interval: float = 0.25
    settle_delay: float = 2.0

    data_seed: int | None = Field(default=None, description="Seed for reproducible fake data generation")
    data_locale: str = "en_US"

    verbose: bool = False

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        value = str(v).lower()
        if value not in VALID_ENVIRONMENTS:
            raise ConfigValidationError(
                message=f"Invalid environment: {v}. Valid: {sorted(VALID_ENVIRONMENTS)}",
                field="environment",
                value=v,
                context=ErrorContext(extra={"valid_environments": sorted(VALID_ENVIRONMENTS)}),
            )
        return value

    @field_validator("browser_name", mode="before")
    @classmethod
    def validate_browser_name(cls, v: str) -> str:
        value = str(v).lower()
        if value not in VALID_BROWSERS:
            raise ConfigValidationError(
                message=f"Invalid browser: {v}. Valid: {sorted(VALID_BROWSERS)}",
                field="browser_name",
                value=v,
            )
        return value

    @field_validator("settle_mode", mode="before")
    @classmethod
    def validate_settle_mode(cls, v: str) -> str:
        value = str(v).lower()
        if value not in VALID_SETTLE_MODES:
            raise ConfigValidationError(
                message=f"Invalid settle_mode: {v}. Valid: {sorted(VALID_SETTLE_MODES)}",
                field="settle_mode",
                value=v,
            )
        return value

    @model_validator(mode="after")
    def apply_environment_defaults(self) -> QAConfig:
        bundle = get_environment_config(self.environment)
        if self.base_url is None:
            self.base_url = bundle.base_url
        if self.api_url is None:
            self.api_url = bundle.api_url
        if self.timeout is None:
            self.timeout = bundle.timeout
        if self.retries is None:
            self.retries = bundle.retries
        return self

    @property
    def viewport(self) -> dict[str, int]:
        if self.mobile:
            return {"width": 375, "height": 667}
        return {"width": self.viewport_width, "height": self.viewport_height}

    @property
    def timeout_ms(self) -> float:
        return float(self.timeout or 0) * 1000

    @property
    def api_endpoints(self) -> dict[str, str]:
        return get_environment_config(self.environment).api_endpoints


def load_config(
    config_path: str | Path | None = None,
    environment: str | None = None,
) -> QAConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > environment bundle > defaults

    A config file may hold per-environment sections under an
    ``environments:`` key; the section for the selected environment is
    merged over the top-level values.
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}

    sections = config_data.pop("environments", None) or {}
    env_name = environment or os.environ.get("SHOPQA_ENVIRONMENT") or config_data.get("environment")
    if env_name:
        config_data["environment"] = env_name
        config_data.update(sections.get(str(env_name).lower(), {}))

    return QAConfig(**_drop_env_shadowed(config_data))


def _drop_env_shadowed(config_data: dict[str, Any]) -> dict[str, Any]:
    """Remove file values whose SHOPQA_<FIELD> variable is set.

    pydantic-settings ranks init values above the environment, so any
    field set in the environment is left for its env source to fill.
    ``environment`` is kept since it was already resolved above.
    """
    prefix = QAConfig.model_config.get("env_prefix", "")
    env_keys = {key.upper() for key in os.environ}
    return {
        key: value
        for key, value in config_data.items()
        if key == "environment" or f"{prefix}{key}".upper() not in env_keys
    }


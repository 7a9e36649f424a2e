"""Configuration module for shopqa."""

from shopqa.config.environments import (
    ENVIRONMENTS,
    EnvironmentConfig,
    get_environment_config,
    get_test_user,
)
from shopqa.config.settings import QAConfig, load_config

__all__ = [
    "ENVIRONMENTS",
    "EnvironmentConfig",
    "QAConfig",
    "get_environment_config",
    "get_test_user",
    "load_config",
]

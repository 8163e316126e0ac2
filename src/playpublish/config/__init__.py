"""Application configuration helpers."""

from __future__ import annotations

from .env import read_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .logging import configure_logging
from .publisher import (
    CredentialsConfig,
    PublishConfig,
    default_androidpublisher_resilience,
    get_credentials_config,
    get_publish_config,
    strip_file_url,
)

__all__ = [
    "ConfigurationError",
    "CredentialsConfig",
    "MissingConfigurationError",
    "PublishConfig",
    "RateLimit",
    "ResilienceConfig",
    "configure_logging",
    "default_androidpublisher_resilience",
    "get_credentials_config",
    "get_publish_config",
    "read_env_var",
    "require_env_vars",
    "strip_file_url",
]

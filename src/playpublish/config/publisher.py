"""Publishing configuration values."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Final

from .env import read_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

ANDROIDPUBLISHER_ROOT_URL: Final[str] = "https://androidpublisher.googleapis.com"
ANDROIDPUBLISHER_TIMEOUT_SECONDS: Final[float] = 60.0
FILE_URL_PREFIX: Final[str] = "file://"
APP_SUFFIXES: Final[frozenset[str]] = frozenset({".apk", ".aab"})

ENV_PACKAGE_NAME: Final[str] = "PACKAGE_NAME"
ENV_APP_PATH: Final[str] = "APP_PATH"
ENV_TRACK: Final[str] = "TRACK"
ENV_USER_FRACTION: Final[str] = "USER_FRACTION"
ENV_EXPANSION_FILE_PATH: Final[str] = "EXPANSION_FILE_PATH"
ENV_MAPPING_FILE: Final[str] = "MAPPING_FILE"
ENV_WHATSNEWS_DIR: Final[str] = "WHATSNEWS_DIR"
ENV_JSON_KEY_PATH: Final[str] = "SERVICE_ACCOUNT_JSON_KEY_PATH"
ENV_P12_KEY_PATH: Final[str] = "KEY_FILE_PATH"
ENV_SERVICE_ACCOUNT_EMAIL: Final[str] = "SERVICE_ACCOUNT_EMAIL"
ENV_API_URL: Final[str] = "PLAYPUBLISH_API_URL"

_LIST_SEPARATOR = re.compile(r"[|\n]")


@dataclass(frozen=True, slots=True)
class CredentialsConfig:
    """Where to find the service account key.

    Locations starting with ``file://`` are local paths, anything else is a URL
    that gets downloaded before use.
    """

    json_key_location: str | None = None
    p12_key_location: str | None = None
    service_account_email: str | None = None

    @property
    def uses_json_key(self) -> bool:
        return self.json_key_location is not None


@dataclass(frozen=True, slots=True)
class PublishConfig:
    package_name: str
    app_paths: tuple[Path, ...]
    track: str
    credentials: CredentialsConfig
    user_fraction: float = 0.0
    expansion_file_entries: tuple[str, ...] = ()
    mapping_paths: tuple[Path, ...] = ()
    release_notes_dir: Path | None = None
    resilience: ResilienceConfig = field(
        default_factory=lambda: default_androidpublisher_resilience()
    )


def default_androidpublisher_resilience(base_url: str | None = None) -> ResilienceConfig:
    return ResilienceConfig(
        name="androidpublisher",
        base_url=base_url or ANDROIDPUBLISHER_ROOT_URL,
        timeout_seconds=ANDROIDPUBLISHER_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
    )


def split_list(value: str | None) -> tuple[str, ...]:
    """Split a ``|`` or newline separated setting, dropping blank items."""

    if value is None:
        return ()
    return tuple(item.strip() for item in _LIST_SEPARATOR.split(value) if item.strip())


def strip_file_url(location: str) -> str | None:
    """Return the local path of a ``file://`` location, or ``None`` for remote ones."""

    if location.startswith(FILE_URL_PREFIX):
        return location.removeprefix(FILE_URL_PREFIX)
    return None


def parse_user_fraction(value: str | None) -> float:
    if value is None:
        return 0.0
    try:
        fraction = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid user fraction: {value!r}") from exc
    if not 0.0 <= fraction <= 1.0:
        raise ConfigurationError(f"User fraction must be between 0 and 1, got {fraction}")
    return fraction


def get_credentials_config(
    *,
    overrides: Mapping[str, str | None] | None = None,
) -> CredentialsConfig:
    json_key = read_env_var(ENV_JSON_KEY_PATH, overrides=overrides)
    if json_key is not None:
        _ensure_local_location_exists(json_key, ENV_JSON_KEY_PATH)
        return CredentialsConfig(json_key_location=json_key)

    p12_key = read_env_var(ENV_P12_KEY_PATH, overrides=overrides)
    if p12_key is None:
        raise MissingConfigurationError(
            f"Missing configuration for: {ENV_JSON_KEY_PATH} or {ENV_P12_KEY_PATH}"
        )
    _ensure_local_location_exists(p12_key, ENV_P12_KEY_PATH)
    email = require_env_vars((ENV_SERVICE_ACCOUNT_EMAIL,), overrides=overrides)[
        ENV_SERVICE_ACCOUNT_EMAIL
    ]
    return CredentialsConfig(p12_key_location=p12_key, service_account_email=email)


def get_publish_config(
    *,
    overrides: Mapping[str, str | None] | None = None,
) -> PublishConfig:
    """Build the immutable publishing configuration.

    Values come from the environment; entries in ``overrides`` (typically CLI flags)
    win over environment variables. Every local file is checked for existence here
    so nothing is uploaded from a half-valid configuration.
    """

    values = require_env_vars((ENV_PACKAGE_NAME, ENV_APP_PATH, ENV_TRACK), overrides=overrides)
    credentials = get_credentials_config(overrides=overrides)

    app_paths = tuple(Path(item) for item in split_list(values[ENV_APP_PATH]))
    if not app_paths:
        raise MissingConfigurationError(f"Missing configuration for: {ENV_APP_PATH}")
    for app_path in app_paths:
        _ensure_file_exists(app_path, "App")
        if app_path.suffix.lower() not in APP_SUFFIXES:
            raise ConfigurationError(f"Unsupported app file type (expected .apk or .aab): {app_path}")

    expansion_entries = split_list(read_env_var(ENV_EXPANSION_FILE_PATH, overrides=overrides))
    if expansion_entries and len(expansion_entries) != len(app_paths):
        raise ConfigurationError(
            f"Expansion file entries ({len(expansion_entries)}) must match "
            f"the number of apps ({len(app_paths)})"
        )

    mapping_paths = tuple(
        Path(item) for item in split_list(read_env_var(ENV_MAPPING_FILE, overrides=overrides))
    )
    if len(mapping_paths) > 1 and len(mapping_paths) != len(app_paths):
        raise ConfigurationError(
            f"Mapping files ({len(mapping_paths)}) must be a single file "
            f"or one per app ({len(app_paths)})"
        )
    for mapping_path in mapping_paths:
        _ensure_file_exists(mapping_path, "Mapping file")

    notes_dir = read_env_var(ENV_WHATSNEWS_DIR, overrides=overrides)
    api_url = read_env_var(ENV_API_URL, overrides=overrides)

    return PublishConfig(
        package_name=values[ENV_PACKAGE_NAME],
        app_paths=app_paths,
        track=values[ENV_TRACK],
        credentials=credentials,
        user_fraction=parse_user_fraction(read_env_var(ENV_USER_FRACTION, overrides=overrides)),
        expansion_file_entries=expansion_entries,
        mapping_paths=mapping_paths,
        release_notes_dir=Path(notes_dir) if notes_dir else None,
        resilience=default_androidpublisher_resilience(api_url),
    )


def _ensure_file_exists(path: Path, label: str) -> None:
    if not path.is_file():
        raise ConfigurationError(f"{label} does not exist at: {path}")


def _ensure_local_location_exists(location: str, name: str) -> None:
    local_path = strip_file_url(location)
    if local_path is not None and not Path(local_path).is_file():
        raise ConfigurationError(f"{name} does not exist at: {local_path}")

"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


def read_env_var(name: str, *, overrides: Mapping[str, str | None] | None = None) -> str | None:
    """Return a stripped value for ``name``, preferring explicit overrides.

    Blank values are treated as unset.
    """

    value = overrides.get(name) if overrides else None
    if value is None:
        value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def require_env_vars(
    names: Sequence[str],
    *,
    overrides: Mapping[str, str | None] | None = None,
) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = read_env_var(name, overrides=overrides)
        if value is None:
            missing.append(name)
            continue
        values[name] = value

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values

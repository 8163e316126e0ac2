"""Service account credentials and access tokens."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .keys import (
    ServiceAccountKey,
    load_json_key,
    load_p12_key,
    load_service_account_key,
    resolve_key_file,
)
from .token import ANDROIDPUBLISHER_SCOPE, ServiceAccountTokenSource

if TYPE_CHECKING:
    from playpublish.config.publisher import CredentialsConfig


def build_token_source(credentials: CredentialsConfig) -> ServiceAccountTokenSource:
    """Load the configured key and wrap it in a token source for the publisher scope."""

    return ServiceAccountTokenSource(load_service_account_key(credentials))


__all__ = [
    "ANDROIDPUBLISHER_SCOPE",
    "ServiceAccountKey",
    "ServiceAccountTokenSource",
    "build_token_source",
    "load_json_key",
    "load_p12_key",
    "load_service_account_key",
    "resolve_key_file",
]

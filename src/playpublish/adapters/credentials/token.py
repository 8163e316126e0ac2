"""OAuth2 access tokens for a service account (JWT bearer grant)."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
import jwt
from pydantic import BaseModel, ConfigDict, ValidationError

from playpublish.adapters.http_resilience import ResilientClient
from playpublish.config.http_resilience import ResilienceConfig
from playpublish.domain.errors import AuthenticationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from .keys import ServiceAccountKey

log = getLogger(__name__)

ANDROIDPUBLISHER_SCOPE: Final[str] = "https://www.googleapis.com/auth/androidpublisher"
JWT_BEARER_GRANT_TYPE: Final[str] = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS: Final[int] = 3600
EXPIRY_MARGIN_SECONDS: Final[int] = 60


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    expires_in: int = ASSERTION_LIFETIME_SECONDS
    token_type: str = "Bearer"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ServiceAccountTokenSource:
    """Mint and cache access tokens for one service account key.

    A new token is requested once the cached one is within a minute of expiry.
    """

    def __init__(
        self,
        key: ServiceAccountKey,
        *,
        scope: str = ANDROIDPUBLISHER_SCOPE,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._key = key
        self._scope = scope
        self._client_factory = client_factory or _default_client_factory
        self._clock = clock
        self._token: str | None = None
        self._expires_at = 0.0

    def build_assertion(self) -> str:
        now = int(self._clock())
        claims = {
            "iss": self._key.client_email,
            "scope": self._scope,
            "aud": self._key.token_uri,
            "iat": now,
            "exp": now + ASSERTION_LIFETIME_SECONDS,
        }
        headers = {"kid": self._key.private_key_id} if self._key.private_key_id else None
        try:
            return jwt.encode(claims, self._key.private_key, algorithm="RS256", headers=headers)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise AuthenticationError(f"Failed to sign token assertion: {exc}") from exc

    async def access_token(self) -> str:
        if self._token is not None and self._clock() < self._expires_at - EXPIRY_MARGIN_SECONDS:
            return self._token

        log.debug("Requesting access token for %s", self._key.client_email)
        assertion = self.build_assertion()
        resilience = ResilienceConfig(name="oauth2", timeout_seconds=30.0)
        async with self._client_factory(resilience) as client:
            try:
                response = await client.post(
                    self._key.token_uri,
                    data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
                )
            except httpx.HTTPError as exc:
                raise AuthenticationError(f"Token request failed: {exc}") from exc

        if response.is_error:
            raise AuthenticationError(
                f"Token request rejected (HTTP {response.status_code}): {response.text[:200]}"
            )
        try:
            payload = TokenResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AuthenticationError(f"Unexpected token response: {exc}") from exc

        self._token = payload.access_token
        self._expires_at = self._clock() + payload.expires_in
        return self._token

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import Encoding, NoEncryption, PrivateFormat

from playpublish.adapters.credentials.keys import GOOGLE_TOKEN_URI, ServiceAccountKey
from playpublish.adapters.credentials.token import (
    ANDROIDPUBLISHER_SCOPE,
    JWT_BEARER_GRANT_TYPE,
    ServiceAccountTokenSource,
)
from playpublish.adapters.http_resilience import ResilienceConfig, ResilientClient
from playpublish.domain.errors import AuthenticationError

NOW = 1_700_000_000.0


@pytest.fixture(scope="module")
def private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def service_account_key(private_key: rsa.RSAPrivateKey) -> ServiceAccountKey:
    pem = private_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    return ServiceAccountKey(
        client_email="publisher@example.iam.gserviceaccount.com",
        private_key=pem.decode("ascii"),
        private_key_id="key-1",
    )


class TokenEndpoint:
    def __init__(self, status_code: int = 200, expires_in: int = 3600) -> None:
        self.status_code = status_code
        self.expires_in = expires_in
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "invalid_grant"})
        return httpx.Response(
            200,
            json={
                "access_token": f"token-{len(self.requests)}",
                "expires_in": self.expires_in,
                "token_type": "Bearer",
            },
        )

    def client_factory(self, resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(self))


def test_build_assertion_is_signed_for_scope(
    service_account_key: ServiceAccountKey, private_key: rsa.RSAPrivateKey
) -> None:
    source = ServiceAccountTokenSource(service_account_key, clock=lambda: NOW)

    assertion = source.build_assertion()

    claims = jwt.decode(
        assertion,
        private_key.public_key(),
        algorithms=["RS256"],
        audience=GOOGLE_TOKEN_URI,
        options={"verify_exp": False},
    )
    assert claims["iss"] == "publisher@example.iam.gserviceaccount.com"
    assert claims["scope"] == ANDROIDPUBLISHER_SCOPE
    assert claims["iat"] == int(NOW)
    assert claims["exp"] == int(NOW) + 3600
    assert jwt.get_unverified_header(assertion)["kid"] == "key-1"


def test_build_assertion_with_invalid_key() -> None:
    key = ServiceAccountKey(client_email="someone@example.com", private_key="not a key")
    source = ServiceAccountTokenSource(key)

    with pytest.raises(AuthenticationError, match="Failed to sign"):
        source.build_assertion()


def test_access_token_exchanges_assertion(service_account_key: ServiceAccountKey) -> None:
    endpoint = TokenEndpoint()
    source = ServiceAccountTokenSource(
        service_account_key, client_factory=endpoint.client_factory, clock=lambda: NOW
    )

    token = asyncio.run(source.access_token())

    assert token == "token-1"
    request = endpoint.requests[0]
    assert str(request.url) == GOOGLE_TOKEN_URI
    form = parse_qs(request.content.decode())
    assert form["grant_type"] == [JWT_BEARER_GRANT_TYPE]
    assert form["assertion"][0].count(".") == 2


def test_access_token_is_cached_until_close_to_expiry(
    service_account_key: ServiceAccountKey,
) -> None:
    now = [NOW]
    endpoint = TokenEndpoint(expires_in=3600)
    source = ServiceAccountTokenSource(
        service_account_key, client_factory=endpoint.client_factory, clock=lambda: now[0]
    )

    first = asyncio.run(source.access_token())
    now[0] += 3000
    second = asyncio.run(source.access_token())
    now[0] += 560
    third = asyncio.run(source.access_token())

    assert (first, second, third) == ("token-1", "token-1", "token-2")
    assert len(endpoint.requests) == 2


def test_rejected_token_request(service_account_key: ServiceAccountKey) -> None:
    endpoint = TokenEndpoint(status_code=400)
    source = ServiceAccountTokenSource(service_account_key, client_factory=endpoint.client_factory)

    with pytest.raises(AuthenticationError, match="HTTP 400"):
        asyncio.run(source.access_token())

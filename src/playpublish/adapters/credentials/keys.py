"""Loading Google service account keys from JSON or legacy P12 files."""

from __future__ import annotations

import asyncio
import tempfile
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

import httpx
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)
from pydantic import BaseModel, ConfigDict, ValidationError

from playpublish.adapters.http_resilience import http_get_resilient
from playpublish.config.http_resilience import ResilienceConfig
from playpublish.config.publisher import strip_file_url
from playpublish.domain.errors import AuthenticationError

if TYPE_CHECKING:
    from playpublish.config.publisher import CredentialsConfig

log = getLogger(__name__)

GOOGLE_TOKEN_URI: Final[str] = "https://oauth2.googleapis.com/token"
P12_DEFAULT_PASSWORD: Final[bytes] = b"notasecret"
KEY_DOWNLOAD_DIR_PREFIX: Final[str] = "__google-play-deploy__"
KEY_DOWNLOAD_TIMEOUT_SECONDS: Final[float] = 30.0


class ServiceAccountKey(BaseModel):
    """The fields of a service account key this package needs."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    client_email: str
    private_key: str
    private_key_id: str | None = None
    token_uri: str = GOOGLE_TOKEN_URI


def load_json_key(path: Path) -> ServiceAccountKey:
    try:
        return ServiceAccountKey.model_validate_json(path.read_bytes())
    except OSError as exc:
        raise AuthenticationError(f"Failed to read json key file {path}: {exc}") from exc
    except ValidationError as exc:
        raise AuthenticationError(f"Invalid service account json key {path}: {exc}") from exc


def load_p12_key(path: Path, service_account_email: str) -> ServiceAccountKey:
    """Decode a legacy P12 key (Google's fixed ``notasecret`` password) to a PEM key."""

    try:
        private_key, _certificate, _additional = pkcs12.load_key_and_certificates(
            path.read_bytes(),
            P12_DEFAULT_PASSWORD,
        )
    except OSError as exc:
        raise AuthenticationError(f"Failed to read p12 key file {path}: {exc}") from exc
    except ValueError as exc:
        raise AuthenticationError(f"Failed to decode p12 key file {path}: {exc}") from exc
    if private_key is None:
        raise AuthenticationError(f"No private key found in p12 key file {path}")

    pem = private_key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    return ServiceAccountKey(client_email=service_account_email, private_key=pem.decode("ascii"))


def download_key_file(url: str, target_path: Path) -> Path:
    log.info("Downloading key file to %s", target_path)
    resilience = ResilienceConfig(
        name="key-download", timeout_seconds=KEY_DOWNLOAD_TIMEOUT_SECONDS
    )
    try:
        response = asyncio.run(http_get_resilient(resilience, url, follow_redirects=True))
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise AuthenticationError(f"Failed to download key file: {exc}") from exc
    try:
        target_path.write_bytes(response.content)
    except OSError as exc:
        raise AuthenticationError(f"Failed to write key file {target_path}: {exc}") from exc
    return target_path


def resolve_key_file(location: str, filename: str, *, download_dir: Path) -> Path:
    """Return a local path for ``location``, downloading remote keys into ``download_dir``."""

    local_path = strip_file_url(location)
    if local_path is not None:
        return Path(local_path)
    return download_key_file(location, download_dir / filename)


def load_service_account_key(
    credentials: CredentialsConfig,
    *,
    download_dir: Path | None = None,
) -> ServiceAccountKey:
    """Load the configured key.

    Remote keys are downloaded into ``download_dir`` or, by default, into a private
    temporary directory that is removed once the key has been read.
    """

    if download_dir is not None:
        return _load_key(credentials, download_dir)
    with tempfile.TemporaryDirectory(prefix=KEY_DOWNLOAD_DIR_PREFIX) as temp_dir:
        return _load_key(credentials, Path(temp_dir))


def _load_key(credentials: CredentialsConfig, download_dir: Path) -> ServiceAccountKey:
    if credentials.json_key_location is not None:
        path = resolve_key_file(
            credentials.json_key_location, "key.json", download_dir=download_dir
        )
        return load_json_key(path)

    if credentials.p12_key_location is None or credentials.service_account_email is None:
        raise AuthenticationError("No json key nor p12 key with service account email provided")
    path = resolve_key_file(credentials.p12_key_location, "key.p12", download_dir=download_dir)
    return load_p12_key(path, credentials.service_account_email)

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from playpublish.domain.model import Release, ReleaseStatus, Track
from tests.support.publisher import FakeEditsService

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def fake_service() -> FakeEditsService:
    return FakeEditsService(
        tracks=[
            Track(name="alpha", releases=(Release(version_codes=(3,), name="3"),)),
            Track(name="beta", releases=(Release(version_codes=(4, 5), name="4-5"),)),
            Track(
                name="production",
                releases=(Release(version_codes=(2,), name="2", status=ReleaseStatus.COMPLETED),),
            ),
        ],
        version_codes=[6],
    )


@pytest.fixture
def apk_file(tmp_path: Path) -> Path:
    path = tmp_path / "app-release.apk"
    path.write_bytes(b"PK\x03\x04apk")
    return path


@pytest.fixture
def bundle_file(tmp_path: Path) -> Path:
    path = tmp_path / "app-release.aab"
    path.write_bytes(b"PK\x03\x04aab")
    return path


PUBLISH_ENV_VARS = (
    "PACKAGE_NAME",
    "APP_PATH",
    "TRACK",
    "USER_FRACTION",
    "EXPANSION_FILE_PATH",
    "MAPPING_FILE",
    "WHATSNEWS_DIR",
    "SERVICE_ACCOUNT_JSON_KEY_PATH",
    "KEY_FILE_PATH",
    "SERVICE_ACCOUNT_EMAIL",
    "PLAYPUBLISH_API_URL",
)


@pytest.fixture(autouse=True)
def clean_publish_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in PUBLISH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def json_key_file(tmp_path: Path) -> Path:
    path = tmp_path / "key.json"
    path.write_text('{"client_email": "publisher@example.com", "private_key": "pem"}')
    return path

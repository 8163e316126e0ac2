from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from playpublish import app as app_module
from playpublish.app import publish_release, publish_request_from_config
from playpublish.config import CredentialsConfig, PublishConfig
from playpublish.domain.errors import UploadError
from playpublish.domain.publishing import PublishState

if TYPE_CHECKING:
    from pathlib import Path

    from tests.support.publisher import FakeEditsService


def _config(apk_file: Path, **kwargs: object) -> PublishConfig:
    return PublishConfig(
        package_name="com.example.app",
        app_paths=(apk_file,),
        track="production",
        credentials=CredentialsConfig(json_key_location="file:///keys/key.json"),
        **kwargs,  # type: ignore[arg-type]
    )


def test_publish_release_with_injected_service(
    fake_service: FakeEditsService, apk_file: Path
) -> None:
    result = publish_release(
        config=_config(apk_file),
        service_factory=lambda _config: fake_service,
    )

    assert result.state is PublishState.COMMITTED
    assert result.cleared_tracks == ["alpha", "beta"]
    assert fake_service.committed == ["edit-1"]


def test_publish_release_reads_notes_directory(
    fake_service: FakeEditsService, apk_file: Path, tmp_path: Path
) -> None:
    notes_dir = tmp_path / "whatsnew"
    notes_dir.mkdir()
    (notes_dir / "whatsnew-en-US").write_text("Bug fixes", encoding="utf-8")

    result = publish_release(
        config=_config(apk_file, release_notes_dir=notes_dir, user_fraction=0.5),
        service_factory=lambda _config: fake_service,
    )

    assert result.release is not None
    assert [note.text for note in result.release.release_notes] == ["Bug fixes"]
    assert result.release.user_fraction == 0.5


def test_publish_release_loads_config_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    fake_service: FakeEditsService,
    apk_file: Path,
    json_key_file: Path,
) -> None:
    monkeypatch.setenv("PACKAGE_NAME", "com.example.app")
    monkeypatch.setenv("APP_PATH", str(apk_file))
    monkeypatch.setenv("SERVICE_ACCOUNT_JSON_KEY_PATH", f"file://{json_key_file}")
    captured: list[PublishConfig] = []

    def factory(config: PublishConfig) -> FakeEditsService:
        captured.append(config)
        return fake_service

    publish_release(overrides={"TRACK": "beta"}, service_factory=factory)

    assert captured[0].track == "beta"
    assert fake_service.updated[0].name == "beta"


def test_build_edits_service_uses_configured_credentials(
    monkeypatch: pytest.MonkeyPatch, apk_file: Path
) -> None:
    seen: list[CredentialsConfig] = []

    def fake_build_token_source(credentials: CredentialsConfig) -> object:
        seen.append(credentials)
        return object()

    monkeypatch.setattr(app_module, "build_token_source", fake_build_token_source)
    config = _config(apk_file)

    service = app_module.build_edits_service(config)

    assert isinstance(service, app_module.AndroidPublisherClient)
    assert seen == [config.credentials]


def test_publish_request_from_config(apk_file: Path) -> None:
    request = publish_request_from_config(
        _config(apk_file, user_fraction=0.2, expansion_file_entries=("main:a.obb",))
    )

    assert request.package_name == "com.example.app"
    assert request.app_paths == (apk_file,)
    assert request.user_fraction == 0.2
    assert request.expansion_file_entries == ("main:a.obb",)


def test_publish_release_closes_service_on_success(
    fake_service: FakeEditsService, apk_file: Path
) -> None:
    publish_release(config=_config(apk_file), service_factory=lambda _config: fake_service)

    assert fake_service.closed is True


def test_publish_release_closes_service_on_failure(
    fake_service: FakeEditsService, apk_file: Path
) -> None:
    fake_service.fail_on.add("upload_apk")

    with pytest.raises(UploadError):
        publish_release(config=_config(apk_file), service_factory=lambda _config: fake_service)

    assert fake_service.closed is True
    assert fake_service.committed == []

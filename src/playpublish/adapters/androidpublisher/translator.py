"""Translate between androidpublisher payloads and domain objects."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from playpublish.domain.model import (
    EditSession,
    LocalizedText,
    Release,
    ReleaseStatus,
    Track,
)

from .schema import TrackPayload, TrackReleasePayload

if TYPE_CHECKING:
    from .schema import AppEdit

type JsonObject = dict[str, object]


def parse_edit(package_name: str, payload: AppEdit) -> EditSession:
    expires_at = None
    if payload.expiry_time_seconds:
        expires_at = datetime.fromtimestamp(int(payload.expiry_time_seconds), tz=UTC)
    return EditSession(package_name=package_name, edit_id=payload.id, expires_at=expires_at)


def parse_release_status(value: str | None) -> ReleaseStatus:
    if value is None:
        return ReleaseStatus.UNSPECIFIED
    try:
        return ReleaseStatus(value)
    except ValueError:
        return ReleaseStatus.UNSPECIFIED


def parse_release(payload: TrackReleasePayload) -> Release:
    return Release(
        version_codes=tuple(payload.version_codes),
        status=parse_release_status(payload.status),
        name=payload.name,
        user_fraction=payload.user_fraction,
        release_notes=tuple(
            LocalizedText(language=note.language, text=note.text) for note in payload.release_notes
        ),
        extra_fields=dict(payload.model_extra or {}),
    )


def parse_track(payload: TrackPayload | JsonObject) -> Track:
    model = payload if isinstance(payload, TrackPayload) else TrackPayload.model_validate(payload)
    return Track(
        name=model.track,
        releases=tuple(parse_release(release) for release in model.releases),
    )


def release_to_payload(release: Release) -> JsonObject:
    """Serialise ``release`` for a track patch/update request.

    Unset optional fields are omitted. Version codes are sent when present, and as
    an explicit empty list when the release was cleared; int64 values travel as
    strings like the API returns them.
    """

    payload: JsonObject = dict(release.extra_fields)
    if release.name is not None:
        payload["name"] = release.name
    if release.version_codes or release.version_codes_cleared:
        payload["versionCodes"] = [str(code) for code in release.version_codes]
    if release.status is not ReleaseStatus.UNSPECIFIED:
        payload["status"] = release.status.value
    if release.user_fraction is not None:
        payload["userFraction"] = release.user_fraction
    if release.release_notes:
        payload["releaseNotes"] = [
            {"language": note.language, "text": note.text} for note in release.release_notes
        ]
    return payload


def track_to_payload(track: Track) -> JsonObject:
    return {
        "track": track.name,
        "releases": [release_to_payload(release) for release in track.releases],
    }

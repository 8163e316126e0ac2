from __future__ import annotations

from playpublish.adapters.androidpublisher.schema import AppEdit, TrackPayload
from playpublish.adapters.androidpublisher.translator import (
    parse_edit,
    parse_release_status,
    parse_track,
    release_to_payload,
    track_to_payload,
)
from playpublish.domain.model import LocalizedText, Release, ReleaseStatus, Track


def test_parse_edit_without_expiry() -> None:
    session = parse_edit("com.example.app", AppEdit(id="edit-1"))

    assert session.edit_id == "edit-1"
    assert session.expires_at is None


def test_parse_release_status_unknown_values() -> None:
    assert parse_release_status("halted") is ReleaseStatus.HALTED
    assert parse_release_status(None) is ReleaseStatus.UNSPECIFIED
    assert parse_release_status("somethingNew") is ReleaseStatus.UNSPECIFIED


def test_parse_track_from_dict_and_model() -> None:
    payload = {
        "track": "beta",
        "releases": [
            {
                "versionCodes": ["4", "5"],
                "status": "inProgress",
                "userFraction": 0.5,
                "releaseNotes": [{"language": "en-US", "text": "Fixes"}],
            }
        ],
    }

    from_dict = parse_track(payload)
    from_model = parse_track(TrackPayload.model_validate(payload))

    assert from_dict == from_model
    release = from_dict.releases[0]
    assert release.version_codes == (4, 5)
    assert release.status is ReleaseStatus.IN_PROGRESS
    assert release.user_fraction == 0.5
    assert release.release_notes == (LocalizedText(language="en-US", text="Fixes"),)


def test_release_to_payload_omits_unset_fields() -> None:
    release = Release(status=ReleaseStatus.UNSPECIFIED)

    assert release_to_payload(release) == {}


def test_release_to_payload_distinguishes_cleared_from_unset() -> None:
    unset = Release(name="draft", status=ReleaseStatus.DRAFT)
    cleared = Release(name="3", version_codes_cleared=True)

    assert "versionCodes" not in release_to_payload(unset)
    assert release_to_payload(cleared)["versionCodes"] == []


def test_release_to_payload_sends_codes_as_strings_with_notes() -> None:
    release = Release(
        version_codes=(6, 7),
        status=ReleaseStatus.IN_PROGRESS,
        user_fraction=0.1,
        release_notes=(LocalizedText(language="de-DE", text="Neu"),),
    )

    assert release_to_payload(release) == {
        "versionCodes": ["6", "7"],
        "status": "inProgress",
        "userFraction": 0.1,
        "releaseNotes": [{"language": "de-DE", "text": "Neu"}],
    }


def test_round_trip_keeps_unmodelled_release_fields() -> None:
    track = parse_track(
        {
            "track": "alpha",
            "releases": [{"versionCodes": ["3"], "inAppUpdatePriority": 5}],
        }
    )

    payload = track_to_payload(track)

    assert payload["track"] == "alpha"
    assert payload["releases"] == [
        {"inAppUpdatePriority": 5, "versionCodes": ["3"]},
    ]


def test_track_to_payload_without_releases() -> None:
    assert track_to_payload(Track(name="internal")) == {"track": "internal", "releases": []}

"""Listing tracks and working out which lower tracks may need cleanup."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from .edits import ensure_open, remote_call
from .errors import ListError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import EditSession, Track
    from .ports import EditsService

log = getLogger(__name__)

ALPHA_TRACK: Final[str] = "alpha"
BETA_TRACK: Final[str] = "beta"
ROLLOUT_TRACK: Final[str] = "rollout"
PRODUCTION_TRACK: Final[str] = "production"

LOWER_TRACKS: Final[dict[str, tuple[str, ...]]] = {
    BETA_TRACK: (ALPHA_TRACK,),
    ROLLOUT_TRACK: (ALPHA_TRACK, BETA_TRACK),
    PRODUCTION_TRACK: (ALPHA_TRACK, BETA_TRACK),
}


def list_tracks(service: EditsService, session: EditSession) -> list[Track]:
    ensure_open(session)
    log.info("Listing tracks")
    tracks = remote_call(
        "list tracks",
        ListError,
        lambda: service.list_tracks(session.package_name, session.edit_id),
    )
    for track in tracks:
        log.debug(
            "Found track: %s, releases=%s",
            track.name,
            [list(release.version_codes) for release in track.releases],
        )
    return tracks


def resolve_track(name: str, tracks: Iterable[Track]) -> Track:
    for track in tracks:
        if track.name == name:
            log.debug("Current track found, name %r", name)
            return track
    raise NotFoundError(name)


def candidate_tracks_for_cleanup(target_track: str, tracks: Sequence[Track]) -> list[Track]:
    """Return the existing lower tracks that publishing to ``target_track`` may shadow."""

    lower = LOWER_TRACKS.get(target_track, ())
    candidates = [track for track in tracks if track.name in lower]
    log.info("Possible tracks to update: %s", [track.name for track in candidates])
    return candidates

"""Clearing lower-track releases that a new release would shadow.

A lower track keeps exposing its build after a newer one ships higher up, which
leaves testers on an older version. Before the target track is updated, each
candidate track's releases are compared against the new version codes and the
blocking ones are emptied.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING

from .edits import ensure_open, remote_call
from .errors import TrackUpdateError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import EditSession, Release, Track
    from .ports import EditsService

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackCleanup:
    """Outcome of evaluating one candidate track."""

    track: Track
    cleared: tuple[Release, ...] = ()
    patched: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.cleared)


def has_shadowing_versions(current: Iterable[int], new: Iterable[int]) -> bool:
    """Return True if, sorted ascending, some current code is below the new one at that index.

    Both sequences are copied before sorting; callers' ordering is left alone.
    """

    for current_code, new_code in zip(sorted(current), sorted(new), strict=True):
        log.debug("Comparing current (%s) with new (%s)", current_code, new_code)
        if current_code < new_code:
            log.info(
                "Shadowing version found, removing current (%s), adding new (%s)",
                current_code,
                new_code,
            )
            return True
    return False


def is_blocking(current: Sequence[int], new: Sequence[int]) -> bool:
    if len(current) != len(new):
        log.warning(
            "Mismatching app count (current %s, new %s), current versions will be removed",
            list(current),
            list(new),
        )
        return True
    return has_shadowing_versions(current, new)


def clear_release(release: Release) -> Release:
    return replace(release, version_codes=(), version_codes_cleared=True)


def clear_shadowed_releases(track: Track, new_version_codes: Sequence[int]) -> TrackCleanup:
    """Evaluate every release of ``track``; non-blocking releases are kept as-is."""

    releases: list[Release] = []
    cleared: list[Release] = []
    for release in track.releases:
        log.info(
            "Checking versions on %s release %s: current=%s, new=%s",
            track.name,
            release.name,
            list(release.version_codes),
            list(new_version_codes),
        )
        if is_blocking(release.version_codes, new_version_codes):
            updated = clear_release(release)
            cleared.append(updated)
            releases.append(updated)
        else:
            releases.append(release)

    return TrackCleanup(track=replace(track, releases=tuple(releases)), cleared=tuple(cleared))


def apply_cleanup(
    service: EditsService,
    session: EditSession,
    candidates: Iterable[Track],
    new_version_codes: Sequence[int],
) -> list[TrackCleanup]:
    """Clear shadowed releases on each candidate and write the tracks back.

    Tracks without releases are reported unchanged and not patched. Every other
    candidate is patched even if nothing was cleared.
    """

    results: list[TrackCleanup] = []
    for track in candidates:
        if not track.releases:
            log.info("Track %s has no releases, nothing to clear", track.name)
            results.append(TrackCleanup(track=track))
            continue

        ensure_open(session)
        cleanup = clear_shadowed_releases(track, new_version_codes)
        remote_call(
            f"patch track {track.name}",
            TrackUpdateError,
            lambda updated=cleanup.track: service.patch_track(
                session.package_name, session.edit_id, updated
            ),
        )
        if cleanup.changed:
            log.info("Blocking versions deactivated on track %s", track.name)
        else:
            log.info("No blocking version found on track %s", track.name)
        results.append(replace(cleanup, patched=True))
    return results

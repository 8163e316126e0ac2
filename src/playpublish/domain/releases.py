"""Building the release that goes onto the target track."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .errors import MalformedInputError
from .model import LocalizedText, Release, ReleaseStatus

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .ports import ReleaseNotesProvider

log = getLogger(__name__)


def release_status_for_fraction(user_fraction: float) -> ReleaseStatus:
    if user_fraction != 0:
        log.info("Release is a staged rollout, %s of users will receive it", user_fraction)
        return ReleaseStatus.IN_PROGRESS
    return ReleaseStatus.COMPLETED


def localized_release_notes(notes: Mapping[str, str]) -> tuple[LocalizedText, ...]:
    return tuple(
        LocalizedText(language=language, text=text) for language, text in sorted(notes.items())
    )


def build_release(
    version_codes: Sequence[int],
    user_fraction: float,
    notes_provider: ReleaseNotesProvider | None = None,
) -> Release:
    """Create the new release for ``version_codes``.

    A zero fraction means a full rollout: status ``completed`` and no fraction field.
    Any other fraction yields an ``inProgress`` staged rollout carrying it.
    """

    if not 0 <= user_fraction <= 1:
        raise MalformedInputError(f"User fraction must be between 0 and 1, got {user_fraction}")

    status = release_status_for_fraction(user_fraction)
    notes = notes_provider() if notes_provider is not None else {}
    if notes:
        log.info("Attaching release notes for: %s", ", ".join(sorted(notes)))
    else:
        log.debug("No release notes found")

    release = Release(
        version_codes=tuple(version_codes),
        status=status,
        user_fraction=user_fraction if user_fraction != 0 else None,
        release_notes=localized_release_notes(notes),
    )
    log.info("Release version codes are: %s", list(release.version_codes))
    return release

"""Filesystem loader for localized release notes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from playpublish.config.errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

RELEASE_NOTES_GLOB: Final[str] = "whatsnew-*-*"
RELEASE_NOTES_PATTERN: Final[re.Pattern[str]] = re.compile(r"^whatsnew-(?P<locale>.+-.+)$")


def load_release_notes(directory: Path | None) -> dict[str, str]:
    """Read ``whatsnew-<locale>`` files from ``directory`` into a locale -> text mapping.

    The locale part must itself contain a hyphen (``whatsnew-en-US``). Other files
    are ignored, and a missing or empty directory yields an empty mapping.
    """

    notes: dict[str, str] = {}
    if directory is None or not directory.is_dir():
        log.debug("No release notes directory at %s", directory)
        return notes

    for path in sorted(directory.glob(RELEASE_NOTES_GLOB)):
        match = RELEASE_NOTES_PATTERN.match(path.name)
        if match is None or not path.is_file():
            continue
        try:
            notes[match.group("locale")] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Failed to read release notes {path}: {exc}") from exc

    if notes:
        log.debug("Found release notes for: %s", ", ".join(notes))
    else:
        log.debug("No release notes found in %s", directory)
    return notes


@dataclass(frozen=True, slots=True)
class ReleaseNotesDirectory:
    """Release notes provider backed by a directory of ``whatsnew-*`` files."""

    directory: Path | None

    def __call__(self) -> dict[str, str]:
        return load_release_notes(self.directory)

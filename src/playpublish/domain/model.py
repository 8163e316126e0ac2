"""Domain model for edit-session publishing (pure, dependency-light)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime
    from pathlib import Path


class EditState(StrEnum):
    OPEN = "open"
    COMMITTED = "committed"
    ABANDONED = "abandoned"


class ArtifactKind(StrEnum):
    APK = "apk"
    BUNDLE = "bundle"

    @classmethod
    def from_path(cls, path: Path) -> ArtifactKind:
        """Bundles are recognised by their ``.aab`` suffix; everything else is an APK."""

        return cls.BUNDLE if path.suffix.lower() == ".aab" else cls.APK


class ExpansionFileType(StrEnum):
    MAIN = "main"
    PATCH = "patch"


class DeobfuscationFileType(StrEnum):
    PROGUARD = "proguard"


class ReleaseStatus(StrEnum):
    COMPLETED = "completed"
    IN_PROGRESS = "inProgress"
    # only ever read back from the backend, never produced here
    DRAFT = "draft"
    HALTED = "halted"
    UNSPECIFIED = "statusUnspecified"


@dataclass(slots=True)
class EditSession:
    """One in-flight edit for a package.

    Only the edit manager moves ``state``; once it leaves ``OPEN`` the session is
    dead and no further remote call may reference ``edit_id``.
    """

    package_name: str
    edit_id: str
    state: EditState = EditState.OPEN
    expires_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.state is EditState.OPEN


@dataclass(frozen=True, slots=True)
class CommittedEdit:
    package_name: str
    edit_id: str


@dataclass(frozen=True, slots=True)
class Artifact:
    path: Path
    version_code: int
    kind: ArtifactKind


@dataclass(frozen=True, slots=True)
class ExpansionFileSpec:
    """Parsed ``type:path`` descriptor, not yet tied to a version code."""

    file_type: ExpansionFileType
    path: Path


@dataclass(frozen=True, slots=True)
class ExpansionFile:
    version_code: int
    file_type: ExpansionFileType
    path: Path


@dataclass(frozen=True, slots=True)
class DeobfuscationFile:
    version_code: int
    path: Path
    file_type: DeobfuscationFileType = DeobfuscationFileType.PROGUARD


type AuxiliaryAsset = ExpansionFile | DeobfuscationFile


@dataclass(frozen=True, slots=True)
class LocalizedText:
    language: str
    text: str


@dataclass(frozen=True, slots=True)
class Release:
    """Exposure of a set of version codes on a track.

    ``version_codes_cleared`` marks an intentionally emptied release so the wire
    format sends an explicit empty list instead of leaving the field out.
    """

    version_codes: tuple[int, ...] = ()
    status: ReleaseStatus = ReleaseStatus.COMPLETED
    name: str | None = None
    user_fraction: float | None = None
    release_notes: tuple[LocalizedText, ...] = ()
    version_codes_cleared: bool = False
    # backend attributes this package does not model, passed through untouched
    extra_fields: Mapping[str, object] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True, slots=True)
class Track:
    name: str
    releases: tuple[Release, ...] = field(default_factory=tuple)

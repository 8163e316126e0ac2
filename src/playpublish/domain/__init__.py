"""Edit-session publishing core."""

from __future__ import annotations

from .errors import (
    AuthenticationError,
    CommitError,
    EditSessionClosedError,
    ListError,
    MalformedInputError,
    NotFoundError,
    PublishError,
    RemoteCallError,
    SessionOpenError,
    TrackUpdateError,
    UploadError,
)
from .model import (
    Artifact,
    ArtifactKind,
    CommittedEdit,
    DeobfuscationFile,
    EditSession,
    EditState,
    ExpansionFile,
    ExpansionFileType,
    LocalizedText,
    Release,
    ReleaseStatus,
    Track,
)
from .ports import EditsService, ReleaseNotesProvider
from .publishing import PublishRequest, PublishResult, PublishState, ReleasePublisher, publish

__all__ = [
    "Artifact",
    "ArtifactKind",
    "AuthenticationError",
    "CommitError",
    "CommittedEdit",
    "DeobfuscationFile",
    "EditSession",
    "EditSessionClosedError",
    "EditState",
    "EditsService",
    "ExpansionFile",
    "ExpansionFileType",
    "ListError",
    "LocalizedText",
    "MalformedInputError",
    "NotFoundError",
    "PublishError",
    "PublishRequest",
    "PublishResult",
    "PublishState",
    "Release",
    "ReleaseNotesProvider",
    "ReleasePublisher",
    "ReleaseStatus",
    "RemoteCallError",
    "SessionOpenError",
    "Track",
    "TrackUpdateError",
    "UploadError",
    "publish",
]

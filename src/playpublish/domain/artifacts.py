"""Uploading binaries and their auxiliary assets into an open edit."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from .edits import ensure_open, remote_call
from .errors import MalformedInputError, UploadError
from .model import (
    Artifact,
    ArtifactKind,
    DeobfuscationFile,
    DeobfuscationFileType,
    ExpansionFile,
    ExpansionFileSpec,
    ExpansionFileType,
)

if TYPE_CHECKING:
    from .model import EditSession
    from .ports import EditsService

log = getLogger(__name__)


def parse_expansion_file_entry(entry: str) -> ExpansionFileSpec:
    """Parse a ``"<type>:<path>"`` descriptor such as ``"main:/file/path/1.obb"``.

    The first colon-delimited segment is the type; the remaining segments are joined
    back together without the delimiter to form the path. Both are trimmed.
    """

    segments = entry.strip().split(":")
    if len(segments) < 2:
        raise MalformedInputError(f"Malformed expansion file entry: {entry!r}")

    raw_type = segments[0].strip()
    path = "".join(segments[1:]).strip()
    try:
        file_type = ExpansionFileType(raw_type)
    except ValueError:
        allowed = ", ".join(item.value for item in ExpansionFileType)
        raise MalformedInputError(
            f"Invalid expansion file type {raw_type!r} in {entry!r} (expected one of: {allowed})"
        ) from None
    if not path:
        raise MalformedInputError(f"Missing expansion file path in {entry!r}")

    log.debug("Expansion file type is %s, path is %s", file_type, path)
    return ExpansionFileSpec(file_type=file_type, path=Path(path))


def upload_artifact(
    service: EditsService,
    session: EditSession,
    path: Path,
    kind: ArtifactKind | None = None,
) -> Artifact:
    """Upload one binary and return it with the version code the backend assigned."""

    ensure_open(session)
    effective_kind = kind or ArtifactKind.from_path(path)
    log.debug("Uploading %s %s to edit %s", effective_kind, path, session.edit_id)

    if effective_kind is ArtifactKind.BUNDLE:
        version_code = remote_call(
            f"upload app bundle {path}",
            UploadError,
            lambda: service.upload_bundle(session.package_name, session.edit_id, path),
        )
    else:
        version_code = remote_call(
            f"upload apk {path}",
            UploadError,
            lambda: service.upload_apk(session.package_name, session.edit_id, path),
        )

    log.info("Uploaded %s version: %s", effective_kind, version_code)
    return Artifact(path=path, version_code=version_code, kind=effective_kind)


def upload_artifacts(
    service: EditsService,
    session: EditSession,
    paths: tuple[Path, ...] | list[Path],
) -> list[Artifact]:
    """Upload split builds one after another, in the given order."""

    return [upload_artifact(service, session, path) for path in paths]


def upload_expansion_file(
    service: EditsService,
    session: EditSession,
    version_code: int,
    spec: ExpansionFileSpec,
) -> ExpansionFile:
    ensure_open(session)
    remote_call(
        f"upload {spec.file_type} expansion file {spec.path}",
        UploadError,
        lambda: service.upload_expansion_file(
            session.package_name,
            session.edit_id,
            version_code,
            spec.file_type,
            spec.path,
        ),
    )
    log.info("Uploaded %s expansion file for version %s", spec.file_type, version_code)
    return ExpansionFile(version_code=version_code, file_type=spec.file_type, path=spec.path)


def upload_mapping_file(
    service: EditsService,
    session: EditSession,
    version_code: int,
    path: Path | None,
) -> DeobfuscationFile | None:
    """Upload the deobfuscation map for ``version_code``; no path means nothing to do."""

    if path is None:
        log.debug("No mapping file configured for version %s", version_code)
        return None

    ensure_open(session)
    file_type = DeobfuscationFileType.PROGUARD
    remote_call(
        f"upload mapping file {path}",
        UploadError,
        lambda: service.upload_deobfuscation_file(
            session.package_name,
            session.edit_id,
            version_code,
            file_type,
            path,
        ),
    )
    log.info("Uploaded mapping file for version: %s", version_code)
    return DeobfuscationFile(version_code=version_code, path=path, file_type=file_type)

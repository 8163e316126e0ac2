"""The edit-session publishing workflow."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from .artifacts import (
    parse_expansion_file_entry,
    upload_artifacts,
    upload_expansion_file,
    upload_mapping_file,
)
from .edits import EditSessionManager, ensure_open, remote_call
from .errors import MalformedInputError, TrackUpdateError
from .model import Track
from .releases import build_release
from .shadowing import apply_cleanup
from .tracks import candidate_tracks_for_cleanup, list_tracks, resolve_track

if TYPE_CHECKING:
    from pathlib import Path

    from .model import (
        Artifact,
        AuxiliaryAsset,
        CommittedEdit,
        EditSession,
        ExpansionFileSpec,
        Release,
    )
    from .ports import EditsService, ReleaseNotesProvider
    from .shadowing import TrackCleanup

log = getLogger(__name__)


class PublishState(StrEnum):
    CONFIGURED = "configured"
    SESSION_OPEN = "session_open"
    ARTIFACTS_UPLOADED = "artifacts_uploaded"
    AUXILIARY_ASSETS_UPLOADED = "auxiliary_assets_uploaded"
    TRACKS_RESOLVED = "tracks_resolved"
    CLEANUP_APPLIED = "cleanup_applied"
    RELEASE_BUILT = "release_built"
    TRACK_UPDATED = "track_updated"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Everything one run needs, already validated by the configuration layer.

    ``expansion_file_entries`` is either empty or index-aligned with ``app_paths``.
    ``mapping_paths`` is empty, a single file used for every app, or one per app.
    """

    package_name: str
    app_paths: tuple[Path, ...]
    track: str
    user_fraction: float = 0.0
    expansion_file_entries: tuple[str, ...] = ()
    mapping_paths: tuple[Path, ...] = ()

    def mapping_path_for(self, index: int) -> Path | None:
        if not self.mapping_paths:
            return None
        if len(self.mapping_paths) == 1:
            return self.mapping_paths[0]
        return self.mapping_paths[index]


@dataclass(slots=True)
class PublishResult:
    package_name: str
    track: str
    state: PublishState = PublishState.CONFIGURED
    edit_id: str | None = None
    artifacts: list[Artifact] = field(default_factory=list["Artifact"])
    auxiliary_assets: list[AuxiliaryAsset] = field(default_factory=list["AuxiliaryAsset"])
    cleanups: list[TrackCleanup] = field(default_factory=list["TrackCleanup"])
    release: Release | None = None
    committed: CommittedEdit | None = None

    @property
    def version_codes(self) -> list[int]:
        return [artifact.version_code for artifact in self.artifacts]

    @property
    def cleared_tracks(self) -> list[str]:
        return [cleanup.track.name for cleanup in self.cleanups if cleanup.changed]


class ReleasePublisher:
    """Runs one publishing attempt from ``Configured`` to ``Committed``.

    Any failure moves the run to ``Failed`` and propagates; the edit is abandoned
    and never committed. A publisher instance is single-use.
    """

    def __init__(
        self,
        service: EditsService,
        request: PublishRequest,
        *,
        notes_provider: ReleaseNotesProvider | None = None,
    ) -> None:
        self.service = service
        self.request = request
        self.notes_provider = notes_provider
        self.result = PublishResult(package_name=request.package_name, track=request.track)

    @property
    def state(self) -> PublishState:
        return self.result.state

    def run(self) -> PublishResult:
        if self.state is not PublishState.CONFIGURED:
            raise RuntimeError(f"Publisher already ran (state: {self.state})")

        try:
            expansion_specs = self._parse_expansion_entries()
            with EditSessionManager(self.service, self.request.package_name) as edit:
                self._run_session(edit, expansion_specs)
        except Exception:
            failed_after = self.state
            self.result.state = PublishState.FAILED
            log.error(
                "Publishing %s to %s failed after step: %s",
                self.request.package_name,
                self.request.track,
                failed_after,
            )
            raise
        return self.result

    def _advance(self, state: PublishState) -> None:
        log.debug("Publish state: %s -> %s", self.result.state, state)
        self.result.state = state

    def _parse_expansion_entries(self) -> list[ExpansionFileSpec | None]:
        entries = self.request.expansion_file_entries
        app_count = len(self.request.app_paths)
        if entries and len(entries) != app_count:
            raise MalformedInputError(
                f"Expansion file entries ({len(entries)}) must match "
                f"the number of apps ({app_count})"
            )
        if not entries:
            return [None] * app_count
        return [parse_expansion_file_entry(entry) for entry in entries]

    def _run_session(
        self,
        edit: EditSessionManager,
        expansion_specs: list[ExpansionFileSpec | None],
    ) -> None:
        session = edit.session
        self.result.edit_id = session.edit_id
        self._advance(PublishState.SESSION_OPEN)

        artifacts = upload_artifacts(self.service, session, self.request.app_paths)
        self.result.artifacts.extend(artifacts)
        self._advance(PublishState.ARTIFACTS_UPLOADED)

        self._upload_auxiliary_assets(session, artifacts, expansion_specs)
        self._advance(PublishState.AUXILIARY_ASSETS_UPLOADED)

        version_codes = self.result.version_codes
        tracks = list_tracks(self.service, session)
        target = resolve_track(self.request.track, tracks)
        candidates = candidate_tracks_for_cleanup(target.name, tracks)
        self._advance(PublishState.TRACKS_RESOLVED)

        self.result.cleanups.extend(apply_cleanup(self.service, session, candidates, version_codes))
        self._advance(PublishState.CLEANUP_APPLIED)

        release = build_release(version_codes, self.request.user_fraction, self.notes_provider)
        self.result.release = release
        self._advance(PublishState.RELEASE_BUILT)

        self._update_target_track(session, target, release)
        self._advance(PublishState.TRACK_UPDATED)

        self.result.committed = edit.commit()
        self._advance(PublishState.COMMITTED)

    def _upload_auxiliary_assets(
        self,
        session: EditSession,
        artifacts: list[Artifact],
        expansion_specs: list[ExpansionFileSpec | None],
    ) -> None:
        for index, artifact in enumerate(artifacts):
            spec = expansion_specs[index]
            if spec is not None:
                self.result.auxiliary_assets.append(
                    upload_expansion_file(self.service, session, artifact.version_code, spec)
                )
            mapping = upload_mapping_file(
                self.service,
                session,
                artifact.version_code,
                self.request.mapping_path_for(index),
            )
            if mapping is not None:
                self.result.auxiliary_assets.append(mapping)

    def _update_target_track(self, session: EditSession, target: Track, release: Release) -> None:
        """Replace the target track's releases with the new one."""

        ensure_open(session)
        updated = remote_call(
            f"update track {target.name}",
            TrackUpdateError,
            lambda: self.service.update_track(
                session.package_name,
                session.edit_id,
                Track(name=target.name, releases=(release,)),
            ),
        )
        log.info(
            "Updated track %s, assigned versions: %s",
            updated.name,
            [list(item.version_codes) for item in updated.releases],
        )


def publish(
    service: EditsService,
    request: PublishRequest,
    *,
    notes_provider: ReleaseNotesProvider | None = None,
) -> PublishResult:
    """Publish ``request`` through one edit session and return the committed result."""

    return ReleasePublisher(service, request, notes_provider=notes_provider).run()

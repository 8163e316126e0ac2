"""Ports implemented by adapters and consumed by the publishing workflow."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from .model import (
        CommittedEdit,
        DeobfuscationFileType,
        EditSession,
        ExpansionFileType,
        Track,
    )


@runtime_checkable
class EditsService(Protocol):
    """Blocking calls against the publishing backend's edit resources.

    Implementations raise :class:`~playpublish.domain.errors.RemoteCallError`
    (or a subclass) for any failed call and never retry on their own.
    """

    def insert_edit(self, package_name: str) -> EditSession: ...

    def upload_apk(self, package_name: str, edit_id: str, path: Path) -> int: ...

    def upload_bundle(self, package_name: str, edit_id: str, path: Path) -> int: ...

    def upload_expansion_file(
        self,
        package_name: str,
        edit_id: str,
        version_code: int,
        file_type: ExpansionFileType,
        path: Path,
    ) -> None: ...

    def upload_deobfuscation_file(
        self,
        package_name: str,
        edit_id: str,
        version_code: int,
        file_type: DeobfuscationFileType,
        path: Path,
    ) -> None: ...

    def list_tracks(self, package_name: str, edit_id: str) -> list[Track]: ...

    def patch_track(self, package_name: str, edit_id: str, track: Track) -> Track | None: ...

    def update_track(self, package_name: str, edit_id: str, track: Track) -> Track: ...

    def commit_edit(self, package_name: str, edit_id: str) -> CommittedEdit: ...

    def close(self) -> None: ...


@runtime_checkable
class ReleaseNotesProvider(Protocol):
    """Supplies release notes keyed by locale tag (e.g. ``en-US``)."""

    def __call__(self) -> Mapping[str, str]: ...


__all__ = ["EditsService", "ReleaseNotesProvider"]

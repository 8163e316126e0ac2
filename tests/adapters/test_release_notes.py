from __future__ import annotations

from typing import TYPE_CHECKING

from playpublish.adapters.release_notes import ReleaseNotesDirectory, load_release_notes

if TYPE_CHECKING:
    from pathlib import Path


def test_load_release_notes_by_locale(tmp_path: Path) -> None:
    (tmp_path / "whatsnew-en-US").write_text("Bug fixes", encoding="utf-8")
    (tmp_path / "whatsnew-de-DE").write_text("Fehlerbehebungen", encoding="utf-8")
    (tmp_path / "whatsnew-fr").write_text("ignored", encoding="utf-8")
    (tmp_path / "README.md").write_text("ignored", encoding="utf-8")

    notes = load_release_notes(tmp_path)

    assert notes == {"en-US": "Bug fixes", "de-DE": "Fehlerbehebungen"}


def test_load_release_notes_keeps_text_verbatim(tmp_path: Path) -> None:
    (tmp_path / "whatsnew-ja-JP").write_text("  修正\n", encoding="utf-8")

    assert load_release_notes(tmp_path) == {"ja-JP": "  修正\n"}


def test_load_release_notes_ignores_directories(tmp_path: Path) -> None:
    (tmp_path / "whatsnew-en-GB").mkdir()

    assert load_release_notes(tmp_path) == {}


def test_missing_directory_has_no_notes(tmp_path: Path) -> None:
    assert load_release_notes(tmp_path / "missing") == {}
    assert load_release_notes(None) == {}


def test_directory_provider(tmp_path: Path) -> None:
    (tmp_path / "whatsnew-en-US").write_text("Hello", encoding="utf-8")

    provider = ReleaseNotesDirectory(tmp_path)

    assert provider() == {"en-US": "Hello"}

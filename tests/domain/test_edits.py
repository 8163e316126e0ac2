from __future__ import annotations

import pytest

from playpublish.domain.edits import (
    EditSessionManager,
    abandon,
    commit,
    ensure_open,
    open_session,
    remote_call,
)
from playpublish.domain.errors import (
    CommitError,
    EditSessionClosedError,
    RemoteCallError,
    SessionOpenError,
    UploadError,
)
from playpublish.domain.model import EditState
from tests.support.publisher import FakeEditsService


def test_open_session_returns_open_edit() -> None:
    service = FakeEditsService(edit_id="abc")

    session = open_session(service, "com.example.app")

    assert session.edit_id == "abc"
    assert session.package_name == "com.example.app"
    assert session.state is EditState.OPEN


def test_open_session_failure_is_session_open_error() -> None:
    service = FakeEditsService(fail_on={"insert_edit"})

    with pytest.raises(SessionOpenError):
        open_session(service, "com.example.app")


def test_commit_marks_session_committed() -> None:
    service = FakeEditsService()
    session = open_session(service, "com.example.app")

    committed = commit(service, session)

    assert committed.edit_id == "edit-1"
    assert session.state is EditState.COMMITTED
    assert service.committed == ["edit-1"]


def test_commit_twice_is_refused() -> None:
    service = FakeEditsService()
    session = open_session(service, "com.example.app")
    commit(service, session)

    with pytest.raises(EditSessionClosedError):
        commit(service, session)

    assert service.committed == ["edit-1"]


def test_failed_commit_leaves_session_open() -> None:
    service = FakeEditsService(fail_on={"commit_edit"})
    session = open_session(service, "com.example.app")

    with pytest.raises(CommitError):
        commit(service, session)

    assert session.state is EditState.OPEN


def test_abandon_is_local_and_final() -> None:
    service = FakeEditsService()
    session = open_session(service, "com.example.app")

    abandon(session)

    assert session.state is EditState.ABANDONED
    assert service.call_names == ["insert_edit"]
    with pytest.raises(EditSessionClosedError):
        ensure_open(session)


def test_abandon_does_not_touch_committed_session() -> None:
    service = FakeEditsService()
    session = open_session(service, "com.example.app")
    commit(service, session)

    abandon(session)

    assert session.state is EditState.COMMITTED


def test_manager_abandons_on_error() -> None:
    service = FakeEditsService()

    with pytest.raises(RuntimeError), EditSessionManager(service, "com.example.app") as edit:
        session = edit.session
        raise RuntimeError("boom")

    assert session.state is EditState.ABANDONED
    assert service.committed == []


def test_manager_commit_inside_block() -> None:
    service = FakeEditsService()

    with EditSessionManager(service, "com.example.app") as edit:
        edit.commit()

    assert edit.session.state is EditState.COMMITTED
    assert service.committed == ["edit-1"]


def test_manager_without_commit_abandons() -> None:
    service = FakeEditsService()

    with EditSessionManager(service, "com.example.app") as edit:
        pass

    assert edit.session.state is EditState.ABANDONED
    assert service.committed == []


def test_manager_session_before_enter_raises() -> None:
    manager = EditSessionManager(FakeEditsService(), "com.example.app")

    with pytest.raises(EditSessionClosedError):
        _ = manager.session


def test_remote_call_tags_operation() -> None:
    def fail() -> int:
        raise RemoteCallError("POST /apks", "HTTP 500")

    with pytest.raises(UploadError) as excinfo:
        remote_call("upload apk app.apk", UploadError, fail)

    assert excinfo.value.operation == "upload apk app.apk"
    assert "HTTP 500" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, RemoteCallError)


def test_remote_call_passes_through_other_errors() -> None:
    def fail() -> int:
        raise KeyError("unexpected")

    with pytest.raises(KeyError):
        remote_call("list tracks", UploadError, fail)

"""Edit session lifecycle: open, commit, abandon."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from .errors import (
    CommitError,
    EditSessionClosedError,
    RemoteCallError,
    SessionOpenError,
)
from .model import EditState

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from .model import CommittedEdit, EditSession
    from .ports import EditsService

log = getLogger(__name__)


def remote_call[T](
    operation: str,
    error_type: type[RemoteCallError],
    func: Callable[[], T],
) -> T:
    """Run one backend call, re-raising failures as ``error_type`` tagged with ``operation``."""

    try:
        return func()
    except RemoteCallError as exc:
        raise error_type(operation, exc) from exc


def ensure_open(session: EditSession) -> None:
    if not session.is_open:
        raise EditSessionClosedError(
            f"Edit {session.edit_id} for {session.package_name} is {session.state}"
        )


def open_session(service: EditsService, package_name: str) -> EditSession:
    log.info("Create new edit for %s", package_name)
    session = remote_call("open edit", SessionOpenError, lambda: service.insert_edit(package_name))
    log.info("Edit opened: edit_id=%s", session.edit_id)
    return session


def commit(service: EditsService, session: EditSession) -> CommittedEdit:
    ensure_open(session)
    committed = remote_call(
        f"commit edit {session.edit_id}",
        CommitError,
        lambda: service.commit_edit(session.package_name, session.edit_id),
    )
    session.state = EditState.COMMITTED
    log.info("Edit committed: edit_id=%s", committed.edit_id)
    return committed


def abandon(session: EditSession) -> None:
    """Stop using ``session`` without committing.

    No remote call is made; the backend expires uncommitted edits on its own.
    """

    if session.state is EditState.OPEN:
        session.state = EditState.ABANDONED
        log.warning("Edit %s abandoned without commit", session.edit_id)


class EditSessionManager:
    """Context manager owning exactly one edit session.

    Leaving the block without :meth:`commit` abandons the session, so an exception
    anywhere inside can never lead to a partial commit.
    """

    def __init__(self, service: EditsService, package_name: str) -> None:
        self.service = service
        self.package_name = package_name
        self._session: EditSession | None = None

    @property
    def session(self) -> EditSession:
        if self._session is None:
            raise EditSessionClosedError(f"No edit opened for {self.package_name}")
        return self._session

    def __enter__(self) -> EditSessionManager:
        self._session = open_session(self.service, self.package_name)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if self._session is not None:
            abandon(self._session)
        return False  # don't swallow exceptions

    def commit(self) -> CommittedEdit:
        return commit(self.service, self.session)

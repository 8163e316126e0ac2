"""Error taxonomy for the publishing workflow.

Every error here is terminal for a run: nothing is retried and nothing is
committed once one has been raised.
"""

from __future__ import annotations


class PublishError(RuntimeError):
    """Base class for failures while publishing."""


class AuthenticationError(PublishError):
    """Raised when credentials cannot be loaded or exchanged for an access token."""


class MalformedInputError(PublishError):
    """Raised when publishing input is malformed, e.g. an unparsable asset descriptor."""


class NotFoundError(PublishError):
    """Raised when a named track is absent from the edit's track list."""

    def __init__(self, track_name: str) -> None:
        super().__init__(f"Could not find track with name {track_name}")
        self.track_name = track_name


class EditSessionClosedError(PublishError):
    """Raised when an operation targets an edit that was committed or abandoned."""


class RemoteCallError(PublishError):
    """A failed call against the publishing backend."""

    def __init__(self, operation: str, cause: BaseException | str) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class SessionOpenError(RemoteCallError):
    pass


class UploadError(RemoteCallError):
    pass


class ListError(RemoteCallError):
    pass


class TrackUpdateError(RemoteCallError):
    pass


class CommitError(RemoteCallError):
    pass


__all__ = [
    "AuthenticationError",
    "CommitError",
    "EditSessionClosedError",
    "ListError",
    "MalformedInputError",
    "NotFoundError",
    "PublishError",
    "RemoteCallError",
    "SessionOpenError",
    "TrackUpdateError",
    "UploadError",
]

"""Google Play Developer API adapter package."""

from __future__ import annotations

from .client import AccessTokenSource, AndroidPublisherAPIError, AndroidPublisherClient
from .schema import AppEdit, TrackPayload, TrackReleasePayload, TracksListResponse
from .translator import parse_track, release_to_payload, track_to_payload

__all__ = [
    "AccessTokenSource",
    "AndroidPublisherAPIError",
    "AndroidPublisherClient",
    "AppEdit",
    "TrackPayload",
    "TrackReleasePayload",
    "TracksListResponse",
    "parse_track",
    "release_to_payload",
    "track_to_payload",
]

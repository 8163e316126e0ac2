"""Configuration types for HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Connection settings for one remote API.

    Calls are made exactly once: repeating an upload against an edit creates a second
    version.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    upload_timeout_seconds: float = 600.0
    ratelimit: RateLimit | None = None

"""Minimal Pydantic models for the Google Play Developer API (androidpublisher v3)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PublisherBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class AppEdit(PublisherBaseModel):
    id: str
    expiry_time_seconds: str | None = None


class ApkBinary(PublisherBaseModel):
    sha1: str | None = None
    sha256: str | None = None


class Apk(PublisherBaseModel):
    version_code: int
    binary: ApkBinary | None = None


class Bundle(PublisherBaseModel):
    version_code: int
    sha1: str | None = None
    sha256: str | None = None


class ExpansionFile(PublisherBaseModel):
    file_size: int | None = None
    references_version: int | None = None


class ExpansionFilesUploadResponse(PublisherBaseModel):
    expansion_file: ExpansionFile | None = None


class DeobfuscationFile(PublisherBaseModel):
    symbol_type: str | None = None


class DeobfuscationFilesUploadResponse(PublisherBaseModel):
    deobfuscation_file: DeobfuscationFile | None = None


class LocalizedTextPayload(PublisherBaseModel):
    language: str
    text: str


class TrackReleasePayload(PublisherBaseModel):
    # keep fields we don't model (country targeting, update priority, ...) so a
    # patched track round-trips them unchanged
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    version_codes: list[int] = Field(default_factory=list[int])
    status: str | None = None
    user_fraction: float | None = None
    release_notes: list[LocalizedTextPayload] = Field(
        default_factory=list["LocalizedTextPayload"]
    )


class TrackPayload(PublisherBaseModel):
    track: str
    releases: list[TrackReleasePayload] = Field(default_factory=list["TrackReleasePayload"])


class TracksListResponse(PublisherBaseModel):
    kind: str | None = None
    tracks: list[TrackPayload] = Field(default_factory=list["TrackPayload"])


class ErrorDetail(PublisherBaseModel):
    code: int | None = None
    message: str | None = None
    status: str | None = None


class ErrorResponse(PublisherBaseModel):
    error: ErrorDetail

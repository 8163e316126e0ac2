"""HTTP client for the Google Play Developer API edit resources."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from playpublish.adapters.http_resilience import RequestOptions, ResilientClient
from playpublish.domain.errors import RemoteCallError
from playpublish.domain.model import CommittedEdit

from .schema import (
    Apk,
    AppEdit,
    Bundle,
    DeobfuscationFilesUploadResponse,
    ErrorResponse,
    ExpansionFilesUploadResponse,
    TrackPayload,
    TracksListResponse,
)
from .translator import parse_edit, parse_track, track_to_payload

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path
    from types import TracebackType
    from typing import Unpack

    from playpublish.config.http_resilience import ResilienceConfig
    from playpublish.domain.model import (
        DeobfuscationFileType,
        EditSession,
        ExpansionFileType,
        Track,
    )
    from playpublish.domain.ports import EditsService

log = getLogger(__name__)

API_PATH: Final[str] = "/androidpublisher/v3/applications"
UPLOAD_PATH: Final[str] = "/upload/androidpublisher/v3/applications"

APK_CONTENT_TYPE: Final[str] = "application/vnd.android.package-archive"
OCTET_STREAM_CONTENT_TYPE: Final[str] = "application/octet-stream"


class AccessTokenSource(Protocol):
    async def access_token(self) -> str: ...


class AndroidPublisherAPIError(RemoteCallError):
    """Raised when a Google Play Developer API request fails."""

    def __init__(self, operation: str, message: str, *, status_code: int | None = None) -> None:
        super().__init__(operation, message)
        self.status_code = status_code


class AndroidPublisherClient:
    """Blocking adapter over the androidpublisher v3 REST API.

    Every public method performs exactly one HTTP request. All requests share one
    event loop and one HTTP client, so the configured rate limit spans the whole
    run. Call :meth:`close` (or use the client as a context manager) when done.
    """

    def __init__(
        self,
        *,
        resilience: ResilienceConfig,
        token_source: AccessTokenSource,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = resilience
        self._token_source = token_source
        self._client_factory = client_factory or ResilientClient
        self._runner = asyncio.Runner()
        self._client: ResilientClient | None = None

    def __enter__(self) -> AndroidPublisherClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._runner.run(self._client.aclose())
            self._client = None
        self._runner.close()

    def insert_edit(self, package_name: str) -> EditSession:
        response = self._run("POST", f"{API_PATH}/{package_name}/edits", json={})
        return parse_edit(package_name, self._validate(AppEdit, response))

    def upload_apk(self, package_name: str, edit_id: str, path: Path) -> int:
        response = self._upload(
            f"{UPLOAD_PATH}/{package_name}/edits/{edit_id}/apks",
            path,
            APK_CONTENT_TYPE,
        )
        return self._validate(Apk, response).version_code

    def upload_bundle(self, package_name: str, edit_id: str, path: Path) -> int:
        response = self._upload(
            f"{UPLOAD_PATH}/{package_name}/edits/{edit_id}/bundles",
            path,
            OCTET_STREAM_CONTENT_TYPE,
        )
        return self._validate(Bundle, response).version_code

    def upload_expansion_file(
        self,
        package_name: str,
        edit_id: str,
        version_code: int,
        file_type: ExpansionFileType,
        path: Path,
    ) -> None:
        response = self._upload(
            f"{UPLOAD_PATH}/{package_name}/edits/{edit_id}/apks/{version_code}"
            f"/expansionFiles/{file_type}",
            path,
            OCTET_STREAM_CONTENT_TYPE,
        )
        self._validate(ExpansionFilesUploadResponse, response)

    def upload_deobfuscation_file(
        self,
        package_name: str,
        edit_id: str,
        version_code: int,
        file_type: DeobfuscationFileType,
        path: Path,
    ) -> None:
        response = self._upload(
            f"{UPLOAD_PATH}/{package_name}/edits/{edit_id}/apks/{version_code}"
            f"/deobfuscationFiles/{file_type}",
            path,
            OCTET_STREAM_CONTENT_TYPE,
        )
        self._validate(DeobfuscationFilesUploadResponse, response)

    def list_tracks(self, package_name: str, edit_id: str) -> list[Track]:
        response = self._run("GET", f"{API_PATH}/{package_name}/edits/{edit_id}/tracks")
        payload = self._validate(TracksListResponse, response)
        return [parse_track(track) for track in payload.tracks]

    def patch_track(self, package_name: str, edit_id: str, track: Track) -> Track | None:
        response = self._run(
            "PATCH",
            f"{API_PATH}/{package_name}/edits/{edit_id}/tracks/{track.name}",
            json=track_to_payload(track),
        )
        if not response.content:
            # an empty body is a successful no-op patch
            return None
        return parse_track(self._validate(TrackPayload, response))

    def update_track(self, package_name: str, edit_id: str, track: Track) -> Track:
        response = self._run(
            "PUT",
            f"{API_PATH}/{package_name}/edits/{edit_id}/tracks/{track.name}",
            json=track_to_payload(track),
        )
        if not response.content:
            return track
        return parse_track(self._validate(TrackPayload, response))

    def commit_edit(self, package_name: str, edit_id: str) -> CommittedEdit:
        response = self._run("POST", f"{API_PATH}/{package_name}/edits/{edit_id}:commit")
        payload = self._validate(AppEdit, response)
        return CommittedEdit(package_name=package_name, edit_id=payload.id)

    def _upload(self, path: str, file_path: Path, content_type: str) -> httpx.Response:
        operation = f"POST {path}"
        try:
            content = file_path.read_bytes()
        except OSError as exc:
            raise RemoteCallError(operation, f"failed to read {file_path}: {exc}") from exc

        log.debug("Uploading %s (%s bytes) to %s", file_path, len(content), path)
        return self._run(
            "POST",
            path,
            params={"uploadType": "media"},
            content=content,
            headers={"Content-Type": content_type},
            timeout=self._resilience.upload_timeout_seconds,
        )

    def _run(self, method: str, path: str, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return self._runner.run(self._perform_request(method, path, **kwargs))

    def _http_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._resilience)
        return self._client

    async def _perform_request(
        self,
        method: str,
        path: str,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        operation = f"{method} {path}"
        token = await self._token_source.access_token()
        headers = dict(kwargs.pop("headers", None) or {})  # pyright: ignore[reportArgumentType]
        headers["Authorization"] = f"Bearer {token}"

        log.debug("Request %s", operation)
        try:
            response = await self._http_client().request(
                method, path, headers=headers, **kwargs
            )
        except httpx.HTTPError as exc:
            raise AndroidPublisherAPIError(operation, str(exc)) from exc

        if response.is_error:
            raise AndroidPublisherAPIError(
                operation,
                _error_message(response),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _validate[TModel: BaseModel](
        model: type[TModel],
        response: httpx.Response,
    ) -> TModel:
        operation = f"{response.request.method} {response.request.url.path}"
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AndroidPublisherAPIError(
                operation,
                f"unexpected response payload: {exc}",
                status_code=response.status_code,
            ) from exc


def _error_message(response: httpx.Response) -> str:
    try:
        payload = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return f"HTTP {response.status_code}: {response.text[:200]}"
    message = payload.error.message or payload.error.status or "unknown error"
    return f"HTTP {response.status_code}: {message}"


if TYPE_CHECKING:

    def _service_check(client: AndroidPublisherClient) -> EditsService:
        return client

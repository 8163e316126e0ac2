"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from playpublish.adapters.androidpublisher import AndroidPublisherClient
from playpublish.adapters.credentials import build_token_source
from playpublish.adapters.release_notes import ReleaseNotesDirectory
from playpublish.config import get_publish_config
from playpublish.domain.publishing import PublishRequest, PublishResult, publish

if TYPE_CHECKING:
    from collections.abc import Mapping

    from playpublish.config import PublishConfig
    from playpublish.domain.ports import EditsService, ReleaseNotesProvider

EditsServiceFactory = Callable[["PublishConfig"], "EditsService"]


log = getLogger(__name__)


def build_edits_service(config: PublishConfig) -> EditsService:
    """Authenticate and return a client bound to the publisher scope."""

    log.info("Create client")
    token_source = build_token_source(config.credentials)
    client = AndroidPublisherClient(resilience=config.resilience, token_source=token_source)
    log.info("Client created")
    return client


def publish_request_from_config(config: PublishConfig) -> PublishRequest:
    return PublishRequest(
        package_name=config.package_name,
        app_paths=config.app_paths,
        track=config.track,
        user_fraction=config.user_fraction,
        expansion_file_entries=config.expansion_file_entries,
        mapping_paths=config.mapping_paths,
    )


def log_config(config: PublishConfig) -> None:
    log.info("Configs:")
    log.info("- PackageName: %s", config.package_name)
    log.info("- AppPaths: %s", ", ".join(str(path) for path in config.app_paths))
    log.info("- Track: %s", config.track)
    log.info("- UserFraction: %s", config.user_fraction)
    log.info("- ExpansionFiles: %s", list(config.expansion_file_entries))
    log.info("- MappingFiles: %s", [str(path) for path in config.mapping_paths])
    log.info("- WhatsNewsDir: %s", config.release_notes_dir)
    if config.credentials.uses_json_key:
        log.info("- Credentials: json key")
    else:
        log.info("- Credentials: p12 key for %s", config.credentials.service_account_email)


def publish_release(
    *,
    config: PublishConfig | None = None,
    overrides: Mapping[str, str | None] | None = None,
    service_factory: EditsServiceFactory | None = None,
    notes_provider: ReleaseNotesProvider | None = None,
) -> PublishResult:
    """Publish the configured binaries to Google Play through a single edit."""

    effective_config = config or get_publish_config(overrides=overrides)
    log_config(effective_config)

    service = (service_factory or build_edits_service)(effective_config)
    effective_notes = notes_provider or ReleaseNotesDirectory(effective_config.release_notes_dir)

    try:
        result = publish(
            service,
            publish_request_from_config(effective_config),
            notes_provider=effective_notes,
        )
    finally:
        service.close()

    log.info(
        "Finished publishing %s to %s: edit=%s, versions=%s, cleared_tracks=%s",
        result.package_name,
        result.track,
        result.edit_id,
        result.version_codes,
        result.cleared_tracks,
    )
    return result

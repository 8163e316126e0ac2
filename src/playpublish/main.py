from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from playpublish.app import publish_release
from playpublish.config import ConfigurationError, configure_logging
from playpublish.config.publisher import (
    ENV_APP_PATH,
    ENV_EXPANSION_FILE_PATH,
    ENV_JSON_KEY_PATH,
    ENV_MAPPING_FILE,
    ENV_P12_KEY_PATH,
    ENV_PACKAGE_NAME,
    ENV_SERVICE_ACCOUNT_EMAIL,
    ENV_TRACK,
    ENV_USER_FRACTION,
    ENV_WHATSNEWS_DIR,
)
from playpublish.domain.errors import MalformedInputError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130

# CLI destination -> environment variable it overrides
_OVERRIDES: dict[str, str] = {
    "package_name": ENV_PACKAGE_NAME,
    "app_path": ENV_APP_PATH,
    "track": ENV_TRACK,
    "user_fraction": ENV_USER_FRACTION,
    "expansion_file_path": ENV_EXPANSION_FILE_PATH,
    "mapping_file": ENV_MAPPING_FILE,
    "whatsnews_dir": ENV_WHATSNEWS_DIR,
    "json_key_path": ENV_JSON_KEY_PATH,
    "key_file_path": ENV_P12_KEY_PATH,
    "service_account_email": ENV_SERVICE_ACCOUNT_EMAIL,
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish Android binaries to a Google Play track",
        epilog="Every option falls back to the environment variable named in its help.",
    )
    parser.add_argument("--package-name", help=f"Application id ({ENV_PACKAGE_NAME})")
    parser.add_argument(
        "--app-path",
        help=f"'|' separated .apk/.aab paths, uploaded in order ({ENV_APP_PATH})",
    )
    parser.add_argument("--track", help=f"Target track, e.g. beta or production ({ENV_TRACK})")
    parser.add_argument(
        "--user-fraction",
        help=f"Staged rollout fraction in (0, 1]; 0 means full rollout ({ENV_USER_FRACTION})",
    )
    parser.add_argument(
        "--expansion-file-path",
        help=f"'|' separated main:<path> / patch:<path>, one per app ({ENV_EXPANSION_FILE_PATH})",
    )
    parser.add_argument(
        "--mapping-file",
        help=f"Deobfuscation mapping file, one or one per app ({ENV_MAPPING_FILE})",
    )
    parser.add_argument(
        "--whatsnews-dir",
        help=f"Directory with whatsnew-<locale> release notes ({ENV_WHATSNEWS_DIR})",
    )
    parser.add_argument(
        "--json-key-path",
        help=f"Service account json key, file://<path> or URL ({ENV_JSON_KEY_PATH})",
    )
    parser.add_argument(
        "--key-file-path",
        help=f"Legacy p12 key, file://<path> or URL ({ENV_P12_KEY_PATH})",
    )
    parser.add_argument(
        "--service-account-email",
        help=f"Service account email for the p12 key ({ENV_SERVICE_ACCOUNT_EMAIL})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(list(argv))


def _overrides_from_args(args: argparse.Namespace) -> dict[str, str | None]:
    return {env_name: getattr(args, dest) for dest, env_name in _OVERRIDES.items()}


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True)

    try:
        publish_release(overrides=_overrides_from_args(parsed_args))
    except (ConfigurationError, MalformedInputError):
        log.exception("Issue with input")
        sys.exit(EXIT_INVALID_INPUT)
    except Exception:
        log.exception("Fatal error during publishing")
        sys.exit(EXIT_FAILURE)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Abort the run on SIGINT (Ctrl+C) with status 130."""
    log.warning("Interrupted by user (Ctrl+C), nothing was committed")
    sys.exit(EXIT_INTERRUPTED)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from gemindex.app import ingest_gemspec_file, load_version, lookup_version
from gemindex.config import ConfigurationError, configure_logging, load_environment
from gemindex.domain.model import RUBY_PLATFORM

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from gemindex.domain.model import ExistingVersion

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile gemspecs into the gem catalog")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="Ingest a JSON-lines gemspec export")
    ingest.add_argument(
        "path",
        type=Path,
        help="File with one gemspec object per line",
    )

    lookup = subparsers.add_parser("lookup", help="Check whether a version is stored")
    lookup.add_argument("name", type=str, help="Package name")
    lookup.add_argument("number", type=str, help="Version number")
    lookup.add_argument(
        "--platform",
        type=str,
        default=RUBY_PLATFORM,
        help="Version platform (default: %(default)s)",
    )

    return parser.parse_args(list(argv))


def _validate_args(args: argparse.Namespace) -> None:
    if args.command == "ingest" and not args.path.is_file():
        raise ValueError(f"Gemspec export not found: {args.path}")
    if args.command == "lookup" and not args.name.strip():
        raise ValueError("Package name must not be blank")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        configure_logging(verbose=parsed_args.verbose)
        _validate_args(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "ingest":
            ingest_gemspec_file(parsed_args.path)
        elif parsed_args.command == "lookup":
            found = lookup_version(
                parsed_args.name,
                parsed_args.number,
                parsed_args.platform,
            )
            if found is None:
                log.info(
                    "%s-%s (%s) is not stored",
                    parsed_args.name,
                    parsed_args.number,
                    parsed_args.platform,
                )
                sys.exit(3)
            _report_version(parsed_args, found)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def _report_version(args: argparse.Namespace, found: ExistingVersion) -> None:
    loaded = load_version(found.version_id)
    if loaded is None:
        return
    version, dependencies = loaded
    log.info(
        "%s-%s (%s): package_id=%s, version_id=%s, indexed=%s, dependencies=%s",
        args.name,
        args.number,
        args.platform,
        found.package_id,
        found.version_id,
        version.indexed,
        len(dependencies),
    )
    for dependency in dependencies:
        log.debug(
            "  %s %s (package_id=%s)",
            dependency.scope,
            dependency.requirements,
            dependency.package_id,
        )


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_environment()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

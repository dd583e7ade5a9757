"""Command-line entrypoint for generating a pacman mirror list."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from mirrorlist.config import AppConfig, load_config
from mirrorlist.jobs import RunConfig, run_job
from mirrorlist.logging_utils import configure_logging, perf_span
from mirrorlist.ranking import InsufficientMirrors
from mirrorlist.source import Scheme, SourceUnavailable

LOGGER = logging.getLogger(__name__)


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mirrorlist",
        description="Generate a pacman mirror list from the fastest Arch Linux mirrors.",
    )
    parser.add_argument(
        "--mirror-list-timeout",
        type=_positive_float,
        default=10.0,
        help="Seconds to wait for the mirror list download (default: 10.0).",
    )
    parser.add_argument(
        "--mirror-timeout",
        type=_positive_float,
        default=5.0,
        help="Seconds to wait for each mirror request (default: 5.0).",
    )
    schemes = parser.add_mutually_exclusive_group()
    schemes.add_argument(
        "--http-only",
        action="store_true",
        help="Use only HTTP mirrors. Cannot be combined with --https-only.",
    )
    schemes.add_argument(
        "--https-only",
        action="store_true",
        help="Use only HTTPS mirrors. Cannot be combined with --http-only.",
    )
    parser.add_argument(
        "--count",
        type=_positive_int,
        default=5,
        help="Number of mirrors to generate (default: 5).",
    )
    parser.add_argument(
        "--pings",
        type=_positive_int,
        default=5,
        help="Requests per mirror. More pings give steadier results but take longer (default: 5).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the mirror list to this file, truncating it. Defaults to stdout.",
    )
    parser.add_argument(
        "--max-workers",
        type=_positive_int,
        default=None,
        help="Cap on concurrent mirror probes (default: one per mirror).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Display warnings for mirrors that fail probing.",
    )
    return parser.parse_args(argv)


def _scheme_from_args(args: argparse.Namespace) -> Scheme:
    if args.http_only:
        return Scheme.HTTP
    if args.https_only:
        return Scheme.HTTPS
    return Scheme.ALL


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config()
    except ValueError as exc:
        # Fall back to console-only logging so the failure is still reported.
        configure_logging(AppConfig())
        LOGGER.error("Failed to load configuration: %s", exc)
        return 1

    try:
        configure_logging(config)
    except OSError as exc:
        configure_logging(AppConfig())
        LOGGER.error("Failed to configure logging: %s", exc)
        return 1

    run_config = RunConfig(
        scheme=_scheme_from_args(args),
        list_timeout=args.mirror_list_timeout,
        mirror_timeout=args.mirror_timeout,
        pings=args.pings,
        count=args.count,
        output=args.output,
        verbose=args.verbose,
        max_workers=args.max_workers,
    )

    try:
        with perf_span(
            "job.total",
            tags={"scheme": run_config.scheme.value, "app": config.app_name},
        ):
            run_job(config, run_config)
    except SourceUnavailable as exc:
        LOGGER.error("%s", exc)
        return 1
    except InsufficientMirrors as exc:
        LOGGER.error("%s", exc)
        return 1
    except OSError as exc:
        if run_config.output is None:
            LOGGER.error("could not write mirror list to stdout: %s", exc)
        else:
            LOGGER.error("could not create %s: %s", run_config.output, exc)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - module entrypoint
    raise SystemExit(main())

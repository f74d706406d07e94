"""Command-line entry point for fontmirror."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_CONCURRENCY, DEFAULT_CONFIG_NAME, DEFAULT_TIMEOUT, load_config
from .errors import ConfigError, FontMirrorError, StylesheetParseError
from .mirror import mirror_fonts
from .utils import describe_error

logger = logging.getLogger("fontmirror.cli")

EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive number")
    return number


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Download the remote fonts referenced by @font-face rules and rewrite "
            "stylesheets to load them from local copies."
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help=(
            f"Path to a YAML config file; defaults to {DEFAULT_CONFIG_NAME} "
            "in the working directory"
        ),
    )
    parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=DEFAULT_CONCURRENCY,
        help="Maximum number of concurrent downloads",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=DEFAULT_TIMEOUT,
        help="HTTP timeout in seconds for stylesheet and font requests",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config_path = args.config or Path.cwd() / DEFAULT_CONFIG_NAME
    try:
        config = load_config(
            config_path, concurrency=args.concurrency, timeout=args.timeout
        )
    except ConfigError as exc:
        logger.error("%s", describe_error(exc))
        return EXIT_CONFIG_ERROR

    overall_start = time.perf_counter()
    try:
        result = asyncio.run(mirror_fonts(config))
    except StylesheetParseError as exc:
        for diagnostic in exc.diagnostics:
            logger.error("%s", diagnostic)
        logger.error("%s", exc)
        return EXIT_FAILURE
    except FontMirrorError as exc:
        logger.error("%s", describe_error(exc))
        return EXIT_FAILURE
    total_elapsed = time.perf_counter() - overall_start

    logger.info(
        "Finished in %.2fs (%d stylesheet(s), %d font(s) downloaded)",
        total_elapsed,
        len(result.stylesheets),
        result.downloads,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

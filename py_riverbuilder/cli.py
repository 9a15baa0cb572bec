"""Command line entry point."""

import argparse
import logging
import sys
from typing import List, Optional

import structlog

from .config.config import Settings, load_settings
from .core.errors import RiverBuilderError
from .pipeline import build_river_valley

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Configure structlog on top of the standard library logger."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="riverbuilder",
        description="Generate a synthetic river valley from an input file",
    )
    parser.add_argument("input", help="Input file with parameters and functions")
    parser.add_argument("-o", "--output-dir", help="Directory for the output files")
    parser.add_argument(
        "--overwrite",
        action="store_true",
        default=None,
        help="Replace output files that already exist",
    )
    parser.add_argument("--seed", type=int, help="Seed of the smoothed-noise random stream")
    parser.add_argument(
        "--no-charts",
        dest="write_charts",
        action="store_false",
        default=None,
        help="Skip the diagnostic PNG charts",
    )
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-format", choices=["plain", "json"], help="Log output format")
    parser.add_argument("--env-file", help="dotenv file with RIVERBUILDER_* settings")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool; returns the process exit status."""
    args = build_parser().parse_args(argv)

    settings = load_settings(
        env_file=args.env_file,
        output_dir=args.output_dir,
        overwrite=args.overwrite,
        seed=args.seed,
        write_charts=args.write_charts,
        log_level=args.log_level,
        log_format=args.log_format,
    )
    configure_logging(settings)

    try:
        build_river_valley(args.input, settings)
    except RiverBuilderError as exc:
        logger.error("River valley generation failed", error=str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

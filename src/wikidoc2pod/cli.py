"""Command-line interface: convert wikidoc in a source file to Pod."""

from __future__ import annotations

import argparse
import sys

from wikidoc2pod.config import (
    WIKIDOC2POD_COMMENT_BLOCKS,
    WIKIDOC2POD_COMMENT_PREFIX_LENGTH,
    WIKIDOC2POD_VERSION,
)
from wikidoc2pod.exceptions import Wikidoc2podError
from wikidoc2pod.pod_filter import FilterOptions, filter_file
from wikidoc2pod.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wikidoc2pod",
        description="Extract Pod and wikidoc from a source file and write Pod.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Input file (default: stdin)")
    parser.add_argument("output", nargs="?", default="-", help="Output file (default: stdout)")
    parser.add_argument(
        "-c",
        "--comments",
        action=argparse.BooleanOptionalAction,
        default=WIKIDOC2POD_COMMENT_BLOCKS,
        help="Also extract wikidoc from comment blocks (default: %(default)s)",
    )
    parser.add_argument(
        "-l",
        "--length",
        type=int,
        default=WIKIDOC2POD_COMMENT_PREFIX_LENGTH,
        help="Number of leading '#' characters marking a comment block (default: %(default)s)",
    )
    parser.add_argument(
        "-d",
        "--define",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Define a %%%%KEY%%%% keyword; may be repeated",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {WIKIDOC2POD_VERSION}")
    return parser


def parse_keywords(definitions: list[str]) -> dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a keyword mapping."""
    keywords: dict[str, str] = {}
    for definition in definitions:
        key, sep, value = definition.partition("=")
        if not sep or not key:
            raise ValueError(f"Keyword definition must look like KEY=VALUE: {definition!r}")
        keywords[key] = value
    return keywords


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else None)

    try:
        keywords = parse_keywords(args.define)
        options = FilterOptions(
            comment_blocks=args.comments,
            comment_prefix_length=args.length,
            keywords=keywords,
        )
    except ValueError as exc:
        parser.error(str(exc))

    input_file = None if args.input == "-" else args.input
    output_file = None if args.output == "-" else args.output
    try:
        filter_file(input_file, output_file, options)
    except Wikidoc2podError as exc:
        print(f"wikidoc2pod: {exc}", file=sys.stderr)
        return 1

    logger.debug("Converted {} to {}", args.input, args.output)
    return 0

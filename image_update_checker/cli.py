#!/usr/bin/env python3

"""
Image Update Checker CLI

Simplified CLI using the Functional Core, Imperative Shell pattern.
All business logic is in pure functions, all I/O is in the I/O layer.

Commands:
    check FILE          Check the FROM images of a Dockerfile
    check-compose FILE  Check every service of a Docker Compose file
    fetch IMAGE         List the newest tags of an image

Exit codes: 0 no updates, 1 compatible updates, 2 breaking updates,
10 failures.
"""

import argparse
import json
import logging
import os
import sys

from .config import (
    DEFAULT_FETCH_AMOUNT,
    EXIT_OK,
    EXIT_NO_UPDATE,
    EXIT_COMPATIBLE_UPDATE,
    EXIT_BREAKING_UPDATE,
    EXIT_ERROR,
)
from .environment import EnvironmentConfig
from .exceptions import UpdateCheckerError
from .io_layer import IOLayer
from .manifest_parsing import parse_image_reference
from .models import ManifestKind, UpdateLevel
from .plan_builder import prepare_plan
from .plan_executor import execute_plan
from .registry_client import DockerHubClient
from .report_generation import (
    generate_report_header,
    generate_failures_text,
    generate_successes_text,
    generate_json_report,
    generate_fetch_text,
)
from .utils import setup_logging, display_path
from .version_pattern import compile_pattern

logger = logging.getLogger(__name__)

EXIT_CODES = {
    UpdateLevel.NO_UPDATES: EXIT_NO_UPDATE,
    UpdateLevel.COMPATIBLE_UPDATE: EXIT_COMPATIBLE_UPDATE,
    UpdateLevel.BREAKING_UPDATE: EXIT_BREAKING_UPDATE,
    UpdateLevel.FAILURE: EXIT_ERROR,
}


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all sub-commands."""
    parser = argparse.ArgumentParser(
        prog="image-update-checker",
        description="Check image tags in Dockerfiles and compose files for available updates",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser("fetch", help="List the newest tags of an image")
    fetch_parser.add_argument("image", help="Image name, e.g. 'node' or 'grafana/grafana'")
    fetch_parser.add_argument("-p", "--pattern", help="Only list tags matching this pattern")
    fetch_parser.add_argument(
        "-a", "--amount", type=_positive_int, default=DEFAULT_FETCH_AMOUNT,
        help=f"Number of tags to fetch (default: {DEFAULT_FETCH_AMOUNT})",
    )
    fetch_parser.set_defaults(handler=run_fetch)

    for command, kind, help_text in (
        ("check", ManifestKind.DOCKERFILE, "Check the images of a Dockerfile"),
        ("check-compose", ManifestKind.COMPOSE, "Check the services of a Docker Compose file"),
    ):
        check_parser = subparsers.add_parser(command, help=help_text)
        check_parser.add_argument("file", help="Path to the file to check")
        check_parser.add_argument(
            "-p", "--pattern",
            help="Pattern for images without a pattern directive",
        )
        check_parser.add_argument("-j", "--json", action="store_true", help="Print the report as JSON")
        check_parser.set_defaults(handler=run_check, kind=kind)

    return parser


def run_fetch(args: argparse.Namespace, config: EnvironmentConfig, io_layer: IOLayer) -> int:
    """List the newest tags of an image, optionally filtered by a pattern."""
    pattern = compile_pattern(args.pattern) if args.pattern is not None else None
    image = parse_image_reference(args.image).name

    tags = io_layer.fetch_recent_tags(image, args.amount)
    listed = list(pattern.filter(tags)) if pattern is not None else tags

    print(generate_fetch_text(listed, len(tags), pattern))
    return EXIT_OK


def run_check(args: argparse.Namespace, config: EnvironmentConfig, io_layer: IOLayer) -> int:
    """Check a Dockerfile or compose file and print the report."""
    if args.pattern is not None:
        # Reject a malformed flag once instead of failing every image
        compile_pattern(args.pattern)

    plan = prepare_plan(
        args.kind,
        args.file,
        io_layer,
        default_pattern=args.pattern,
        marker=config.directive_marker,
    )
    report = execute_plan(plan, io_layer, max_workers=config.max_workers)
    path = display_path(args.file)

    if args.json:
        print(json.dumps(generate_json_report(report, path), indent=2))
    else:
        print(generate_report_header(report, path))
        print()
        failures = generate_failures_text(report)
        if failures:
            print(failures, file=sys.stderr)
            print()
        print(generate_successes_text(report))

    return EXIT_CODES[report.update_level]


def main(argv=None):
    """Main entry point - Clean planning/execution pipeline."""
    args = build_parser().parse_args(argv)

    # Step 1: Parse environment
    config = EnvironmentConfig.from_env(os.environ)

    # Step 2: Validate configuration
    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    setup_logging(logging.DEBUG if args.verbose else getattr(logging, config.log_level))

    # Step 3: Setup I/O layer
    registry_client = DockerHubClient(
        registry_url=config.registry_url,
        timeout=config.request_timeout,
        max_pages=config.max_tag_pages,
    )
    io_layer = IOLayer(registry_client)

    # Step 4: Run the command
    try:
        code = args.handler(args, config, io_layer)
    except UpdateCheckerError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = EXIT_ERROR
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"Unexpected error: {e}", file=sys.stderr)
        code = EXIT_ERROR

    sys.exit(code)


if __name__ == "__main__":
    main()

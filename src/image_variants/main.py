"""Main module for the image variants CLI."""

import sys
import json
import argparse
from typing import List, Optional

from . import __version__
from .core import (
    ConfigurationError,
    ImageVariantsError,
    MalformedEventError,
    SourceCreatedNotification,
    get_logger,
    load_config,
    object_url,
    set_debug_logging,
)
from .core.factories import ConversionPipelineFactory
from .processors import PROCESSORS


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for all subcommands."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="image-variants",
        description="Image Variants - resize uploaded images into configured storage variants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert one object, variants configured through THUMBNAIL_128_WIDTH etc.
  image-variants convert --bucket uploads --key photos/cat.jpg

  # Replay a saved S3 notification with a thread pool
  image-variants convert --event-file event.json --processor multithread

  # Show the variants the current environment configures
  image-variants variants
        """,
    )

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    convert_parser: argparse.ArgumentParser = subparsers.add_parser(
        "convert", help="Convert one source object into every configured variant"
    )
    source = convert_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Source object URL, e.g. s3://bucket/key")
    source.add_argument("--bucket", help="Source S3 bucket (requires --key)")
    source.add_argument("--event-file", help="JSON file holding a notification payload")
    convert_parser.add_argument("--key", help="Source S3 key")
    convert_parser.add_argument(
        "--processor",
        type=str,
        default=None,
        choices=sorted(PROCESSORS),
        help="Variant processing strategy (default: CONVERSION_PROCESSOR or serial)",
    )
    convert_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("variants", help="Show the configured variants")
    subparsers.add_parser("version", help="Show version information")

    return parser


def _run_convert(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    logger = get_logger("image-variants.cli")

    if args.debug:
        set_debug_logging()

    if args.bucket and not args.key:
        parser.error("--bucket requires --key")

    config = load_config()
    if args.processor:
        config.processor = args.processor

    pipeline = ConversionPipelineFactory.create_pipeline(config=config)

    if args.event_file:
        with open(args.event_file, "r", encoding="utf-8") as f:
            payload = json.load(f)
        reports = pipeline.handle_event(payload)
    else:
        url = args.url or object_url(args.bucket, args.key)
        reports = [pipeline.handle(SourceCreatedNotification(url=url))]

    for report in reports:
        print(json.dumps(report.summary(), indent=2))

    failed = sum(report.failed_count for report in reports)
    if failed:
        logger.warning(f"{failed} variant(s) failed")
        return 2
    return 0


def _show_variants() -> int:
    config = load_config()
    for variant in config.variants:
        try:
            definition = variant.to_definition()
            print(f"{definition.name:<16} width={definition.width:<6} container={definition.container}")
        except ConfigurationError as e:
            print(f"{variant.name:<16} INVALID: {e}")
    print(f"processor={config.processor} max_workers={config.max_workers}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the command-line interface of the image variants worker.

    ``convert`` runs the same pipeline the Lambda handler runs, against real
    S3; ``variants`` prints the configuration loaded from the environment.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "convert":
        try:
            sys.exit(_run_convert(args, parser))
        except (MalformedEventError, ConfigurationError) as e:
            get_logger("image-variants.cli").error(f"Cannot convert: {e}")
            sys.exit(1)
        except KeyboardInterrupt:
            get_logger("image-variants.cli").warning("Conversion interrupted by user.")
            sys.exit(130)

    elif args.command == "variants":
        try:
            sys.exit(_show_variants())
        except ImageVariantsError as e:
            get_logger("image-variants.cli").error(f"Invalid configuration: {e}")
            sys.exit(1)

    elif args.command == "version":
        print("Image Variants CLI")
        print(f"Version {__version__}")
        print("Resizes uploaded images into configured storage variants")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

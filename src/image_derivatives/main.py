"""Main module for the image derivatives CLI."""

import argparse
import json
import sys
from typing import List, Optional

from . import __version__
from .core import ImageDerivativesError, setup_logger
from .core.factories import RuntimeSettings
from .handler import handle_notification
from .processors import PROCESSORS


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="image-derivatives",
        description="Image Derivatives - reduce, back up and resize images uploaded to S3",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Replay a stored S3 put notification
  image-derivatives process --event event.json --config config.json

  # Transform on a thread pool and keep going past broken outputs
  image-derivatives process --event event.json --config config.json \\
                            --processor multithread --on-codec-error continue

  # Show version
  image-derivatives version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    process_parser = subparsers.add_parser(
        "process", help="Process the records of an S3 put notification"
    )
    process_parser.add_argument(
        "--event", required=True, help="JSON file holding the S3 notification"
    )
    process_parser.add_argument(
        "--config", default="config.json", help="JSON configuration of the outputs"
    )
    process_parser.add_argument(
        "--processor",
        type=str,
        default="serial",
        choices=list(PROCESSORS),
        help="Processing strategy to use (default: serial)",
    )
    process_parser.add_argument(
        "--on-codec-error",
        type=str,
        default="abort",
        choices=["abort", "continue"],
        help="Write nothing (abort) or the outputs that succeeded (continue)",
    )
    process_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the command-line interface."""
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "process":
        logger = setup_logger(level="DEBUG" if args.debug else None)
        try:
            with open(args.event, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read event file {args.event}: {e}")
            sys.exit(2)

        try:
            settings = RuntimeSettings(
                config_path=args.config,
                processor=args.processor,
                codec_error_policy=args.on_codec_error,
            )
            result = handle_notification(payload, settings)
        except ImageDerivativesError as e:
            logger.error(f"{type(e).__name__}: {e}")
            sys.exit(1)
        print(json.dumps(result))

    elif args.command == "version":
        print("Image Derivatives CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

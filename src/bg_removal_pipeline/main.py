"""Command-line interface for the background removal pipeline."""

import sys
import argparse

from . import __version__
from .core import PipelineConfig, get_logger
from .core.factories import ProcessingPipelineFactory


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bg-removal-pipeline",
        description="Remove backgrounds from every image under an R2 folder via remove.bg",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process the configured bucket/prefix into ./processed-images
  bg-removal-pipeline run

  # Show version
  bg-removal-pipeline version

Credentials are read from ACCESS_KEY_ID, SECRET_ACCESS_KEY and
REMOVE_BG_API_KEY (a .env file in the working directory is honoured).
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("run", help="Process all images in the configured folder")
    subparsers.add_parser("version", help="Show version information")
    return parser


def run() -> None:
    """
    Run one batch pass.

    Per-item failures are handled inside the batch driver; anything that
    reaches this function is fatal and exits with status 1.
    """
    logger = get_logger("processor")
    try:
        config = PipelineConfig.from_env()
        pipeline = ProcessingPipelineFactory.create_pipeline(config)
        pipeline.run()
    except KeyboardInterrupt:
        logger.warning("Processing interrupted by user.")
    except Exception as e:
        logger.error(f"Processing failed: {e}", exc_info=True)
        sys.exit(1)


def main() -> None:
    """Entry point for the bg-removal-pipeline command."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "run":
        run()
    elif args.command == "version":
        print("Background Removal Pipeline CLI")
        print(f"Version {__version__}")
        sys.exit(0)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

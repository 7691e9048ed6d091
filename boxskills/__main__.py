#!/usr/bin/env python3
"""boxskills - Box image annotation skill.

Command-line entry point for running the webhook pipeline locally against
a Box file, without deploying the serverless function.

Usage:
    python -m boxskills --file-id <file_id> --user-id <user_id>
    python -m boxskills --event event.json
    python -m boxskills --file-id <file_id> --user-id <user_id> --dry-run
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from ._version import __version__
from .box import BoxClient, WebhookEvent
from .box.exceptions import BoxError, BoxNotFoundError
from .config import ConfigManager, ConfigError
from .logging_config import setup_logging
from .processing import SkillProcessor
from .processing.exceptions import MetadataWriteError
from .vision.exceptions import AnnotationError


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to ``sys.argv[1:]``)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="boxskills - write Vision keywords and transcripts to Box file metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process a file as its owner
  python -m boxskills --file-id 222 --user-id 111

  # Replay a saved webhook event (or bare webhook body)
  python -m boxskills --event event.json

  # Preview the metadata without writing it
  python -m boxskills --file-id 222 --user-id 111 --dry-run

  # Read the written metadata back
  python -m boxskills --file-id 222 --user-id 111 --show
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"boxskills {__version__}"
    )

    # File selection (mutually exclusive)
    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--file-id",
        metavar="ID",
        help="Box file ID to process (requires --user-id)"
    )
    source_group.add_argument(
        "--event",
        metavar="PATH",
        help="JSON file holding a webhook event or webhook body"
    )
    parser.add_argument(
        "--user-id",
        metavar="ID",
        help="Box user ID owning the file"
    )

    # Processing options
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Annotate and format metadata without writing it to Box"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Read the metadata templates back from Box after processing"
    )

    # Configuration
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to a YAML config file (default: environment only)"
    )

    # Output control
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose debug logging"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress all output except errors"
    )

    args = parser.parse_args(argv)

    if args.file_id and not args.user_id:
        parser.error("--file-id requires --user-id")

    return args


def load_webhook(args: argparse.Namespace) -> WebhookEvent:
    """Build the webhook event from the command-line arguments.

    Raises:
        WebhookEventError: If the event file is malformed
        OSError: If the event file cannot be read
    """
    if args.file_id:
        return WebhookEvent(user_id=args.user_id, file_id=args.file_id)

    with open(args.event, "r") as f:
        raw = f.read()

    try:
        data = json.loads(raw)
    except ValueError:
        return WebhookEvent.from_event({"body": raw})

    if isinstance(data, dict) and "body" in data:
        return WebhookEvent.from_event(data)
    return WebhookEvent.from_payload(data)


def print_summary(result, dry_run: bool) -> None:
    """Print processing summary.

    Args:
        result: ProcessingResult object
        dry_run: Whether this was a dry run
    """
    print()
    print("=" * 70)
    print("Processing Summary")
    print("=" * 70)
    print()
    print(f"File:             {result.file_id}")
    print(f"Size:             {result.file_size} bytes")
    print(f"Annotated by:     {result.annotation_model}")
    print(f"Processing time:  {result.processing_time:.1f}s")
    print()

    for write in result.writes:
        status = "○" if write.skipped else "✓" if write.success else "✗"
        print(f"{status} {write.template_key}")
        for key, value in write.record.items():
            print(f"    {key}: {value!r}")

    print()
    if dry_run:
        print("✓ Dry run complete! No metadata was written to Box.")
    else:
        print("✓ Processing complete! Metadata has been written to Box.")
    print()


def show_metadata(client: BoxClient, file_id: str, template_keys: List[str]) -> None:
    """Print the metadata instances stored on a file."""
    print("Stored metadata:")
    for template_key in template_keys:
        try:
            values = client.get_file_metadata(file_id, template_key)
        except BoxNotFoundError:
            print(f"  {template_key}: (none)")
            continue
        print(f"  {template_key}: {values}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the boxskills CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)

    if args.quiet:
        logging.basicConfig(level=logging.ERROR)
    else:
        setup_logging("DEBUG" if args.verbose else "INFO", "%(levelname)s - %(name)s - %(message)s")

    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager.load(config_path=args.config)
        if args.dry_run:
            config.set("processing.dry_run", True)

        log_file = config.get("logging.file")
        if log_file and not args.quiet:
            setup_logging(
                "DEBUG" if args.verbose else config.get("logging.level", "INFO"),
                config.get("logging.format"),
                log_file=log_file
            )

        webhook = load_webhook(args)

        if not args.quiet:
            print(f"Processing file {webhook.file_id} as user {webhook.user_id}...")
            if config.get("processing.dry_run"):
                print("⚠️  DRY RUN MODE - No metadata will be written to Box")
            print()

        processor = SkillProcessor(config)
        client = BoxClient.for_user(config, webhook.user_id)
        result = processor.process_file(client, webhook.file_id, user_id=webhook.user_id)

        if not args.quiet:
            print_summary(result, processor.dry_run)
            if args.show:
                show_metadata(client, webhook.file_id, list(result.records()))

        return 0

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        if not args.quiet:
            print()
            print(f"✗ Configuration Error: {e}")
        return 2

    except BoxError as e:
        logger.error(f"Box error: {e}", exc_info=args.verbose)
        if not args.quiet:
            print()
            print(f"✗ Box Error: {e}")
            print()
            print("Troubleshooting:")
            print("  - Verify the Box app credentials (BOX_* variables)")
            print("  - Check that the file ID exists and the user can access it")
        return 3

    except AnnotationError as e:
        logger.error(f"Annotation error: {e}", exc_info=args.verbose)
        if not args.quiet:
            print()
            print(f"✗ Annotation Error: {e}")
            print()
            print("Troubleshooting:")
            print("  - Verify the Google service account (GCV_* variables)")
            print("  - Check that the file is an image Vision can read")
        return 4

    except MetadataWriteError as e:
        logger.error(f"Metadata error: {e}")
        if not args.quiet:
            print()
            print(f"✗ Metadata Error: {e}")
            for write in e.results:
                status = "✓" if write.success else "✗"
                print(f"  {status} {write.template_key}" + (f": {write.error}" if write.error else ""))
        return 1

    except KeyboardInterrupt:
        if not args.quiet:
            print()
            print("Processing interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        if not args.quiet:
            print()
            print(f"✗ Unexpected Error: {e}")
            if not args.verbose:
                print("Run with --verbose for detailed error information")
        return 1


if __name__ == "__main__":
    sys.exit(main())

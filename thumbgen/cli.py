"""
Command Line Interface for the thumbnail handler.
"""

import argparse
import json
import logging
import mimetypes
import sys
from typing import List, Optional

import urllib3

from .errors import ThumbnailError
from .handler import build_pipeline, setup_logging
from .handler_config import HandlerConfig
from .local_client import LocalConfig, LocalClient
from .naming import NamingPolicy
from .object_ref import ObjectEvent, ObjectRef
from .processing_stats import ProcessingStats
from .s3_client import S3Client
from .s3_config import S3Config


def get_s3_config(args: argparse.Namespace) -> S3Config:
    """Get S3 configuration from environment and CLI overrides."""
    config = S3Config.from_env()

    if getattr(args, 's3_endpoint', None):
        config.endpoint = args.s3_endpoint
    if getattr(args, 's3_access_key', None):
        config.access_key = args.s3_access_key
    if getattr(args, 's3_secret_key', None):
        config.secret_key = args.s3_secret_key
    if getattr(args, 's3_region', None):
        config.region = args.s3_region

    return config


def get_handler_config(args: argparse.Namespace) -> HandlerConfig:
    """Get handler configuration from environment and CLI overrides."""
    config = HandlerConfig.from_env()

    if getattr(args, 'max_width', None) is not None:
        config.max_width = args.max_width
    if getattr(args, 'max_height', None) is not None:
        config.max_height = args.max_height
    if getattr(args, 'allow_enlargement', False):
        config.allow_enlargement = True
    if getattr(args, 'prefix', None) is not None:
        config.prefix = args.prefix
    if getattr(args, 'quality', None) is not None:
        config.quality = args.quality

    return config


def get_storage_client(args: argparse.Namespace, logger: logging.Logger):
    """
    Get appropriate storage client based on arguments.

    Returns:
        LocalClient if --local-root is given, otherwise S3Client

    Raises:
        ValueError: If the storage configuration is invalid
    """
    local_root = getattr(args, 'local_root', None)

    if local_root:
        config = LocalConfig(root_path=local_root)
        errors = config.validate()
        if errors:
            for error in errors:
                logger.error(error)
            raise ValueError("Local configuration invalid")

        logger.info(f"Storage: Local filesystem ({config.root_path})")
        return LocalClient(config, logger)

    config = get_s3_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        raise ValueError("S3 configuration invalid")

    logger.info(f"Storage: S3 ({config.endpoint or 'default endpoint'})")
    return S3Client(config, logger)


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    local_group = parser.add_argument_group('Local Storage')
    local_group.add_argument('--local-root', metavar='PATH',
                             help='Use local filesystem instead of S3; buckets are subdirectories')

    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--s3-endpoint', help='Override S3_ENDPOINT')
    s3_group.add_argument('--s3-access-key', help='Override S3_ACCESS_KEY')
    s3_group.add_argument('--s3-secret-key', help='Override S3_SECRET_KEY')
    s3_group.add_argument('--s3-region', help='Override S3_REGION')


def add_thumbnail_arguments(parser: argparse.ArgumentParser) -> None:
    """Add thumbnail settings arguments to a parser."""
    group = parser.add_argument_group('Thumbnail')
    group.add_argument('--max-width', type=int, metavar='N', help='Maximum width (default: 200)')
    group.add_argument('--max-height', type=int, metavar='N', help='Maximum height (default: 200)')
    group.add_argument('--allow-enlargement', action='store_true',
                       help='Upscale images smaller than the bounding box')
    group.add_argument('--prefix', help='Thumbnail filename prefix (default: thumb_)')
    group.add_argument('--quality', type=int, metavar='Q', help='JPEG/WebP quality (default: 85)')


def cmd_classify(args: argparse.Namespace) -> int:
    """Execute classify command."""
    try:
        naming = NamingPolicy(NamingPolicy.DEFAULT_PREFIX if args.prefix is None else args.prefix)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    content_type = args.content_type or mimetypes.guess_type(args.path)[0]
    result = naming.classify(args.path, content_type)

    print(f"Path:          {args.path}")
    print(f"Content type:  {content_type or '(none)'}")
    if result.is_eligible:
        print("Eligible:      yes")
        print(f"Thumbnail:     {result.derived_path}")
    else:
        print(f"Eligible:      no ({result.reason.value})")
        if result.is_already_thumbnail:
            print(f"Original:      {naming.original_path(args.path)}")
    return 0


def cmd_process(args: argparse.Namespace) -> int:
    """Execute process command."""
    logger = setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    try:
        store = get_storage_client(args, logger)
        pipeline = build_pipeline(get_handler_config(args), store, logger)
    except ValueError as e:
        logger.error(str(e))
        return 1

    spec = pipeline.thumb_gen.spec
    logger.info(
        f"Thumbnail size: {spec.max_width}x{spec.max_height}"
        f"{' (enlargement allowed)' if spec.allow_enlargement else ''}"
    )

    stats = ProcessingStats(total_to_process=len(args.keys))

    try:
        for key in args.keys:
            content_type = args.content_type or mimetypes.guess_type(key)[0]
            event = ObjectEvent(ObjectRef(args.bucket, key), content_type)
            naming = pipeline.naming.classify(key, content_type)

            if args.dry_run:
                if naming.is_eligible:
                    print(f"  [DRY RUN] {key} -> {naming.derived_path}")
                else:
                    print(f"  [SKIP] {key} -> {naming.reason.value}")
                stats.record_skip('dry_run')
                continue

            try:
                if naming.is_eligible and args.skip_existing and store.exists(args.bucket, naming.derived_path):
                    logger.info(f"Skipping {args.bucket}/{key} (thumbnail exists)")
                    stats.record_skip('exists')
                    continue
                result = pipeline.handle(event)
            except ThumbnailError as e:
                stats.record_error(key, e)
                continue

            stats.record_result(result)

    except KeyboardInterrupt:
        logger.info(f"Interrupted by user ({stats.remaining_count} of {stats.total_to_process} not processed)")
        return 130

    if not args.quiet:
        print()
        print(f"Generated: {stats.completed} ({stats.bytes_generated / 1024:.1f} KB)")
        reasons = ', '.join(f"{reason}: {count}" for reason, count in sorted(stats.skip_reasons.items()))
        print(f"Skipped: {stats.skipped}" + (f" ({reasons})" if reasons else ''))
        print(f"Errors: {stats.errors} ({stats.retryable_errors} retryable)")
        for detail in stats.error_details:
            print(f"  {detail}")
        print(f"Time: {stats.elapsed_seconds:.1f}s ({stats.rate_per_second:.1f} thumbnails/s)")

    return 0 if stats.errors == 0 else 1


def cmd_event(args: argparse.Namespace) -> int:
    """Execute event command."""
    logger = setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    try:
        if args.file == '-':
            payload = json.load(sys.stdin)
        else:
            with open(args.file) as f:
                payload = json.load(f)
    except FileNotFoundError:
        logger.error(f"Event file not found: {args.file}")
        return 1
    except json.JSONDecodeError as e:
        logger.error(f"Event is not valid JSON: {e}")
        return 1

    try:
        store = get_storage_client(args, logger)
        pipeline = build_pipeline(get_handler_config(args), store, logger)
    except ValueError as e:
        logger.error(str(e))
        return 1

    try:
        result = pipeline.handle(ObjectEvent.from_dict(payload))
    except ThumbnailError as e:
        print(json.dumps({
            'status': 'failed',
            'error': type(e).__name__,
            'retryable': e.retryable,
            'stage': e.stage,
            'message': str(e),
        }, indent=2))
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='thumbgen',
        description='Generate thumbnails for images uploaded to object storage',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m thumbgen classify photos/cat.jpg
  python -m thumbgen process --bucket photos-bucket photos/cat.jpg photos/dog.png
  python -m thumbgen event event.json

Storage options:
  Use --local-root for local filesystem, or S3 environment variables for S3.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Classify command
    classify_parser = subparsers.add_parser('classify', help='Show how a path would be handled (no I/O)')
    classify_parser.add_argument('path', help='Object path')
    classify_parser.add_argument('--content-type', help='Declared content type (default: guessed from path)')
    classify_parser.add_argument('--prefix', help='Thumbnail filename prefix (default: thumb_)')

    # Process command
    process_parser = subparsers.add_parser('process', help='Generate thumbnails for objects')
    process_parser.add_argument('--bucket', required=True, help='Bucket containing the objects')
    process_parser.add_argument('keys', nargs='+', metavar='KEY', help='Object path(s)')
    process_parser.add_argument('--content-type', help='Content type for all keys (default: guessed per key)')
    process_parser.add_argument('--skip-existing', action='store_true',
                                help='Skip objects whose thumbnail already exists')
    process_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    process_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress summary output')
    add_thumbnail_arguments(process_parser)
    add_storage_arguments(process_parser)

    # Event command
    event_parser = subparsers.add_parser('event', help='Run the handler on a JSON trigger payload')
    event_parser.add_argument('file', help="Event JSON file, or '-' for stdin")
    add_thumbnail_arguments(event_parser)
    add_storage_arguments(event_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'classify':
        return cmd_classify(parsed_args)
    elif parsed_args.command == 'process':
        return cmd_process(parsed_args)
    elif parsed_args.command == 'event':
        return cmd_event(parsed_args)

    return 1

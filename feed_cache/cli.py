"""
Command line entry point for the feed cache.

Usage:
    feed-cache SOURCE_DIR DEST_DIR [--workers N] [--field-set basic|extended]
               [--require FIELD ...] [--hash-algorithm NAME] [--log-level LEVEL]
               [--log-file PATH] [--metrics-file PATH]

Exit status is 0 when every feed file was processed successfully, 1 when any
file failed or the run could not start, and 2 for usage errors.
"""

import argparse
import logging
import sys

from pathlib import Path
from typing import List, Optional

from . import __version__
from .config.config_manager import ConfigManager
from .config.processing_defaults import ProcessingDefaults
from .exceptions import FeedCacheError
from .models import FIELD_SETS
from .processing.batch_runner import FeedBatchRunner


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_level: str, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the feed_cache logger hierarchy for a command line run."""
    level = getattr(logging, log_level.upper())

    # Keep third-party noise out of the run log
    logging.getLogger().setLevel(logging.WARNING)
    logging.getLogger('lxml').setLevel(logging.WARNING)

    package_logger = logging.getLogger('feed_cache')
    package_logger.setLevel(level)
    package_logger.propagate = False

    # Remove any existing handlers to avoid duplicates
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feed-cache",
        description="Extract video entries from YouTube feed documents into content-addressed JSON artifacts"
    )
    parser.add_argument("source_dir", help="Directory containing feed documents (not searched recursively)")
    parser.add_argument("dest_dir", help="Directory receiving {digest}.json artifacts (created if missing)")

    parser.add_argument("--workers", type=int,
                        help=f"Number of worker processes (default: {ProcessingDefaults.WORKERS}, "
                             f"1 processes files sequentially)")
    parser.add_argument("--field-set", choices=sorted(FIELD_SETS),
                        help=f"Fields captured per entry (default: {ProcessingDefaults.FIELD_SET})")
    parser.add_argument("--require", action="append", dest="required_fields", metavar="FIELD",
                        help="Field an entry must carry to be written; repeat for several "
                             "(default: the five basic fields)")
    parser.add_argument("--hash-algorithm",
                        help=f"hashlib algorithm used for artifact names (default: {ProcessingDefaults.HASH_ALGORITHM})")
    parser.add_argument("--log-level", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help=f"Logging level (default: {ProcessingDefaults.LOG_LEVEL})")
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument("--metrics-file", help="Write a JSON run summary to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the feed cache over one source directory."""
    args = build_parser().parse_args(argv)

    try:
        config_manager = ConfigManager()
        config_manager.apply_overrides(
            workers=args.workers,
            field_set=args.field_set,
            required_fields=args.required_fields,
            hash_algorithm=args.hash_algorithm.lower() if args.hash_algorithm else None,
            log_level=args.log_level
        )
        config_manager.validate_configuration()
        config = config_manager.get_processing_config()
    except FeedCacheError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logger = setup_logging(config_manager.processing_params.log_level, args.log_file)
    if logger.isEnabledFor(logging.DEBUG):
        ProcessingDefaults.log_summary(logger)
        logger.debug(f"Configuration: {config_manager.get_configuration_summary()}")

    try:
        runner = FeedBatchRunner(
            args.source_dir,
            args.dest_dir,
            config=config,
            metrics_file=args.metrics_file
        )
        result = runner.run()
    except KeyboardInterrupt:
        logger.error("Processing interrupted by user")
        return 1
    except FeedCacheError as e:
        logger.error(f"Processing could not start: {e}")
        return 1

    print(
        f"Processed {result.files_processed} files: {result.files_successful} succeeded, "
        f"{result.files_failed} failed; {result.entries_written} artifacts written, "
        f"{result.entries_duplicate} already present, {result.entries_dropped} incomplete entries dropped"
    )
    for error in result.errors:
        print(f"  FAILED {error}", file=sys.stderr)

    return 0 if result.files_failed == 0 else 1


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
flushkv Maintenance CLI

Inspect and edit a flushkv store file from the command line.

Usage:
    python -m flushkv.cli dump                    # Print key<TAB>value lines
    python -m flushkv.cli get mykey               # Print one value
    python -m flushkv.cli set mykey myvalue       # Insert or overwrite
    python -m flushkv.cli delete mykey            # Remove a key
    python -m flushkv.cli check                   # Validate the file
    python -m flushkv.cli --path other.dat dump   # Custom store file
    python -m flushkv.cli --strict dump           # Refuse corrupt files

Environment Variables:
    FLUSHKV_STORE_PATH  - Default store file
    FLUSHKV_DEBUG       - Enable debug logging (true/false)
    FLUSHKV_LOG_LEVEL   - Log level when not debugging

Exit Status:
    0 on success, 1 if a key is missing, check fails or set is given text
    that cannot be stored, 2 if --strict is given and the store file does
    not parse cleanly.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .cache.store import Iterate, KeyValueStore
from .config.settings import settings
from .protocol.results import Present
from .sink.file import FileSink

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_INVALID = 1
EXIT_CORRUPT = 2


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="flushkv",
        description="flushkv: inspect and edit a persisted key-value store",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--path",
        type=str,
        default=settings.STORE_PATH,
        help="Store file to operate on",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error if the store file is corrupt",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.DEBUG,
        help="Enable debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("dump", help="Print every entry")
    commands.add_parser("check", help="Validate the store file")

    get_cmd = commands.add_parser("get", help="Print the value of a key")
    get_cmd.add_argument("key")

    set_cmd = commands.add_parser("set", help="Insert or overwrite a key")
    set_cmd.add_argument("key")
    set_cmd.add_argument("value")

    delete_cmd = commands.add_parser("delete", help="Remove a key")
    delete_cmd.add_argument("key")

    return parser.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else settings.LOG_LEVEL

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr),
        ]
    )


def run(args: argparse.Namespace) -> int:
    """Execute one command against the store file and return the exit status."""
    logger = logging.getLogger(__name__)

    # No timer: every mutation is written back before run() returns
    store = KeyValueStore(FileSink(args.path), flush_interval=0)

    with store:
        if not store.loaded_cleanly:
            if args.strict or args.command == "check":
                logger.error(f"Store file {args.path} is corrupt")
                return EXIT_CORRUPT if args.strict else EXIT_MISSING
            logger.warning(f"Continuing with {store.size()} recovered entries")

        if args.command == "check":
            print(f"{args.path}: {store.size()} entries")
            return EXIT_OK

        if args.command == "dump":
            def emit(key: str, value: str) -> Iterate:
                print(f"{key}\t{value}")
                return Iterate.CONTINUE

            store.iterate(emit)
            return EXIT_OK

        if args.command == "get":
            result = store.get(args.key)
            if isinstance(result, Present):
                print(result.value)
                return EXIT_OK
            logger.info(f"Key not found: {args.key}")
            return EXIT_MISSING

        if args.command == "set":
            try:
                store.add_or_update(args.key, args.value)
            except ValueError as exc:
                logger.error(str(exc))
                return EXIT_INVALID
            return EXIT_OK

        if args.command == "delete":
            if args.key not in store:
                logger.info(f"Key not found: {args.key}")
            store.remove(args.key)
            return EXIT_OK

    return EXIT_MISSING


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    args = parse_args(argv)
    setup_logging(debug=args.debug)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())

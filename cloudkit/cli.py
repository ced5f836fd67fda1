"""
cloudkit date CLI

Converts between epoch milliseconds and the wire-format date strings used by
remote APIs.

Usage:
    python -m cloudkit.cli format <epoch_millis> [format]   # Render an instant
    python -m cloudkit.cli parse "<date string>" [format]   # Print epoch millis
    python -m cloudkit.cli formats                          # List formats
"""

import logging
import sys
from typing import List, Optional

from cloudkit.config import Config
from cloudkit.date.codec import DateCodec
from cloudkit.date.codec_factory import get_date_codec_factory
from cloudkit.date.date_service import epoch_millis, instant_from_epoch_millis
from cloudkit.date.errors import MalformedInputError
from cloudkit.date.wire_format import WireFormat

logger = logging.getLogger(__name__)

USAGE = """Usage:
    python -m cloudkit.cli format <epoch_millis> [format]
    python -m cloudkit.cli parse "<date string>" [format]
    python -m cloudkit.cli formats"""


def configure_logging() -> None:
    """Configure logging for CLI runs"""
    logging.basicConfig(
        level=Config.LOG_LEVEL.upper(),
        format=Config.LOG_FORMAT,
        datefmt=Config.LOG_DATE_FORMAT
    )


def resolve_codec(name: Optional[str]) -> Optional[DateCodec]:
    """
    Look up the codec for a format argument.

    Falls back to Config.DEFAULT_DATE_FORMAT when no name is given.

    Returns:
        The shared codec, or None (after reporting) if the name is unknown
    """
    try:
        wire_format = WireFormat.from_name(name or Config.DEFAULT_DATE_FORMAT)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return None
    return get_date_codec_factory().codec_for(wire_format)


def format_command(args: List[str]) -> int:
    """Print an epoch millisecond value in the requested format"""
    if not args or len(args) > 2:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        millis = int(args[0])
    except ValueError:
        print(f"Error: epoch milliseconds must be an integer, got {args[0]!r}", file=sys.stderr)
        return 1

    codec = resolve_codec(args[1] if len(args) > 1 else None)
    if codec is None:
        return 1

    try:
        instant = instant_from_epoch_millis(millis)
    except OverflowError:
        print(f"Error: {millis} is outside the supported date range", file=sys.stderr)
        return 1

    print(codec.to_string(instant))
    return 0


def parse_command(args: List[str]) -> int:
    """Print the epoch milliseconds of a wire-format date string"""
    if not args or len(args) > 2:
        print(USAGE, file=sys.stderr)
        return 1

    codec = resolve_codec(args[1] if len(args) > 1 else None)
    if codec is None:
        return 1

    try:
        instant = codec.to_date(args[0])
    except MalformedInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(epoch_millis(instant))
    return 0


def formats_command(args: List[str]) -> int:
    """List supported formats with a sample of each"""
    for wire_format in WireFormat:
        print(f"{wire_format.name.lower():<16} {wire_format.sample}")
    return 0


COMMANDS = {
    "format": format_command,
    "parse": parse_command,
    "formats": formats_command,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI"""
    configure_logging()
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] not in COMMANDS:
        print(USAGE, file=sys.stderr)
        return 1

    logger.debug(f"Running {argv[0]} with {argv[1:]}")
    return COMMANDS[argv[0]](argv[1:])


if __name__ == '__main__':
    sys.exit(main())

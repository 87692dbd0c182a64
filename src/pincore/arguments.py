"""Command-line parsing and validation for ``<prog> <pid> <core_id>``."""

import re
import sys
from typing import List, Optional, Union

from pydantic import ValidationError

from .central_logger import get_logger
from .config_schema import AffinityRequest, request_model
from .errors import AffinityError, ErrorKind

_logger = get_logger("arguments")

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def usage_text(prog: str) -> str:
    """Usage block printed on any argument error."""
    return (
        "A cross-platform tool to set CPU affinity for a process.\n"
        f"Usage: {prog} <pid> <core_id>\n"
        f"Example (Linux):   sudo {prog} 12345 0\n"
        f"Example (Windows): {prog} 6789 1\n"
        "\n"
        "Note: This tool usually requires administrator/root privileges."
    )


def parse_integer(token: str) -> Optional[int]:
    """
    Parse a base-10 signed integer, or return None.

    The whole token must be digits with an optional sign. Whitespace,
    underscores and fractional parts are rejected, so ``"12.5"`` is invalid.
    """
    # str.isdigit() accepts non-ASCII digits, the regex does not
    if not _INTEGER_RE.fullmatch(token):
        return None
    return int(token)


def parse_request(
    argv: List[str], platform: str = sys.platform
) -> Union[AffinityRequest, AffinityError]:
    """
    Turn the raw argument list into an affinity request.

    Args:
        argv: Arguments after the program name.
        platform: ``sys.platform`` value that decides the pid limits.

    Returns:
        The validated request, or an AffinityError of kind USAGE,
        INVALID_ARGUMENT or OUT_OF_RANGE.
    """
    if len(argv) != 2:
        _logger.debug(f"Rejected argument list {argv!r}")
        return AffinityError(ErrorKind.USAGE, f"Expected exactly two arguments, got {len(argv)}.")

    # Every token is positional: "-x", "--" and "--help" are just non-integers
    pid = parse_integer(argv[0])
    core_id = parse_integer(argv[1])
    if pid is None or core_id is None:
        return AffinityError(ErrorKind.INVALID_ARGUMENT, "Invalid argument. PID and core_id must be integers.")

    try:
        request = request_model(platform)(pid=pid, core_id=core_id)
    except ValidationError as e:
        _logger.debug(f"Out of range request pid={pid} core_id={core_id}: {e.errors()}")
        return AffinityError(ErrorKind.OUT_OF_RANGE, "Argument is out of range.")

    _logger.debug(f"Parsed request pid={request.pid} core_id={request.core_id}")
    return request

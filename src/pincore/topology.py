"""
Logical CPU discovery and core index bound checking.

A count of 0 means the operating system could not report one. Bound checks
are skipped in that case and the affinity call itself rejects bad indices.
"""

from typing import Optional

import psutil

from .central_logger import get_logger
from .errors import AffinityError, ErrorKind

_logger = get_logger("topology")

UNKNOWN_CORE_COUNT = 0


def logical_core_count() -> int:
    """
    Return the number of logical CPUs currently online.

    Returns:
        A positive count, or 0 if the platform could not report one.
    """
    try:
        count = psutil.cpu_count(logical=True)
    except (OSError, RuntimeError) as e:
        _logger.debug(f"cpu_count failed: {e}")
        return UNKNOWN_CORE_COUNT

    if not count:
        _logger.debug(f"cpu_count reported {count!r}, treating as unknown")
        return UNKNOWN_CORE_COUNT

    _logger.debug(f"Detected {count} logical cores")
    return count


def check_core_bounds(core_id: int, core_count: int) -> Optional[AffinityError]:
    """Return an error if ``core_id`` is outside ``[0, core_count)``; skip when the count is unknown."""
    if core_count == UNKNOWN_CORE_COUNT:
        return None
    if core_id < 0 or core_id >= core_count:
        return AffinityError(
            ErrorKind.CORE_INDEX_OUT_OF_BOUNDS,
            f"Core ID {core_id} is out of range. "
            f"Available cores on this system: 0 to {core_count - 1}.",
        )
    return None

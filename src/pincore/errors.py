"""
Failure outcomes for pincore.

Fallible operations return an ``AffinityError`` instead of raising. A caller
checks the returned value and stops at the first error it sees.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

PRIVILEGE_REMINDER = (
    "Please ensure the PID is correct and you have sufficient privileges "
    "(e.g., run with 'sudo' or as Administrator)."
)


class ErrorKind(str, Enum):
    """Every way a single invocation can fail."""
    USAGE = "usage"
    INVALID_ARGUMENT = "invalid_argument"
    OUT_OF_RANGE = "out_of_range"
    CORE_INDEX_OUT_OF_BOUNDS = "core_index_out_of_bounds"
    PROCESS_ACCESS = "process_access"
    AFFINITY_APPLY = "affinity_apply"
    UNSUPPORTED_PLATFORM = "unsupported_platform"


_USAGE_KINDS = frozenset({ErrorKind.USAGE, ErrorKind.INVALID_ARGUMENT, ErrorKind.OUT_OF_RANGE})
_RUNTIME_KINDS = frozenset({
    ErrorKind.PROCESS_ACCESS,
    ErrorKind.AFFINITY_APPLY,
    ErrorKind.UNSUPPORTED_PLATFORM,
})


@dataclass(frozen=True)
class AffinityError:
    """
    A terminal failure of the current invocation.

    Attributes:
        kind: Which failure this is.
        message: One-line, human-readable description.
        code: Native error code (Win32 last error or errno) when the OS supplied one.
    """
    kind: ErrorKind
    message: str
    code: Optional[int] = None

    @property
    def is_usage_error(self) -> bool:
        """True when the usage text should follow the message."""
        return self.kind in _USAGE_KINDS

    @property
    def is_runtime_error(self) -> bool:
        """True when the failure came from the operating system call."""
        return self.kind in _RUNTIME_KINDS

    def __str__(self) -> str:
        return self.message

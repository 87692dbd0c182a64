"""
CPU affinity setters for pinning an external process to one logical core.

Two platform families are supported:

* Windows: a process handle is opened with only the rights needed to set and
  query information, the single-bit mask is applied with
  SetProcessAffinityMask, and the handle is closed on every path.
* Linux: os.sched_setaffinity is called directly with the numeric PID.

Any other platform gets a setter that fails without touching the target.
The setter is chosen once, when this module is imported.
"""

import ctypes
import os
import sys
from typing import Callable, Optional

from .central_logger import get_logger
from .config_schema import AffinityRequest
from .errors import AffinityError, ErrorKind

_logger = get_logger("cpu_affinity")

# Win32 access rights and error codes
PROCESS_SET_INFORMATION = 0x0200
PROCESS_QUERY_INFORMATION = 0x0400
ERROR_INVALID_PARAMETER = 87

# Width of DWORD_PTR, which holds the Windows affinity mask
WINDOWS_MASK_BITS = ctypes.sizeof(ctypes.c_void_p) * 8

# glibc cpu_set_t capacity
CPU_SETSIZE = 1024

WINDOWS = "Windows"
LINUX = "Linux"

AffinitySetter = Callable[[AffinityRequest], Optional[AffinityError]]


def platform_family(platform: str = sys.platform) -> Optional[str]:
    """Map a ``sys.platform`` value to a supported family name, or None."""
    if platform == "win32":
        return WINDOWS
    if platform.startswith("linux"):
        return LINUX
    return None


# =============================================================================
# Windows
# =============================================================================

class Kernel32Api:
    """Typed kernel32 bindings for the calls used to pin a process."""

    def __init__(self):
        from ctypes import wintypes

        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)

        kernel32.OpenProcess.argtypes = [wintypes.DWORD, wintypes.BOOL, wintypes.DWORD]
        kernel32.OpenProcess.restype = wintypes.HANDLE
        kernel32.SetProcessAffinityMask.argtypes = [wintypes.HANDLE, ctypes.c_size_t]
        kernel32.SetProcessAffinityMask.restype = wintypes.BOOL
        kernel32.CloseHandle.argtypes = [wintypes.HANDLE]
        kernel32.CloseHandle.restype = wintypes.BOOL

        self._kernel32 = kernel32

    def open_process(self, access: int, pid: int):
        return self._kernel32.OpenProcess(access, False, pid)

    def set_process_affinity_mask(self, handle, mask: int) -> bool:
        return bool(self._kernel32.SetProcessAffinityMask(handle, mask))

    def close_handle(self, handle) -> bool:
        return bool(self._kernel32.CloseHandle(handle))

    def last_error(self) -> int:
        return ctypes.get_last_error()


def set_affinity_windows(request: AffinityRequest, api: Kernel32Api = None) -> Optional[AffinityError]:
    """
    Pin a process to one core through a least-privilege process handle.

    Args:
        request: Target PID and core index.
        api:     kernel32 bindings. Created on demand when omitted.

    Returns:
        None on success. PROCESS_ACCESS if the handle could not be opened,
        AFFINITY_APPLY if the mask could not be applied. Both carry the
        Win32 error code.
    """
    api = api or Kernel32Api()

    handle = api.open_process(PROCESS_SET_INFORMATION | PROCESS_QUERY_INFORMATION, request.pid)
    if not handle:
        code = api.last_error()
        _logger.debug(f"OpenProcess({request.pid}) failed with error {code}")
        return AffinityError(
            ErrorKind.PROCESS_ACCESS,
            f"Could not open process with PID {request.pid}. Error code: {code}",
            code,
        )

    try:
        if not 0 <= request.core_id < WINDOWS_MASK_BITS:
            code = ERROR_INVALID_PARAMETER
        else:
            mask = 1 << request.core_id
            if api.set_process_affinity_mask(handle, mask):
                _logger.info(f"Process {request.pid} affinity mask set to {mask:#x}")
                return None
            code = api.last_error()

        _logger.debug(f"SetProcessAffinityMask for PID {request.pid} failed with error {code}")
        return AffinityError(
            ErrorKind.AFFINITY_APPLY,
            f"Failed to set process affinity mask. Error code: {code}",
            code,
        )
    finally:
        api.close_handle(handle)


# =============================================================================
# Linux
# =============================================================================

def set_affinity_linux(request: AffinityRequest) -> Optional[AffinityError]:
    """
    Pin a process to one core with sched_setaffinity.

    A core index that does not fit in a cpu_set_t yields an empty set. The
    call is still made, so the kernel reports a missing process (ESRCH) or
    missing permission (EPERM) before rejecting the empty set (EINVAL).
    """
    cpuset = {request.core_id} if 0 <= request.core_id < CPU_SETSIZE else set()

    try:
        os.sched_setaffinity(request.pid, cpuset)
    except OSError as e:
        _logger.debug(f"sched_setaffinity({request.pid}, {sorted(cpuset)}) raised {e!r}")
        description = os.strerror(e.errno) if e.errno else str(e)
        return AffinityError(
            ErrorKind.AFFINITY_APPLY,
            f"sched_setaffinity failed: {description}",
            e.errno,
        )

    _logger.info(f"Process {request.pid} affinity set to core {request.core_id}")
    return None


# =============================================================================
# Everything else
# =============================================================================

def set_affinity_unsupported(request: AffinityRequest) -> Optional[AffinityError]:
    """Fail without touching the target process."""
    return AffinityError(ErrorKind.UNSUPPORTED_PLATFORM, "Unsupported operating system.")


_SETTERS = {
    WINDOWS: set_affinity_windows,
    LINUX: set_affinity_linux,
}


def select_setter(platform: str = sys.platform) -> AffinitySetter:
    """Return the affinity setter for ``platform``."""
    return _SETTERS.get(platform_family(platform), set_affinity_unsupported)


apply_affinity: AffinitySetter = select_setter()

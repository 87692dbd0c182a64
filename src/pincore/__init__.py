"""
pincore
Pin a running process to a single CPU core on Windows or Linux.
"""

__version__ = "1.0.0"
__author__ = "pincore"

# Import main classes and functions for easy access
from .central_logger import get_logger, configure_logging
from .errors import AffinityError, ErrorKind

# Config schema
from .config_schema import (
    AppConfig,
    LoggingConfig,
    AffinityRequest,
    WindowsAffinityRequest,
    PosixAffinityRequest,
)

# Pipeline stages
from .arguments import parse_request, usage_text
from .topology import logical_core_count, check_core_bounds
from .cpu_affinity import (
    apply_affinity,
    select_setter,
    platform_family,
    set_affinity_windows,
    set_affinity_linux,
    set_affinity_unsupported,
    Kernel32Api,
)

__all__ = [
    'get_logger',
    'configure_logging',
    'AffinityError',
    'ErrorKind',
    # Config schema
    'AppConfig',
    'LoggingConfig',
    'AffinityRequest',
    'WindowsAffinityRequest',
    'PosixAffinityRequest',
    # Pipeline stages
    'parse_request',
    'usage_text',
    'logical_core_count',
    'check_core_bounds',
    'apply_affinity',
    'select_setter',
    'platform_family',
    'set_affinity_windows',
    'set_affinity_linux',
    'set_affinity_unsupported',
    'Kernel32Api',
]

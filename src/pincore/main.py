"""CLI entry point for pincore: ``pincore <pid> <core_id>``."""

import sys
from pathlib import Path

from .arguments import parse_request, usage_text
from .central_logger import configure_logging, get_logger
from .config_schema import AppConfig
from .cpu_affinity import apply_affinity, platform_family
from .errors import PRIVILEGE_REMINDER, AffinityError, ErrorKind
from .topology import check_core_bounds, logical_core_count

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def report_error(error: AffinityError, prog: str) -> int:
    """Write the diagnostic for ``error`` to stderr and return the exit status."""
    if error.is_runtime_error:
        print(f"An error occurred: {error.message}", file=sys.stderr)
        print(PRIVILEGE_REMINDER, file=sys.stderr)
        return EXIT_FAILURE

    if error.kind is not ErrorKind.USAGE:
        print(f"Error: {error.message}", file=sys.stderr)
    if error.is_usage_error:
        print(usage_text(prog), file=sys.stderr)
    return EXIT_FAILURE


def main(argv=None, prog: str = None, config: AppConfig = None) -> int:
    """
    Pin one process to one core.

    Args:
        argv:   Arguments after the program name. Defaults to ``sys.argv[1:]``.
        prog:   Program name shown in usage text. Defaults to ``sys.argv[0]``.
        config: Runtime settings. Defaults to ``AppConfig()``.

    Returns:
        0 when the affinity was applied, 1 on any failure.
    """
    config = config or AppConfig()
    configure_logging(config.logging)
    logger = get_logger("main")

    if argv is None:
        argv = sys.argv[1:]
    if prog is None:
        prog = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "pincore"

    request = parse_request(list(argv))
    if isinstance(request, AffinityError):
        logger.debug(f"Argument error: {request.kind.value}")
        return report_error(request, prog)

    core_count = logical_core_count()
    error = check_core_bounds(request.core_id, core_count)
    if error:
        logger.debug(f"Core {request.core_id} rejected, {core_count} cores online")
        return report_error(error, prog)

    family = platform_family()
    if family:
        print(f"Running on {family}.")

    try:
        error = apply_affinity(request)
    except Exception:
        # Outcomes cover every OS-reported failure; this is a fault in the binding itself
        logger.exception(f"Unexpected failure while setting affinity for PID {request.pid}")
        print(PRIVILEGE_REMINDER, file=sys.stderr)
        return EXIT_FAILURE

    if error:
        logger.debug(f"Affinity not applied: kind={error.kind.value} code={error.code}")
        return report_error(error, prog)

    print(f"Successfully set affinity for PID {request.pid} to core {request.core_id}")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())

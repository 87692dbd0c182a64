# --- Information About Script ---
__name__ = "Central Logger (Powered by Loguru)"
__version__ = "4.1.0"
__author__ = "pincore"

import logging
import sys
from pathlib import Path
from typing import Union

from loguru import logger

from .config_schema import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


# Patcher to use custom logger names
def patch_record_with_bound_name(record: dict) -> None:
    if record["extra"].get("name"):
        record["name"] = record["extra"]["name"]


# --- 1. Intercept Standard Logging ---
class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


# --- 2. Configuration ---

def configure_logging(config: LoggingConfig = None) -> None:
    """
    Install the console sink and, when a log directory is configured, the file sinks.

    Existing handlers are removed first, so the last call wins. The console
    sink writes to ``sys.stderr`` as it is at call time.

    Args:
        config: Logging settings. Defaults to ``LoggingConfig()``.
    """
    config = config or LoggingConfig()

    logger.remove()
    logger.configure(patcher=patch_record_with_bound_name)

    # Console handler
    logger.add(
        sys.stderr,
        level=config.console_level,
        format=CONSOLE_FORMAT,
        colorize=None,
        backtrace=False,
        diagnose=False,
    )

    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        # Debug file handler - all levels with traceback, date-based rotation
        logger.add(
            str(log_dir / "debug_{time:YYYY-MM-DD}.log"),
            level="DEBUG",
            rotation=config.file_rotation,
            format=FILE_FORMAT,
            backtrace=True,
            diagnose=True,
            encoding="utf8",
        )

        # Error file handler - ERROR and above with full traceback
        logger.add(
            str(log_dir / "error_{time:YYYY-MM-DD}.log"),
            level="ERROR",
            rotation=config.error_file_rotation,
            format=FILE_FORMAT,
            backtrace=True,
            diagnose=True,
            encoding="utf8",
        )

    install_intercept_handler()


def install_intercept_handler() -> None:
    """Route stdlib logging into loguru, leaving handlers the host installed in place."""
    root = logging.getLogger()
    if not any(isinstance(handler, InterceptHandler) for handler in root.handlers):
        root.addHandler(InterceptHandler())


# --- 3. The Public API Function ---

def get_logger(name: Union[str, object] = None, module_name: str = None):
    """
    Get the pre-configured Loguru logger instance.

    Args:
        name: A string or an object (e.g., a class instance) to name the logger.
        module_name: Kept for compatibility, usually `__name__`.

    Returns:
        A logger wrapper with error() and exception() methods.
    """
    logger_name = name or module_name

    if logger_name and not isinstance(logger_name, str):
        if hasattr(logger_name, '__class__'):
            logger_name = logger_name.__class__.__name__

    base_logger = logger.bind(name=logger_name) if isinstance(logger_name, str) else logger

    class LoggerWrapper:
        def __init__(self, base):
            self._logger = base

        def error(self, msg, *args, traceback: bool = True, **kwargs):
            """
            Log an error message.

            Args:
                msg: The message to log.
                traceback: If True (default), attaches the active exception traceback.
                           If False, logs message only.
            """
            if traceback:
                self._logger.opt(exception=True).error(msg, *args, **kwargs)
            else:
                self._logger.error(msg, *args, **kwargs)

        def exception(self, msg, *args, **kwargs):
            """
            Log an exception with full traceback to both file and stderr.
            Always captures exception context.
            """
            self._logger.opt(exception=True, depth=1).error(msg, *args, **kwargs)

        def __getattr__(self, name):
            return getattr(self._logger, name)

    return LoggerWrapper(base_logger)

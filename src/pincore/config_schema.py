"""
Configuration Schema for pincore.

Defines Pydantic models for the affinity request and the runtime settings.
Limits on the request fields follow the native integer types of the
target platform.
"""

import sys
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


# ==============================================================================
# Native integer limits
# ==============================================================================
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
DWORD_MAX = 2 ** 32 - 1


# ==============================================================================
# Affinity Request
# ==============================================================================
class AffinityRequest(BaseModel):
    """A single (pid, core) pairing. Built once per invocation, never persisted."""

    model_config = ConfigDict(frozen=True, strict=True)

    pid: int = Field(..., description="Target process identifier")
    core_id: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Zero-based logical core index")


class WindowsAffinityRequest(AffinityRequest):
    """Request whose pid is bounded by the Windows DWORD range."""

    pid: int = Field(..., ge=0, le=DWORD_MAX, description="Target process identifier")


class PosixAffinityRequest(AffinityRequest):
    """Request whose pid is bounded by the signed 32-bit pid_t range."""

    pid: int = Field(..., ge=INT32_MIN, le=INT32_MAX, description="Target process identifier")


def request_model(platform: str = sys.platform) -> type:
    """Pick the request model whose pid limits match ``platform``."""
    if platform == "win32":
        return WindowsAffinityRequest
    return PosixAffinityRequest


# ==============================================================================
# Logging Configuration
# ==============================================================================
class LoggingConfig(BaseModel):
    """Diagnostic logging. User-facing report lines are not affected."""

    console_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Minimum level written to stderr"
    )
    log_dir: Optional[str] = Field(default=None, description="Directory for rotating log files, disabled when unset")
    file_rotation: str = Field(default="10 MB", description="Rotation size of the debug log file")
    error_file_rotation: str = Field(default="5 MB", description="Rotation size of the error log file")


# ==============================================================================
# Root Configuration
# ==============================================================================
class AppConfig(BaseModel):
    """Root configuration model. There is no file or environment source."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")

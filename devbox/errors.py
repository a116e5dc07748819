"""Error taxonomy for devbox runs.

Every error here is terminal: the CLI logs it and exits with status 1.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .packages.dnf import ToolFailure


class DevboxError(Exception):
    """Base class for all fatal devbox errors."""

    def __init__(self, message: str, step: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        if self.step:
            return f"{self.step}: {self.message}"
        return self.message


class PrivilegeError(DevboxError):
    """Raised when devbox is invoked as root."""


class UnsupportedOSError(DevboxError):
    """Raised when /etc/os-release does not name a supported distribution."""


class StepError(DevboxError):
    """A provisioning action failed."""

    def __init__(self, message: str, step: Optional[str] = None, result: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, step)
        self.result = result or {}


class ToolError(StepError):
    """A tool could not be installed, or still fails verification after install."""

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        result: Optional[Dict[str, Any]] = None,
        failures: Optional[List["ToolFailure"]] = None,
    ) -> None:
        super().__init__(message, step, result)
        self.failures = list(failures or [])


class EnvFileError(StepError):
    """The environment file could not be written."""


class CloneError(StepError):
    """git clone failed."""


class DbError(StepError):
    """The test database could not be created."""

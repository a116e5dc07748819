from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from .errors import StepError
from .shell import Shell


class Step(ABC):
    """A granular, idempotent unit of provisioning work.

    The runner calls check() first; when it reports the target state already
    exists, run() is skipped. run() returns a JSON-serializable dict whose
    "status" is "success" or "error". Failures are raised by the runner as
    error_class.
    """

    description: str = ""
    skip_message: str = ""
    error_class: Type[StepError] = StepError

    def __init__(self, id: str, config: Optional[Dict[str, Any]] = None, shell: Optional[Shell] = None) -> None:
        self.id = id
        self.config = config or {}
        self.shell = shell
        # Variables exported by earlier steps, set by the runner.
        self.exports: Dict[str, str] = {}

    def check(self) -> bool:
        """Return True if the target state already exists. Must not have side effects."""
        return False

    @abstractmethod
    def run(self) -> Dict[str, Any]:
        """Perform the action and return structured output."""

    def verify(self) -> bool:
        """Optional postcondition checked after a successful run()."""
        return True

    def sudo(self, cmd: List[str]) -> List[str]:
        if self.config.get("sudo", True):
            return ["sudo"] + cmd
        return cmd

    def exec(self, cmd: List[str], cwd: Optional[str] = None) -> Dict[str, Any]:
        if self.shell is None:
            raise StepError(f"no shell configured to run {cmd[0]}", step=self.id)
        return self.shell.run(
            cmd,
            cwd=cwd or self.config.get("cwd"),
            env=self.exports or None,
            timeout=self.config.get("timeout"),
        )

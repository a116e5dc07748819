from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import ToolError
from ..shell import Shell
from ..step import Step

logger = logging.getLogger(__name__)

DNF = "dnf"
DOCKER_REPO_FILE = "docker-ce.repo"


@dataclass
class ToolSpec:
    package: str              # dnf package name
    verify_cmd: List[str] = field(default_factory=list)  # exits 0 when the tool works


@dataclass
class ToolFailure:
    package: str
    reason: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def ensure_tool(spec: ToolSpec, shell: Shell, sudo: bool = True, timeout: Optional[float] = None) -> Optional[ToolFailure]:
    """Install spec.package unless its verify command already succeeds.

    Raises ToolError when the install command itself fails. A tool that is
    still broken after a successful install is returned as a ToolFailure so
    the caller can report all of them together.
    """
    if shell.succeeds(spec.verify_cmd):
        logger.info(f"{spec.package} is already installed.")
        return None

    logger.info(f"Installing {spec.package}...")
    cmd = [DNF, "install", "-y", spec.package]
    res = shell.run(["sudo"] + cmd if sudo else cmd, timeout=timeout)
    if res.get("status") != "success":
        raise ToolError(f"Failed to install {spec.package}: {res.get('error', 'unknown error')}", result=res)

    if not shell.succeeds(spec.verify_cmd):
        reason = f"'{' '.join(spec.verify_cmd)}' still fails after installation"
        logger.warning(f"{spec.package}: {reason}")
        return ToolFailure(package=spec.package, reason=reason)
    logger.info(f"{spec.package} installed.")
    return None


class EpelReleaseStep(Step):
    """Install the EPEL repository package if it is missing."""

    description = "Installing EPEL repository..."
    skip_message = "EPEL repository is already installed."

    def check(self) -> bool:
        return self.shell.succeeds([DNF, "list", "installed", "epel-release"])

    def run(self) -> Dict[str, Any]:
        res = self.exec(self.sudo([DNF, "install", "-y", "epel-release"]))
        if res.get("status") == "error":
            res["error"] = f"Failed to install EPEL repo: {res.get('error')}"
        return res


class SystemUpdateStep(Step):
    """Upgrade installed packages. Always runs."""

    description = "Updating system packages..."

    def run(self) -> Dict[str, Any]:
        res = self.exec(self.sudo([DNF, "update", "-y"]))
        if res.get("status") == "error":
            res["error"] = f"Failed to update packages: {res.get('error')}"
        return res


class DockerRepoStep(Step):
    """Register the Docker CE package repository.

    Config:
    - url: str – repo file URL passed to dnf config-manager --add-repo.
    - repos_dir: str – where dnf keeps .repo files (default /etc/yum.repos.d).
    """

    description = "Adding Docker CE repository..."
    skip_message = "Docker CE repository is already configured."

    def _repo_file(self) -> Path:
        return Path(self.config.get("repos_dir", "/etc/yum.repos.d")) / DOCKER_REPO_FILE

    def check(self) -> bool:
        return self._repo_file().exists()

    def run(self) -> Dict[str, Any]:
        url = self.config.get("url")
        if not url:
            return {"status": "error", "error": "DockerRepoStep requires config['url']"}
        res = self.exec(self.sudo([DNF, "config-manager", "--add-repo", url]))
        if res.get("status") == "error":
            res["error"] = f"Failed to add Docker repository: {res.get('error')}"
        return res


class ToolInstallStep(Step):
    """Ensure every configured tool is installed and working.

    Config:
    - tools: List[ToolSpec]
    """

    description = "Installing Git, Curl, Docker, and SQLite..."
    error_class = ToolError

    @property
    def tools(self) -> List[ToolSpec]:
        return list(self.config.get("tools") or [])

    def run(self) -> Dict[str, Any]:
        # ensure_tool fast-paths per tool, so there is no step-level check().
        failures: List[ToolFailure] = []
        for spec in self.tools:
            failure = ensure_tool(spec, self.shell, sudo=self.config.get("sudo", True), timeout=self.config.get("timeout"))
            if failure:
                failures.append(failure)
        if failures:
            message = f"Tools failed verification after install: {', '.join(f.package for f in failures)}"
            result = {"status": "error", "error": message, "failures": [f.to_dict() for f in failures]}
            raise ToolError(message, step=self.id, result=result, failures=failures)
        return {"status": "success", "installed": [t.package for t in self.tools]}

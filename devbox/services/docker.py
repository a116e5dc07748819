from __future__ import annotations

import getpass
import logging
import os
from typing import Any, Dict

from ..step import Step

logger = logging.getLogger(__name__)

DOCKER_GROUP = "docker"


def current_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


class DockerServiceStep(Step):
    """Enable and start the docker service. A no-op when it is already running."""

    description = "Enabling and starting Docker service..."

    def run(self) -> Dict[str, Any]:
        res = self.exec(self.sudo(["systemctl", "enable", "--now", "docker"]))
        if res.get("status") == "error":
            res["error"] = f"Failed to start Docker: {res.get('error')}"
        return res


class DockerGroupStep(Step):
    """Add the invoking user to the docker group.

    The new membership only applies to new login sessions.

    Config:
    - user: str – defaults to $USER.
    - group: str – defaults to "docker".
    """

    @property
    def user(self) -> str:
        return self.config.get("user") or current_user()

    @property
    def group(self) -> str:
        return self.config.get("group", DOCKER_GROUP)

    @property
    def description(self) -> str:  # type: ignore[override]
        return f"Checking '{self.group}' group membership for {self.user}..."

    def check(self) -> bool:
        res = self.shell.run(["id", "-nG", self.user])
        if res.get("status") != "success":
            return False
        return self.group in (res.get("stdout") or "").split()

    def run(self) -> Dict[str, Any]:
        logger.info(f"Adding {self.user} to '{self.group}' group...")
        res = self.exec(self.sudo(["usermod", "-aG", self.group, self.user]))
        if res.get("status") == "error":
            res["error"] = f"Failed to add {self.user} to group '{self.group}': {res.get('error')}"
            return res
        logger.warning(
            f"You must log out and back in (or run 'newgrp {self.group}') "
            f"for {self.group} group changes to take effect."
        )
        res["relogin_required"] = True
        return res

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import CloneError
from ..shell import Shell
from ..step import Step

logger = logging.getLogger(__name__)


def clone_if_absent(url: str, name: str, dest_dir: Path, shell: Shell, timeout: Optional[float] = None) -> Dict[str, Any]:
    """Clone url into dest_dir/name unless that directory already exists.

    Raises CloneError when git fails or dest_dir cannot be created.
    """
    dest_dir = Path(dest_dir)
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CloneError(f"Cannot create {dest_dir}: {e}") from e

    target = dest_dir / name
    if target.is_dir():
        logger.info(f"Repository '{name}' already exists. Skipping clone.")
        return {"status": "skipped", "path": str(target)}

    logger.info(f"Cloning repository: {name}")
    res = shell.run(["git", "clone", url, name], cwd=str(dest_dir), timeout=timeout)
    if res.get("status") != "success":
        raise CloneError(f"Failed to clone repository {url}: {res.get('error', 'unknown error')}", result=res)
    res["path"] = str(target)
    return res


class GitClone(Step):
    """Config:
    - url: str – repository URL.
    - name: str – directory name under dest.
    - dest: str – parent directory (created if missing).
    """

    error_class = CloneError

    @property
    def target(self) -> Path:
        return Path(self.config["dest"]) / self.config["name"]

    @property
    def description(self) -> str:  # type: ignore[override]
        return f"Cloning {self.config['url']} into {self.target}..."

    @property
    def skip_message(self) -> str:  # type: ignore[override]
        return f"Repository '{self.config['name']}' already exists. Skipping clone."

    def check(self) -> bool:
        return self.target.is_dir()

    def run(self) -> Dict[str, Any]:
        return clone_if_absent(
            self.config["url"],
            self.config["name"],
            Path(self.config["dest"]),
            self.shell,
            timeout=self.config.get("timeout"),
        )

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..errors import EnvFileError
from ..step import Step

logger = logging.getLogger(__name__)

HEADER = "# Auto-generated dev environment"
DEFAULT_VARS: Dict[str, str] = {"APP_ENV": "development", "DB_HOST": "localhost"}


def render_env_file(variables: Mapping[str, str]) -> str:
    lines = [HEADER]
    lines += [f"export {key}={shlex.quote(str(value))}" for key, value in variables.items()]
    return "\n".join(lines) + "\n"


def load_env_file(path: Path) -> Dict[str, str]:
    """Parse `export KEY=value` (or `KEY=value`) lines into a mapping."""
    env: Dict[str, str] = {}
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        key, sep, value = line.partition("=")
        if not sep:
            continue
        parts = shlex.split(value) if value else [""]
        env[key.strip()] = parts[0] if parts else ""
    return env


def write_env_file(path: Path, variables: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Overwrite path with the given variables and return them as loaded back.

    Raises EnvFileError if the file cannot be written or read.
    """
    variables = DEFAULT_VARS if variables is None else variables
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_env_file(variables), encoding="utf-8")
        logger.debug(f"Wrote {len(variables)} variables to {path}")
        return load_env_file(path)
    except OSError as e:
        raise EnvFileError(f"Failed to create environment file {path}: {e}") from e


class EnvFileStep(Step):
    """Regenerate the environment file on every run and export its variables.

    Config:
    - path: str – target file.
    - variables: dict – KEY -> value (default APP_ENV, DB_HOST).
    """

    error_class = EnvFileError

    @property
    def path(self) -> Path:
        return Path(self.config["path"])

    @property
    def description(self) -> str:  # type: ignore[override]
        return f"Creating environment file: {self.path}"

    def run(self) -> Dict[str, Any]:
        env = write_env_file(self.path, self.config.get("variables"))
        return {"status": "success", "path": str(self.path), "exports": env}

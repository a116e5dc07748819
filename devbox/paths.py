"""Path utilities for devbox's home-relative outputs."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Union


GLOBAL_CONFIG_NAME = ".devbox.yaml"
ENV_FILE_NAME = ".dev_env"
PROJECTS_DIRNAME = "projects"
LOG_SUBDIR = Path(".devbox") / "logs"


def expand(path: Union[str, Path], home: Optional[Path] = None) -> Path:
    """Expand a leading ~ against home (defaults to the current user's home).

    Example:
        >>> expand("~/projects", Path("/home/dev"))
        PosixPath('/home/dev/projects')
    """
    home = home or Path.home()
    s = str(path)
    if s == "~":
        return home
    if s.startswith("~/"):
        return home / s[2:]
    return Path(s)


def default_env_file(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / ENV_FILE_NAME


def default_projects_dir(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / PROJECTS_DIRNAME


def default_log_dir(home: Optional[Path] = None) -> Path:
    return (home or Path.home()) / LOG_SUBDIR


def log_file_path(log_dir: Path, now: Optional[datetime] = None) -> Path:
    """Timestamped log file inside log_dir, e.g. devbox-20250101-120000.log."""
    now = now or datetime.now()
    return Path(log_dir) / f"devbox-{now.strftime('%Y%m%d-%H%M%S')}.log"


def repo_name_from_url(url: str) -> str:
    """Directory name git clone would create for url."""
    name = url.rstrip("/").rsplit("/", 1)[-1]
    if ":" in name:
        name = name.rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name

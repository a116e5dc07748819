"""Configuration management for devbox."""
from __future__ import annotations

import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .paths import (
    GLOBAL_CONFIG_NAME,
    default_env_file,
    default_log_dir,
    default_projects_dir,
    expand,
    repo_name_from_url,
)


DEFAULTS: Dict[str, Any] = {
    "repo_url": "https://github.com/example/sample-app.git",
    "env_vars": {"APP_ENV": "development", "DB_HOST": "localhost"},
    "docker_repo_url": "https://download.docker.com/linux/centos/docker-ce.repo",
    "repos_dir": "/etc/yum.repos.d",
    "tools": [
        {"package": "git", "verify": ["git", "--version"]},
        {"package": "curl", "verify": ["curl", "--version"]},
        {"package": "docker-ce", "verify": ["docker", "--version"]},
        {"package": "sqlite", "verify": ["sqlite3", "--version"]},
    ],
    "os_markers": ["Red Hat", "CentOS", "Rocky", "AlmaLinux"],
    "update_system": True,
    "use_sudo": True,
    "command_timeout": None,
}


class Config:
    """Devbox settings with hierarchical lookup.

    Lookup order (higher priority first):
    1. The file given at init (e.g. --config)
    2. Global config (~/.devbox.yaml)
    3. Built-in defaults

    Paths starting with ~ are expanded against the home directory passed at
    init, which defaults to $HOME.
    """

    def __init__(self, config_path: Optional[Path] = None, home: Optional[Path] = None, enable_hierarchy: bool = True):
        self.home = Path(home) if home else Path.home()
        self.global_path = self.home / GLOBAL_CONFIG_NAME
        self.config_path = Path(config_path) if config_path else self.global_path
        self.enable_hierarchy = enable_hierarchy
        self._data: dict[str, Any] = {}
        self._global_data: dict[str, Any] = {}
        self.load()

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise RuntimeError(f"Failed to load config from {path}: {e}") from e
        if not isinstance(data, dict):
            raise RuntimeError(f"Failed to load config from {path}: expected a mapping")
        return data

    def load(self) -> None:
        """Load configuration from file(s). Missing files mean defaults."""
        self._data = self._read(self.config_path) if self.config_path.exists() else {}
        if self.enable_hierarchy and self.config_path != self.global_path and self.global_path.exists():
            self._global_data = self._read(self.global_path)
        else:
            self._global_data = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._data:
            return self._data[key]
        if key in self._global_data:
            return self._global_data[key]
        if key in DEFAULTS:
            return DEFAULTS[key]
        return default

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def _path(self, key: str, fallback: Path) -> Path:
        value = self.get(key)
        return expand(value, self.home) if value else fallback

    @property
    def projects_dir(self) -> Path:
        return self._path("projects_dir", default_projects_dir(self.home))

    @property
    def env_file(self) -> Path:
        return self._path("env_file", default_env_file(self.home))

    @property
    def log_dir(self) -> Path:
        return self._path("log_dir", default_log_dir(self.home))

    @property
    def db_file(self) -> Path:
        return self._path("db_file", self.projects_dir / "test.db")

    @property
    def repos_dir(self) -> Path:
        return expand(self.get("repos_dir"), self.home)

    @property
    def repo_url(self) -> str:
        return str(self.get("repo_url"))

    @property
    def repo_name(self) -> str:
        return self.get("repo_name") or repo_name_from_url(self.repo_url)

    @property
    def docker_repo_url(self) -> str:
        return str(self.get("docker_repo_url"))

    @property
    def env_vars(self) -> Dict[str, str]:
        return {str(k): str(v) for k, v in (self.get("env_vars") or {}).items()}

    @property
    def os_markers(self) -> List[str]:
        return [str(m) for m in self.get("os_markers") or []]

    @property
    def tools(self) -> List[Dict[str, Any]]:
        """Tool entries as {package, verify} with verify normalized to a list."""
        out: List[Dict[str, Any]] = []
        for t in self.get("tools") or []:
            verify = t.get("verify") or [t["package"], "--version"]
            if isinstance(verify, str):
                verify = shlex.split(verify)
            out.append({"package": t["package"], "verify": list(verify)})
        return out

    @property
    def update_system(self) -> bool:
        return bool(self.get("update_system"))

    @property
    def use_sudo(self) -> bool:
        return bool(self.get("use_sudo"))

    @property
    def command_timeout(self) -> Optional[float]:
        value = self.get("command_timeout")
        if value is None:
            return None
        try:
            timeout = float(value)
        except (TypeError, ValueError) as e:
            raise RuntimeError(f"Invalid command_timeout in {self.config_path}: {value!r}") from e
        if timeout <= 0:
            raise RuntimeError(f"Invalid command_timeout in {self.config_path}: must be positive, got {value!r}")
        return timeout

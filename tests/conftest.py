"""Pytest configuration and fixtures for devbox tests"""
import logging
import tempfile
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from devbox.config import Config
from devbox.logs import LOGGER_NAME
from devbox.shell import Shell


Handler = Callable[[List[str], Optional[str]], Tuple[int, str]]


class FakeShell(Shell):
    """Shell double that records commands instead of running them.

    Handlers are matched by command prefix; the first match wins. Unmatched
    commands succeed with empty output.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[Dict] = []
        self.handlers: List[Tuple[List[str], Handler]] = []

    def on(self, prefix: List[str], handler: Handler) -> None:
        self.handlers.insert(0, (list(prefix), handler))

    def returns(self, prefix: List[str], returncode: int = 0, stdout: str = "") -> None:
        self.on(prefix, lambda cmd, cwd: (returncode, stdout))

    def sequence(self, prefix: List[str], returncodes: List[int]) -> None:
        """Return each code in turn; the last one repeats."""
        codes = list(returncodes)

        def _next(cmd, cwd):
            return (codes.pop(0) if len(codes) > 1 else codes[0]), ""

        self.on(prefix, _next)

    def run(self, cmd, cwd=None, env=None, timeout=None):
        self.calls.append({"cmd": list(cmd), "cwd": cwd, "env": env, "timeout": timeout})
        rc, stdout = 0, ""
        for prefix, handler in self.handlers:
            if cmd[: len(prefix)] == prefix:
                rc, stdout = handler(list(cmd), cwd)
                break
        result = {"status": "success" if rc == 0 else "error", "stdout": stdout, "stderr": "", "returncode": rc, "duration": 0.0}
        if rc != 0:
            result["error"] = f"Process exited with code {rc}"
        return result

    def ran(self, *prefix: str) -> List[List[str]]:
        """Commands that started with prefix (sudo stripped)."""
        out = []
        for call in self.calls:
            cmd = call["cmd"][1:] if call["cmd"][:1] == ["sudo"] else call["cmd"]
            if cmd[: len(prefix)] == list(prefix):
                out.append(cmd)
        return out


class FakeHost(FakeShell):
    """A FakeShell with just enough state to behave like a fresh RHEL box.

    Installing packages, adding the docker repo, joining the docker group and
    cloning all change what later checks see.
    """

    def __init__(self, repos_dir: Path, user: str = "dev") -> None:
        super().__init__()
        self.repos_dir = repos_dir
        self.user = user
        self.installed: set = set()
        self.groups = [user, "wheel"]
        self.on(["sudo", "dnf", "install", "-y"], self._install)
        self.on(["dnf", "list", "installed"], lambda cmd, cwd: (0 if cmd[3] in self.installed else 1, ""))
        self.on(["sudo", "dnf", "config-manager", "--add-repo"], self._add_repo)
        self.on(["id", "-nG"], lambda cmd, cwd: (0, " ".join(self.groups)))
        self.on(["sudo", "usermod", "-aG"], self._usermod)
        self.on(["git", "clone"], self._clone)
        for binary, package in (("git", "git"), ("curl", "curl"), ("docker", "docker-ce"), ("sqlite3", "sqlite")):
            self.on([binary, "--version"], self._verifier(package))

    def _verifier(self, package):
        return lambda cmd, cwd: (0 if package in self.installed else 127, "")

    def _install(self, cmd, cwd):
        self.installed.add(cmd[-1])
        return 0, ""

    def _add_repo(self, cmd, cwd):
        self.repos_dir.mkdir(parents=True, exist_ok=True)
        (self.repos_dir / "docker-ce.repo").write_text("[docker-ce-stable]\n")
        return 0, ""

    def _usermod(self, cmd, cwd):
        self.groups.append(cmd[3])
        return 0, ""

    def _clone(self, cmd, cwd):
        (Path(cwd) / cmd[3] / ".git").mkdir(parents=True)
        return 0, ""

    def side_effects(self) -> List[List[str]]:
        """Commands that change host state, excluding the always-run ones."""
        return (
            self.ran("dnf", "install")
            + self.ran("dnf", "config-manager")
            + self.ran("usermod")
            + self.ran("git", "clone")
        )


@pytest.fixture(autouse=True)
def reset_devbox_logger():
    """setup_logging() disables propagation; restore it so caplog works."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def home(temp_dir):
    path = temp_dir / "home"
    path.mkdir()
    return path


@pytest.fixture
def fake_shell():
    return FakeShell()


@pytest.fixture
def fake_host(temp_dir):
    return FakeHost(repos_dir=temp_dir / "yum.repos.d")


@pytest.fixture
def make_os_release(temp_dir):
    """Write an os-release file with the given text and return its path"""
    def _make(text: str) -> Path:
        path = temp_dir / "os-release"
        path.write_text(text)
        return path
    return _make


@pytest.fixture
def rocky_release(make_os_release):
    return make_os_release('NAME="Rocky Linux"\nVERSION="9.2 (Blue Onyx)"\nID="rocky"\nPRETTY_NAME="Rocky Linux 9.2 (Blue Onyx)"\n')


@pytest.fixture
def config(home, temp_dir):
    """Config rooted in a temporary home with repos under the temp dir"""
    cfg = Config(config_path=temp_dir / "devbox.yaml", home=home)
    cfg.set("repos_dir", str(temp_dir / "yum.repos.d"))
    return cfg

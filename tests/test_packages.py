"""Tests for dnf-backed steps and the tool installer"""
import json
import logging

import pytest

from devbox.errors import ToolError
from devbox.packages.dnf import (
    DockerRepoStep,
    EpelReleaseStep,
    SystemUpdateStep,
    ToolFailure,
    ToolInstallStep,
    ToolSpec,
    ensure_tool,
)
from devbox.runner import Runner


TOOLS = [
    ToolSpec("git", ["git", "--version"]),
    ToolSpec("curl", ["curl", "--version"]),
    ToolSpec("docker-ce", ["docker", "--version"]),
    ToolSpec("sqlite", ["sqlite3", "--version"]),
]


class TestEnsureTool:
    def test_already_installed_is_fast_path(self, fake_shell, caplog):
        with caplog.at_level(logging.INFO):
            assert ensure_tool(TOOLS[0], fake_shell) is None
        assert fake_shell.ran("dnf") == []
        assert "git is already installed" in caplog.text

    def test_installs_when_verify_fails(self, fake_shell):
        fake_shell.sequence(["git", "--version"], [1, 0])
        assert ensure_tool(TOOLS[0], fake_shell) is None
        assert fake_shell.ran("dnf", "install") == [["dnf", "install", "-y", "git"]]
        assert fake_shell.calls[1]["cmd"][0] == "sudo"

    def test_install_without_sudo(self, fake_shell):
        fake_shell.sequence(["git", "--version"], [1, 0])
        ensure_tool(TOOLS[0], fake_shell, sudo=False)
        assert fake_shell.calls[1]["cmd"] == ["dnf", "install", "-y", "git"]

    def test_install_failure_is_fatal(self, fake_shell):
        fake_shell.returns(["git", "--version"], returncode=127)
        fake_shell.returns(["sudo", "dnf", "install"], returncode=1)
        with pytest.raises(ToolError) as exc:
            ensure_tool(TOOLS[0], fake_shell)
        assert "Failed to install git" in exc.value.message

    def test_still_broken_after_install_is_recorded(self, fake_shell):
        fake_shell.returns(["git", "--version"], returncode=127)
        failure = ensure_tool(TOOLS[0], fake_shell)
        assert isinstance(failure, ToolFailure)
        assert failure.package == "git"
        assert failure.to_dict()["package"] == "git"


class TestToolInstallStep:
    def test_all_present(self, fake_shell):
        result = ToolInstallStep("tools", {"tools": TOOLS}, shell=fake_shell).run()
        assert result["status"] == "success"
        assert fake_shell.ran("dnf") == []
        # every tool verified independently
        assert {tuple(c["cmd"]) for c in fake_shell.calls} == {tuple(t.verify_cmd) for t in TOOLS}

    def test_failures_are_batched(self, fake_shell):
        fake_shell.returns(["curl", "--version"], returncode=127)
        fake_shell.returns(["sqlite3", "--version"], returncode=127)
        with pytest.raises(ToolError) as exc:
            ToolInstallStep("tools", {"tools": TOOLS}, shell=fake_shell).run()
        assert sorted(f.package for f in exc.value.failures) == ["curl", "sqlite"]
        # both broken tools were still given an install attempt
        assert sorted(c[-1] for c in fake_shell.ran("dnf", "install")) == ["curl", "sqlite"]

    def test_failures_in_result_are_plain_dicts(self, fake_shell):
        fake_shell.returns(["curl", "--version"], returncode=127)
        with pytest.raises(ToolError) as exc:
            ToolInstallStep("tools", {"tools": TOOLS}, shell=fake_shell).run()
        result = exc.value.result
        assert result["status"] == "error"
        assert result["failures"] == [
            {"package": "curl", "reason": "'curl --version' still fails after installation"},
        ]
        assert json.loads(json.dumps(result)) == result

    def test_one_failure_does_not_block_others(self, fake_shell):
        fake_shell.returns(["docker", "--version"], returncode=127)
        for binary in ("git", "curl", "sqlite3"):
            fake_shell.sequence([binary, "--version"], [1, 0])
        with pytest.raises(ToolError) as exc:
            ToolInstallStep("tools", {"tools": TOOLS}, shell=fake_shell).run()
        assert [f.package for f in exc.value.failures] == ["docker-ce"]
        assert sorted(c[-1] for c in fake_shell.ran("dnf", "install")) == ["curl", "docker-ce", "git", "sqlite"]

    def test_runner_raises_tool_error_with_all_failures(self, fake_shell):
        fake_shell.returns(["git", "--version"], returncode=127)
        fake_shell.returns(["curl", "--version"], returncode=127)
        with pytest.raises(ToolError) as exc:
            Runner([ToolInstallStep("tools", {"tools": TOOLS})], shell=fake_shell).execute()
        assert exc.value.step == "tools"
        assert sorted(f.package for f in exc.value.failures) == ["curl", "git"]

    def test_install_command_failure_stops_immediately(self, fake_shell):
        fake_shell.returns(["sudo", "dnf", "install"], returncode=1)
        for t in TOOLS:
            fake_shell.returns(t.verify_cmd, returncode=127)
        with pytest.raises(ToolError):
            Runner([ToolInstallStep("tools", {"tools": TOOLS})], shell=fake_shell).execute()
        assert len(fake_shell.ran("dnf", "install")) == 1


class TestEpelReleaseStep:
    def test_check_queries_dnf(self, fake_shell):
        step = EpelReleaseStep("epel", shell=fake_shell)
        assert step.check() is True
        assert fake_shell.calls[0]["cmd"] == ["dnf", "list", "installed", "epel-release"]

    def test_installs_when_missing(self, fake_shell):
        fake_shell.returns(["dnf", "list", "installed"], returncode=1)
        results = Runner([EpelReleaseStep("epel")], shell=fake_shell).execute()
        assert results["epel"]["status"] == "success"
        assert fake_shell.calls[-1]["cmd"] == ["sudo", "dnf", "install", "-y", "epel-release"]

    def test_install_failure_message(self, fake_shell):
        fake_shell.returns(["dnf", "list", "installed"], returncode=1)
        fake_shell.returns(["sudo", "dnf", "install"], returncode=1)
        result = EpelReleaseStep("epel", shell=fake_shell).run()
        assert result["error"].startswith("Failed to install EPEL repo")


class TestSystemUpdateStep:
    def test_always_runs(self, fake_shell):
        step = SystemUpdateStep("update", shell=fake_shell)
        assert step.check() is False
        assert step.run()["status"] == "success"
        assert fake_shell.calls[0]["cmd"] == ["sudo", "dnf", "update", "-y"]

    def test_failure(self, fake_shell):
        fake_shell.returns(["sudo", "dnf", "update"], returncode=1)
        assert "Failed to update packages" in SystemUpdateStep("update", shell=fake_shell).run()["error"]


class TestDockerRepoStep:
    URL = "https://download.docker.com/linux/centos/docker-ce.repo"

    def test_skipped_when_repo_file_present(self, temp_dir, fake_shell):
        (temp_dir / "docker-ce.repo").write_text("[docker-ce-stable]\n")
        step = DockerRepoStep("repo", {"url": self.URL, "repos_dir": str(temp_dir)}, shell=fake_shell)
        assert step.check() is True

    def test_adds_repo(self, temp_dir, fake_shell):
        step = DockerRepoStep("repo", {"url": self.URL, "repos_dir": str(temp_dir)}, shell=fake_shell)
        assert step.check() is False
        assert step.run()["status"] == "success"
        assert fake_shell.calls[0]["cmd"] == ["sudo", "dnf", "config-manager", "--add-repo", self.URL]

    def test_requires_url(self, temp_dir, fake_shell):
        result = DockerRepoStep("repo", {"repos_dir": str(temp_dir)}, shell=fake_shell).run()
        assert result["status"] == "error"
        assert fake_shell.calls == []

"""Assemble the Red Hat dev environment pipeline from a Config."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from .config import Config
from .pipeline import Pipeline
from .preflight import OS_RELEASE_PATH
from .runner import Runner
from .shell import Shell
from .step import Step
from .steps import (
    DockerGroupStep,
    DockerRepoStep,
    DockerServiceStep,
    EnvFileStep,
    EpelReleaseStep,
    GitClone,
    SystemUpdateStep,
    TestDatabaseStep,
    ToolInstallStep,
    ToolSpec,
)


def build_steps(config: Config, user: Optional[str] = None) -> List[Step]:
    """The ordered step catalog."""
    sudo = config.use_sudo
    timeout = config.command_timeout
    common: Dict[str, Any] = {"sudo": sudo, "timeout": timeout}
    tools = [ToolSpec(package=t["package"], verify_cmd=t["verify"]) for t in config.tools]

    steps: List[Step] = [EpelReleaseStep("epel", dict(common))]
    if config.update_system:
        steps.append(SystemUpdateStep("system_update", dict(common)))
    steps += [
        DockerRepoStep("docker_repo", {**common, "url": config.docker_repo_url, "repos_dir": str(config.repos_dir)}),
        ToolInstallStep("tools", {**common, "tools": tools}),
        DockerServiceStep("docker_service", dict(common)),
        DockerGroupStep("docker_group", {**common, "user": user}),
        EnvFileStep("env_file", {"path": str(config.env_file), "variables": config.env_vars}),
        GitClone(
            "clone",
            {"url": config.repo_url, "name": config.repo_name, "dest": str(config.projects_dir), "timeout": timeout},
        ),
        TestDatabaseStep("test_db", {"path": str(config.db_file)}),
    ]
    return steps


def build_pipeline(
    config: Config,
    shell: Optional[Shell] = None,
    os_release: Path = OS_RELEASE_PATH,
    euid: Optional[int] = None,
    user: Optional[str] = None,
) -> Pipeline:
    shell = shell or Shell(timeout=config.command_timeout)
    runner = Runner(build_steps(config, user=user), shell=shell)
    return Pipeline([runner], os_release=os_release, os_markers=config.os_markers, euid=euid)


def relogin_required(results: Dict[str, Any]) -> bool:
    for runner_results in results.get("runners", {}).values():
        for res in runner_results.values():
            if res.get("relogin_required"):
                return True
    return False


def print_summary(config: Config, results: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Print the human-readable next steps after a successful run."""
    console = console or Console()
    project = config.projects_dir / config.repo_name
    console.print()
    console.print("[green]✅ Setup complete![/green]")
    console.print("[bold]Next steps:[/bold]")
    if relogin_required(results):
        console.print("  • Log out and back in (or run 'newgrp docker') to use Docker without sudo")
    console.print(f"  • Run 'source {config.env_file}' to load environment variables")
    console.print(f"  • Go to {project} and start coding!")

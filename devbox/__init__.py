"""
devbox: bootstrap a local development environment on Red Hat-based systems.

This package provides:
- Step: check-then-act unit of provisioning work.
- Runner: sequential, fail-fast runner for steps.
- Pipeline: preflight guard (non-root user, supported OS) followed by runners.
- Shell: subprocess wrapper every external command goes through.
- Steps for EPEL, system update, Docker repo, tools, Docker service/group,
  environment file, repository clone and test database.
"""

from .errors import (
    DevboxError,
    PrivilegeError,
    UnsupportedOSError,
    StepError,
    ToolError,
    EnvFileError,
    CloneError,
    DbError,
)
from .shell import Shell
from .step import Step
from .runner import Runner
from .pipeline import Pipeline
from .config import Config
from .preflight import check_preconditions
from .steps import (
    EpelReleaseStep,
    SystemUpdateStep,
    DockerRepoStep,
    ToolInstallStep,
    ToolSpec,
    ToolFailure,
    DockerServiceStep,
    DockerGroupStep,
    EnvFileStep,
    TestDatabaseStep,
    GitClone,
)
from .bootstrap import build_pipeline

__version__ = "0.1.0"

__all__ = [
    # Errors
    "DevboxError",
    "PrivilegeError",
    "UnsupportedOSError",
    "StepError",
    "ToolError",
    "EnvFileError",
    "CloneError",
    "DbError",
    # Core
    "Shell",
    "Step",
    "Runner",
    "Pipeline",
    "Config",
    "check_preconditions",
    "build_pipeline",
    # Steps
    "EpelReleaseStep",
    "SystemUpdateStep",
    "DockerRepoStep",
    "ToolInstallStep",
    "ToolSpec",
    "ToolFailure",
    "DockerServiceStep",
    "DockerGroupStep",
    "EnvFileStep",
    "TestDatabaseStep",
    "GitClone",
]

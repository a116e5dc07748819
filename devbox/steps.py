from __future__ import annotations

# Aggregator module for provisioning steps.
# Implementations live in the packages, services, files and vcs packages.

from .packages import (
    DockerRepoStep,
    EpelReleaseStep,
    SystemUpdateStep,
    ToolFailure,
    ToolInstallStep,
    ToolSpec,
)

from .services import (
    DockerGroupStep,
    DockerServiceStep,
)

from .files import (
    EnvFileStep,
    TestDatabaseStep,
)

from .vcs import (
    GitClone,
)


__all__ = [
    # package-manager steps
    "EpelReleaseStep",
    "SystemUpdateStep",
    "DockerRepoStep",
    "ToolInstallStep",
    "ToolSpec",
    "ToolFailure",

    # service steps
    "DockerServiceStep",
    "DockerGroupStep",

    # file steps
    "EnvFileStep",
    "TestDatabaseStep",

    # vcs steps
    "GitClone",
]

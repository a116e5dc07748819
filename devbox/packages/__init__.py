from .dnf import (
    DockerRepoStep,
    EpelReleaseStep,
    SystemUpdateStep,
    ToolFailure,
    ToolInstallStep,
    ToolSpec,
    ensure_tool,
)

__all__ = [
    "DockerRepoStep",
    "EpelReleaseStep",
    "SystemUpdateStep",
    "ToolFailure",
    "ToolInstallStep",
    "ToolSpec",
    "ensure_tool",
]

from .docker import DockerGroupStep, DockerServiceStep

__all__ = ["DockerGroupStep", "DockerServiceStep"]

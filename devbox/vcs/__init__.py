from .git import GitClone, clone_if_absent

__all__ = ["GitClone", "clone_if_absent"]

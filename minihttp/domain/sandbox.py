"""Filesystem sandbox utilities for safe path resolution."""

from pathlib import Path


class ForbiddenPath(Exception):
    """Raised when a requested path escapes the served directory."""


def resolve_sandbox_path(directory: str, user_path: str) -> Path:
    """Resolve a user-supplied filename inside the served directory."""
    if "\x00" in user_path:
        raise ForbiddenPath(user_path)

    root = Path(directory).resolve()
    relative_part = user_path.lstrip("/")
    if not relative_part or ".." in Path(relative_part).parts:
        raise ForbiddenPath(user_path)

    target = (root / relative_part).resolve()
    if root not in target.parents:
        raise ForbiddenPath(user_path)
    return target

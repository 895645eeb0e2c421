"""Confine client-supplied file names to the served directory."""

from pathlib import Path, PurePosixPath


class ForbiddenPath(Exception):
    """Raised when a requested file name escapes the configured directory."""


def _relative_name(user_path: str) -> PurePosixPath:
    if "\x00" in user_path:
        raise ForbiddenPath
    name = PurePosixPath(user_path.lstrip("/"))
    if not name.parts or ".." in name.parts:
        raise ForbiddenPath
    return name


def resolve_sandbox_path(directory: str, user_path: str) -> Path:
    """Return the absolute file path for ``user_path`` under ``directory``.

    An empty directory means the working directory. The name is always joined
    relative to the root, so a leading ``/`` is ignored. The result must be a
    strictly nested entry: the root itself and anything reached through a
    symlink pointing outside it are refused.
    """
    root = Path(directory).resolve()
    target = root.joinpath(_relative_name(user_path)).resolve()
    if target == root or not target.is_relative_to(root):
        raise ForbiddenPath
    return target

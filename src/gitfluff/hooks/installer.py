"""
Git hook installation.

Writes a small `#!/bin/sh` script into the repository's hooks directory that
runs `gitfluff lint` on the message file git passes to the hook. Repository
discovery goes through GitPython, so linked worktrees, `.git` files and
`core.hooksPath` are handled the way git handles them.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Union

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from ..errors import HookInstallError

logger = logging.getLogger(__name__)

MERGE_HEAD = "MERGE_HEAD"
HOOK_MODE = 0o755


class HookKind(Enum):
    """Hooks gitfluff can install."""
    COMMIT_MSG = "commit-msg"


def _open_repo(start_dir: Union[str, Path]) -> Repo:
    try:
        return Repo(str(start_dir), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise HookInstallError(f"not inside a git repository: {start_dir}", cause=e)


def hooks_dir(repo: Repo) -> Path:
    """Directory git runs hooks from for this repository."""
    with repo.config_reader() as reader:
        configured = reader.get_value("core", "hooksPath", default="")

    if configured:
        path = Path(os.path.expanduser(str(configured)))
        if not path.is_absolute():
            base = repo.working_tree_dir or repo.git_dir
            path = Path(base) / path
        return path

    return Path(repo.common_dir) / "hooks"


def render_hook_script(kind: HookKind, write: bool = False) -> str:
    """Shell script body for a hook."""
    command = 'exec gitfluff lint "$1"'
    if write:
        command += " --write"
    return f"#!/bin/sh\n# Installed by gitfluff ({kind.value})\n{command}\n"


def install_hook(
    start_dir: Union[str, Path],
    kind: HookKind = HookKind.COMMIT_MSG,
    write: bool = False,
    force: bool = False,
) -> Path:
    """
    Install a git hook that runs gitfluff.

    Args:
        start_dir: Any directory inside the repository
        kind: Hook to install
        write: Whether the hook rewrites the message with cleanups
        force: Overwrite an existing hook

    Returns:
        Path of the installed hook

    Raises:
        HookInstallError: Outside a repository, existing hook without force,
                          or the hook file can't be written
    """
    with _open_repo(start_dir) as repo:
        directory = hooks_dir(repo)

    hook_path = directory / kind.value
    if hook_path.exists() and not force:
        raise HookInstallError(
            f"{hook_path} already exists (use --force to overwrite)"
        )

    try:
        directory.mkdir(parents=True, exist_ok=True)
        hook_path.write_text(render_hook_script(kind, write=write), encoding="utf-8")
        hook_path.chmod(HOOK_MODE)
    except OSError as e:
        raise HookInstallError(f"failed to write hook {hook_path}: {e.strerror or e}", cause=e)

    logger.info(f"Installed {kind.value} hook at {hook_path}")
    return hook_path


def is_merge_in_progress(start_dir: Union[str, Path]) -> bool:
    """
    True when the repository containing `start_dir` has a merge in progress.

    Outside a git repository this is always False.
    """
    try:
        repo = Repo(str(start_dir), search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return False

    with repo:
        return (Path(repo.git_dir) / MERGE_HEAD).exists()

"""tools/core_git.py

Git helpers for the target project.

All helpers are best-effort readers except :func:`init_repository`: they
return None when the directory is not a git repo or git is unavailable, so
config auto-detection never fails a run.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

from .core_cmd import run_cmd

GIT_TIMEOUT_SECONDS = 20


def _git(project_root: Path, *args: str) -> Optional[str]:
    if not shutil.which("git"):
        return None
    res = run_cmd(["git", "-C", str(project_root), *args], timeout_seconds=GIT_TIMEOUT_SECONDS)
    out = (res.stdout or "").strip()
    return out if res.exit_code == 0 and out else None


def get_git_config(project_root: Path, key: str) -> Optional[str]:
    """Effective ``git config <key>`` (repo, then global) or None."""
    return _git(project_root, "config", "--get", key)


def get_remote_url(project_root: Path, remote: str = "origin") -> Optional[str]:
    return _git(project_root, "remote", "get-url", remote)


def get_git_branch(project_root: Path) -> Optional[str]:
    """Return the current branch name, or None when detached/unavailable."""
    b = _git(project_root, "rev-parse", "--abbrev-ref", "HEAD")
    if not b or b == "HEAD":
        return None
    return b


def is_git_repo(project_root: Path) -> bool:
    return (Path(project_root) / ".git").exists()


def init_repository(project_root: Path, *, default_branch: str = "main") -> bool:
    """Run ``git init`` in *project_root* unless it is already a repo.

    Returns True if a repository was created.
    """
    if is_git_repo(project_root):
        return False
    res = run_cmd(
        ["git", "init", "--initial-branch", default_branch, str(project_root)],
        timeout_seconds=GIT_TIMEOUT_SECONDS,
    )
    if res.exit_code != 0:
        raise RuntimeError(f"git init failed (exit {res.exit_code}): {res.stderr.strip()}")
    return True


def repo_name_from_url(url: str) -> Optional[str]:
    """``git@github.com:acme/widget.git`` -> ``widget``."""
    tail = url.rstrip("/").replace(":", "/").split("/")[-1]
    if tail.endswith(".git"):
        tail = tail[: -len(".git")]
    return tail or None

"""Git-related services for git-worktree-status."""

from .repository import Repository, parse_numstat
from .worktrees import parse_worktree_porcelain

__all__ = [
    "Repository",
    "parse_numstat",
    "parse_worktree_porcelain",
]

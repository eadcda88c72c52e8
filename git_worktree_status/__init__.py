"""
git-worktree-status - Status overview of every worktree in a Git repository
"""

from .__version__ import __version__
from .core.worktree_status import WorktreeStatus
from .cli.main import main

__all__ = ["WorktreeStatus", "main", "__version__"]

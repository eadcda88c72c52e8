"""Version information for git-worktree-status."""

__version__ = "0.1.0"

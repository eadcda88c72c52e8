"""Worktree enumeration for git-worktree-status."""

from typing import Any, Dict, List

from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.worktree import Worktree

logger = get_logger(__name__)


def _build_worktree(entry: Dict[str, Any]) -> Worktree:
    return Worktree(
        path=entry["path"],
        head=entry.get("HEAD", ""),
        branch=entry.get("branch"),
        bare=entry.get("bare", False),
        detached=entry.get("detached", False),
        locked=entry.get("locked"),
        prunable=entry.get("prunable"),
    )


def parse_worktree_porcelain(output: str) -> List[Worktree]:
    """Parse `git worktree list --porcelain` output.

    Format (records separated by blank lines):
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name | detached
        bare
        locked [reason]
        prunable [reason]

    The first record is always the primary worktree.

    Args:
        output: Raw porcelain output

    Returns:
        Worktrees in enumeration order
    """
    worktrees: List[Worktree] = []
    current: Dict[str, Any] = {}

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line.strip():
            # Empty line marks end of worktree entry
            if current.get("path"):
                worktrees.append(_build_worktree(current))
            current = {}
            continue

        key, _, value = line.partition(" ")
        if key == "worktree":
            current["path"] = value
        elif key == "HEAD":
            current["HEAD"] = value
        elif key == "branch":
            # "branch refs/heads/feature/x" -> "feature/x"
            if value.startswith("refs/heads/"):
                current["branch"] = value[len("refs/heads/"):]
            else:
                current["branch"] = value
        elif key == "detached":
            current["detached"] = True
        elif key == "bare":
            current["bare"] = True
        elif key == "locked":
            current["locked"] = value
        elif key == "prunable":
            current["prunable"] = value

    # Handle last entry if no trailing blank line
    if current.get("path"):
        worktrees.append(_build_worktree(current))

    logger.debug(f"Parsed {len(worktrees)} worktrees")
    for wt in worktrees:
        logger.debug(f"  {wt}")
    return worktrees

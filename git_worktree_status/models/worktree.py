"""Worktree data models."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from git_worktree_status.models.status import (
    AheadBehind,
    BranchDiffTotals,
    CommitDetails,
    PrStatus,
    StatusSymbols,
    UpstreamStatus,
)


@dataclass(frozen=True)
class Worktree:
    """A worktree as reported by `git worktree list --porcelain`."""

    path: str
    head: str
    branch: Optional[str]  # None when detached
    bare: bool = False
    detached: bool = False
    locked: Optional[str] = None  # Lock reason, "" when locked without one
    prunable: Optional[str] = None  # Prune reason, "" when prunable without one

    def __str__(self) -> str:
        return f"{self.branch or '(detached)'} @ {self.path}"


@dataclass
class WorktreeInfo:
    """A worktree enriched with commit, divergence, diff and status metadata."""

    worktree: Worktree
    commit: CommitDetails
    counts: AheadBehind
    working_tree_diff: Tuple[int, int]
    # None: not computed (tree differs from the primary's)
    # (0, 0): content identical to the primary branch
    # (a, d): lines added/deleted against the primary branch
    working_tree_diff_with_main: Optional[Tuple[int, int]]
    branch_diff: BranchDiffTotals
    is_primary: bool
    upstream: UpstreamStatus
    worktree_state: Optional[str] = None
    pr_status: Optional[PrStatus] = None
    has_conflicts: bool = False
    status_symbols: StatusSymbols = field(default_factory=StatusSymbols)
    user_status: Optional[str] = None

    def combined_status(self) -> str:
        """Git status symbols followed by the user-defined status."""
        rendered = self.status_symbols.render()
        if self.user_status:
            return rendered + self.user_status
        return rendered

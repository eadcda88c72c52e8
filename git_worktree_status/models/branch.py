"""Branch data models."""

from dataclasses import dataclass
from typing import Optional

from git_worktree_status.constants import SYMBOL_BRANCH_ONLY
from git_worktree_status.models.status import (
    AheadBehind,
    BranchDiffTotals,
    CommitDetails,
    PrStatus,
    UpstreamStatus,
)


@dataclass
class BranchInfo:
    """A local branch with no worktree, enriched with git metadata."""

    name: str
    head: str
    commit: CommitDetails
    counts: AheadBehind
    branch_diff: BranchDiffTotals
    upstream: UpstreamStatus
    pr_status: Optional[PrStatus] = None
    has_conflicts: bool = False
    user_status: Optional[str] = None

    def combined_status(self) -> str:
        """Branches carry no git status symbols; "·" marks a branch without a worktree."""
        return self.user_status if self.user_status else SYMBOL_BRANCH_ONLY

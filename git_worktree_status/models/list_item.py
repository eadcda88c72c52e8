"""Unified row type for worktrees and branches shown in the same table."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from git_worktree_status.constants import DETACHED_LABEL
from git_worktree_status.models.branch import BranchInfo
from git_worktree_status.models.status import (
    AheadBehind,
    BranchDiffTotals,
    CommitDetails,
    PrStatus,
    UpstreamStatus,
)
from git_worktree_status.models.worktree import WorktreeInfo


class ItemKind(Enum):
    """Which variant a ListItem holds."""
    WORKTREE = "worktree"
    BRANCH = "branch"


@dataclass(frozen=True)
class ListItem:
    """A row of the report: either a worktree or a branch without one.

    Sorting and rendering go through the accessors below. Fields that only
    exist on worktrees are reached through as_worktree().
    """

    kind: ItemKind
    info: Union[WorktreeInfo, BranchInfo]

    @classmethod
    def worktree(cls, info: WorktreeInfo) -> "ListItem":
        return cls(ItemKind.WORKTREE, info)

    @classmethod
    def branch(cls, info: BranchInfo) -> "ListItem":
        return cls(ItemKind.BRANCH, info)

    @property
    def is_worktree(self) -> bool:
        return self.kind is ItemKind.WORKTREE

    def as_worktree(self) -> Optional[WorktreeInfo]:
        """Narrow to the worktree variant, None for branch rows."""
        if self.kind is ItemKind.WORKTREE:
            return self.info  # type: ignore[return-value]
        return None

    def as_branch(self) -> Optional[BranchInfo]:
        """Narrow to the branch variant, None for worktree rows."""
        if self.kind is ItemKind.BRANCH:
            return self.info  # type: ignore[return-value]
        return None

    @property
    def branch_name(self) -> str:
        wt = self.as_worktree()
        if wt is not None:
            return wt.worktree.branch or DETACHED_LABEL
        return self.info.name  # type: ignore[union-attr]

    @property
    def head(self) -> str:
        wt = self.as_worktree()
        if wt is not None:
            return wt.worktree.head
        return self.info.head  # type: ignore[union-attr]

    @property
    def is_primary(self) -> bool:
        wt = self.as_worktree()
        return wt is not None and wt.is_primary

    @property
    def worktree_path(self) -> Optional[str]:
        wt = self.as_worktree()
        return wt.worktree.path if wt is not None else None

    @property
    def commit(self) -> CommitDetails:
        return self.info.commit

    @property
    def commit_timestamp(self) -> int:
        return self.info.commit.timestamp

    @property
    def counts(self) -> AheadBehind:
        return self.info.counts

    @property
    def branch_diff(self) -> BranchDiffTotals:
        return self.info.branch_diff

    @property
    def upstream(self) -> UpstreamStatus:
        return self.info.upstream

    @property
    def pr_status(self) -> Optional[PrStatus]:
        return self.info.pr_status

    def combined_status(self) -> str:
        return self.info.combined_status()


@dataclass
class ListData:
    """Sorted rows plus the worktree the process is standing in."""

    items: List[ListItem]
    current_worktree_path: Optional[str] = None

    def is_current(self, item: ListItem) -> bool:
        path = item.worktree_path
        return path is not None and path == self.current_worktree_path

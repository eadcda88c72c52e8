"""Column sizing for the worktree table"""

import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from rich.cells import cell_len

from git_worktree_status.constants import COLUMN_LABELS
from git_worktree_status.formatters import (
    find_common_prefix,
    format_ahead_behind,
    format_all_states,
    format_ci,
    format_relative_time,
    format_upstream,
    truncate_at_word_boundary,
)
from git_worktree_status.models.list_item import ListItem


@dataclass
class DiffWidths:
    """Width of a "+added -deleted" column and its two digit groups."""
    total: int = 0
    added_digits: int = 0
    deleted_digits: int = 0


@dataclass
class ColumnWidths:
    """Widths in terminal cells; 0 means the column is hidden."""
    branch: int = 0
    status: int = 0
    time: int = 0
    ahead_behind: int = 0
    branch_diff: DiffWidths = field(default_factory=DiffWidths)
    working_diff: DiffWidths = field(default_factory=DiffWidths)
    upstream: int = 0
    ci: int = 0
    message: int = 0
    states: int = 0


@dataclass
class LayoutConfig:
    widths: ColumnWidths
    common_prefix: str
    max_message_len: int
    now: int


def _column_width(key: str, cells: Iterable[str]) -> int:
    """max(header, widest cell), or 0 when every cell is empty."""
    widest = max((cell_len(text) for text in cells if text), default=0)
    if widest == 0:
        return 0
    return max(cell_len(COLUMN_LABELS[key]), widest)


def _diff_widths(key: str, diffs: List[tuple]) -> DiffWidths:
    """Size a diff column from the (added, deleted) pairs that have content."""
    diffs = [(added, deleted) for added, deleted in diffs if added or deleted]
    if not diffs:
        return DiffWidths()

    added_digits = max(len(str(added)) for added, _ in diffs)
    deleted_digits = max(len(str(deleted)) for _, deleted in diffs)
    # "+" digits " -" digits
    content = 1 + added_digits + 2 + deleted_digits
    return DiffWidths(
        total=max(cell_len(COLUMN_LABELS[key]), content),
        added_digits=added_digits,
        deleted_digits=deleted_digits,
    )


def calculate_layout(items: List[ListItem], max_message_len: int = 50,
                     now: Optional[int] = None) -> LayoutConfig:
    """Compute column widths and the common path prefix for a list of rows.

    Primary rows never show ahead/behind or branch diff, so they do not
    count towards those columns.

    Args:
        items: Rows to display
        max_message_len: Maximum commit message width
        now: Reference time for the Age column (defaults to the current time)
    """
    if now is None:
        now = int(time.time())

    non_primary = [item for item in items if not item.is_primary]
    worktree_infos = [info for info in (item.as_worktree() for item in items) if info is not None]

    widths = ColumnWidths(
        branch=max(
            [cell_len(COLUMN_LABELS["branch"])] + [cell_len(item.branch_name) for item in items]
        ),
        status=_column_width("status", (item.combined_status() for item in items)),
        time=_column_width(
            "time", (format_relative_time(item.commit_timestamp, now) for item in items)
        ),
        ahead_behind=_column_width(
            "ahead_behind", (format_ahead_behind(item.counts) for item in non_primary)
        ),
        branch_diff=_diff_widths(
            "branch_diff", [item.branch_diff.diff for item in non_primary]
        ),
        working_diff=_diff_widths(
            "working_diff", [info.working_tree_diff for info in worktree_infos]
        ),
        upstream=_column_width("upstream", (format_upstream(item.upstream) for item in items)),
        ci=_column_width("ci", (format_ci(item.pr_status) for item in items)),
        message=_column_width(
            "message",
            (truncate_at_word_boundary(item.commit.message, max_message_len) for item in items),
        ),
        states=_column_width("states", (format_all_states(info) for info in worktree_infos)),
    )

    return LayoutConfig(
        widths=widths,
        common_prefix=find_common_prefix([info.worktree.path for info in worktree_infos]),
        max_message_len=max_message_len,
        now=now,
    )

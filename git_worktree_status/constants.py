"""Shared constants for git-worktree-status."""

from dataclasses import dataclass
from typing import List


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str


# Column order for the table. Every column except branch, commit and path
# is optional and disappears when no row has content for it.
COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch"),
    ColumnDefinition("status", "Status"),
    ColumnDefinition("time", "Age"),
    ColumnDefinition("ahead_behind", "Cmts"),
    ColumnDefinition("branch_diff", "Cmt +/-"),
    ColumnDefinition("working_diff", "WT +/-"),
    ColumnDefinition("upstream", "Remote"),
    ColumnDefinition("ci", "CI"),
    ColumnDefinition("commit", "Commit"),
    ColumnDefinition("message", "Message"),
    ColumnDefinition("states", "State"),
    ColumnDefinition("path", "Path"),
]

COLUMN_LABELS = {col.key: col.label for col in COLUMNS}

COLUMN_GAP = "  "
COMMIT_WIDTH = 8
DETACHED_LABEL = "(detached)"


# Status symbols, prefix slot
SYMBOL_CONFLICT = "="
SYMBOL_MATCHES_PRIMARY = "≡"
SYMBOL_NO_COMMITS = "∅"
SYMBOL_REBASE = "↻"
SYMBOL_MERGE = "⋈"
SYMBOL_BARE = "◇"
SYMBOL_LOCKED = "⊠"
SYMBOL_PRUNABLE = "⚠"

# Divergence from the primary branch
SYMBOL_AHEAD = "↑"
SYMBOL_BEHIND = "↓"
SYMBOL_DIVERGED = "↕"

# Divergence from the upstream branch
SYMBOL_UPSTREAM_AHEAD = "⇡"
SYMBOL_UPSTREAM_BEHIND = "⇣"
SYMBOL_UPSTREAM_DIVERGED = "⇅"

# Working tree changes, in emission order
SYMBOL_UNTRACKED = "?"
SYMBOL_MODIFIED = "!"
SYMBOL_STAGED = "+"
SYMBOL_RENAMED = "»"
SYMBOL_DELETED = "✘"

# Combined status of a branch row without any user status
SYMBOL_BRANCH_ONLY = "·"

SYMBOL_CI = "●"


# Rich styles
STYLE_ADDITION = "green"
STYLE_DELETION = "red"
STYLE_AHEAD_BEHIND = "yellow"
STYLE_CURRENT = "bold magenta"
STYLE_PRIMARY = "cyan"
STYLE_DIM = "dim"

CI_STYLES = {
    "passed": "green",
    "running": "blue",
    "failed": "red",
    "conflicts": "yellow",
    "no-ci": "bright_black",
}


# Git config keys for user-defined status
USER_STATUS_KEY = "wtstatus.status"
BRANCH_USER_STATUS_KEY = "branch.{branch}.wtstatus"


LEGEND_TEXT = """
Legend:
= Conflicts            ≡ Matches primary     ∅ No commits
↻ Rebase in progress   ⋈ Merge in progress
◇ Bare                 ⊠ Locked              ⚠ Prunable
↑ Ahead of primary     ↓ Behind primary      ↕ Diverged from primary
⇡ Ahead of upstream    ⇣ Behind upstream     ⇅ Diverged from upstream
? Untracked  ! Modified  + Staged  » Renamed  ✘ Deleted
· Branch without worktree
"""

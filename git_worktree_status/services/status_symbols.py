"""Status symbol engine: compresses git status facts into StatusSymbols.

Everything here is pure; callers supply the raw `git status --porcelain`
report and the divergence counts.
"""

from git_worktree_status.constants import (
    SYMBOL_AHEAD,
    SYMBOL_BEHIND,
    SYMBOL_CONFLICT,
    SYMBOL_DELETED,
    SYMBOL_DIVERGED,
    SYMBOL_MODIFIED,
    SYMBOL_RENAMED,
    SYMBOL_STAGED,
    SYMBOL_UNTRACKED,
    SYMBOL_UPSTREAM_AHEAD,
    SYMBOL_UPSTREAM_BEHIND,
    SYMBOL_UPSTREAM_DIVERGED,
)
from git_worktree_status.models.status import GitStatusInfo, StatusSymbols


def divergence_symbol(ahead: int, behind: int, ahead_symbol: str = SYMBOL_AHEAD,
                      behind_symbol: str = SYMBOL_BEHIND,
                      diverged_symbol: str = SYMBOL_DIVERGED) -> str:
    """Pick exactly one of ahead/behind/diverged, or "" when in sync."""
    if ahead > 0 and behind > 0:
        return diverged_symbol
    if ahead > 0:
        return ahead_symbol
    if behind > 0:
        return behind_symbol
    return ""


def upstream_divergence_symbol(ahead: int, behind: int) -> str:
    return divergence_symbol(
        ahead, behind, SYMBOL_UPSTREAM_AHEAD, SYMBOL_UPSTREAM_BEHIND, SYMBOL_UPSTREAM_DIVERGED
    )


def parse_git_status(status_output: str, main_ahead: int = 0, main_behind: int = 0,
                     upstream_ahead: int = 0, upstream_behind: int = 0) -> GitStatusInfo:
    """Parse `git status --porcelain` output into a dirty flag and status symbols.

    One report feeds both facts so callers only run `git status` once.

    Each line is "XY path" where X is the index status and Y the worktree
    status. A line may fall into several classes:
        conflict:  U on either side, DD, AA
        untracked: ??
        modified:  Y == M
        staged:    X in A/M/C (deletes and renames have their own symbols)
        renamed:   X == R
        deleted:   D on either side

    Args:
        status_output: Raw porcelain report
        main_ahead: Commits ahead of the primary branch
        main_behind: Commits behind the primary branch
        upstream_ahead: Commits ahead of the upstream branch
        upstream_behind: Commits behind the upstream branch

    Returns:
        GitStatusInfo with is_dirty and the structured symbols
    """
    is_dirty = False
    has_conflicts = False
    has_untracked = False
    has_modified = False
    has_staged = False
    has_renamed = False
    has_deleted = False

    for line in status_output.splitlines():
        if len(line) < 2:
            continue

        is_dirty = True

        index_status = line[0]
        worktree_status = line[1]

        if (
            index_status == "U"
            or worktree_status == "U"
            or (index_status == "D" and worktree_status == "D")
            or (index_status == "A" and worktree_status == "A")
        ):
            has_conflicts = True

        if index_status == "?" and worktree_status == "?":
            has_untracked = True

        if worktree_status == "M":
            has_modified = True

        if index_status in ("A", "M", "C"):
            has_staged = True

        if index_status == "R":
            has_renamed = True

        if index_status == "D" or worktree_status == "D":
            has_deleted = True

    symbols = StatusSymbols()

    if has_conflicts:
        symbols.prefix = SYMBOL_CONFLICT

    symbols.main_divergence = divergence_symbol(main_ahead, main_behind)
    symbols.upstream_divergence = upstream_divergence_symbol(upstream_ahead, upstream_behind)

    working_tree = []
    if has_untracked:
        working_tree.append(SYMBOL_UNTRACKED)
    if has_modified:
        working_tree.append(SYMBOL_MODIFIED)
    if has_staged:
        working_tree.append(SYMBOL_STAGED)
    if has_renamed:
        working_tree.append(SYMBOL_RENAMED)
    if has_deleted:
        working_tree.append(SYMBOL_DELETED)
    symbols.working_tree = "".join(working_tree)

    return GitStatusInfo(is_dirty=is_dirty, symbols=symbols)

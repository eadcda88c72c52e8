"""Column text for states, divergence, upstream, diffs and CI."""

from typing import Optional

from git_worktree_status.constants import DETACHED_LABEL, SYMBOL_AHEAD, SYMBOL_BEHIND, SYMBOL_CI
from git_worktree_status.models.status import AheadBehind, PrStatus, UpstreamStatus
from git_worktree_status.models.worktree import WorktreeInfo


def _with_reason(label: str, reason: str) -> str:
    return f"({label}: {reason})" if reason else f"({label})"


def format_all_states(info: WorktreeInfo) -> str:
    """
    Describe operations in progress and worktree attributes.

    A detached worktree without a branch already reads "(detached)" in the
    branch column, so it is not repeated here.
    """
    wt = info.worktree
    states = []

    if info.worktree_state:
        states.append(f"[{info.worktree_state}]")
    if wt.detached and wt.branch is not None:
        states.append(DETACHED_LABEL)
    if wt.bare:
        states.append("(bare)")
    if wt.locked is not None:
        states.append(_with_reason("locked", wt.locked))
    if wt.prunable is not None:
        states.append(_with_reason("prunable", wt.prunable))

    return " ".join(states)


def format_ahead_behind(counts: AheadBehind) -> str:
    """Commits ahead and behind, like "↑3 ↓1"; empty when in sync."""
    if counts.ahead == 0 and counts.behind == 0:
        return ""
    return f"{SYMBOL_AHEAD}{counts.ahead} {SYMBOL_BEHIND}{counts.behind}"


def format_upstream(upstream: UpstreamStatus) -> str:
    """Tracking divergence, like "origin ↑1 ↓0"; empty without a tracking branch."""
    active = upstream.active()
    if active is None:
        return ""
    remote, ahead, behind = active
    return f"{remote} {SYMBOL_AHEAD}{ahead} {SYMBOL_BEHIND}{behind}"


def format_diff(added: int, deleted: int, added_digits: int = 1, deleted_digits: int = 1) -> str:
    """Line totals, like "+12 -3", each number right-aligned to its digit width."""
    return f"+{added:>{added_digits}} -{deleted:>{deleted_digits}}"


def format_ci(pr_status: Optional[PrStatus]) -> str:
    if pr_status is None:
        return ""
    return f"{SYMBOL_CI} {pr_status.value}"

"""Machine-readable output for the worktree report"""

import json
from typing import Any, Dict, List, Optional

from git_worktree_status.formatters import format_ahead_behind, format_ci, format_diff, format_upstream
from git_worktree_status.models.list_item import ListData, ListItem
from git_worktree_status.models.status import StatusSymbols


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _status_symbols(symbols: StatusSymbols, combined: str) -> Dict[str, str]:
    data = symbols.to_dict()
    data["status"] = combined
    return data


def _diff_display(diff) -> Optional[str]:
    added, deleted = diff
    if not (added or deleted):
        return None
    return format_diff(added, deleted)


def _display_fields(item: ListItem) -> Dict[str, Optional[str]]:
    """Cell text as the table shows it; the primary shows no divergence."""
    return {
        "commits_display": None if item.is_primary else format_ahead_behind(item.counts) or None,
        "branch_diff_display": None if item.is_primary else _diff_display(item.branch_diff.diff),
        "upstream_display": format_upstream(item.upstream) or None,
        "ci_status_display": format_ci(item.pr_status) or None,
    }


def serialize_list_item(item: ListItem, is_current: bool = False) -> Dict[str, Any]:
    """Flatten a row into a JSON-ready dict.

    Optional fields that are absent are left out; diff pairs become
    two-element lists. Branch rows carry empty symbol slots. The
    `*_display` fields repeat the table cell text.
    """
    data: Dict[str, Any] = {
        "type": item.kind.value,
        "head": item.head,
        "timestamp": item.commit.timestamp,
        "commit_message": item.commit.message,
        "ahead": item.counts.ahead,
        "behind": item.counts.behind,
        "branch_diff": list(item.branch_diff.diff),
        "upstream_remote": item.upstream.remote,
        "upstream_ahead": item.upstream.ahead,
        "upstream_behind": item.upstream.behind,
        "pr_status": item.pr_status.value if item.pr_status is not None else None,
    }

    wt_info = item.as_worktree()
    if wt_info is not None:
        wt = wt_info.worktree
        diff_with_main = wt_info.working_tree_diff_with_main
        data.update({
            "path": wt.path,
            "branch": wt.branch,
            "bare": wt.bare,
            "detached": wt.detached,
            "locked": wt.locked,
            "prunable": wt.prunable,
            "is_primary": wt_info.is_primary,
            "is_current": is_current,
            "working_tree_diff": list(wt_info.working_tree_diff),
            "working_tree_diff_with_main": list(diff_with_main) if diff_with_main is not None else None,
            "worktree_state": wt_info.worktree_state,
            "has_conflicts": wt_info.has_conflicts,
            "user_status": wt_info.user_status,
            "status_symbols": _status_symbols(wt_info.status_symbols, wt_info.combined_status()),
            "working_diff_display": _diff_display(wt_info.working_tree_diff),
        })
    else:
        branch_info = item.as_branch()
        assert branch_info is not None
        data.update({
            "branch": branch_info.name,
            "has_conflicts": branch_info.has_conflicts,
            "user_status": branch_info.user_status,
            "status_symbols": _status_symbols(StatusSymbols(), branch_info.combined_status()),
        })

    data.update(_display_fields(item))
    return _drop_none(data)


def serialize_list_data(list_data: ListData) -> List[Dict[str, Any]]:
    return [serialize_list_item(item, list_data.is_current(item)) for item in list_data.items]


def render_json(list_data: ListData) -> str:
    """Indented JSON array of all rows, in display order."""
    return json.dumps(serialize_list_data(list_data), indent=2, ensure_ascii=False)

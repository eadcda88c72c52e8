"""Display service for the worktree table"""

from typing import Optional

from rich.console import Console
from rich.text import Text

from git_worktree_status.constants import (
    CI_STYLES,
    COLUMN_GAP,
    COLUMN_LABELS,
    COMMIT_WIDTH,
    LEGEND_TEXT,
    STYLE_ADDITION,
    STYLE_AHEAD_BEHIND,
    STYLE_CURRENT,
    STYLE_DELETION,
    STYLE_DIM,
    STYLE_PRIMARY,
    SYMBOL_AHEAD,
    SYMBOL_BEHIND,
)
from git_worktree_status.formatters import (
    format_ahead_behind,
    format_all_states,
    format_ci,
    format_diff,
    format_relative_time,
    pad_to_width,
    shorten_path,
    truncate_at_word_boundary,
)
from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.list_item import ListData, ListItem
from git_worktree_status.services.layout_service import DiffWidths, LayoutConfig, calculate_layout

logger = get_logger(__name__)


def _append_cell(line: Text, text: str, width: int, style: Optional[str] = None) -> None:
    """Append text padded to width, then the column gap."""
    line.append(pad_to_width(text, width), style=style)
    line.append(COLUMN_GAP)


def _append_blank(line: Text, width: int) -> None:
    line.append(" " * width + COLUMN_GAP)


def _append_diff(line: Text, added: int, deleted: int, widths: DiffWidths) -> None:
    """Append "+a -d" with the two halves styled separately."""
    formatted = pad_to_width(
        format_diff(added, deleted, widths.added_digits, widths.deleted_digits), widths.total
    )
    split_pos = 1 + widths.added_digits
    line.append(formatted[:split_pos], style=STYLE_ADDITION)
    line.append(formatted[split_pos:], style=STYLE_DELETION)
    line.append(COLUMN_GAP)


class DisplayService:
    def __init__(self, verbose: bool = False, console: Optional[Console] = None):
        self.verbose = verbose
        self.console = console or Console()

    def format_header_line(self, layout: LayoutConfig) -> Text:
        """Header row with exactly the columns and widths of the data rows."""
        widths = layout.widths
        line = Text()

        def header(key: str, width: int) -> None:
            if width > 0:
                _append_cell(line, COLUMN_LABELS[key], width, STYLE_DIM)

        header("branch", widths.branch)
        header("status", widths.status)
        header("time", widths.time)
        header("ahead_behind", widths.ahead_behind)
        header("branch_diff", widths.branch_diff.total)
        header("working_diff", widths.working_diff.total)
        header("upstream", widths.upstream)
        header("ci", widths.ci)
        header("commit", COMMIT_WIDTH)
        header("message", widths.message)
        header("states", widths.states)
        line.append(COLUMN_LABELS["path"], style=STYLE_DIM)
        return line

    def format_item_line(self, item: ListItem, layout: LayoutConfig,
                         current_worktree_path: Optional[str] = None) -> Text:
        """One data row for a worktree or a branch."""
        widths = layout.widths
        info = item.as_worktree()
        line = Text()

        # Current worktree wins over primary
        text_style = None
        if info is not None:
            if current_worktree_path is not None and info.worktree.path == current_worktree_path:
                text_style = STYLE_CURRENT
            elif info.is_primary:
                text_style = STYLE_PRIMARY

        _append_cell(line, item.branch_name, widths.branch, text_style)

        if widths.status > 0:
            _append_cell(line, item.combined_status(), widths.status)

        if widths.time > 0:
            _append_cell(
                line, format_relative_time(item.commit_timestamp, layout.now), widths.time, STYLE_DIM
            )

        if widths.ahead_behind > 0:
            ahead_behind = "" if item.is_primary else format_ahead_behind(item.counts)
            if ahead_behind:
                _append_cell(line, ahead_behind, widths.ahead_behind, STYLE_AHEAD_BEHIND)
            else:
                _append_blank(line, widths.ahead_behind)

        if widths.branch_diff.total > 0:
            added, deleted = item.branch_diff.diff
            if not item.is_primary and (added or deleted):
                _append_diff(line, added, deleted, widths.branch_diff)
            else:
                _append_blank(line, widths.branch_diff.total)

        if widths.working_diff.total > 0:
            added, deleted = info.working_tree_diff if info is not None else (0, 0)
            if added or deleted:
                _append_diff(line, added, deleted, widths.working_diff)
            else:
                _append_blank(line, widths.working_diff.total)

        if widths.upstream > 0:
            self._append_upstream(line, item, widths.upstream)

        if widths.ci > 0:
            pr_status = item.pr_status
            style = CI_STYLES.get(pr_status.value) if pr_status is not None else None
            _append_cell(line, format_ci(pr_status), widths.ci, style)

        _append_cell(line, item.head[:COMMIT_WIDTH], COMMIT_WIDTH, text_style or STYLE_DIM)

        if widths.message > 0:
            message = truncate_at_word_boundary(item.commit.message, layout.max_message_len)
            _append_cell(line, message, widths.message, STYLE_DIM)

        if widths.states > 0:
            _append_cell(line, format_all_states(info) if info is not None else "", widths.states)

        if info is not None:
            line.append(shorten_path(info.worktree.path, layout.common_prefix), style=text_style)

        return line

    def _append_upstream(self, line: Text, item: ListItem, width: int) -> None:
        """Tracking text with the remote dimmed and the counts colored."""
        active = item.upstream.active()
        if active is None:
            _append_blank(line, width)
            return

        remote, ahead, behind = active
        segment = Text()
        segment.append(remote, style=STYLE_DIM)
        segment.append(" ")
        segment.append(f"{SYMBOL_AHEAD}{ahead}", style=STYLE_ADDITION)
        segment.append(" ")
        segment.append(f"{SYMBOL_BEHIND}{behind}", style=STYLE_DELETION)
        segment.append(" " * max(0, width - segment.cell_len))
        line.append_text(segment)
        line.append(COLUMN_GAP)

    def display_list(self, list_data: ListData, max_message_len: int = 50) -> None:
        """Print the table, plus a legend in verbose mode."""
        layout = calculate_layout(list_data.items, max_message_len)
        logger.debug(f"Layout: {layout.widths}")

        self.console.print(self.format_header_line(layout), soft_wrap=True)
        for item in list_data.items:
            self.console.print(
                self.format_item_line(item, layout, list_data.current_worktree_path),
                soft_wrap=True,
            )

        if self.verbose:
            self.console.print(LEGEND_TEXT, style=STYLE_DIM, highlight=False)

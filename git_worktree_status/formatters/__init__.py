"""Formatting utilities for git-worktree-status.

- date: relative commit age
- text: cell-width padding and word-boundary truncation
- path: common prefix and path shortening
- states: state, divergence, upstream, diff and CI column text
"""

from .date import format_relative_time
from .text import pad_to_width, truncate_at_word_boundary
from .path import find_common_prefix, shorten_path
from .states import (
    format_all_states,
    format_ahead_behind,
    format_upstream,
    format_diff,
    format_ci,
)

__all__ = [
    # Date
    "format_relative_time",
    # Text
    "pad_to_width",
    "truncate_at_word_boundary",
    # Path
    "find_common_prefix",
    "shorten_path",
    # States
    "format_all_states",
    "format_ahead_behind",
    "format_upstream",
    "format_diff",
    "format_ci",
]

"""Path shortening utilities."""

import os
from typing import List


def find_common_prefix(paths: List[str]) -> str:
    """
    Common directory of all paths.

    A single path yields its parent directory so the path itself still
    shows up as "./name".
    """
    if not paths:
        return ""
    if len(paths) == 1:
        return os.path.dirname(paths[0])
    return os.path.commonpath(paths)


def shorten_path(path: str, prefix: str) -> str:
    """
    Shorten a worktree path for display.

    Args:
        path: Absolute path
        prefix: Common prefix of all displayed paths

    Returns:
        "." for the prefix itself, "./<relative>" below it, otherwise the
        path with the home directory written as "~"
    """
    if prefix:
        if path == prefix:
            return "."
        if path.startswith(prefix.rstrip(os.sep) + os.sep):
            return "./" + path[len(prefix.rstrip(os.sep)) + 1:]

    home = os.path.expanduser("~")
    if path == home or path.startswith(home + os.sep):
        return "~" + path[len(home):]
    return path

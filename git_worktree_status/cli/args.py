"""Command-line argument parsing for git-worktree-status."""

import argparse
from typing import List, Optional

from git_worktree_status.__version__ import __version__
from git_worktree_status.config import OUTPUT_FORMATS


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Show the status of every worktree in a Git repository",
        epilog="CI status (--ci) needs a GitHub token in the GITHUB_TOKEN environment variable.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output and a legend")
    parser.add_argument("--version", action="version", version=f"git-worktree-status {__version__}")
    parser.add_argument(
        "--branches",
        action="store_true",
        help="Also list local branches that have no worktree",
    )
    parser.add_argument("--ci", action="store_true", help="Show CI/PR status from GitHub")
    parser.add_argument(
        "--conflicts",
        action="store_true",
        help="Check for merge conflicts against the primary branch",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--max-message-len",
        type=_positive_int,
        default=50,
        metavar="N",
        help="Maximum width of the commit message column (default: 50)",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        metavar="N",
        help="Number of parallel workers (default: auto-detect based on CPU and threading mode)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Force sequential processing (disable parallelism)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    return parser.parse_args(argv)

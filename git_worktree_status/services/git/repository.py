"""Read-only repository queries for git-worktree-status."""

import os
from typing import List, Optional, Sequence, Tuple

import git

from git_worktree_status.exceptions import GitOperationError
from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.worktree import Worktree
from git_worktree_status.services.git.worktrees import parse_worktree_porcelain

logger = get_logger(__name__)

# Files in the git dir that mark an operation in progress, checked in order
_STATE_MARKERS = [
    ("MERGE_HEAD", "merge"),
    ("CHERRY_PICK_HEAD", "cherry-pick"),
    ("REVERT_HEAD", "revert"),
    ("BISECT_LOG", "bisect"),
]


def _describe_git_error(e: git.exc.GitCommandError) -> str:
    """Turn a GitCommandError into a one-line message."""
    stderr = (e.stderr if hasattr(e, "stderr") and e.stderr else str(e)).strip()
    status = e.status if hasattr(e, "status") else "unknown"
    if stderr:
        return f"exit {status}: {stderr}"
    return f"exit code {status}"


def parse_numstat(output: str) -> Tuple[int, int]:
    """Sum `git diff --numstat` output into (added, deleted).

    Binary files report "-" for both counts and contribute nothing.
    """
    added = 0
    deleted = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        if parts[0].isdigit():
            added += int(parts[0])
        if parts[1].isdigit():
            deleted += int(parts[1])
    return added, deleted


class Repository:
    """Read-only queries against one working copy of a git repository.

    Every query opens a fresh git.Repo, so instances can be used from
    worker threads without locking.
    """

    def __init__(self, path: str):
        """Initialize the accessor.

        Args:
            path: Filesystem path of the working copy (or any directory inside it)
        """
        self.path = path

    @classmethod
    def at(cls, path: str) -> "Repository":
        """Accessor scoped to another working copy."""
        return cls(path)

    def _get_repo(self) -> git.Repo:
        """Get a fresh git.Repo instance for this path.

        Raises:
            GitOperationError: If the path is not inside a git repository
        """
        try:
            return git.Repo(self.path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise GitOperationError("open_repository", message=f"{self.path}: {e}") from e

    def run_command(self, *args: str, operation: Optional[str] = None,
                    branch: Optional[str] = None) -> str:
        """Run a git subcommand in this working copy and return its stdout.

        Raises:
            GitOperationError: If git exits with a non-zero status
        """
        repo = self._get_repo()
        command = ["git", *args]
        logger.debug(f"[{self.path}] {' '.join(command)}")
        try:
            return repo.git.execute(command)
        except git.exc.GitCommandError as e:
            raise GitOperationError(operation or args[0], branch, _describe_git_error(e)) from e

    def _run_with_status(self, args: Sequence[str]) -> Tuple[int, str, str]:
        """Run a git subcommand and return (status, stdout, stderr) without raising."""
        repo = self._get_repo()
        command = ["git", *args]
        logger.debug(f"[{self.path}] {' '.join(command)}")
        return repo.git.execute(command, with_extended_output=True, with_exceptions=False)

    # Worktrees and branches

    def list_worktrees(self) -> List[Worktree]:
        """Enumerate worktrees, primary first."""
        output = self.run_command("worktree", "list", "--porcelain", operation="list_worktrees")
        return parse_worktree_porcelain(output)

    def worktree_root(self) -> str:
        """Absolute, symlink-resolved top-level directory of this working copy."""
        output = self.run_command("rev-parse", "--show-toplevel", operation="worktree_root")
        return os.path.realpath(output.strip())

    def local_branches(self) -> List[str]:
        output = self.run_command(
            "for-each-ref", "--format=%(refname:lstrip=2)", "refs/heads/", operation="local_branches"
        )
        return [line.strip() for line in output.splitlines() if line.strip()]

    def available_branches(self, worktrees: Optional[List[Worktree]] = None) -> List[str]:
        """Local branches that are not checked out in any worktree.

        Args:
            worktrees: Already enumerated worktrees, listed again when omitted
        """
        if worktrees is None:
            worktrees = self.list_worktrees()
        checked_out = {wt.branch for wt in worktrees if wt.branch}
        return [b for b in self.local_branches() if b not in checked_out]

    # Commits

    def rev_parse(self, ref: str) -> str:
        output = self.run_command("rev-parse", "--verify", "--quiet", ref, operation="rev_parse")
        return output.strip()

    def tree_hash(self, ref: str) -> str:
        return self.rev_parse(f"{ref}^{{tree}}")

    def commit_timestamp(self, ref: str) -> int:
        output = self.run_command("log", "-1", "--format=%ct", ref, operation="commit_timestamp")
        try:
            return int(output.strip())
        except ValueError as e:
            raise GitOperationError(
                "commit_timestamp", message=f"unexpected output {output!r}"
            ) from e

    def commit_message(self, ref: str) -> str:
        output = self.run_command("log", "-1", "--format=%s", ref, operation="commit_message")
        return output.strip()

    # Divergence and diffs

    def ahead_behind(self, base: str, head: str) -> Tuple[int, int]:
        """Commits (ahead, behind) of head relative to base."""
        output = self.run_command(
            "rev-list", "--left-right", "--count", f"{base}...{head}", operation="ahead_behind"
        )
        parts = output.split()
        if len(parts) != 2:
            raise GitOperationError("ahead_behind", message=f"unexpected output {output!r}")
        behind, ahead = int(parts[0]), int(parts[1])
        return ahead, behind

    def branch_diff_stats(self, base: str, head: str) -> Tuple[int, int]:
        """Lines (added, deleted) on head since it forked from base."""
        output = self.run_command(
            "diff", "--numstat", f"{base}...{head}", operation="branch_diff_stats"
        )
        return parse_numstat(output)

    def working_tree_diff_stats(self) -> Tuple[int, int]:
        """Lines (added, deleted) in the working tree against HEAD."""
        output = self.run_command("diff", "--numstat", "HEAD", operation="working_tree_diff")
        return parse_numstat(output)

    def working_tree_diff_vs_ref(self, ref: str) -> Tuple[int, int]:
        """Lines (added, deleted) in the working tree against an arbitrary ref."""
        output = self.run_command("diff", "--numstat", ref, operation="working_tree_diff_vs_ref")
        return parse_numstat(output)

    def upstream_branch(self, branch: str) -> Optional[str]:
        """Tracking reference of a branch, e.g. "origin/feature", or None."""
        try:
            output = self.run_command(
                "rev-parse", "--abbrev-ref", "--symbolic-full-name", f"{branch}@{{upstream}}",
                operation="upstream_branch", branch=branch,
            )
        except GitOperationError as e:
            logger.debug(f"No upstream for {branch}: {e}")
            return None
        upstream = output.strip()
        return upstream or None

    def has_merge_conflicts(self, base: str, head: str) -> bool:
        """Whether merging head into base would conflict.

        Uses `git merge-tree --write-tree`, which exits 1 on conflicts.
        """
        status, _, stderr = self._run_with_status(
            ["merge-tree", "--write-tree", "--no-messages", base, head]
        )
        if status == 0:
            return False
        if status == 1:
            return True
        raise GitOperationError(
            "has_merge_conflicts", head, f"exit {status}: {stderr.strip()}"
        )

    # Working tree

    def status_porcelain(self) -> str:
        return self.run_command("status", "--porcelain", operation="status")

    def git_dir(self) -> str:
        output = self.run_command("rev-parse", "--absolute-git-dir", operation="git_dir")
        return output.strip()

    def worktree_state(self) -> Optional[str]:
        """Describe an operation in progress ("rebase 2/5", "merge", ...) or None."""
        git_dir = self.git_dir()

        for rebase_dir in ("rebase-merge", "rebase-apply"):
            path = os.path.join(git_dir, rebase_dir)
            if os.path.isdir(path):
                progress = _read_rebase_progress(path)
                return f"rebase {progress}" if progress else "rebase"

        for marker, state in _STATE_MARKERS:
            if os.path.exists(os.path.join(git_dir, marker)):
                return state
        return None

    # Config

    def config_value(self, key: str, worktree: bool = False) -> Optional[str]:
        """Read a config value, None when unset or empty.

        Args:
            key: Config key
            worktree: Read the worktree-scoped value (`git config --worktree`)
        """
        args = ["config"]
        if worktree:
            args.append("--worktree")
        args.extend(["--get", key])
        status, stdout, stderr = self._run_with_status(args)
        if status != 0:
            if stderr:
                logger.debug(f"config {key}: {stderr.strip()}")
            return None
        value = stdout.strip()
        return value or None


def _read_rebase_progress(rebase_dir: str) -> Optional[str]:
    """Read "current/total" from a rebase state directory."""
    for current_name, total_name in (("msgnum", "end"), ("next", "last")):
        try:
            with open(os.path.join(rebase_dir, current_name)) as f:
                current = f.read().strip()
            with open(os.path.join(rebase_dir, total_name)) as f:
                total = f.read().strip()
        except OSError:
            continue
        if current and total:
            return f"{current}/{total}"
    return None

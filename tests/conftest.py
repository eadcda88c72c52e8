"""Pytest fixtures for git-worktree-status tests"""
import tempfile
from pathlib import Path
from typing import Optional

import pytest
import git

from git_worktree_status.models.branch import BranchInfo
from git_worktree_status.models.list_item import ListItem
from git_worktree_status.models.status import (
    AheadBehind,
    BranchDiffTotals,
    CommitDetails,
    StatusSymbols,
    UpstreamStatus,
)
from git_worktree_status.models.worktree import Worktree, WorktreeInfo


def commit_file(repo: git.Repo, name: str, content: str, message: str) -> str:
    """Write a file in the repo's working tree, commit it and return the sha."""
    path = Path(repo.working_tree_dir) / name
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message).hexsha


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing (symlinks resolved)."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_config():
    """Create a configuration dictionary."""
    return {
        'show_branches': False,
        'fetch_ci': False,
        'check_conflicts': False,
        'output_format': 'table',
        'max_message_len': 50,
        'verbose': False,
        'debug': False,
        'sequential': True,
        'workers': None,
        'github_token': None,
        'ci_cache_ttl': 60,
    }


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_worktree(git_repo, temp_dir):
    """Repository with a second worktree on a fresh branch identical to main."""
    wt_path = temp_dir / "test_repo.feature"
    git_repo.git.worktree('add', '-b', 'feature', str(wt_path))

    yield git_repo, wt_path


@pytest.fixture
def git_repo_with_stale_worktree(git_repo, temp_dir):
    """Repository whose second worktree sits on a branch behind main.

    The branch has no commits of its own, but its tree differs from main's.
    """
    git_repo.git.branch('stale')
    commit_file(git_repo, "main.txt", "main only\n", "Advance main")

    wt_path = temp_dir / "test_repo.stale"
    git_repo.git.worktree('add', str(wt_path), 'stale')

    yield git_repo, wt_path


def make_worktree_info(path: str = "/repo", branch: Optional[str] = "main",
                       head: str = "a" * 40, timestamp: int = 1_700_000_000,
                       message: str = "Initial commit", is_primary: bool = False,
                       **overrides) -> WorktreeInfo:
    """Build a WorktreeInfo without touching git."""
    worktree = overrides.pop(
        "worktree", Worktree(path=path, head=head, branch=branch, detached=branch is None)
    )
    fields = dict(
        worktree=worktree,
        commit=CommitDetails(timestamp=timestamp, message=message),
        counts=AheadBehind(),
        working_tree_diff=(0, 0),
        working_tree_diff_with_main=(0, 0) if is_primary else None,
        branch_diff=BranchDiffTotals(),
        is_primary=is_primary,
        upstream=UpstreamStatus(),
        status_symbols=StatusSymbols(),
    )
    fields.update(overrides)
    return WorktreeInfo(**fields)


def make_branch_info(name: str = "topic", head: str = "b" * 40,
                     timestamp: int = 1_700_000_000, message: str = "Topic work",
                     **overrides) -> BranchInfo:
    """Build a BranchInfo without touching git."""
    fields = dict(
        name=name,
        head=head,
        commit=CommitDetails(timestamp=timestamp, message=message),
        counts=AheadBehind(),
        branch_diff=BranchDiffTotals(),
        upstream=UpstreamStatus(),
    )
    fields.update(overrides)
    return BranchInfo(**fields)


@pytest.fixture
def sample_items():
    """Primary worktree, a feature worktree and a branch without worktree."""
    primary = make_worktree_info(path="/work/repo", branch="main", is_primary=True,
                                 timestamp=1_700_000_000)
    feature = make_worktree_info(
        path="/work/repo.feature",
        branch="feature",
        head="c" * 40,
        timestamp=1_700_050_000,
        message="Add the feature with a fairly long commit message that needs truncation",
        counts=AheadBehind(ahead=3, behind=1),
        working_tree_diff=(12, 4),
        branch_diff=BranchDiffTotals(added=120, deleted=7),
        upstream=UpstreamStatus(remote="origin", ahead=1, behind=0),
        status_symbols=StatusSymbols(main_divergence="↕", upstream_divergence="⇡",
                                     working_tree="!"),
    )
    topic = make_branch_info(name="topic", timestamp=1_699_000_000,
                             counts=AheadBehind(ahead=1, behind=0),
                             branch_diff=BranchDiffTotals(added=5, deleted=0))
    return [ListItem.worktree(primary), ListItem.worktree(feature), ListItem.branch(topic)]

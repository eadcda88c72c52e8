"""GitHub CI/PR status lookup"""

import os
from typing import Iterable, Optional, Tuple, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Auth, Github

from git_worktree_status.exceptions import GitHubAPIError
from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.status import PrStatus

if TYPE_CHECKING:
    from github.Repository import Repository as GitHubRepository
    from git_worktree_status.config import Config
    from git_worktree_status.services.cache_service import CacheService
    from git_worktree_status.services.git.repository import Repository

logger = get_logger(__name__)

FAILED_CONCLUSIONS = {"failure", "cancelled", "timed_out", "action_required", "startup_failure"}


def parse_github_repo(remote_url: str) -> Optional[str]:
    """Extract "org/repo" from a GitHub remote URL, None for other hosts."""
    if "github.com" not in remote_url:
        return None

    if remote_url.startswith("git@"):
        # git@github.com:org/repo.git
        path = remote_url.split("github.com:", 1)[1]
    else:
        # https://github.com/org/repo.git, ssh://git@github.com/org/repo.git
        path = urlparse(remote_url).path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    return path if path.count("/") == 1 else None


def classify_ci_status(has_pr: bool, check_runs: Iterable[Tuple[str, Optional[str]]],
                       commit_state: Optional[str]) -> Optional[PrStatus]:
    """Reduce check runs and the combined commit status to one PrStatus.

    Args:
        has_pr: Whether the branch has an open pull request
        check_runs: (status, conclusion) of every check run on the head commit
        commit_state: Combined commit status state, None when no statuses exist

    Returns:
        The status, or None when there is neither a PR nor any CI
    """
    runs = list(check_runs)

    if commit_state in ("failure", "error") or any(c in FAILED_CONCLUSIONS for _, c in runs):
        return PrStatus.FAILED
    if commit_state == "pending" or any(s != "completed" for s, _ in runs):
        return PrStatus.RUNNING
    if runs or commit_state == "success":
        return PrStatus.PASSED
    if has_pr:
        return PrStatus.NO_CI
    return None


class GitHubService:
    def __init__(self, config: Union["Config", dict], cache_service: Optional["CacheService"] = None):
        """Initialize the service. Lookups stay disabled until setup succeeds."""
        self.config = config
        self.cache_service = cache_service
        self.github_token = config.get("github_token") or os.environ.get("GITHUB_TOKEN")
        self.github_repo: Optional[str] = None
        self.github: Optional[Github] = None
        self.gh_repo: Optional["GitHubRepository"] = None

    @property
    def enabled(self) -> bool:
        return self.gh_repo is not None and self.github_repo is not None

    def setup_github_api(self, github_repo: str) -> None:
        """Connect to the GitHub API for "org/repo".

        Raises:
            GitHubAPIError: If the token is missing or the repository can't be opened
        """
        if not self.github_token:
            raise GitHubAPIError("setup", "GitHub token not found")
        try:
            self.github = Github(auth=Auth.Token(self.github_token))
            self.gh_repo = self.github.get_repo(github_repo)
            self.github_repo = github_repo
        except Exception as e:
            self.gh_repo = None
            raise GitHubAPIError("setup", str(e)) from e

        logger.debug(f"[GitHub] CI lookup enabled for: {github_repo}")

    def setup_from_repository(self, repository: "Repository") -> bool:
        """Enable lookups when the origin remote is on GitHub and a token exists.

        Returns:
            True if CI lookups are enabled
        """
        remote_url = repository.config_value("remote.origin.url")
        if not remote_url:
            logger.info("No origin remote found. CI status disabled.")
            return False

        github_repo = parse_github_repo(remote_url)
        if github_repo is None:
            logger.info(f"Non-GitHub repository detected ({remote_url}). CI status disabled.")
            return False

        if not self.github_token:
            logger.warning(
                "GitHub token not found. CI status disabled.\n"
                "  • To enable: Set GITHUB_TOKEN environment variable\n"
                "  • Get token at: https://github.com/settings/tokens"
            )
            return False

        try:
            self.setup_github_api(github_repo)
        except GitHubAPIError as e:
            logger.debug(f"Failed to setup GitHub API: {e}")
            logger.warning("[GitHub] Setup failed - CI status disabled")
            return False
        return True

    def detect(self, branch_name: str, head: str) -> Optional[PrStatus]:
        """CI/PR status for a branch at a head commit. Never raises."""
        if not self.enabled:
            return None

        if self.cache_service is not None:
            found, cached = self.cache_service.get_ci_status(branch_name, head)
            if found:
                logger.debug(f"[GitHub] Using cached CI status for {branch_name}: {cached}")
                return cached

        try:
            status = self._fetch_status(branch_name, head)
        except Exception as e:
            logger.debug(f"[GitHub] Error fetching CI status for {branch_name}: {e}")
            return None

        logger.debug(f"[GitHub] CI status for {branch_name}@{head[:8]}: {status}")
        if self.cache_service is not None:
            self.cache_service.set_ci_status(branch_name, head, status)
        return status

    def _fetch_status(self, branch_name: str, head: str) -> Optional[PrStatus]:
        assert self.gh_repo is not None
        assert self.github_repo is not None

        owner = self.github_repo.split("/")[0]
        pulls = list(self.gh_repo.get_pulls(state="open", head=f"{owner}:{branch_name}"))
        pr = pulls[0] if pulls else None

        if pr is not None and pr.mergeable is False:
            return PrStatus.CONFLICTS

        commit = self.gh_repo.get_commit(head)
        check_runs = [(run.status, run.conclusion) for run in commit.get_check_runs()]
        combined = commit.get_combined_status()
        commit_state = combined.state if combined.total_count > 0 else None

        return classify_ci_status(pr is not None, check_runs, commit_state)

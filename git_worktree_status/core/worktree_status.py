"""Enrichment orchestrator for git-worktree-status"""

import os
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from typing import Callable, List, Optional, Sequence, TypeVar, Union

from rich.console import Console
from rich.markup import escape

from git_worktree_status.config import Config
from git_worktree_status.exceptions import GitOperationError
from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.list_item import ListData, ListItem
from git_worktree_status.models.worktree import Worktree
from git_worktree_status.services.cache_service import CacheService
from git_worktree_status.services.gather_service import GatherService
from git_worktree_status.services.git.repository import Repository
from git_worktree_status.services.github_service import GitHubService
from git_worktree_status.utils.threading import get_optimal_worker_count, get_threading_info

logger = get_logger(__name__)

# Warnings and the spinner go to stderr so JSON on stdout stays clean
err_console = Console(stderr=True)

T = TypeVar("T")
R = TypeVar("R")


def sort_items(items: List[ListItem], current_worktree_path: Optional[str]) -> List[ListItem]:
    """Primary first, then the current worktree, then newest commit first."""

    def sort_key(item: ListItem):
        if item.is_primary:
            priority = 0
        elif current_worktree_path is not None and item.worktree_path == current_worktree_path:
            priority = 1
        else:
            priority = 2
        return (priority, -item.commit_timestamp)

    return sorted(items, key=sort_key)


def _resolve_current_path(repo: Repository, worktrees: List[Worktree]) -> Optional[str]:
    """Path of the worktree the process is standing in, as enumerated."""
    try:
        root = repo.worktree_root()
    except GitOperationError as e:
        logger.debug(f"Could not resolve current worktree: {e}")
        return None

    for wt in worktrees:
        if os.path.realpath(wt.path) == root:
            return wt.path
    return root


class WorktreeStatus:
    """Gathers the worktree (and optional branch) report for one repository."""

    def __init__(self, repo_path: str, config: Union[Config, dict], show_progress: bool = False):
        """Initialize the orchestrator.

        Args:
            repo_path: Any path inside the repository
            config: Configuration dict or Config object
            show_progress: Show a spinner on stderr while gathering
        """
        if isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config
        self.repo = Repository(repo_path)
        self.show_progress = show_progress

        github_service = None
        if config.fetch_ci:
            cache_service = CacheService(repo_path, ttl=config.ci_cache_ttl)
            github_service = GitHubService(config, cache_service)
            github_service.setup_from_repository(self.repo)
        self.gather_service = GatherService(config, github_service)

    def _map(self, func: Callable[[T], R], inputs: Sequence[T]) -> List[R]:
        """Apply func to every input, results in input order.

        The first exception raised by any task is re-raised.
        """
        if self.config.run_sequentially or len(inputs) <= 1:
            return [func(item) for item in inputs]

        max_workers = get_optimal_worker_count(self.config.workers)
        logger.debug(f"Using {max_workers} workers for {len(inputs)} tasks")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(func, item) for item in inputs]
            return [future.result() for future in futures]

    def gather_list_data(self) -> Optional[ListData]:
        """Build the sorted report, or None when the repository has no worktrees.

        Raises:
            GitOperationError: If enumeration or any worktree enrichment fails
        """
        if self.config.debug:
            logger.debug(f"Threading: {get_threading_info()}")

        status_context = (
            err_console.status("[bold blue]Gathering worktree status...", spinner="dots")
            if self.show_progress
            else nullcontext()
        )
        with status_context:
            return self._gather()

    def _gather(self) -> Optional[ListData]:
        worktrees = self.repo.list_worktrees()
        if not worktrees:
            logger.debug("No worktrees found")
            return None

        primary = worktrees[0]
        current_worktree_path = _resolve_current_path(self.repo, worktrees)

        # Worktree failures propagate and abort the whole report
        worktree_infos = self._map(
            lambda wt: self.gather_service.gather_worktree_info(wt, primary), worktrees
        )
        items = [ListItem.worktree(info) for info in worktree_infos]

        if self.config.show_branches:
            items.extend(self._gather_branches(worktrees, primary.branch))

        return ListData(
            items=sort_items(items, current_worktree_path),
            current_worktree_path=current_worktree_path,
        )

    def _gather_branches(self, worktrees: List[Worktree],
                         primary_branch: Optional[str]) -> List[ListItem]:
        """Enrich branches without a worktree, dropping the ones that fail."""
        branches = self.repo.available_branches(worktrees)
        logger.debug(f"Gathering {len(branches)} branches without worktrees")

        def gather(branch: str) -> Optional[ListItem]:
            try:
                info = self.gather_service.gather_branch_info(self.repo, branch, primary_branch)
            except GitOperationError as e:
                logger.debug(f"Failed to enrich branch {branch}: {e}")
                report_branch_failure(branch, e)
                return None
            return ListItem.branch(info)

        return [item for item in self._map(gather, branches) if item is not None]


def report_branch_failure(branch: str, error: Exception) -> None:
    """Print a warning and hint for a branch that could not be enriched."""
    err_console.print(
        f"[yellow]Warning: Failed to enrich branch [bold]{escape(branch)}[/bold]: "
        f"{escape(str(error))}[/yellow]"
    )
    err_console.print("[dim]This branch will be left out of the list[/dim]")

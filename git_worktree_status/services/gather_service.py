"""Service that enriches worktrees and branches with git metadata"""

from typing import Optional, Tuple, Union, TYPE_CHECKING

from git_worktree_status.constants import (
    BRANCH_USER_STATUS_KEY,
    SYMBOL_BARE,
    SYMBOL_CONFLICT,
    SYMBOL_LOCKED,
    SYMBOL_MATCHES_PRIMARY,
    SYMBOL_MERGE,
    SYMBOL_NO_COMMITS,
    SYMBOL_PRUNABLE,
    SYMBOL_REBASE,
    USER_STATUS_KEY,
)
from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.branch import BranchInfo
from git_worktree_status.models.status import (
    AheadBehind,
    BranchDiffTotals,
    CommitDetails,
    PrStatus,
    StatusSymbols,
    UpstreamStatus,
)
from git_worktree_status.models.worktree import Worktree, WorktreeInfo
from git_worktree_status.services.git.repository import Repository
from git_worktree_status.services.status_symbols import parse_git_status

if TYPE_CHECKING:
    from git_worktree_status.config import Config
    from git_worktree_status.services.github_service import GitHubService

logger = get_logger(__name__)


def gather_commit_details(repo: Repository, head: str) -> CommitDetails:
    return CommitDetails(
        timestamp=repo.commit_timestamp(head),
        message=repo.commit_message(head),
    )


def compute_ahead_behind(repo: Repository, base: Optional[str], head: str) -> AheadBehind:
    """Ahead/behind of head against base, (0, 0) when there is no base."""
    if base is None:
        return AheadBehind()
    ahead, behind = repo.ahead_behind(base, head)
    return AheadBehind(ahead=ahead, behind=behind)


def compute_branch_diff(repo: Repository, base: Optional[str], head: str) -> BranchDiffTotals:
    """Line totals of head against base, (0, 0) when there is no base."""
    if base is None:
        return BranchDiffTotals()
    added, deleted = repo.branch_diff_stats(base, head)
    return BranchDiffTotals(added=added, deleted=deleted)


def calculate_upstream(repo: Repository, branch: Optional[str], head: str) -> UpstreamStatus:
    """Divergence of head from the branch's tracking reference.

    The remote name is the part of the tracking ref before the first "/".
    A branch without a tracking reference (or a detached HEAD) is inactive.
    """
    if branch is None:
        return UpstreamStatus()

    upstream_branch = repo.upstream_branch(branch)
    if upstream_branch is None:
        return UpstreamStatus()

    remote = upstream_branch.split("/", 1)[0] if "/" in upstream_branch else "origin"
    ahead, behind = repo.ahead_behind(upstream_branch, head)
    return UpstreamStatus(remote=remote, ahead=ahead, behind=behind)


def read_branch_user_status(repo: Repository, branch: str) -> Optional[str]:
    return repo.config_value(BRANCH_USER_STATUS_KEY.format(branch=branch))


def read_user_status(repo: Repository, branch: Optional[str]) -> Optional[str]:
    """User status for a worktree: worktree-scoped first, then branch-keyed."""
    status = repo.config_value(USER_STATUS_KEY, worktree=True)
    if status:
        return status
    if branch is None:
        return None
    return read_branch_user_status(repo, branch)


def assemble_prefix(symbols: StatusSymbols, *, has_conflicts: bool, is_primary: bool,
                    diff_with_main: Optional[Tuple[int, int]], ahead: int,
                    working_tree_diff: Tuple[int, int], worktree_state: Optional[str],
                    worktree: Worktree) -> None:
    """Add derived markers to the prefix slot, in place.

    Order: = then ≡ or ∅, then ↻ or ⋈, then ◇ ⊠ ⚠.
    """
    if has_conflicts and SYMBOL_CONFLICT not in symbols.prefix:
        symbols.prefix = SYMBOL_CONFLICT + symbols.prefix

    state_symbols = []

    if not is_primary:
        if diff_with_main == (0, 0):
            state_symbols.append(SYMBOL_MATCHES_PRIMARY)
        elif ahead == 0 and working_tree_diff == (0, 0):
            state_symbols.append(SYMBOL_NO_COMMITS)

    if worktree_state:
        if "rebase" in worktree_state:
            state_symbols.append(SYMBOL_REBASE)
        elif "merge" in worktree_state:
            state_symbols.append(SYMBOL_MERGE)

    if worktree.bare:
        state_symbols.append(SYMBOL_BARE)
    if worktree.locked is not None:
        state_symbols.append(SYMBOL_LOCKED)
    if worktree.prunable is not None:
        state_symbols.append(SYMBOL_PRUNABLE)

    symbols.prefix += "".join(state_symbols)


class GatherService:
    """Builds WorktreeInfo and BranchInfo records from live git queries.

    Any GitOperationError is propagated; deciding whether it is fatal is
    up to the caller.
    """

    def __init__(self, config: Union["Config", dict],
                 github_service: Optional["GitHubService"] = None):
        """Initialize the service."""
        self.fetch_ci = config.get("fetch_ci", False)
        self.check_conflicts = config.get("check_conflicts", False)
        self.github_service = github_service

    def _detect_pr_status(self, branch: Optional[str], head: str) -> Optional[PrStatus]:
        if not self.fetch_ci or branch is None or self.github_service is None:
            return None
        return self.github_service.detect(branch, head)

    def _detect_conflicts(self, repo: Repository, base: Optional[str], head: str) -> bool:
        if not self.check_conflicts or base is None:
            return False
        return repo.has_merge_conflicts(base, head)

    def gather_worktree_info(self, wt: Worktree, primary: Worktree) -> WorktreeInfo:
        """Enrich one worktree.

        Args:
            wt: Worktree to enrich
            primary: First enumerated worktree, the base for comparisons

        Raises:
            GitOperationError: If any git query fails
        """
        logger.debug(f"Gathering worktree {wt}")
        wt_repo = Repository.at(wt.path)
        is_primary = wt.path == primary.path

        commit = gather_commit_details(wt_repo, wt.head)
        base_branch = primary.branch if not is_primary else None
        counts = compute_ahead_behind(wt_repo, base_branch, wt.head)
        upstream = calculate_upstream(wt_repo, wt.branch, wt.head)

        # One status report feeds both the dirty flag and the symbols
        status_info = parse_git_status(
            wt_repo.status_porcelain(),
            main_ahead=counts.ahead,
            main_behind=counts.behind,
            upstream_ahead=upstream.ahead,
            upstream_behind=upstream.behind,
        )

        if status_info.is_dirty:
            working_tree_diff = wt_repo.working_tree_diff_stats()
        else:
            working_tree_diff = (0, 0)

        working_tree_diff_with_main = self._diff_with_main(
            wt_repo, base_branch, is_primary, status_info.is_dirty
        )
        branch_diff = compute_branch_diff(wt_repo, base_branch, wt.head)
        worktree_state = wt_repo.worktree_state()
        pr_status = self._detect_pr_status(wt.branch, wt.head)
        has_conflicts = self._detect_conflicts(wt_repo, base_branch, wt.head)

        symbols = status_info.symbols
        assemble_prefix(
            symbols,
            has_conflicts=has_conflicts,
            is_primary=is_primary,
            diff_with_main=working_tree_diff_with_main,
            ahead=counts.ahead,
            working_tree_diff=working_tree_diff,
            worktree_state=worktree_state,
            worktree=wt,
        )

        return WorktreeInfo(
            worktree=wt,
            commit=commit,
            counts=counts,
            working_tree_diff=working_tree_diff,
            working_tree_diff_with_main=working_tree_diff_with_main,
            branch_diff=branch_diff,
            is_primary=is_primary,
            upstream=upstream,
            worktree_state=worktree_state,
            pr_status=pr_status,
            has_conflicts=has_conflicts,
            status_symbols=symbols,
            user_status=read_user_status(wt_repo, wt.branch),
        )

    def _diff_with_main(self, wt_repo: Repository, base_branch: Optional[str],
                        is_primary: bool, is_dirty: bool) -> Optional[Tuple[int, int]]:
        """Working tree diff against the primary branch.

        None means skipped because the committed trees differ; the primary
        always matches itself.
        """
        if is_primary:
            return (0, 0)
        if base_branch is None:
            return None

        # Equal tree hashes mean equal content, no diff needed
        if wt_repo.tree_hash("HEAD") != wt_repo.tree_hash(base_branch):
            return None
        if is_dirty:
            return wt_repo.working_tree_diff_vs_ref(base_branch)
        return (0, 0)

    def gather_branch_info(self, repo: Repository, branch: str,
                           primary_branch: Optional[str]) -> BranchInfo:
        """Enrich one branch that has no worktree.

        Raises:
            GitOperationError: If any git query fails
        """
        logger.debug(f"Gathering branch {branch}")
        head = repo.rev_parse(branch)

        return BranchInfo(
            name=branch,
            head=head,
            commit=gather_commit_details(repo, head),
            counts=compute_ahead_behind(repo, primary_branch, head),
            branch_diff=compute_branch_diff(repo, primary_branch, head),
            upstream=calculate_upstream(repo, branch, head),
            pr_status=self._detect_pr_status(branch, head),
            has_conflicts=self._detect_conflicts(repo, primary_branch, head),
            user_status=read_branch_user_status(repo, branch),
        )

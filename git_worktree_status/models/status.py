"""Per-item status records shared by worktree and branch rows."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class PrStatus(Enum):
    """CI/PR status of a branch's head commit."""
    PASSED = "passed"
    RUNNING = "running"
    FAILED = "failed"
    CONFLICTS = "conflicts"
    NO_CI = "no-ci"


@dataclass(frozen=True)
class CommitDetails:
    """Timestamp and subject line of a head commit."""
    timestamp: int
    message: str


@dataclass(frozen=True)
class AheadBehind:
    """Commit counts relative to a base reference."""
    ahead: int = 0
    behind: int = 0


@dataclass(frozen=True)
class BranchDiffTotals:
    """Added/deleted line totals between a base reference and a head."""
    added: int = 0
    deleted: int = 0

    @property
    def diff(self) -> Tuple[int, int]:
        return (self.added, self.deleted)


@dataclass(frozen=True)
class UpstreamStatus:
    """Divergence from the remote tracking branch, if there is one."""
    remote: Optional[str] = None
    ahead: int = 0
    behind: int = 0

    def active(self) -> Optional[Tuple[str, int, int]]:
        """Return (remote, ahead, behind) when a tracking branch exists."""
        if self.remote is None:
            return None
        return (self.remote, self.ahead, self.behind)


@dataclass
class StatusSymbols:
    """Structured status symbols for aligned rendering.

    Symbols are grouped into four slots so each kind lands in the same
    column on every row:

    - prefix: =, ≡, ∅, ↻, ⋈, ◇, ⊠, ⚠ (may combine, conflict marker first)
    - main_divergence: ↑, ↓ or ↕ (exactly one or empty)
    - upstream_divergence: ⇡, ⇣ or ⇅ (exactly one or empty)
    - working_tree: ?, !, +, », ✘ (may combine, fixed order)

    ≡ and ∅ never co-occur, nor do ↻ and ⋈.
    """
    prefix: str = ""
    main_divergence: str = ""
    upstream_divergence: str = ""
    working_tree: str = ""

    def is_empty(self) -> bool:
        return not (
            self.prefix or self.main_divergence or self.upstream_divergence or self.working_tree
        )

    def render(self) -> str:
        """Render the symbols with a placeholder space for every empty slot
        that is followed by a non-empty one.

        An empty symbol set renders as the empty string.
        """
        if self.is_empty():
            return ""

        slots = [self.prefix, self.main_divergence, self.upstream_divergence, self.working_tree]
        last = max(i for i, slot in enumerate(slots) if slot)
        return "".join(slot or " " for slot in slots[: last + 1])

    def to_dict(self) -> dict:
        return {
            "prefix": self.prefix,
            "main_divergence": self.main_divergence,
            "upstream_divergence": self.upstream_divergence,
            "working_tree": self.working_tree,
        }


@dataclass
class GitStatusInfo:
    """Result of parsing one `git status --porcelain` report."""
    is_dirty: bool = False
    symbols: StatusSymbols = field(default_factory=StatusSymbols)

"""Configuration handling for git-worktree-status"""

from dataclasses import dataclass
from typing import Optional

OUTPUT_FORMATS = ["table", "json"]


@dataclass
class Config:
    """Configuration for git-worktree-status with validation."""

    # What to gather
    show_branches: bool = False  # Also list branches that have no worktree
    fetch_ci: bool = False  # Look up CI/PR status on GitHub
    check_conflicts: bool = False  # Probe for merge conflicts against the primary branch

    # Rendering
    output_format: str = "table"
    max_message_len: int = 50

    # Execution modes
    verbose: bool = False
    debug: bool = False
    sequential: bool = False  # Force sequential processing (disable parallelism)
    workers: Optional[int] = None  # Number of parallel workers (None = auto-detect)

    # GitHub integration
    github_token: Optional[str] = None
    ci_cache_ttl: int = 60  # Seconds a cached CI status stays valid

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_output_format()
        self._validate_max_message_len()
        self._validate_workers()
        self._validate_ci_cache_ttl()

    def _validate_output_format(self):
        """Validate output_format is one of allowed values."""
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got '{self.output_format}'"
            )

    def _validate_max_message_len(self):
        """Validate max_message_len is positive."""
        if self.max_message_len <= 0:
            raise ValueError(f"max_message_len must be positive, got {self.max_message_len}")

    def _validate_workers(self):
        """Validate workers is positive when given."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def _validate_ci_cache_ttl(self):
        """Validate ci_cache_ttl is not negative."""
        if self.ci_cache_ttl < 0:
            raise ValueError(f"ci_cache_ttl cannot be negative, got {self.ci_cache_ttl}")

    @property
    def run_sequentially(self) -> bool:
        """Debug mode forces sequential processing for readable logs."""
        return self.sequential or self.debug

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "show_branches": self.show_branches,
            "fetch_ci": self.fetch_ci,
            "check_conflicts": self.check_conflicts,
            "output_format": self.output_format,
            "max_message_len": self.max_message_len,
            "verbose": self.verbose,
            "debug": self.debug,
            "sequential": self.sequential,
            "workers": self.workers,
            "github_token": self.github_token,
            "ci_cache_ttl": self.ci_cache_ttl,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {
            "show_branches",
            "fetch_ci",
            "check_conflicts",
            "output_format",
            "max_message_len",
            "verbose",
            "debug",
            "sequential",
            "workers",
            "github_token",
            "ci_cache_ttl",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

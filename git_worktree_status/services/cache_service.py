"""Cache service for CI/PR status lookups."""
import hashlib
import json
import time
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Tuple

from git_worktree_status.logging_config import get_logger
from git_worktree_status.models.status import PrStatus

logger = get_logger(__name__)

_NO_STATUS = "none"


class CacheService:
    """Caches CI status per branch, valid for one head commit and a short TTL."""

    def __init__(self, repo_path: str, ttl: int = 60, cache_dir: Optional[Path] = None):
        """Initialize cache service for a repository.

        Args:
            repo_path: Path to the git repository
            ttl: Seconds an entry stays valid
            cache_dir: Override for the cache directory (tests)
        """
        self.repo_path = Path(repo_path).resolve()
        self.ttl = ttl
        self.cache_dir = cache_dir or Path.home() / ".git-worktree-status" / "cache"
        self.cache_file = self.cache_dir / f"{self._get_repo_hash()}.json"
        self._entries: Optional[Dict[str, Dict]] = None
        self._lock = Lock()

    def _get_repo_hash(self) -> str:
        """Generate a unique hash for the repository path."""
        return hashlib.md5(str(self.repo_path).encode()).hexdigest()

    def _validate_cache_data(self, cache_data) -> bool:
        if not isinstance(cache_data, dict):
            logger.warning("Cache data is not a dictionary")
            return False
        if not isinstance(cache_data.get("ci_status"), dict):
            logger.warning("Cache missing 'ci_status' dictionary")
            return False
        for branch_name, entry in cache_data["ci_status"].items():
            if not isinstance(entry, dict) or not {"head", "status", "checked_at"} <= entry.keys():
                logger.warning(f"Invalid cache entry for '{branch_name}'")
                return False
        return True

    def load_cache(self) -> Dict[str, Dict]:
        """Load cached entries from disk, empty on any problem."""
        if not self.cache_file.exists():
            logger.debug("No cache file found")
            return {}

        try:
            with open(self.cache_file, "r") as f:
                cache_data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in cache file: {e}")
            return {}
        except OSError as e:
            logger.warning(f"Failed to load cache: {e}")
            return {}

        if not self._validate_cache_data(cache_data):
            logger.warning("Cache validation failed, ignoring cache")
            return {}

        logger.debug(f"Loaded cache with {len(cache_data['ci_status'])} entries")
        return cache_data["ci_status"]

    def _ensure_loaded(self) -> Dict[str, Dict]:
        if self._entries is None:
            self._entries = self.load_cache()
        return self._entries

    def get_ci_status(self, branch_name: str, head: str) -> Tuple[bool, Optional[PrStatus]]:
        """Look up a cached status. Returns (found, status)."""
        with self._lock:
            entry = self._ensure_loaded().get(branch_name)

        if entry is None or entry["head"] != head:
            return (False, None)
        if time.time() - entry["checked_at"] > self.ttl:
            logger.debug(f"Cached CI status for {branch_name} expired")
            return (False, None)

        if entry["status"] == _NO_STATUS:
            return (True, None)
        try:
            return (True, PrStatus(entry["status"]))
        except ValueError:
            logger.debug(f"Unknown cached CI status {entry['status']!r} for {branch_name}")
            return (False, None)

    def set_ci_status(self, branch_name: str, head: str, status: Optional[PrStatus]) -> None:
        """Record a status and persist the cache (atomic write)."""
        with self._lock:
            entries = self._ensure_loaded()
            entries[branch_name] = {
                "head": head,
                "status": status.value if status else _NO_STATUS,
                "checked_at": time.time(),
            }
            self._save(entries)

    def _save(self, entries: Dict[str, Dict]) -> None:
        cache_data = {"repo_path": str(self.repo_path), "ci_status": entries}
        temp_file = self.cache_file.with_suffix(".tmp")
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, "w") as f:
                json.dump(cache_data, f, indent=2)
            # Atomic rename (POSIX systems guarantee atomicity)
            temp_file.replace(self.cache_file)
            logger.debug(f"Saved cache with {len(entries)} entries")
        except OSError as e:
            logger.warning(f"Failed to save cache: {e}")
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError:
                    pass

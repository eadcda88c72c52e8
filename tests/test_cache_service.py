"""Tests for the CI status cache"""
import json
from unittest.mock import patch

import pytest

from git_worktree_status.models.status import PrStatus
from git_worktree_status.services.cache_service import CacheService


@pytest.fixture
def cache(temp_dir):
    return CacheService(str(temp_dir / "repo"), ttl=60, cache_dir=temp_dir / "cache")


class TestCacheService:
    """Test CI status caching."""

    def test_miss_when_empty(self, cache):
        assert cache.get_ci_status("feature", "abc") == (False, None)

    def test_round_trip_and_persistence(self, cache, temp_dir):
        cache.set_ci_status("feature", "abc", PrStatus.PASSED)

        assert cache.get_ci_status("feature", "abc") == (True, PrStatus.PASSED)
        assert cache.cache_file.exists()

        reloaded = CacheService(str(temp_dir / "repo"), ttl=60, cache_dir=temp_dir / "cache")
        assert reloaded.get_ci_status("feature", "abc") == (True, PrStatus.PASSED)

    def test_absent_status_is_cached(self, cache):
        cache.set_ci_status("feature", "abc", None)

        assert cache.get_ci_status("feature", "abc") == (True, None)

    def test_new_head_invalidates(self, cache):
        cache.set_ci_status("feature", "abc", PrStatus.FAILED)

        assert cache.get_ci_status("feature", "def") == (False, None)

    def test_expired_entry(self, cache):
        with patch("git_worktree_status.services.cache_service.time.time", return_value=1000.0):
            cache.set_ci_status("feature", "abc", PrStatus.RUNNING)
        with patch("git_worktree_status.services.cache_service.time.time", return_value=1061.0):
            assert cache.get_ci_status("feature", "abc") == (False, None)
        with patch("git_worktree_status.services.cache_service.time.time", return_value=1059.0):
            assert cache.get_ci_status("feature", "abc") == (True, PrStatus.RUNNING)

    def test_corrupt_file_is_ignored(self, cache):
        cache.cache_dir.mkdir(parents=True)
        cache.cache_file.write_text("{not json")

        assert cache.get_ci_status("feature", "abc") == (False, None)

    def test_invalid_structure_is_ignored(self, cache):
        cache.cache_dir.mkdir(parents=True)
        cache.cache_file.write_text(json.dumps({"ci_status": {"feature": {"head": "abc"}}}))

        assert cache.load_cache() == {}

    def test_unknown_status_value_is_a_miss(self, cache):
        cache.cache_dir.mkdir(parents=True)
        cache.cache_file.write_text(json.dumps({"ci_status": {
            "feature": {"head": "abc", "status": "exploded", "checked_at": 9e12},
        }}))

        assert cache.get_ci_status("feature", "abc") == (False, None)

    def test_one_file_per_repository(self, temp_dir):
        first = CacheService(str(temp_dir / "one"), cache_dir=temp_dir / "cache")
        second = CacheService(str(temp_dir / "two"), cache_dir=temp_dir / "cache")

        assert first.cache_file != second.cache_file

"""Tests for worker-count heuristics"""
from unittest.mock import patch

from git_worktree_status.utils.threading import (
    get_optimal_worker_count,
    get_threading_info,
    is_free_threading_enabled,
)


class TestWorkerCount:
    """Test get_optimal_worker_count."""

    def test_user_value_wins(self):
        assert get_optimal_worker_count(3) == 3

    def test_gil_build(self):
        with patch("git_worktree_status.utils.threading.is_free_threading_enabled", return_value=False), \
             patch("git_worktree_status.utils.threading.os.cpu_count", return_value=4):
            assert get_optimal_worker_count() == 8

    def test_gil_build_is_capped(self):
        with patch("git_worktree_status.utils.threading.is_free_threading_enabled", return_value=False), \
             patch("git_worktree_status.utils.threading.os.cpu_count", return_value=128):
            assert get_optimal_worker_count() == 32

    def test_free_threading_build(self):
        with patch("git_worktree_status.utils.threading.is_free_threading_enabled", return_value=True), \
             patch("git_worktree_status.utils.threading.os.cpu_count", return_value=8):
            assert get_optimal_worker_count() == 16

    def test_unknown_cpu_count(self):
        with patch("git_worktree_status.utils.threading.is_free_threading_enabled", return_value=False), \
             patch("git_worktree_status.utils.threading.os.cpu_count", return_value=None):
            assert get_optimal_worker_count() == 5


def test_threading_info_is_consistent():
    info = get_threading_info()

    assert info["free_threading"] is is_free_threading_enabled()
    assert info["optimal_workers"] >= 1
    assert info["python_version"].count(".") == 2

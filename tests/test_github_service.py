"""Tests for GitHubService"""
from unittest.mock import Mock, patch

import pytest

from git_worktree_status.exceptions import GitHubAPIError
from git_worktree_status.models.status import PrStatus
from git_worktree_status.services.github_service import (
    GitHubService,
    classify_ci_status,
    parse_github_repo,
)


def _enabled_service(mock_config, cache_service=None):
    mock_config['github_token'] = "test_token"
    service = GitHubService(mock_config, cache_service)
    service.github_repo = "test/repo"
    service.gh_repo = Mock()
    return service


def _commit(check_runs=(), state=None, total_count=0):
    commit = Mock()
    commit.get_check_runs.return_value = [
        Mock(status=status, conclusion=conclusion) for status, conclusion in check_runs
    ]
    commit.get_combined_status.return_value = Mock(state=state, total_count=total_count)
    return commit


class TestParseGithubRepo:
    """Test remote URL parsing."""

    @pytest.mark.parametrize("url", [
        "git@github.com:test/repo.git",
        "https://github.com/test/repo.git",
        "https://github.com/test/repo",
        "ssh://git@github.com/test/repo.git",
    ])
    def test_github_urls(self, url):
        assert parse_github_repo(url) == "test/repo"

    def test_other_hosts(self):
        assert parse_github_repo("git@gitlab.com:test/repo.git") is None

    def test_malformed_path(self):
        assert parse_github_repo("https://github.com/just-an-org") is None


class TestClassifyCiStatus:
    """Test reduction of checks to one status."""

    def test_failed_check_wins(self):
        runs = [("completed", "success"), ("completed", "failure"), ("in_progress", None)]
        assert classify_ci_status(True, runs, None) is PrStatus.FAILED

    @pytest.mark.parametrize("conclusion", ["cancelled", "timed_out"])
    def test_other_failing_conclusions(self, conclusion):
        assert classify_ci_status(False, [("completed", conclusion)], None) is PrStatus.FAILED

    def test_failing_commit_status(self):
        assert classify_ci_status(False, [], "error") is PrStatus.FAILED

    def test_running(self):
        runs = [("completed", "success"), ("queued", None)]
        assert classify_ci_status(True, runs, None) is PrStatus.RUNNING

    def test_pending_commit_status(self):
        assert classify_ci_status(False, [("completed", "success")], "pending") is PrStatus.RUNNING

    def test_passed(self):
        runs = [("completed", "success"), ("completed", "skipped")]
        assert classify_ci_status(False, runs, "success") is PrStatus.PASSED

    def test_open_pr_without_ci(self):
        assert classify_ci_status(True, [], None) is PrStatus.NO_CI

    def test_nothing_at_all(self):
        assert classify_ci_status(False, [], None) is None


class TestGitHubServiceInit:
    """Test GitHubService initialization."""

    def test_init_without_token(self, mock_config):
        with patch.dict('os.environ', {}, clear=True):
            service = GitHubService(mock_config)

        assert service.github_token is None
        assert service.enabled is False

    def test_init_with_token_from_config(self, mock_config):
        mock_config['github_token'] = "test_token"
        service = GitHubService(mock_config)

        assert service.github_token == "test_token"

    @patch.dict('os.environ', {'GITHUB_TOKEN': 'env_token'})
    def test_init_with_token_from_env(self, mock_config):
        service = GitHubService(mock_config)

        assert service.github_token == "env_token"


class TestGitHubServiceSetup:
    """Test GitHub API setup."""

    def test_setup_github_api(self, mock_config):
        mock_config['github_token'] = "test_token"
        service = GitHubService(mock_config)

        with patch('git_worktree_status.services.github_service.Github') as mock_github_class:
            mock_gh = Mock()
            mock_github_class.return_value = mock_gh

            service.setup_github_api("test/repo")

        assert service.github_repo == "test/repo"
        assert service.enabled is True
        mock_gh.get_repo.assert_called_once_with("test/repo")

    def test_setup_failure_raises(self, mock_config):
        mock_config['github_token'] = "test_token"
        service = GitHubService(mock_config)

        with patch('git_worktree_status.services.github_service.Github') as mock_github_class:
            mock_github_class.return_value.get_repo.side_effect = Exception("404 Not Found")

            with pytest.raises(GitHubAPIError, match="404"):
                service.setup_github_api("test/repo")

        assert service.enabled is False

    def test_setup_from_repository(self, mock_config):
        mock_config['github_token'] = "test_token"
        service = GitHubService(mock_config)
        repository = Mock()
        repository.config_value.return_value = "git@github.com:test/repo.git"

        with patch('git_worktree_status.services.github_service.Github'):
            assert service.setup_from_repository(repository) is True

        repository.config_value.assert_called_once_with("remote.origin.url")
        assert service.github_repo == "test/repo"

    def test_setup_from_non_github_repository(self, mock_config):
        mock_config['github_token'] = "test_token"
        repository = Mock()
        repository.config_value.return_value = "https://gitlab.com/test/repo.git"

        assert GitHubService(mock_config).setup_from_repository(repository) is False

    def test_setup_without_origin(self, mock_config):
        repository = Mock()
        repository.config_value.return_value = None

        assert GitHubService(mock_config).setup_from_repository(repository) is False

    def test_setup_without_token(self, mock_config):
        repository = Mock()
        repository.config_value.return_value = "git@github.com:test/repo.git"

        with patch.dict('os.environ', {}, clear=True):
            service = GitHubService(mock_config)
            assert service.setup_from_repository(repository) is False

    def test_setup_from_repository_swallows_api_errors(self, mock_config):
        mock_config['github_token'] = "test_token"
        repository = Mock()
        repository.config_value.return_value = "git@github.com:test/repo.git"

        with patch('git_worktree_status.services.github_service.Github') as mock_github_class:
            mock_github_class.return_value.get_repo.side_effect = Exception("401 Bad credentials")
            assert GitHubService(mock_config).setup_from_repository(repository) is False


class TestDetect:
    """Test CI/PR status detection."""

    def test_disabled_returns_none(self, mock_config):
        assert GitHubService(mock_config).detect("feature", "abc") is None

    def test_unmergeable_pr_is_conflicts(self, mock_config):
        service = _enabled_service(mock_config)
        service.gh_repo.get_pulls.return_value = [Mock(mergeable=False)]

        assert service.detect("feature", "abc") is PrStatus.CONFLICTS
        service.gh_repo.get_pulls.assert_called_once_with(state="open", head="test:feature")
        service.gh_repo.get_commit.assert_not_called()

    def test_checks_on_head_commit(self, mock_config):
        service = _enabled_service(mock_config)
        service.gh_repo.get_pulls.return_value = [Mock(mergeable=True)]
        service.gh_repo.get_commit.return_value = _commit([("completed", "success")])

        assert service.detect("feature", "abc") is PrStatus.PASSED
        service.gh_repo.get_commit.assert_called_once_with("abc")

    def test_commit_status_counts_only_when_present(self, mock_config):
        service = _enabled_service(mock_config)
        service.gh_repo.get_pulls.return_value = [Mock(mergeable=None)]
        service.gh_repo.get_commit.return_value = _commit(state="pending", total_count=0)

        assert service.detect("feature", "abc") is PrStatus.NO_CI

    def test_no_pr_no_checks(self, mock_config):
        service = _enabled_service(mock_config)
        service.gh_repo.get_pulls.return_value = []
        service.gh_repo.get_commit.return_value = _commit()

        assert service.detect("feature", "abc") is None

    def test_api_error_returns_none(self, mock_config):
        service = _enabled_service(mock_config)
        service.gh_repo.get_pulls.side_effect = Exception("API rate limit exceeded")

        assert service.detect("feature", "abc") is None

    def test_uses_cache(self, mock_config):
        cache_service = Mock()
        cache_service.get_ci_status.return_value = (True, PrStatus.FAILED)
        service = _enabled_service(mock_config, cache_service)

        assert service.detect("feature", "abc") is PrStatus.FAILED
        service.gh_repo.get_pulls.assert_not_called()

    def test_stores_in_cache(self, mock_config):
        cache_service = Mock()
        cache_service.get_ci_status.return_value = (False, None)
        service = _enabled_service(mock_config, cache_service)
        service.gh_repo.get_pulls.return_value = []
        service.gh_repo.get_commit.return_value = _commit([("in_progress", None)])

        assert service.detect("feature", "abc") is PrStatus.RUNNING
        cache_service.set_ci_status.assert_called_once_with("feature", "abc", PrStatus.RUNNING)

    def test_errors_are_not_cached(self, mock_config):
        cache_service = Mock()
        cache_service.get_ci_status.return_value = (False, None)
        service = _enabled_service(mock_config, cache_service)
        service.gh_repo.get_pulls.side_effect = Exception("boom")

        service.detect("feature", "abc")

        cache_service.set_ci_status.assert_not_called()

"""Tests for the command-line interface"""
import json
from unittest.mock import patch

import pytest

from git_worktree_status.cli.args import parse_args
from git_worktree_status.cli.main import main


class TestParseArgs:
    """Test argument parsing."""

    def test_defaults(self):
        args = parse_args([])

        assert args.format == "table"
        assert args.max_message_len == 50
        assert args.workers is None
        assert not args.branches
        assert not args.ci
        assert not args.conflicts
        assert not args.sequential

    def test_flags(self):
        args = parse_args([
            "--branches", "--ci", "--conflicts", "--format", "json",
            "--max-message-len", "30", "--workers", "2", "--sequential", "-v",
        ])

        assert args.branches and args.ci and args.conflicts
        assert args.format == "json"
        assert args.max_message_len == 30
        assert args.workers == 2
        assert args.sequential and args.verbose

    @pytest.mark.parametrize("argv", [
        ["--format", "yaml"],
        ["--max-message-len", "0"],
        ["--workers", "-1"],
        ["--workers", "many"],
    ])
    def test_invalid_values_exit(self, argv):
        with pytest.raises(SystemExit):
            parse_args(argv)


class TestMain:
    """Test the main entry point against real repositories."""

    def test_table_output(self, git_repo_with_worktree, monkeypatch, capsys):
        repo, _ = git_repo_with_worktree
        monkeypatch.chdir(repo.working_tree_dir)

        assert main(["--sequential"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("Branch")
        assert "Path" in lines[0]
        assert lines[1].startswith("main")
        assert lines[1].rstrip().endswith("./test_repo")
        assert lines[2].startswith("feature")
        assert lines[2].rstrip().endswith("./test_repo.feature")

    def test_json_output(self, git_repo_with_worktree, monkeypatch, capsys):
        repo, wt_path = git_repo_with_worktree
        monkeypatch.chdir(wt_path)

        assert main(["--format", "json", "--branches"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [row["branch"] for row in data] == ["main", "feature"]
        assert data[0]["is_primary"] is True
        assert data[1]["is_current"] is True
        assert data[1]["status_symbols"]["prefix"] == "≡"

    def test_verbose_prints_legend(self, git_repo, monkeypatch, capsys):
        monkeypatch.chdir(git_repo.working_tree_dir)

        assert main(["-v"]) == 0

        assert "Legend" in capsys.readouterr().out

    def test_not_a_repository(self, temp_dir, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)

        assert main([]) == 1

        assert "Error" in capsys.readouterr().err

    def test_no_worktrees(self, git_repo, monkeypatch, capsys):
        monkeypatch.chdir(git_repo.working_tree_dir)

        with patch("git_worktree_status.services.git.repository.Repository.list_worktrees",
                   return_value=[]):
            assert main([]) == 0

        assert "No worktrees found" in capsys.readouterr().out

    def test_no_worktrees_json(self, git_repo, monkeypatch, capsys):
        monkeypatch.chdir(git_repo.working_tree_dir)

        with patch("git_worktree_status.services.git.repository.Repository.list_worktrees",
                   return_value=[]):
            assert main(["--format", "json"]) == 0

        assert json.loads(capsys.readouterr().out) == []

    def test_keyboard_interrupt(self, git_repo, monkeypatch, capsys):
        monkeypatch.chdir(git_repo.working_tree_dir)

        with patch("git_worktree_status.cli.main.WorktreeStatus.gather_list_data",
                   side_effect=KeyboardInterrupt):
            assert main([]) == 1

        assert "cancelled" in capsys.readouterr().err

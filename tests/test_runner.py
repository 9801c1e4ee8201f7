"""Tests for the git command executor"""
from unittest.mock import Mock, patch

import pytest

from git_worktree_keeper.exceptions import (
    ExternalToolError,
    RepositoryLockedError,
    RepositoryNotFoundError,
)
from git_worktree_keeper.services.git.runner import GitRunner, is_lock_contention


class TestRun:
    """Test raw command execution."""

    def test_captures_output(self, git_repo, runner):
        result = runner.run(["rev-parse", "--abbrev-ref", "HEAD"], git_repo.working_dir)

        assert result.ok
        assert result.stdout.strip() == "main"
        assert result.stderr == ""

    def test_failure_is_returned_not_raised(self, git_repo, runner):
        result = runner.run(["rev-parse", "--verify", "refs/heads/nope"], git_repo.working_dir)

        assert not result.ok
        assert result.status != 0

    def test_missing_working_directory(self, temp_dir, runner):
        with pytest.raises(ExternalToolError, match="working directory does not exist"):
            runner.run(["status"], str(temp_dir / "missing"))


class TestCheck:
    """Test failure translation."""

    def test_non_zero_exit_raises_with_context(self, git_repo, runner):
        with pytest.raises(ExternalToolError) as exc_info:
            runner.check(["checkout", "no-such-branch"], git_repo.working_dir, operation="switch-branch")

        error = exc_info.value
        assert error.operation == "switch-branch"
        assert error.repo_path == git_repo.working_dir
        assert error.exit_code != 0
        assert error.stderr
        assert error.retryable is False

    def test_lock_contention_is_retryable(self, git_repo):
        runner = GitRunner()
        fake_git = Mock()
        fake_git.execute.return_value = (
            128,
            "",
            "fatal: Unable to create '/repo/.git/index.lock': File exists.\n\n"
            "Another git process seems to be running in this repository",
        )

        with patch.object(runner, "_get_git", return_value=fake_git):
            with pytest.raises(RepositoryLockedError) as exc_info:
                runner.check(["add", "--all"], git_repo.working_dir, operation="commit")

        assert exc_info.value.retryable is True
        assert exc_info.value.code == "REPOSITORY_LOCKED"

    @pytest.mark.parametrize(
        "stderr, expected",
        [
            ("fatal: Unable to create '/r/.git/index.lock': File exists.", True),
            ("error: cannot lock ref 'refs/heads/x': Unable to create '/r/.git/refs/heads/x.lock': File exists.", True),
            ("fatal: invalid reference: nope", False),
            ("", False),
        ],
    )
    def test_is_lock_contention(self, stderr, expected):
        assert is_lock_contention(stderr) is expected


class TestResolveRepositoryRoot:
    """Test repository resolution."""

    def test_main_working_directory(self, git_repo, runner):
        assert runner.resolve_repository_root(git_repo.working_dir) == git_repo.working_dir

    def test_linked_worktree_resolves_to_main_root(self, git_repo, runner, temp_dir):
        linked = str(temp_dir / "linked")
        git_repo.git.worktree("add", "-b", "linked", linked)

        assert runner.resolve_repository_root(linked) == git_repo.working_dir

    def test_submodule_resolves_to_its_own_working_tree(self, submodule_path, runner):
        # The git dir of a submodule lives under the superproject's .git/modules
        assert runner.resolve_repository_root(submodule_path) == submodule_path

    def test_missing_path(self, temp_dir, runner):
        with pytest.raises(RepositoryNotFoundError):
            runner.resolve_repository_root(str(temp_dir / "nope"))

    def test_plain_directory(self, temp_dir, runner):
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(RepositoryNotFoundError, match="not a git repository"):
            runner.resolve_repository_root(str(plain))

    def test_empty_path(self, runner):
        with pytest.raises(RepositoryNotFoundError):
            runner.resolve_repository_root("")

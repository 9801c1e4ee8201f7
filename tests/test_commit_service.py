"""Tests for staging and committing worktree changes"""
import re
from pathlib import Path

import git
import pytest

from git_worktree_keeper.exceptions import RepositoryNotFoundError


def commit_count(path) -> int:
    return int(git.Git(str(path)).rev_list("--count", "HEAD"))


@pytest.fixture
def feature_worktree(lifecycle, repo_path):
    return lifecycle.create(repo_path, "feature/work").path


class TestCommit:
    """Test the commit operation."""

    def test_commits_everything(self, commit_service, feature_worktree):
        (Path(feature_worktree) / "new.txt").write_text("new\n")
        (Path(feature_worktree) / "README.md").write_text("# Changed\n")
        before = commit_count(feature_worktree)

        result = commit_service.commit(feature_worktree, "Add new file")

        assert result.committed is True
        assert result.branch == "feature/work"
        assert re.fullmatch(r"[0-9a-f]{8}", result.commit_hash)
        assert commit_count(feature_worktree) == before + 1

        repo = git.Repo(feature_worktree)
        assert repo.head.commit.hexsha.startswith(result.commit_hash)
        assert repo.head.commit.message.strip() == "Add new file"
        assert not repo.is_dirty(untracked_files=True)

    def test_no_changes(self, commit_service, feature_worktree):
        before = commit_count(feature_worktree)

        result = commit_service.commit(feature_worktree, "Nothing here")

        assert result.committed is False
        assert result.message == "No changes to commit"
        assert result.commit_hash is None
        assert commit_count(feature_worktree) == before

    def test_sequential_commits(self, commit_service, feature_worktree):
        before = commit_count(feature_worktree)
        hashes = []
        for i in range(2):
            (Path(feature_worktree) / f"file{i}.txt").write_text(f"{i}\n")
            hashes.append(commit_service.commit(feature_worktree, f"Commit {i}").commit_hash)

        assert hashes[0] != hashes[1]
        assert commit_count(feature_worktree) == before + 2

    def test_commit_stays_on_its_branch(self, commit_service, git_repo, feature_worktree):
        main_head = git_repo.head.commit.hexsha
        (Path(feature_worktree) / "feature.txt").write_text("feature\n")

        commit_service.commit(feature_worktree, "Feature work")

        assert git_repo.head.commit.hexsha == main_head
        assert not (Path(git_repo.working_dir) / "feature.txt").exists()

    def test_commits_isolated_between_worktrees(self, commit_service, lifecycle, repo_path):
        first = lifecycle.create(repo_path, "feature/first").path
        second = lifecycle.create(repo_path, "feature/second").path
        (Path(first) / "a.txt").write_text("a\n")
        (Path(second) / "b.txt").write_text("b\n")

        commit_service.commit(first, "Work in first")
        commit_service.commit(second, "Work in second")

        first_log = git.Git(first).log("--format=%s").splitlines()
        second_log = git.Git(second).log("--format=%s").splitlines()
        assert "Work in first" in first_log
        assert "Work in second" not in first_log
        assert "Work in second" in second_log
        assert "Work in first" not in second_log

    def test_deleted_file_is_committed(self, commit_service, feature_worktree):
        (Path(feature_worktree) / "README.md").unlink()

        result = commit_service.commit(feature_worktree, "Remove readme")

        assert result.committed is True
        assert "README.md" not in [item.path for item in git.Repo(feature_worktree).head.commit.tree]

    def test_main_working_directory(self, commit_service, git_repo):
        (Path(git_repo.working_dir) / "main.txt").write_text("main\n")

        result = commit_service.commit(git_repo.working_dir, "Commit on main")

        assert result.committed is True
        assert result.branch == "main"

    def test_missing_worktree(self, commit_service, temp_dir):
        with pytest.raises(RepositoryNotFoundError):
            commit_service.commit(str(temp_dir / "missing"), "msg")

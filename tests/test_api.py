"""Tests for the request/response envelope surface"""
import os
import shutil
from pathlib import Path
from unittest.mock import Mock

import pytest

from git_worktree_keeper.api import WorktreeAPI
from git_worktree_keeper.exceptions import RepositoryLockedError


class TestEnvelopes:
    """Test envelope shapes and error mapping."""

    def test_unknown_operation(self, api):
        envelope = api.handle("renameWorktree", {})

        assert envelope["success"] is False
        assert envelope["code"] == "UNKNOWN_OPERATION"

    @pytest.mark.parametrize(
        "operation, request_fields, missing",
        [
            ("commitWorktree", {"message": "msg"}, "worktreePath"),
            ("commitWorktree", {"worktreePath": "/wt"}, "message"),
            ("commitWorktree", {"worktreePath": "/wt", "message": ""}, "message"),
            ("createWorktree", {"repoPath": "/repo"}, "branchName"),
            ("deleteWorktree", {"repoPath": "/repo"}, "worktreePath"),
            ("switchBranch", {"branchName": "main"}, "repoPath"),
            ("worktreeStatus", {}, "worktreePath"),
        ],
    )
    def test_missing_fields(self, api, operation, request_fields, missing):
        envelope = api.handle(operation, request_fields)

        assert envelope == {
            "success": False,
            "error": f"{missing} is required",
            "code": "VALIDATION_ERROR",
            "retryable": False,
        }

    def test_validation_runs_before_git(self):
        keeper = Mock()
        api = WorktreeAPI(keeper)

        api.commit_worktree({"worktreePath": "/wt"})

        keeper.commit_worktree.assert_not_called()

    def test_repository_not_found(self, api, temp_dir):
        envelope = api.list_worktrees({"repoPath": str(temp_dir / "missing")})

        assert envelope["success"] is False
        assert envelope["code"] == "REPOSITORY_NOT_FOUND"

    def test_nonexistent_branch(self, api, repo_path):
        envelope = api.switch_branch({"repoPath": repo_path, "branchName": "nonexistent"})

        assert envelope["success"] is False
        assert envelope["code"] == "BRANCH_NOT_FOUND"
        assert "does not exist" in envelope["error"]

    def test_dirty_switch(self, api, git_repo, repo_path):
        git_repo.git.branch("develop")
        (Path(repo_path) / "wip.txt").write_text("wip\n")

        envelope = api.switch_branch({"repoPath": repo_path, "branchName": "develop"})

        assert envelope["code"] == "UNCOMMITTED_CHANGES"
        assert "uncommitted changes" in envelope["error"]
        assert git_repo.active_branch.name == "main"

    def test_retryable_errors(self):
        keeper = Mock()
        keeper.commit_worktree.side_effect = RepositoryLockedError(
            "commit", "/repo", stderr="fatal: Unable to create '/repo/.git/index.lock': File exists."
        )

        envelope = WorktreeAPI(keeper).commit_worktree({"worktreePath": "/wt", "message": "m"})

        assert envelope["code"] == "REPOSITORY_LOCKED"
        assert envelope["retryable"] is True

    def test_unexpected_exception(self):
        keeper = Mock()
        keeper.list_worktrees.side_effect = RuntimeError("kaboom")

        envelope = WorktreeAPI(keeper).list_worktrees({"repoPath": "/repo"})

        assert envelope["success"] is False
        assert envelope["code"] == "INTERNAL_ERROR"
        assert "kaboom" in envelope["error"]

    def test_operations(self, api):
        assert "commitWorktree" in api.operations
        assert len(api.operations) == 8


class TestWorkflow:
    """End-to-end flows through the envelope surface."""

    def test_feature_branch_lifecycle(self, api, git_repo, repo_path):
        created = api.create_worktree({"repoPath": repo_path, "branchName": "feature/x"})
        assert created["success"] is True
        assert created["worktree"]["isNew"] is True
        path = created["worktree"]["path"]
        assert path == os.path.join(repo_path, ".worktrees", "feature-x")

        again = api.create_worktree({"repoPath": repo_path, "branchName": "feature/x"})
        assert again["worktree"] == {"branch": "feature/x", "path": path, "isNew": False}

        for name in ("a.txt", "b.txt", "c.txt"):
            (Path(path) / name).write_text(name)

        listing = api.list_worktrees({"repoPath": repo_path, "includeStatus": True})
        assert listing["includeStatus"] is True
        assert len(listing["worktrees"]) == 2
        entry = next(wt for wt in listing["worktrees"] if wt["branch"] == "feature/x")
        assert entry["hasChanges"] is True
        assert entry["changedFilesCount"] >= 3

        status = api.worktree_status({"worktreePath": path})
        assert status["status"]["untracked"] == 3

        committed = api.commit_worktree({"worktreePath": path, "message": "Add files"})
        assert committed["result"]["committed"] is True
        assert len(committed["result"]["commitHash"]) == 8
        assert committed["result"]["branch"] == "feature/x"

        nothing = api.commit_worktree({"worktreePath": path, "message": "Again"})
        assert nothing["result"] == {
            "committed": False,
            "branch": "feature/x",
            "message": "No changes to commit",
        }

        deleted = api.delete_worktree({"repoPath": repo_path, "worktreePath": path, "deleteBranch": True})
        assert deleted["deleted"]["removed"] is True
        assert deleted["deleted"]["branchDeleted"] is True
        assert not os.path.exists(path)
        assert "feature/x" not in [head.name for head in git_repo.heads]

        final = api.list_worktrees({"repoPath": repo_path})
        assert len(final["worktrees"]) == 1
        assert final["worktrees"][0]["isMain"] is True

    def test_list_branches(self, api, git_repo, repo_path):
        git_repo.git.branch("develop")

        envelope = api.list_branches({"repoPath": repo_path})

        assert envelope["result"]["currentBranch"] == "main"
        assert {b["name"] for b in envelope["result"]["branches"]} == {"main", "develop"}

    def test_switch_and_back(self, api, git_repo, repo_path):
        git_repo.git.branch("develop")

        switched = api.switch_branch({"repoPath": repo_path, "branchName": "develop"})
        same = api.switch_branch({"repoPath": repo_path, "branchName": "develop"})

        assert switched["result"]["message"] == "Switched to branch develop"
        assert same["result"]["message"] == "Already on branch develop"
        assert git_repo.active_branch.name == "develop"

    def test_prune(self, api, repo_path):
        created = api.create_worktree({"repoPath": repo_path, "branchName": "feature/gone"})
        shutil.rmtree(created["worktree"]["path"])

        envelope = api.prune_worktrees({"repoPath": repo_path})

        assert envelope["success"] is True
        assert envelope["pruned"] == [created["worktree"]["path"]]

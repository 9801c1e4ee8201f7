"""Tests for request validation"""
import pytest

from git_worktree_keeper.exceptions import ValidationError
from git_worktree_keeper.services.validation_service import REQUIRED_FIELDS, RequestValidator


class TestIsMissing:
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_missing(self, value):
        assert RequestValidator.is_missing(value) is True

    @pytest.mark.parametrize("value", ["x", False, 0, " main "])
    def test_present(self, value):
        assert RequestValidator.is_missing(value) is False


class TestValidate:
    """Test required field checks."""

    def test_names_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            RequestValidator.validate("commitWorktree", {"message": "msg"})

        assert exc_info.value.field == "worktreePath"
        assert exc_info.value.message == "worktreePath is required"
        assert exc_info.value.code == "VALIDATION_ERROR"

    def test_whitespace_message(self):
        with pytest.raises(ValidationError, match="message is required"):
            RequestValidator.validate("commitWorktree", {"worktreePath": "/wt", "message": "  "})

    def test_first_missing_field_reported(self):
        with pytest.raises(ValidationError, match="repoPath is required"):
            RequestValidator.validate("createWorktree", {})

    def test_optional_fields_not_required(self):
        RequestValidator.validate("listWorktrees", {"repoPath": "/repo"})
        RequestValidator.validate("deleteWorktree", {"repoPath": "/repo", "worktreePath": "/wt"})

    def test_every_operation_has_rules(self):
        assert set(REQUIRED_FIELDS) == {
            "createWorktree",
            "deleteWorktree",
            "listWorktrees",
            "pruneWorktrees",
            "worktreeStatus",
            "commitWorktree",
            "switchBranch",
            "listBranches",
        }
        assert RequestValidator.required_fields("switchBranch") == ("repoPath", "branchName")

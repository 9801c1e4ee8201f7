"""Request validation service for git-worktree-keeper."""

from typing import Dict, Mapping, Tuple

from git_worktree_keeper.exceptions import ValidationError

# Required request fields per operation, checked in this order
REQUIRED_FIELDS: Dict[str, Tuple[str, ...]] = {
    "createWorktree": ("repoPath", "branchName"),
    "deleteWorktree": ("repoPath", "worktreePath"),
    "listWorktrees": ("repoPath",),
    "pruneWorktrees": ("repoPath",),
    "worktreeStatus": ("worktreePath",),
    "commitWorktree": ("worktreePath", "message"),
    "switchBranch": ("repoPath", "branchName"),
    "listBranches": ("repoPath",),
}


class RequestValidator:
    """Service for validating requests before anything touches git."""

    @staticmethod
    def is_missing(value) -> bool:
        """
        Check if a request value counts as absent.

        None, empty strings and whitespace-only strings are absent; False and 0 are not.
        """
        if value is None:
            return True
        return isinstance(value, str) and not value.strip()

    @classmethod
    def validate(cls, operation: str, request: Mapping) -> None:
        """
        Check that every field the operation requires is present.

        Args:
            operation: Operation name, e.g. "commitWorktree"
            request: Request fields

        Raises:
            ValidationError: Naming the first missing field verbatim
            KeyError: If the operation is unknown
        """
        for field in REQUIRED_FIELDS[operation]:
            if cls.is_missing(request.get(field)):
                raise ValidationError(field)

    @staticmethod
    def required_fields(operation: str) -> Tuple[str, ...]:
        return REQUIRED_FIELDS[operation]

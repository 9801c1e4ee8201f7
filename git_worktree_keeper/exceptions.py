"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""

    code = "WORKTREE_ERROR"
    retryable = False

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        """Render the error as an OperationError payload."""
        return {"code": self.code, "message": self.message}


class ValidationError(WorktreeKeeperError):
    """Exception raised when a request is missing a required field."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class RepositoryNotFoundError(WorktreeKeeperError):
    """Exception raised when a path does not resolve to a usable repository."""

    code = "REPOSITORY_NOT_FOUND"

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        error_msg = f"Repository not found: {path}"
        if reason:
            error_msg += f" ({reason})"
        super().__init__(error_msg)


class BranchNotFoundError(WorktreeKeeperError):
    """Exception raised when a branch is not found."""

    code = "BRANCH_NOT_FOUND"

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' does not exist")


class UncommittedChangesError(WorktreeKeeperError):
    """Exception raised when a branch switch is attempted on a dirty tree."""

    code = "UNCOMMITTED_CHANGES"

    def __init__(self, branch: str, changed_files_count: int):
        self.branch = branch
        self.changed_files_count = changed_files_count
        super().__init__(
            f"Cannot switch to branch '{branch}': working tree has uncommitted changes "
            f"({changed_files_count} file(s)). Commit or stash them first."
        )


class WorktreePathConflictError(WorktreeKeeperError):
    """Exception raised when a derived worktree path belongs to another branch."""

    code = "WORKTREE_PATH_CONFLICT"

    def __init__(self, branch: str, path: str, other_branch: Optional[str]):
        self.branch = branch
        self.path = path
        self.other_branch = other_branch
        super().__init__(
            f"Worktree path {path} for branch '{branch}' is already used by "
            f"branch '{other_branch or '(detached)'}'"
        )


class ExternalToolError(WorktreeKeeperError):
    """Exception raised when a git command exits with a failure."""

    code = "GIT_COMMAND_FAILED"

    def __init__(
        self,
        operation: str,
        repo_path: Optional[str] = None,
        message: Optional[str] = None,
        stderr: str = "",
        exit_code: Optional[int] = None,
    ):
        self.operation = operation
        self.repo_path = repo_path
        self.stderr = stderr
        self.exit_code = exit_code

        error_msg = f"Git operation '{operation}' failed"
        if repo_path:
            error_msg += f" in {repo_path}"
        if exit_code is not None:
            error_msg += f" (exit {exit_code})"
        detail = message or stderr
        if detail:
            error_msg += f": {detail}"

        super().__init__(error_msg)


class RepositoryLockedError(ExternalToolError):
    """Exception raised when git reports another process holds a repository lock."""

    code = "REPOSITORY_LOCKED"
    retryable = True


class OperationTimeoutError(WorktreeKeeperError):
    """Exception raised when a caller-imposed timeout expires.

    The underlying git process is not killed; a later list or status call
    shows whatever state it left behind.
    """

    code = "OPERATION_TIMEOUT"
    retryable = True

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"Operation '{operation}' did not finish within {timeout:g} seconds; "
            "it may still complete in the background"
        )

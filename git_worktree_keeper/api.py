"""Transport-agnostic request/response surface for git-worktree-keeper.

Each operation takes a request mapping with camelCase fields and returns an
envelope: {"success": True, ...payload} or
{"success": False, "error": <message>, "code": <code>, "retryable": <bool>}.
Nothing raised below this layer escapes to the caller.
"""

from typing import Callable, Dict, Mapping, Optional

from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import WorktreeKeeperError
from git_worktree_keeper.services.validation_service import RequestValidator
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


def success(**payload) -> dict:
    return {"success": True, **payload}


def failure(error: WorktreeKeeperError) -> dict:
    return {
        "success": False,
        "error": error.message,
        "code": error.code,
        "retryable": error.retryable,
    }


class WorktreeAPI:
    """Validates requests and maps keeper results and errors onto envelopes."""

    def __init__(self, keeper: Optional[WorktreeKeeper] = None):
        self.keeper = keeper or WorktreeKeeper()
        self._handlers: Dict[str, Callable[[Mapping], dict]] = {
            "createWorktree": self._create_worktree,
            "deleteWorktree": self._delete_worktree,
            "listWorktrees": self._list_worktrees,
            "pruneWorktrees": self._prune_worktrees,
            "worktreeStatus": self._worktree_status,
            "commitWorktree": self._commit_worktree,
            "switchBranch": self._switch_branch,
            "listBranches": self._list_branches,
        }

    @property
    def operations(self):
        return sorted(self._handlers)

    def handle(self, operation: str, request: Optional[Mapping] = None) -> dict:
        """Run one operation and wrap its outcome in an envelope."""
        request = request or {}
        handler = self._handlers.get(operation)
        if handler is None:
            return {
                "success": False,
                "error": f"Unknown operation: {operation}",
                "code": "UNKNOWN_OPERATION",
                "retryable": False,
            }

        try:
            RequestValidator.validate(operation, request)
            return handler(request)
        except WorktreeKeeperError as e:
            logger.debug(f"{operation} failed: [{e.code}] {e.message}")
            return failure(e)
        except Exception as e:
            logger.exception(f"Unexpected error in {operation}")
            return {
                "success": False,
                "error": f"Unexpected error: {e}",
                "code": "INTERNAL_ERROR",
                "retryable": False,
            }

    def create_worktree(self, request: Mapping) -> dict:
        return self.handle("createWorktree", request)

    def delete_worktree(self, request: Mapping) -> dict:
        return self.handle("deleteWorktree", request)

    def list_worktrees(self, request: Mapping) -> dict:
        return self.handle("listWorktrees", request)

    def prune_worktrees(self, request: Mapping) -> dict:
        return self.handle("pruneWorktrees", request)

    def worktree_status(self, request: Mapping) -> dict:
        return self.handle("worktreeStatus", request)

    def commit_worktree(self, request: Mapping) -> dict:
        return self.handle("commitWorktree", request)

    def switch_branch(self, request: Mapping) -> dict:
        return self.handle("switchBranch", request)

    def list_branches(self, request: Mapping) -> dict:
        return self.handle("listBranches", request)

    def _create_worktree(self, request: Mapping) -> dict:
        result = self.keeper.create_worktree(request["repoPath"], request["branchName"])
        return success(worktree=result.to_dict())

    def _delete_worktree(self, request: Mapping) -> dict:
        result = self.keeper.delete_worktree(
            request["repoPath"],
            request["worktreePath"],
            bool(request.get("deleteBranch", False)),
        )
        return success(deleted=result.to_dict())

    def _list_worktrees(self, request: Mapping) -> dict:
        worktrees = self.keeper.list_worktrees(
            request["repoPath"], bool(request.get("includeStatus", False))
        )
        return success(
            worktrees=[worktree.to_dict() for worktree in worktrees],
            includeStatus=bool(request.get("includeStatus", False)),
        )

    def _prune_worktrees(self, request: Mapping) -> dict:
        return success(pruned=self.keeper.prune_worktrees(request["repoPath"]))

    def _worktree_status(self, request: Mapping) -> dict:
        status = self.keeper.worktree_status(request["worktreePath"])
        return success(status=status.to_dict())

    def _commit_worktree(self, request: Mapping) -> dict:
        result = self.keeper.commit_worktree(request["worktreePath"], request["message"])
        return success(result=result.to_dict())

    def _switch_branch(self, request: Mapping) -> dict:
        result = self.keeper.switch_branch(request["repoPath"], request["branchName"])
        return success(result=result.to_dict())

    def _list_branches(self, request: Mapping) -> dict:
        listing = self.keeper.list_branches(request["repoPath"])
        return success(result=listing.to_dict())

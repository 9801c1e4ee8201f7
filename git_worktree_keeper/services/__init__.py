"""Services for git-worktree-keeper."""

from .branch_service import BranchService
from .commit_service import CommitService
from .lifecycle_service import LifecycleService
from .locking import RepositoryLock, RepositoryLocks
from .status_service import StatusService
from .validation_service import RequestValidator

__all__ = [
    "BranchService",
    "CommitService",
    "LifecycleService",
    "RepositoryLock",
    "RepositoryLocks",
    "StatusService",
    "RequestValidator",
]

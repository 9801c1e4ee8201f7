"""Core functionality for git-worktree-keeper"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, List, Optional, TypeVar, Union

from git_worktree_keeper.config import Config
from git_worktree_keeper.exceptions import OperationTimeoutError
from git_worktree_keeper.models.branch import BranchListing, SwitchResult
from git_worktree_keeper.models.commit import CommitResult
from git_worktree_keeper.models.worktree import CreateResult, DeleteResult, StatusSummary, Worktree
from git_worktree_keeper.services.branch_service import BranchService
from git_worktree_keeper.services.commit_service import CommitService
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.lifecycle_service import LifecycleService
from git_worktree_keeper.services.locking import RepositoryLocks
from git_worktree_keeper.services.status_service import StatusService
from git_worktree_keeper.utils.logging import get_logger
from git_worktree_keeper.utils.threading import get_optimal_worker_count

logger = get_logger(__name__)

T = TypeVar("T")


class WorktreeKeeper:
    """Main entry point for managing the worktrees of any number of repositories.

    Every operation runs on a worker thread so a slow git call never blocks
    the caller beyond the configured timeout. A timed-out operation keeps
    running to completion in the background; it is never killed half way.
    """

    def __init__(
        self,
        config: Union[Config, dict, None] = None,
        runner: Optional[GitRunner] = None,
        locks: Optional[RepositoryLocks] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            config: Configuration dict or Config object
            runner: Command executor (a default GitRunner when omitted)
            locks: Lock registry shared with other keepers (a private one when omitted)
        """
        if config is None:
            self.config = Config()
        elif isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        self.runner = runner or GitRunner()
        self.locks = locks or RepositoryLocks()

        self.status_service = StatusService(self.runner, self.locks)
        self.lifecycle_service = LifecycleService(
            self.runner, self.locks, self.status_service, self.config
        )
        self.branch_service = BranchService(self.runner, self.locks, self.status_service)
        self.commit_service = CommitService(self.runner, self.locks)

        max_workers = get_optimal_worker_count(self.config.workers)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="worktree-keeper"
        )
        logger.debug(f"WorktreeKeeper started with {max_workers} workers")

    def _dispatch(self, operation: str, func: Callable[..., T], *args) -> T:
        """Run func on the worker pool and wait up to the configured timeout."""
        future = self._executor.submit(func, *args)
        try:
            return future.result(timeout=self.config.timeout)
        except FutureTimeoutError:
            # Only work that never started can be cancelled; a running git call finishes
            if future.cancel():
                logger.warning(
                    f"Operation '{operation}' exceeded {self.config.timeout}s before it started; cancelled"
                )
            else:
                logger.warning(
                    f"Operation '{operation}' exceeded {self.config.timeout}s; "
                    "leaving it to finish in the background"
                )
            raise OperationTimeoutError(operation, self.config.timeout)

    def create_worktree(self, repo_path: str, branch_name: str) -> CreateResult:
        return self._dispatch("createWorktree", self.lifecycle_service.create, repo_path, branch_name)

    def delete_worktree(self, repo_path: str, worktree_path: str, delete_branch: bool = False) -> DeleteResult:
        return self._dispatch(
            "deleteWorktree", self.lifecycle_service.delete, repo_path, worktree_path, delete_branch
        )

    def list_worktrees(self, repo_path: str, include_status: bool = False) -> List[Worktree]:
        return self._dispatch("listWorktrees", self.lifecycle_service.list, repo_path, include_status)

    def prune_worktrees(self, repo_path: str) -> List[str]:
        return self._dispatch("pruneWorktrees", self.lifecycle_service.prune, repo_path)

    def worktree_status(self, worktree_path: str) -> StatusSummary:
        return self._dispatch("worktreeStatus", self.status_service.status, worktree_path)

    def commit_worktree(self, worktree_path: str, message: str) -> CommitResult:
        return self._dispatch("commitWorktree", self.commit_service.commit, worktree_path, message)

    def switch_branch(self, repo_path: str, branch_name: str) -> SwitchResult:
        return self._dispatch("switchBranch", self.branch_service.switch, repo_path, branch_name)

    def list_branches(self, repo_path: str) -> BranchListing:
        return self._dispatch("listBranches", self.branch_service.list_branches, repo_path)

    def close(self, wait: bool = True) -> None:
        """Stop accepting work; with wait, let in-flight operations finish first."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "WorktreeKeeper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

"""Worktree lifecycle service: create, delete, list and prune linked worktrees."""

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Union, TYPE_CHECKING

from git_worktree_keeper.exceptions import WorktreeKeeperError, WorktreePathConflictError
from git_worktree_keeper.models.worktree import CreateResult, DeleteResult, Worktree
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.git.worktrees import WorktreeRegistry, normalize_path
from git_worktree_keeper.services.locking import RepositoryLocks
from git_worktree_keeper.services.status_service import StatusService
from git_worktree_keeper.utils.logging import get_logger
from git_worktree_keeper.utils.threading import get_optimal_worker_count

if TYPE_CHECKING:
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)


class LifecycleService:
    """Creates and removes linked worktrees idempotently."""

    def __init__(
        self,
        runner: GitRunner,
        locks: RepositoryLocks,
        status_service: StatusService,
        config: Union["Config", dict],
    ):
        """Initialize the lifecycle service.

        Args:
            runner: Command executor
            locks: Per-repository lock registry
            status_service: Status inspector used by list(include_status=True)
            config: Configuration dictionary or Config object
        """
        self.runner = runner
        self.locks = locks
        self.status_service = status_service
        self.config = config
        self.worktree_dir_name = config.get("worktree_dir_name", ".worktrees")
        self.force_remove = config.get("force_remove", True)
        self.exclude_worktree_dir = config.get("exclude_worktree_dir", True)

    def _get_registry(self, repo_root: str) -> WorktreeRegistry:
        return WorktreeRegistry(self.runner, repo_root, self.worktree_dir_name)

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    def create(self, repo_path: str, branch_name: str) -> CreateResult:
        """Ensure a linked worktree exists for branch_name.

        A second call for the same branch returns the existing worktree with
        is_new=False and changes nothing.

        Raises:
            RepositoryNotFoundError: If repo_path is not a repository
            WorktreePathConflictError: If the derived path belongs to another branch
            ExternalToolError: If git rejects the branch name or the checkout
        """
        repo_root = self.runner.resolve_repository_root(repo_path)
        registry = self._get_registry(repo_root)
        target = registry.path_for(branch_name)

        with self.locks.for_root(repo_root).write():
            # Reject bad names before the derived path means anything (".." resolves upward)
            self.runner.check(
                ["check-ref-format", "--branch", branch_name],
                repo_root,
                operation="create-worktree",
            )

            if registry.has_stale_entries():
                self._prune(repo_root)

            existing = registry.find_by_branch(branch_name)
            if existing is not None:
                logger.debug(f"Worktree for {branch_name} already exists at {existing.path}")
                path = target if normalize_path(existing.path) == normalize_path(target) else existing.path
                return CreateResult(branch=branch_name, path=path, is_new=False)

            occupant = registry.find_by_path(target)
            if occupant is not None:
                raise WorktreePathConflictError(branch_name, target, occupant.branch_name)

            if self.exclude_worktree_dir:
                self._ensure_excluded(repo_root)

            if registry.branch_exists(branch_name):
                args = ["worktree", "add", target, branch_name]
            else:
                logger.debug(f"Branch {branch_name} does not exist, creating it from HEAD")
                args = ["worktree", "add", "-b", branch_name, target, "HEAD"]

            self.runner.check(args, repo_root, operation="create-worktree")

        logger.info(f"Created worktree at {target} for branch {branch_name}")
        return CreateResult(branch=branch_name, path=target, is_new=True)

    def _ensure_excluded(self, repo_root: str) -> None:
        """Add the worktree directory to the repository's local exclude file.

        Without it the main working directory reports its own linked
        worktrees as untracked files.
        """
        exclude_file = Path(self.runner.resolve_common_dir(repo_root)) / "info" / "exclude"
        pattern = f"/{self.worktree_dir_name}/"

        existing = exclude_file.read_text().splitlines() if exclude_file.exists() else []
        accepted = {pattern, pattern.strip("/"), f"{self.worktree_dir_name}/", f"/{self.worktree_dir_name}"}
        if any(line.strip() in accepted for line in existing):
            return

        exclude_file.parent.mkdir(parents=True, exist_ok=True)
        with open(exclude_file, "a") as f:
            if existing and existing[-1].strip():
                f.write("\n")
            f.write(f"{pattern}\n")
        logger.debug(f"Added {pattern} to {exclude_file}")

    # ------------------------------------------------------------------
    # delete
    # ------------------------------------------------------------------

    def delete(self, repo_path: str, worktree_path: str, delete_branch: bool = False) -> DeleteResult:
        """Ensure the worktree at worktree_path is absent.

        An already missing worktree is a success. With delete_branch the
        local branch is deleted as well; a failure there is raised but the
        directory stays removed.

        Raises:
            RepositoryNotFoundError: If repo_path is not a repository
            ExternalToolError: If git refuses the removal or the branch deletion
        """
        repo_root = self.runner.resolve_repository_root(repo_path)
        registry = self._get_registry(repo_root)
        if not os.path.isabs(worktree_path):
            worktree_path = os.path.join(repo_root, worktree_path)

        with self.locks.for_root(repo_root).write():
            record = registry.find_record_by_path(worktree_path)
            branch = record.branch_name if record else None
            removed = False

            if record is not None and os.path.isdir(record.path) and not record.is_prunable:
                args = ["worktree", "remove"]
                if self.force_remove:
                    # A locked worktree needs --force twice
                    args += ["--force", "--force"] if record.is_locked else ["--force"]
                args.append(record.path)
                self.runner.check(args, repo_root, operation="delete-worktree")
                removed = True
                logger.info(f"Removed worktree at {record.path}")
            elif record is not None:
                logger.info(f"Worktree directory {worktree_path} already gone, pruning metadata")
                self._prune(repo_root)
            elif os.path.exists(worktree_path):
                # Not a worktree of this repository; git explains why
                self.runner.check(
                    ["worktree", "remove", worktree_path], repo_root, operation="delete-worktree"
                )
            else:
                logger.info(f"Worktree {worktree_path} already absent")

            branch_deleted = False
            if delete_branch:
                branch = branch or registry.branch_for_path(worktree_path)
                branch_deleted = self._delete_branch(registry, branch)

        return DeleteResult(
            path=worktree_path,
            removed=removed,
            branch=branch,
            branch_deleted=branch_deleted,
        )

    def _delete_branch(self, registry: WorktreeRegistry, branch: Optional[str]) -> bool:
        if branch is None:
            logger.warning("No branch maps to the deleted worktree; nothing to delete")
            return False
        if not registry.branch_exists(branch):
            logger.info(f"Branch {branch} already absent")
            return False

        self.runner.check(["branch", "-D", branch], registry.repo_root, operation="delete-branch")
        logger.info(f"Deleted branch {branch}")
        return True

    # ------------------------------------------------------------------
    # list / prune
    # ------------------------------------------------------------------

    def list(self, repo_path: str, include_status: bool = False) -> List[Worktree]:
        """Main working directory plus every live linked worktree, one per branch.

        Raises:
            RepositoryNotFoundError: If repo_path is not a repository
        """
        repo_root = self.runner.resolve_repository_root(repo_path)
        registry = self._get_registry(repo_root)

        with self.locks.for_root(repo_root).read():
            worktrees = registry.worktrees()
            if include_status and worktrees:
                worktrees = self._with_status(worktrees, repo_root)

        return worktrees

    def _with_status(self, worktrees: List[Worktree], repo_root: str) -> List[Worktree]:
        """Fill in status fields, inspecting worktrees in parallel."""
        max_workers = get_optimal_worker_count(
            self.config.get("status_workers"), limit=len(worktrees)
        )
        results = list(worktrees)

        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="status") as executor:
            future_to_index = {
                executor.submit(self.status_service.inspect, worktree.path, repo_root): index
                for index, worktree in enumerate(worktrees)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                try:
                    results[index] = worktrees[index].with_status(future.result())
                except WorktreeKeeperError as e:
                    # The directory may have gone away since the inventory was read
                    logger.warning(f"Could not read status of {worktrees[index].path}: {e}")

        return results

    def prune(self, repo_path: str) -> List[str]:
        """Drop metadata of worktrees whose directories were removed by hand.

        Returns:
            Paths whose metadata was pruned
        """
        repo_root = self.runner.resolve_repository_root(repo_path)
        with self.locks.for_root(repo_root).write():
            return self._prune(repo_root)

    def _prune(self, repo_root: str) -> List[str]:
        registry = self._get_registry(repo_root)
        stale = [
            record.path
            for record in registry.records()
            if not record.is_bare and (record.is_prunable or not os.path.isdir(record.path))
        ]
        self.runner.check(["worktree", "prune"], repo_root, operation="prune-worktrees")
        if stale:
            logger.info(f"Pruned {len(stale)} stale worktree entries in {repo_root}")
        return stale

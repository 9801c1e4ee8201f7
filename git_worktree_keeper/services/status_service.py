"""Working tree status inspection for git-worktree-keeper."""

from typing import Optional

from git_worktree_keeper.models.worktree import StatusSummary
from git_worktree_keeper.services.git.parsers import parse_status_porcelain
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.locking import RepositoryLocks
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_ARGS = ["status", "--porcelain=v1", "--untracked-files=all"]


class StatusService:
    """Computes dirty/clean state and changed-file counts of a worktree."""

    def __init__(self, runner: GitRunner, locks: RepositoryLocks):
        self.runner = runner
        self.locks = locks

    def status(self, worktree_path: str) -> StatusSummary:
        """Status of the worktree at worktree_path, read under the repository's read lock."""
        repo_root = self.runner.resolve_repository_root(worktree_path)
        with self.locks.for_root(repo_root).read():
            return self.inspect(worktree_path, repo_root)

    def inspect(self, worktree_path: str, repo_root: Optional[str] = None) -> StatusSummary:
        """Status of a worktree without locking; the caller holds the repository lock.

        Untracked files count as changes alongside staged and modified ones.
        """
        result = self.runner.check(
            STATUS_ARGS, worktree_path, operation="status", repo_path=repo_root
        )
        summary = parse_status_porcelain(result.stdout)
        logger.debug(
            f"Status of {worktree_path}: {summary.changed_files_count} changed "
            f"(staged={summary.staged}, modified={summary.modified}, "
            f"untracked={summary.untracked}, conflicted={summary.conflicted})"
        )
        return summary

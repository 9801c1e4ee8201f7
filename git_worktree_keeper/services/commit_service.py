"""Stage-and-commit service for git-worktree-keeper."""

from git_worktree_keeper.constants import NO_CHANGES_MESSAGE
from git_worktree_keeper.exceptions import ExternalToolError
from git_worktree_keeper.models.commit import CommitResult
from git_worktree_keeper.services.git.parsers import abbreviate_hash, parse_commit_hash
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.git.worktrees import current_branch
from git_worktree_keeper.services.locking import RepositoryLocks
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


class CommitService:
    """Commits everything pending in a worktree."""

    def __init__(self, runner: GitRunner, locks: RepositoryLocks):
        self.runner = runner
        self.locks = locks

    def commit(self, worktree_path: str, message: str) -> CommitResult:
        """Stage all changes (untracked files included) and commit them.

        A clean worktree is not an error: the result has committed=False and
        the message "No changes to commit".

        Raises:
            RepositoryNotFoundError: If worktree_path is not a working directory
            ExternalToolError: If staging or committing fails (hooks, identity, ...)
        """
        repo_root = self.runner.resolve_repository_root(worktree_path)

        with self.locks.for_root(repo_root).write():
            branch = current_branch(self.runner, worktree_path)

            self.runner.check(
                ["add", "--all"], worktree_path, operation="commit", repo_path=repo_root
            )

            # Exit 0 means nothing is staged
            staged = self.runner.run(
                ["diff", "--cached", "--quiet"], worktree_path, operation="commit"
            )
            if staged.ok:
                logger.info(f"Nothing to commit in {worktree_path}")
                return CommitResult(committed=False, branch=branch, message=NO_CHANGES_MESSAGE)
            if staged.status != 1:
                raise ExternalToolError(
                    "commit", repo_root, stderr=staged.stderr, exit_code=staged.status
                )

            self.runner.check(
                ["commit", "--quiet", "-m", message],
                worktree_path,
                operation="commit",
                repo_path=repo_root,
            )
            head = self.runner.check(
                ["rev-parse", "HEAD"], worktree_path, operation="commit", repo_path=repo_root
            )
            commit_hash = abbreviate_hash(parse_commit_hash(head.stdout))

        logger.info(f"Committed {commit_hash} on {branch or '(detached)'} in {worktree_path}")
        return CommitResult(committed=True, branch=branch, commit_hash=commit_hash)

"""Branch listing and guarded branch switching for git-worktree-keeper."""

from git_worktree_keeper.constants import ALREADY_ON_BRANCH_MESSAGE, SWITCHED_MESSAGE
from git_worktree_keeper.exceptions import BranchNotFoundError, UncommittedChangesError
from git_worktree_keeper.models.branch import BranchListing, SwitchResult
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.git.worktrees import WorktreeRegistry
from git_worktree_keeper.services.locking import RepositoryLocks
from git_worktree_keeper.services.status_service import StatusService
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


class BranchService:
    """Lists branches and switches the branch of a working directory."""

    def __init__(self, runner: GitRunner, locks: RepositoryLocks, status_service: StatusService):
        self.runner = runner
        self.locks = locks
        self.status_service = status_service

    def list_branches(self, repo_path: str) -> BranchListing:
        """Local branches, with the one checked out at repo_path marked current."""
        repo_root = self.runner.resolve_repository_root(repo_path)
        with self.locks.for_root(repo_root).read():
            return WorktreeRegistry(self.runner, repo_root).branches(repo_path)

    def switch(self, repo_path: str, branch_name: str) -> SwitchResult:
        """Check out branch_name in the working directory at repo_path.

        Checks run in a fixed order: the branch must exist, switching to the
        current branch succeeds without touching anything (even on a dirty
        tree), and any other switch requires a clean tree.

        Raises:
            BranchNotFoundError: If branch_name is not a local branch
            UncommittedChangesError: If the working tree has changes
            ExternalToolError: If git refuses the checkout, e.g. because the
                branch is checked out in another worktree
        """
        repo_root = self.runner.resolve_repository_root(repo_path)
        registry = WorktreeRegistry(self.runner, repo_root)

        with self.locks.for_root(repo_root).write():
            listing = registry.branches(repo_path)
            if branch_name not in listing.names:
                raise BranchNotFoundError(branch_name)

            previous = listing.current_branch
            if branch_name == previous:
                return SwitchResult(
                    previous_branch=previous,
                    current_branch=branch_name,
                    message=ALREADY_ON_BRANCH_MESSAGE.format(branch=branch_name),
                )

            status = self.status_service.inspect(repo_path, repo_root)
            if status.has_changes:
                logger.info(
                    f"Refusing to switch {repo_path} to {branch_name}: "
                    f"{status.changed_files_count} uncommitted change(s)"
                )
                raise UncommittedChangesError(branch_name, status.changed_files_count)

            self.runner.check(
                ["checkout", "--quiet", branch_name, "--"],
                repo_path,
                operation="switch-branch",
                repo_path=repo_root,
            )

        logger.info(f"Switched {repo_path} from {previous or '(detached)'} to {branch_name}")
        return SwitchResult(
            previous_branch=previous,
            current_branch=branch_name,
            message=SWITCHED_MESSAGE.format(branch=branch_name),
        )

"""Command executor: the only place that invokes the git binary."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import git

from git_worktree_keeper.constants import LOCK_CONTENTION_MARKERS
from git_worktree_keeper.exceptions import (
    ExternalToolError,
    RepositoryLockedError,
    RepositoryNotFoundError,
)
from git_worktree_keeper.services.git.parsers import parse_worktree_list
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GitResult:
    """Captured outcome of one git invocation."""

    args: tuple
    cwd: str
    status: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.status == 0


def is_lock_contention(stderr: str) -> bool:
    """Whether git failed because another process holds a repository lock."""
    lowered = stderr.lower()
    return any(marker in lowered for marker in LOCK_CONTENTION_MARKERS)


class GitRunner:
    """Runs single git commands against a working directory."""

    def __init__(self, git_executable: Optional[str] = None):
        """Initialize the runner.

        Args:
            git_executable: Path to the git binary (defaults to GitPython's lookup)
        """
        self.git_executable = git_executable

    def _get_git(self, cwd: str) -> git.Git:
        """Get a git command wrapper bound to cwd.

        A fresh wrapper per call keeps the runner safe to share between threads.
        """
        return git.Git(cwd)

    def run(self, args: Sequence[str], cwd: str, operation: Optional[str] = None) -> GitResult:
        """Execute `git <args>` in cwd and capture exit status and output.

        A non-zero exit is returned, not raised; use check() for that.

        Raises:
            ExternalToolError: If git could not be started at all
        """
        operation = operation or (args[0] if args else "git")
        if not os.path.isdir(cwd):
            # GitPython silently falls back to the process cwd for a missing directory
            raise ExternalToolError(operation, cwd, "working directory does not exist")

        command = [self.git_executable or git.Git.GIT_PYTHON_GIT_EXECUTABLE or "git", *args]
        logger.debug(f"Executing: {' '.join(command)} in {cwd}")

        try:
            status, stdout, stderr = self._get_git(cwd).execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except git.exc.GitCommandNotFound as e:
            # Raised for a missing binary and for a missing cwd alike
            raise ExternalToolError(operation, cwd, f"could not run git: {e}") from e

        result = GitResult(
            args=tuple(args),
            cwd=cwd,
            status=status if status is not None else -1,
            stdout=stdout or "",
            stderr=(stderr or "").strip(),
        )

        if not result.ok:
            logger.debug(
                f"git {' '.join(args)} exited {result.status} in {cwd}: {result.stderr}"
            )
        return result

    def check(
        self,
        args: Sequence[str],
        cwd: str,
        operation: Optional[str] = None,
        repo_path: Optional[str] = None,
    ) -> GitResult:
        """Execute a git command and raise on failure.

        Args:
            args: git arguments (without 'git')
            cwd: Working directory for the command
            operation: Operation name used in error messages
            repo_path: Repository the error is reported against (defaults to cwd)

        Raises:
            RepositoryLockedError: If another git process holds a lock (retryable)
            ExternalToolError: For any other non-zero exit
        """
        operation = operation or (args[0] if args else "git")
        result = self.run(args, cwd, operation=operation)
        if result.ok:
            return result

        error_cls = RepositoryLockedError if is_lock_contention(result.stderr) else ExternalToolError
        logger.warning(
            f"Git operation '{operation}' failed (exit {result.status}): {result.stderr}"
        )
        raise error_cls(
            operation,
            repo_path or cwd,
            stderr=result.stderr,
            exit_code=result.status,
        )

    def resolve_repository_root(self, path: str) -> str:
        """Canonical root of the repository that path belongs to.

        Linked worktrees resolve to the main working directory, so every path
        of one repository shares a root (and therefore a lock).

        Raises:
            RepositoryNotFoundError: If path is missing, not a repository, or bare
        """
        if not path or not os.path.isdir(path):
            raise RepositoryNotFoundError(path, "directory does not exist")

        try:
            with git.Repo(path) as repo:
                if repo.bare:
                    raise RepositoryNotFoundError(path, "bare repositories have no working tree")
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise RepositoryNotFoundError(path, "not a git repository") from e

        # git lists the main working tree first, wherever its git dir lives
        # (submodules and --separate-git-dir keep it outside the working tree)
        result = self.run(["worktree", "list", "--porcelain"], path, operation="resolve-repository")
        if not result.ok:
            raise RepositoryNotFoundError(path, result.stderr or "not a git repository")

        records = parse_worktree_list(result.stdout)
        if not records or records[0].is_bare:
            raise RepositoryNotFoundError(path, "no main working tree")
        return str(Path(records[0].path).resolve())

    def resolve_common_dir(self, repo_root: str) -> str:
        """Absolute path of the git metadata directory shared by all worktrees."""
        result = self.check(
            ["rev-parse", "--git-common-dir"], repo_root, operation="resolve-repository"
        )
        common_path = Path(result.stdout.strip())
        if not common_path.is_absolute():
            common_path = Path(repo_root) / common_path
        return str(common_path.resolve())

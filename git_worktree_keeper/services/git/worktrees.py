"""Worktree registry for git-worktree-keeper."""

import os
from pathlib import Path
from typing import List, Optional

from git_worktree_keeper.constants import (
    PATH_SEPARATOR_REPLACEMENT,
    PATH_SEPARATORS,
    WORKTREE_DIR_NAME,
)
from git_worktree_keeper.exceptions import ExternalToolError, ValidationError
from git_worktree_keeper.models.branch import BranchListing
from git_worktree_keeper.models.worktree import Worktree, WorktreeRecord
from git_worktree_keeper.services.git.parsers import (
    BRANCH_LIST_FORMAT,
    parse_branch_list,
    parse_current_branch,
    parse_worktree_list,
)
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


def sanitize_branch_name(branch_name: str) -> str:
    """Directory name for a branch: path separators become hyphens.

    feature/x -> feature-x, team/a/b -> team-a-b. Two distinct branches can
    only collide when one literally spells the other's substitution
    (feature/x vs feature-x); the registry refuses that case on create.
    """
    if not branch_name or not branch_name.strip():
        raise ValidationError("branchName")
    sanitized = branch_name.strip()
    for separator in PATH_SEPARATORS:
        sanitized = sanitized.replace(separator, PATH_SEPARATOR_REPLACEMENT)
    return sanitized


def worktree_path(repo_root: str, branch_name: str, worktree_dir_name: str = WORKTREE_DIR_NAME) -> str:
    """Deterministic location of the linked worktree for a branch."""
    return str(Path(repo_root) / worktree_dir_name / sanitize_branch_name(branch_name))


def normalize_path(path: str) -> str:
    """Resolved absolute form of a path, used for comparing worktree locations."""
    return os.path.normcase(str(Path(path).resolve()))


class WorktreeRegistry:
    """Branch -> worktree mapping of one repository, read from git on every call.

    Nothing is cached: each lookup runs `git worktree list` again, so the
    answer always reflects the repository as it is now.
    """

    def __init__(self, runner: GitRunner, repo_root: str, worktree_dir_name: str = WORKTREE_DIR_NAME):
        """Initialize the registry.

        Args:
            runner: Command executor
            repo_root: Canonical repository root (main working directory)
            worktree_dir_name: Directory under the root that holds linked worktrees
        """
        self.runner = runner
        self.repo_root = repo_root
        self.worktree_dir_name = worktree_dir_name

    def path_for(self, branch_name: str) -> str:
        return worktree_path(self.repo_root, branch_name, self.worktree_dir_name)

    def records(self) -> List[WorktreeRecord]:
        """Raw worktree inventory as git reports it, main working directory first."""
        result = self.runner.check(
            ["worktree", "list", "--porcelain"],
            self.repo_root,
            operation="worktree-list",
        )
        return parse_worktree_list(result.stdout)

    def worktrees(self) -> List[Worktree]:
        """Live working directories, deduplicated by branch.

        Entries git flags as prunable, or whose directory has vanished, are
        stale metadata and are left out. Status fields are not filled in.
        """
        worktrees = []
        seen_branches = set()

        for index, record in enumerate(self.records()):
            if record.is_bare:
                continue
            if record.is_prunable or not os.path.isdir(record.path):
                logger.debug(f"Skipping stale worktree entry {record.path}")
                continue
            if record.branch_name is not None:
                if record.branch_name in seen_branches:
                    logger.warning(
                        f"Branch {record.branch_name} reported for more than one worktree; "
                        f"ignoring {record.path}"
                    )
                    continue
                seen_branches.add(record.branch_name)

            worktrees.append(
                Worktree(
                    branch_name=record.branch_name,
                    path=record.path,
                    # git always lists the main working directory first
                    is_main=index == 0,
                )
            )

        logger.debug(f"Found {len(worktrees)} worktrees in {self.repo_root}")
        return worktrees

    def has_stale_entries(self) -> bool:
        return any(
            record.is_prunable or not os.path.isdir(record.path)
            for record in self.records()
            if not record.is_bare
        )

    def find_by_branch(self, branch_name: str) -> Optional[Worktree]:
        return next((wt for wt in self.worktrees() if wt.branch_name == branch_name), None)

    def find_by_path(self, path: str) -> Optional[Worktree]:
        target = normalize_path(path)
        return next((wt for wt in self.worktrees() if normalize_path(wt.path) == target), None)

    def find_record_by_path(self, path: str) -> Optional[WorktreeRecord]:
        """Inventory entry for path, stale entries included."""
        target = normalize_path(path)
        return next(
            (record for record in self.records() if normalize_path(record.path) == target),
            None,
        )

    def branches(self, working_dir: Optional[str] = None) -> BranchListing:
        """Local branches and the branch checked out in working_dir.

        working_dir defaults to the main working directory; the branch list is
        shared by every worktree, only the current branch differs.
        """
        result = self.runner.check(
            ["for-each-ref", f"--format={BRANCH_LIST_FORMAT}", "refs/heads/"],
            working_dir or self.repo_root,
            operation="list-branches",
        )
        branches = parse_branch_list(result.stdout)
        current = next((branch.name for branch in branches if branch.is_current), None)
        return BranchListing(current_branch=current, branches=branches)

    def branch_exists(self, branch_name: str) -> bool:
        result = self.runner.run(
            ["rev-parse", "--verify", "--quiet", f"refs/heads/{branch_name}"],
            self.repo_root,
            operation="verify-branch",
        )
        return result.ok

    def branch_for_path(self, path: str) -> Optional[str]:
        """Local branch whose derived worktree path is path.

        Recovers the branch of a worktree whose metadata is already gone.
        """
        target = normalize_path(path)
        for branch in self.branches().branches:
            if normalize_path(self.path_for(branch.name)) == target:
                return branch.name
        return None


def current_branch(runner: GitRunner, path: str) -> Optional[str]:
    """Branch checked out in the working directory at path (None if detached)."""
    result = runner.run(
        ["symbolic-ref", "--quiet", "--short", "HEAD"], path, operation="current-branch"
    )
    if not result.ok:
        # --quiet exits 1 with no output on a detached HEAD
        if result.status == 1 and not result.stderr:
            return None
        raise ExternalToolError(
            "current-branch", path, stderr=result.stderr, exit_code=result.status
        )
    return parse_current_branch(result.stdout)

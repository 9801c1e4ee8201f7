"""Git-facing building blocks: command execution, output parsing, worktree registry."""

from .runner import GitRunner, GitResult
from .worktrees import WorktreeRegistry, sanitize_branch_name, worktree_path

__all__ = [
    "GitRunner",
    "GitResult",
    "WorktreeRegistry",
    "sanitize_branch_name",
    "worktree_path",
]

"""Data models for git-worktree-keeper."""

from .branch import BranchInfo, BranchListing, SwitchResult
from .commit import CommitResult
from .worktree import CreateResult, DeleteResult, StatusSummary, Worktree, WorktreeRecord

__all__ = [
    "BranchInfo",
    "BranchListing",
    "SwitchResult",
    "CommitResult",
    "CreateResult",
    "DeleteResult",
    "StatusSummary",
    "Worktree",
    "WorktreeRecord",
]

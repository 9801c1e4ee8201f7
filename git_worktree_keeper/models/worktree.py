"""Worktree data models."""

from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class WorktreeRecord:
    """One entry of `git worktree list --porcelain`."""

    path: str
    head: str = ""
    branch_name: Optional[str] = None  # None when detached or bare
    is_bare: bool = False
    is_detached: bool = False
    is_locked: bool = False
    is_prunable: bool = False


@dataclass(frozen=True)
class StatusSummary:
    """Counts parsed from `git status --porcelain`."""

    staged: int = 0
    modified: int = 0
    untracked: int = 0
    conflicted: int = 0
    changed_files_count: int = 0

    @property
    def has_changes(self) -> bool:
        return self.changed_files_count > 0

    def to_dict(self) -> dict:
        return {
            "hasChanges": self.has_changes,
            "changedFilesCount": self.changed_files_count,
            "staged": self.staged,
            "modified": self.modified,
            "untracked": self.untracked,
            "conflicted": self.conflicted,
        }


@dataclass(frozen=True)
class Worktree:
    """A working directory of a repository, main or linked."""

    branch_name: Optional[str]
    path: str
    is_main: bool
    has_changes: bool = False
    changed_files_count: int = 0

    def with_status(self, status: StatusSummary) -> "Worktree":
        """Copy of this worktree carrying freshly computed status fields."""
        return replace(
            self,
            has_changes=status.has_changes,
            changed_files_count=status.changed_files_count,
        )

    def to_dict(self) -> dict:
        return {
            "branch": self.branch_name,
            "path": self.path,
            "isMain": self.is_main,
            "hasChanges": self.has_changes,
            "changedFilesCount": self.changed_files_count,
        }

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        changes = f" [{self.changed_files_count} changed]" if self.has_changes else ""
        return f"{self.branch_name or '(detached)'} @ {self.path}{main_marker}{changes}"


@dataclass(frozen=True)
class CreateResult:
    """Outcome of creating (or finding) the worktree for a branch."""

    branch: str
    path: str
    is_new: bool

    def to_dict(self) -> dict:
        return {"branch": self.branch, "path": self.path, "isNew": self.is_new}


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of deleting a worktree."""

    path: str
    removed: bool  # False when the worktree was already absent
    branch: Optional[str] = None
    branch_deleted: bool = False

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "removed": self.removed,
            "branch": self.branch,
            "branchDeleted": self.branch_deleted,
        }

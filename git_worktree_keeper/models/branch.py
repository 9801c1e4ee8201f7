"""Branch data models."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class BranchInfo:
    """A local branch."""
    name: str
    is_current: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "isCurrent": self.is_current}


@dataclass(frozen=True)
class BranchListing:
    """Local branches of a repository and the one checked out in it."""
    current_branch: Optional[str]  # None = detached HEAD
    branches: List[BranchInfo] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [branch.name for branch in self.branches]

    def to_dict(self) -> dict:
        return {
            "currentBranch": self.current_branch,
            "branches": [branch.to_dict() for branch in self.branches],
        }


@dataclass(frozen=True)
class SwitchResult:
    """Outcome of a branch switch."""
    previous_branch: Optional[str]
    current_branch: str
    message: str

    def to_dict(self) -> dict:
        return {
            "previousBranch": self.previous_branch,
            "currentBranch": self.current_branch,
            "message": self.message,
        }

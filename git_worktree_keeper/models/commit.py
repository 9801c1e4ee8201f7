"""Commit data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a stage-and-commit request."""

    committed: bool
    branch: Optional[str]
    commit_hash: Optional[str] = None  # Abbreviated, 8 lowercase hex characters
    message: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"committed": self.committed, "branch": self.branch}
        if self.commit_hash is not None:
            result["commitHash"] = self.commit_hash
        if self.message is not None:
            result["message"] = self.message
        return result

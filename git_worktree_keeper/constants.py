"""Shared constants for git-worktree-keeper."""

from dataclasses import dataclass
from typing import List


# Directory (under the repository root) that holds linked worktrees
WORKTREE_DIR_NAME = ".worktrees"

# Characters replaced when deriving a worktree directory from a branch name
PATH_SEPARATORS = ("/", "\\")
PATH_SEPARATOR_REPLACEMENT = "-"

# Default caller timeout for a single operation, in seconds
DEFAULT_TIMEOUT = 60.0

# Length of the abbreviated commit hash reported after a commit
ABBREVIATED_HASH_LENGTH = 8

# Messages callers match on
NO_CHANGES_MESSAGE = "No changes to commit"
ALREADY_ON_BRANCH_MESSAGE = "Already on branch {branch}"
SWITCHED_MESSAGE = "Switched to branch {branch}"

# stderr fragments git prints when another process holds a repository lock
LOCK_CONTENTION_MARKERS = (
    "index.lock",
    ".lock': file exists",
    "another git process seems to be running",
)


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


WORKTREE_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("path", "Path"),
    ColumnDefinition("main", "Main", 6),
    ColumnDefinition("changes", "Changes", 10),
]

BRANCH_COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("current", "", 2),
    ColumnDefinition("branch", "Branch", 40),
]

SYMBOL_CURRENT_BRANCH = "*"
SYMBOL_MAIN_WORKTREE = "✓"

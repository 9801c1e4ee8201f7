"""Configuration handling for git-worktree-keeper"""

from dataclasses import dataclass
from typing import Optional

from git_worktree_keeper.constants import DEFAULT_TIMEOUT, WORKTREE_DIR_NAME


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Filesystem layout
    worktree_dir_name: str = WORKTREE_DIR_NAME
    exclude_worktree_dir: bool = True  # Keep linked worktrees out of the main tree's status

    # Deletion
    force_remove: bool = True  # Remove worktrees even when they hold local changes

    # Execution
    timeout: Optional[float] = DEFAULT_TIMEOUT  # Seconds to wait for an operation (None = forever)
    workers: Optional[int] = None  # Operation dispatch workers (None = auto-detect)
    status_workers: Optional[int] = None  # Parallel status checks per listing (None = auto-detect)

    # Output
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_worktree_dir_name()
        self._validate_timeout()
        self._validate_workers()

    def _validate_worktree_dir_name(self):
        """Validate worktree_dir_name is a single relative path component."""
        name = (self.worktree_dir_name or "").strip()
        if not name:
            raise ValueError("worktree_dir_name cannot be empty")
        if "/" in name or "\\" in name or name in (".", ".."):
            raise ValueError(
                f"worktree_dir_name must be a single directory name, got '{self.worktree_dir_name}'"
            )
        self.worktree_dir_name = name

    def _validate_timeout(self):
        """Validate timeout is positive when set."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    def _validate_workers(self):
        """Validate worker counts are positive when set."""
        for name in ("workers", "status_workers"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "worktree_dir_name": self.worktree_dir_name,
            "exclude_worktree_dir": self.exclude_worktree_dir,
            "force_remove": self.force_remove,
            "timeout": self.timeout,
            "workers": self.workers,
            "status_workers": self.status_workers,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "worktree_dir_name",
            "exclude_worktree_dir",
            "force_remove",
            "timeout",
            "workers",
            "status_workers",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

"""
git-worktree-keeper - per-feature git worktrees with idempotent, race-safe operations
"""

from .__version__ import __version__
from .api import WorktreeAPI
from .config import Config
from .core import WorktreeKeeper

__all__ = ["WorktreeAPI", "Config", "WorktreeKeeper", "__version__"]

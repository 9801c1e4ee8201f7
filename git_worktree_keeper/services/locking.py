"""Per-repository locking for git-worktree-keeper.

All worktrees of a repository share one metadata directory, so mutating
operations against the same repository root are serialized. Readers may
overlap with each other but queue behind any running or waiting writer.
"""

from contextlib import contextmanager
from threading import Condition, Lock
from typing import Dict

from git_worktree_keeper.services.git.worktrees import normalize_path
from git_worktree_keeper.utils.logging import get_logger

logger = get_logger(__name__)


class RepositoryLock:
    """Writer-preferring readers/writer lock for one repository root.

    Not re-entrant: take it once, at the public entry point of an operation.
    """

    def __init__(self, repo_root: str):
        self.repo_root = repo_root
        self._condition = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        """Shared access for inspection (list, status, branch listing)."""
        with self._condition:
            while self._writer or self._writers_waiting:
                self._condition.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._condition:
                self._readers -= 1
                if not self._readers:
                    self._condition.notify_all()

    @contextmanager
    def write(self):
        """Exclusive access for mutations (create, delete, switch, commit, prune)."""
        with self._condition:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        logger.debug(f"Acquired write lock for {self.repo_root}")
        try:
            yield
        finally:
            with self._condition:
                self._writer = False
                self._condition.notify_all()
            logger.debug(f"Released write lock for {self.repo_root}")

    @property
    def is_write_locked(self) -> bool:
        with self._condition:
            return self._writer

    @property
    def reader_count(self) -> int:
        with self._condition:
            return self._readers


class RepositoryLocks:
    """Registry handing out one RepositoryLock per canonical repository root."""

    def __init__(self):
        self._locks: Dict[str, RepositoryLock] = {}
        self._registry_lock = Lock()

    def for_root(self, repo_root: str) -> RepositoryLock:
        key = normalize_path(repo_root)
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = RepositoryLock(key)
            return lock

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

"""Pytest fixtures for git-worktree-keeper tests"""
import tempfile
from pathlib import Path
import pytest
import git

from git_worktree_keeper.config import Config
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.api import WorktreeAPI
from git_worktree_keeper.services.git.runner import GitRunner
from git_worktree_keeper.services.locking import RepositoryLocks
from git_worktree_keeper.services.status_service import StatusService
from git_worktree_keeper.services.lifecycle_service import LifecycleService
from git_worktree_keeper.services.branch_service import BranchService
from git_worktree_keeper.services.commit_service import CommitService


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits (shared by every linked worktree)
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def submodule_path(git_repo, temp_dir):
    """Working directory of a submodule `sub` added to the test repository.

    Its git dir lives under the superproject's `.git/modules/sub`.
    """
    lib_path = temp_dir / "lib"
    lib_path.mkdir()
    lib = git.Repo.init(lib_path)
    with lib.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
    (lib_path / "lib.txt").write_text("library\n")
    lib.index.add(["lib.txt"])
    lib.index.commit("Library commit")
    lib.close()

    # Local file transport is disabled for submodules by default
    git_repo.git.execute(
        ["git", "-c", "protocol.file.allow=always", "submodule", "add", str(lib_path), "sub"]
    )
    return str(Path(git_repo.working_dir) / "sub")


@pytest.fixture
def repo_path(git_repo):
    """Working directory of the test repository as a string."""
    return git_repo.working_dir


@pytest.fixture
def config():
    return Config(timeout=30.0)


@pytest.fixture
def runner():
    return GitRunner()


@pytest.fixture
def locks():
    return RepositoryLocks()


@pytest.fixture
def status_service(runner, locks):
    return StatusService(runner, locks)


@pytest.fixture
def lifecycle(runner, locks, status_service, config):
    return LifecycleService(runner, locks, status_service, config)


@pytest.fixture
def branch_service(runner, locks, status_service):
    return BranchService(runner, locks, status_service)


@pytest.fixture
def commit_service(runner, locks):
    return CommitService(runner, locks)


@pytest.fixture
def keeper(config):
    with WorktreeKeeper(config) as keeper:
        yield keeper


@pytest.fixture
def api(keeper):
    return WorktreeAPI(keeper)


"""Version information for git-worktree-keeper."""

try:
    from importlib.metadata import version, PackageNotFoundError

    __version__ = version("git-worktree-keeper")
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    __version__ = "0.0.0+unknown"

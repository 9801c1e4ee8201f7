"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.constants import DEFAULT_TIMEOUT, WORKTREE_DIR_NAME


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="git-worktree-keeper",
        description=f"Manage per-feature git worktrees kept under <repo>/{WORKTREE_DIR_NAME}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--debug", action="store_true", help="Show debug information for troubleshooting")
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON response envelope")
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Give up waiting for an operation after this many seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--worktree-dir",
        default=WORKTREE_DIR_NAME,
        help=f"Directory under the repository root that holds worktrees (default: {WORKTREE_DIR_NAME})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    create = subparsers.add_parser("create", help="Create (or find) the worktree for a branch")
    create.add_argument("repo", help="Repository path")
    create.add_argument("branch", help="Branch name; created from HEAD if missing")

    delete = subparsers.add_parser("delete", help="Remove a worktree")
    delete.add_argument("repo", help="Repository path")
    delete.add_argument("path", help="Worktree path")
    delete.add_argument("--delete-branch", action="store_true", help="Also delete the local branch")
    delete.add_argument(
        "--no-force",
        action="store_true",
        help="Refuse to remove worktrees with local changes",
    )

    list_cmd = subparsers.add_parser("list", help="List worktrees")
    list_cmd.add_argument("repo", help="Repository path")
    list_cmd.add_argument("--status", action="store_true", help="Include change counts")

    status = subparsers.add_parser("status", help="Show the change counts of one worktree")
    status.add_argument("path", help="Worktree path")

    commit = subparsers.add_parser("commit", help="Stage everything in a worktree and commit it")
    commit.add_argument("path", help="Worktree path")
    commit.add_argument("-m", "--message", required=True, help="Commit message")

    switch = subparsers.add_parser("switch", help="Switch the branch of a working directory")
    switch.add_argument("repo", help="Repository or worktree path")
    switch.add_argument("branch", help="Existing branch to check out")

    branches = subparsers.add_parser("branches", help="List local branches")
    branches.add_argument("repo", help="Repository path")

    prune = subparsers.add_parser("prune", help="Drop metadata of manually removed worktrees")
    prune.add_argument("repo", help="Repository path")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def to_request(parsed_args) -> tuple:
    """Map parsed arguments onto an (operation, request) pair."""
    command = parsed_args.command
    if command == "create":
        return "createWorktree", {"repoPath": parsed_args.repo, "branchName": parsed_args.branch}
    if command == "delete":
        return "deleteWorktree", {
            "repoPath": parsed_args.repo,
            "worktreePath": parsed_args.path,
            "deleteBranch": parsed_args.delete_branch,
        }
    if command == "list":
        return "listWorktrees", {"repoPath": parsed_args.repo, "includeStatus": parsed_args.status}
    if command == "status":
        return "worktreeStatus", {"worktreePath": parsed_args.path}
    if command == "commit":
        return "commitWorktree", {"worktreePath": parsed_args.path, "message": parsed_args.message}
    if command == "switch":
        return "switchBranch", {"repoPath": parsed_args.repo, "branchName": parsed_args.branch}
    if command == "branches":
        return "listBranches", {"repoPath": parsed_args.repo}
    if command == "prune":
        return "pruneWorktrees", {"repoPath": parsed_args.repo}
    raise ValueError(f"Unknown command: {command}")

"""Rich rendering of response envelopes for the command line."""

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_worktree_keeper.constants import (
    BRANCH_COLUMNS,
    SYMBOL_CURRENT_BRANCH,
    SYMBOL_MAIN_WORKTREE,
    WORKTREE_COLUMNS,
)


def format_changes(worktree: dict) -> str:
    """
    Format the change indicator of a worktree row.

    Args:
        worktree: Worktree payload from a listWorktrees envelope

    Returns:
        "clean" or "<n> changed"
    """
    count = worktree["changedFilesCount"]
    return f"[yellow]{count} changed[/yellow]" if count else "[green]clean[/green]"


def build_worktree_table(worktrees: List[dict], include_status: bool = True) -> Table:
    """Table with one row per worktree."""
    table = Table()
    for col in WORKTREE_COLUMNS:
        if col.key == "changes" and not include_status:
            continue
        table.add_column(col.label, min_width=col.width or None)

    for worktree in worktrees:
        row = [
            escape(worktree["branch"]) if worktree.get("branch") else "[dim](detached)[/dim]",
            escape(worktree["path"]),
            SYMBOL_MAIN_WORKTREE if worktree.get("isMain") else "",
        ]
        if include_status:
            row.append(format_changes(worktree))
        table.add_row(*row)
    return table


def build_branch_table(branches: List[dict]) -> Table:
    """Table with one row per local branch, the current one marked."""
    table = Table()
    for col in BRANCH_COLUMNS:
        table.add_column(col.label, min_width=col.width or None)

    for branch in branches:
        marker = SYMBOL_CURRENT_BRANCH if branch.get("isCurrent") else ""
        name = escape(branch["name"])
        if branch.get("isCurrent"):
            name = f"[bold green]{name}[/bold green]"
        table.add_row(marker, name)
    return table


def render_envelope(console: Console, operation: str, envelope: dict) -> None:
    """Print an envelope in human-readable form."""
    if not envelope.get("success"):
        code = envelope.get("code")
        prefix = f"[{code}] " if code else ""
        console.print(f"[red]Error: {escape(prefix + str(envelope.get('error')))}[/red]", highlight=False)
        if envelope.get("retryable"):
            console.print("[yellow]This error is transient; retrying may succeed.[/yellow]")
        return

    if operation == "createWorktree":
        worktree = envelope["worktree"]
        verb = "Created" if worktree["isNew"] else "Found existing"
        console.print(f"[green]{verb} worktree[/green] {escape(worktree['path'])} for branch {escape(worktree['branch'])}")
    elif operation == "deleteWorktree":
        deleted = envelope["deleted"]
        if deleted["removed"]:
            console.print(f"[green]Removed worktree[/green] {escape(deleted['path'])}")
        else:
            console.print(f"[dim]Worktree {escape(deleted['path'])} was already absent[/dim]")
        if deleted["branchDeleted"]:
            console.print(f"[green]Deleted branch[/green] {escape(deleted['branch'])}")
    elif operation == "listWorktrees":
        worktrees = envelope["worktrees"]
        include_status = envelope.get("includeStatus", False)
        console.print(build_worktree_table(worktrees, include_status))
    elif operation == "worktreeStatus":
        status = envelope["status"]
        if status["hasChanges"]:
            console.print(
                f"[yellow]{status['changedFilesCount']} changed file(s)[/yellow] "
                f"(staged {status['staged']}, modified {status['modified']}, "
                f"untracked {status['untracked']}, conflicted {status['conflicted']})"
            )
        else:
            console.print("[green]Working tree clean[/green]")
    elif operation == "commitWorktree":
        result = envelope["result"]
        if result["committed"]:
            console.print(f"[green]Committed[/green] {result['commitHash']} on {escape(result['branch'] or '(detached)')}")
        else:
            console.print(f"[dim]{result['message']}[/dim]")
    elif operation == "switchBranch":
        console.print(f"[green]{escape(envelope['result']['message'])}[/green]")
    elif operation == "listBranches":
        console.print(build_branch_table(envelope["result"]["branches"]))
    elif operation == "pruneWorktrees":
        pruned = envelope["pruned"]
        if pruned:
            for path in pruned:
                console.print(f"[green]Pruned[/green] {escape(path)}")
        else:
            console.print("[dim]Nothing to prune[/dim]")

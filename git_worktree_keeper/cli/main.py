"""Command-line entry point for git-worktree-keeper"""

import json
import sys
from rich.console import Console

from git_worktree_keeper.api import WorktreeAPI
from git_worktree_keeper.cli.args import parse_args, to_request
from git_worktree_keeper.config import Config
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.formatters import render_envelope
from git_worktree_keeper.utils.logging import setup_logging
from git_worktree_keeper.utils.threading import get_threading_info

console = Console()


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            worktree_dir_name=parsed_args.worktree_dir,
            timeout=parsed_args.timeout,
            force_remove=not getattr(parsed_args, "no_force", False),
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.debug:
            threading_info = get_threading_info()
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print(f"  Python version: {threading_info['python_version']}")
            console.print(f"  Threading mode: {threading_info['mode']}")
            console.print(f"  Optimal workers: {threading_info['optimal_workers']}")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        operation, request = to_request(parsed_args)

        with WorktreeKeeper(config) as keeper:
            envelope = WorktreeAPI(keeper).handle(operation, request)

        if parsed_args.json:
            console.print_json(json.dumps(envelope))
        else:
            render_envelope(console, operation, envelope)

        return 0 if envelope["success"] else 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args is not None and parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Command-line interface for git-worktree-status"""

import os
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_status.cli.args import parse_args
from git_worktree_status.config import Config
from git_worktree_status.core.worktree_status import WorktreeStatus
from git_worktree_status.exceptions import GitWorktreeStatusError
from git_worktree_status.logging_config import get_log_file, setup_logging
from git_worktree_status.services.display_service import DisplayService
from git_worktree_status.services.json_service import render_json
from git_worktree_status.utils.threading import get_threading_info

console = Console()
err_console = Console(stderr=True)


def _print_debug_info(config: Config) -> None:
    threading_info = get_threading_info()
    err_console.print("[yellow]Debug mode enabled[/yellow]")
    err_console.print("[yellow]Threading Information:[/yellow]")
    err_console.print(f"  Python version: {threading_info['python_version']}")
    err_console.print(f"  Threading mode: {threading_info['mode']}")
    err_console.print(f"  CPU count: {threading_info['cpu_count']}")
    err_console.print(f"  Optimal workers: {threading_info['optimal_workers']}")
    err_console.print("[yellow]Configuration:[/yellow]")
    for key, value in config.to_dict().items():
        if key == "github_token" and value:
            value = "***"
        err_console.print(f"  {key}: {value}")
    err_console.print(f"[dim]Log file: {get_log_file()}[/dim]")
    err_console.print("[dim]Note: Debug mode forces sequential processing for readable logs[/dim]")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = None
    try:
        parsed_args = parse_args(argv)

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        config = Config(
            show_branches=parsed_args.branches,
            fetch_ci=parsed_args.ci,
            check_conflicts=parsed_args.conflicts,
            output_format=parsed_args.format,
            max_message_len=parsed_args.max_message_len,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            sequential=parsed_args.sequential,
            workers=parsed_args.workers,
        )

        if config.debug:
            _print_debug_info(config)

        show_progress = config.output_format == "table" and sys.stderr.isatty() and not config.debug
        status = WorktreeStatus(os.getcwd(), config, show_progress=show_progress)
        list_data = status.gather_list_data()

        if list_data is None:
            if config.output_format == "json":
                print("[]")
            else:
                console.print("No worktrees found")
            return 0

        if config.output_format == "json":
            print(render_json(list_data))
        else:
            DisplayService(verbose=config.verbose, console=console).display_list(
                list_data, config.max_message_len
            )
        return 0
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (GitWorktreeStatusError, ValueError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        if parsed_args is not None and parsed_args.debug:
            err_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())

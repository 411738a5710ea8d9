"""Command-line front end: list sessions and projects, launch Claude Code."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from claude_launcher.actions import LaunchActions, copy_command
from claude_launcher.catalog import (
    FileScanner,
    ProjectResolver,
    SessionCatalog,
    filter_sessions,
    find_project,
    find_session,
)
from claude_launcher.config import LaunchConfig
from claude_launcher.exceptions import LauncherError
from claude_launcher.formatting import format_time_ago
from claude_launcher.launcher import TerminalLauncher
from claude_launcher.notifications import ConsoleNotifier

logger = logging.getLogger(__name__)

DOCS_URL = "https://docs.anthropic.com/en/docs/claude-code"


class LauncherCLI:
    """Wires configuration, catalog and launcher together for one invocation"""

    def __init__(
        self,
        config: LaunchConfig,
        console: Console | None = None,
        launcher: TerminalLauncher | None = None,
    ):
        self.config = config
        self.console = console or Console()
        self.catalog = SessionCatalog(config)
        self.resolver = ProjectResolver(
            FileScanner(config.projects_dir, config.max_file_size_bytes), config.max_lines
        )
        self.launcher = launcher or TerminalLauncher(config)
        self.actions = LaunchActions(self.launcher, ConsoleNotifier(self.console))

    async def list_sessions(self, search: str = "", limit: Optional[int] = None) -> int:
        snapshot = await self.catalog.refresh()
        if snapshot is None:
            return 0
        if snapshot.error:
            self.console.print(f"[red]{escape(snapshot.error)}")
            self.console.print(f"[dim]Install Claude Code: {DOCS_URL}")
            return 1

        sessions = filter_sessions(snapshot.sessions, search)
        if limit:
            sessions = sessions[:limit]
        if not snapshot.sessions:
            self.console.print("[yellow]No Claude Code Sessions Found")
            self.console.print("[dim]Start using Claude Code CLI to see your sessions here")
            return 0

        refreshed = snapshot.refreshed_at.astimezone().strftime("%H:%M:%S")
        table = Table(
            title="Claude Code Sessions",
            caption=f"Loaded {len(snapshot.sessions)} sessions in {snapshot.elapsed:.2f}s at {refreshed}",
        )
        table.add_column("Description")
        table.add_column("Directory")
        table.add_column("Last Activity", style="dim i")
        table.add_column("Session ID", style="cyan")
        for session in sessions:
            style = "red" if session.is_error else None
            table.add_row(
                escape(session.description),
                escape(session.directory_name),
                format_time_ago(session.last_activity),
                session.id,
                style=style,
            )
        self.console.print(table)

        if snapshot.budget_exhausted:
            self.console.print("[dim]Session loading stopped early; results may be incomplete.")
        return 0

    async def list_projects(self) -> int:
        projects = await self.resolver.resolve()
        if not projects:
            self.console.print("[yellow]No Claude Code projects found. Start a new session to see projects here.")
            return 0

        table = Table(title="Claude Code Projects")
        table.add_column("Project")
        table.add_column("Path")
        table.add_column("Status")
        table.add_column("Last Activity", style="dim i")
        for project in projects:
            status = "[green]Available" if project.exists_on_disk else "[red]Missing"
            table.add_row(
                escape(project.name),
                escape(project.working_directory),
                status,
                format_time_ago(project.last_activity),
            )
        self.console.print(table)
        return 0

    async def open_project(self, key: str) -> int:
        projects = await self.resolver.resolve()
        project = find_project(projects, key)
        if project is None:
            self.console.print(f"[red]Project '{escape(key)}' not found. Run 'projects' to list them.")
            return 1

        result = await self.actions.open_project(project)
        return 0 if result is not None and result.success else 1

    async def resume(self, session_id: str) -> int:
        snapshot = await self.catalog.refresh()
        if snapshot is None or snapshot.error:
            if snapshot is not None:
                self.console.print(f"[red]{escape(snapshot.error)}")
            return 1

        session = find_session(snapshot.sessions, session_id)
        if session is None:
            self.console.print(f"[red]Session '{escape(session_id)}' not found among recent sessions.")
            return 1

        result = await self.actions.resume_session(session)
        if result is None:
            self.console.print(f"[dim]Run: {escape(copy_command(session, self.config.cli_binary))}")
            return 1
        return 0 if result.success else 1

    async def open_path(self, path: str) -> int:
        result = await self.actions.open_path(path)
        return 0 if result is not None and result.success else 1

    def list_terminals(self) -> int:
        terminals = self.launcher.candidates()
        if not terminals:
            self.console.print("[yellow]No supported terminal application found.")
            return 1
        for index, terminal in enumerate(terminals):
            marker = " [green](default)" if index == 0 else ""
            self.console.print(f"{escape(terminal.name)}{marker}")
        return 0


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claude-launcher",
        description="Browse Claude Code sessions and projects and open them in a terminal",
    )
    parser.add_argument("--projects-dir", type=Path, help="Override ~/.claude/projects")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sessions = subparsers.add_parser("sessions", help="List recent sessions")
    sessions.add_argument("--search", "-s", default="", help="Filter by description or directory")
    sessions.add_argument("--limit", "-n", type=positive_int, help="Show at most N sessions")

    subparsers.add_parser("projects", help="List projects recovered from session logs")

    open_project = subparsers.add_parser("open-project", help="Open Claude Code in a listed project")
    open_project.add_argument("project", help="Project name, full path or project group key")

    resume = subparsers.add_parser("resume", help="Resume a session in a new terminal")
    resume.add_argument("session_id", help="Full session ID or a unique prefix")

    open_parser = subparsers.add_parser("open", help="Open Claude Code on a file or directory")
    open_parser.add_argument("path")

    subparsers.add_parser("terminals", help="List detected terminal applications")
    return parser


async def run_command(cli: LauncherCLI, args: argparse.Namespace) -> int:
    if args.command == "sessions":
        return await cli.list_sessions(args.search, args.limit)
    if args.command == "projects":
        return await cli.list_projects()
    if args.command == "resume":
        return await cli.resume(args.session_id)
    if args.command == "open":
        return await cli.open_path(args.path)
    if args.command == "open-project":
        return await cli.open_project(args.project)
    return cli.list_terminals()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    config = LaunchConfig.from_env(projects_dir=args.projects_dir)
    cli = LauncherCLI(config)
    try:
        return asyncio.run(run_command(cli, args))
    except LauncherError as e:
        cli.console.print(f"[red]Error: {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

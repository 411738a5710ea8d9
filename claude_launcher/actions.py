"""
User-level launch actions: resume a session, open a project, open a path.

Each action builds the command, hands it to the TerminalLauncher and reports
the outcome through a Notifier. Callers get the LaunchResult back (or None
when the action was refused) but never an exception.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from claude_launcher.formatting import directory_name
from claude_launcher.launcher import TerminalLauncher, build_command, manual_command
from claude_launcher.models import LaunchCommand, LaunchResult, Project, Session
from claude_launcher.notifications import Notifier

logger = logging.getLogger(__name__)

LOGIN_COMMAND = "claude login"


def resume_command(session: Session, cli_binary: str = "claude") -> LaunchCommand:
    directory = os.path.expanduser(session.directory)
    return build_command(directory, session_id=session.id, cli_binary=cli_binary)


def copy_command(session: Session, cli_binary: str = "claude") -> str:
    """Text offered for the clipboard for a session"""
    if session.is_error:
        return LOGIN_COMMAND
    return manual_command(resume_command(session, cli_binary))


def target_directory(path: str) -> str:
    """Directory to cd into for a path: the path itself or its parent for files"""
    candidate = Path(path).expanduser()
    if candidate.is_dir():
        return str(candidate)
    return str(candidate.parent)


class LaunchActions:
    """Launch flows shared by every front end"""

    def __init__(self, launcher: TerminalLauncher, notifier: Notifier):
        self.launcher = launcher
        self.notifier = notifier

    @property
    def cli_binary(self) -> str:
        return self.launcher.config.cli_binary

    async def resume_session(self, session: Session) -> Optional[LaunchResult]:
        if session.is_error:
            self.notifier.failure(
                "Session Error",
                "This session failed due to authentication issues. Run 'claude login' to fix.",
            )
            return None

        command = resume_command(session, self.cli_binary)
        return await self._launch(command, f"Claude Code session in {session.directory_name}")

    async def open_project(self, project: Project) -> Optional[LaunchResult]:
        if not project.exists_on_disk:
            self.notifier.failure(
                "Project Not Found",
                f"The project path {project.working_directory} no longer exists",
            )
            return None

        command = build_command(
            project.working_directory,
            add_dir=project.working_directory,
            cli_binary=self.cli_binary,
        )
        return await self._launch(command, project.name)

    async def open_path(self, path: str) -> Optional[LaunchResult]:
        expanded = str(Path(path).expanduser())
        if not os.path.exists(expanded):
            self.notifier.failure("Path Not Found", f"{expanded} does not exist")
            return None

        command = build_command(
            target_directory(expanded), add_dir=expanded, cli_binary=self.cli_binary
        )
        return await self._launch(command, directory_name(expanded))

    async def _launch(self, command: LaunchCommand, label: str) -> LaunchResult:
        result = await self.launcher.launch(command)
        if result.success:
            self.notifier.success("Launched", f"{label} opened in {result.terminal_used}")
        else:
            logger.info(f"Falling back to manual command for {label}: {result.error}")
            self.notifier.failure(
                "Could not open a terminal",
                f"Run manually: {result.manual_command}",
            )
        return result

"""
Hands a Claude Code command line to a terminal application.

AppleScript terminals run through `osascript -e <script>` passed as argv, so
the only quoting layers are the shell string and the AppleScript literal.
Launch failures are returned as a LaunchResult carrying the manual command;
nothing here raises to the caller.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

from claude_launcher.config import LaunchConfig
from claude_launcher.exceptions import TerminalLaunchError
from claude_launcher.models import LaunchCommand, LaunchResult

from .escaping import manual_command, render_shell_command
from .terminals import TerminalApp, TerminalProbe

logger = logging.getLogger(__name__)

Runner = Callable[[TerminalApp, List[str]], Awaitable[None]]

# How long a non-AppleScript terminal is watched for an immediate failure
STARTUP_WINDOW_SECONDS = 1.0


class TerminalLauncher:
    """Launches commands in the first terminal that accepts them."""

    def __init__(
        self,
        config: LaunchConfig | None = None,
        probe: TerminalProbe | None = None,
        runner: Optional[Runner] = None,
    ):
        self.config = config or LaunchConfig()
        self.probe = probe or TerminalProbe()
        self.runner = runner or self._run_terminal

    def candidates(self) -> List[TerminalApp]:
        return self.probe.available(self.config.preferred_terminal)

    async def launch(self, command: LaunchCommand) -> LaunchResult:
        """Run the command in a new terminal window."""
        shell_line = render_shell_command(command)
        fallback = manual_command(command)
        terminals = self.candidates()

        if not terminals:
            logger.warning("No supported terminal application found")
            return LaunchResult(
                success=False,
                manual_command=fallback,
                error="No supported terminal application found",
            )

        errors: List[str] = []
        for terminal in terminals:
            argv = terminal.build_argv(shell_line)
            logger.info(f"Launching Claude Code in {terminal.name} (cwd: {command.working_directory})")
            try:
                await self.runner(terminal, argv)
            except TerminalLaunchError as e:
                logger.warning(f"Terminal launch failed: {e}")
                errors.append(str(e))
                continue
            return LaunchResult(success=True, manual_command=fallback, terminal_used=terminal.name)

        return LaunchResult(success=False, manual_command=fallback, error="; ".join(errors))

    async def _run_terminal(self, terminal: TerminalApp, argv: Sequence[str]) -> None:
        """Spawn one terminal; raises TerminalLaunchError on any failure"""
        if terminal.uses_applescript:
            await self._run_osascript(terminal, argv)
            return

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            raise TerminalLaunchError(terminal.name, str(e)) from e

        window = min(STARTUP_WINDOW_SECONDS, self.config.spawn_timeout_seconds)
        try:
            returncode = await asyncio.wait_for(process.wait(), timeout=window)
        except asyncio.TimeoutError:
            # Still running after the window, so the terminal came up
            return

        if returncode != 0:
            raise TerminalLaunchError(terminal.name, f"exited with code {returncode} at startup")

    async def _run_osascript(self, terminal: TerminalApp, argv: Sequence[str]) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            raise TerminalLaunchError(terminal.name, str(e)) from e

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.spawn_timeout_seconds
            )
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise TerminalLaunchError(terminal.name, "osascript timed out") from e

        if process.returncode != 0:
            detail = stderr.decode(errors="replace").strip() or f"exit code {process.returncode}"
            raise TerminalLaunchError(terminal.name, f"osascript failed: {detail}")

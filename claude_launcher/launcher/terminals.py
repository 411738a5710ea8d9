"""Terminal applications the launcher knows how to drive, in preference order."""

import os
import platform
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .escaping import applescript_escape

APPLICATION_DIRS = (
    Path("/Applications"),
    Path("/System/Applications/Utilities"),
    Path("/Applications/Utilities"),
    Path.home() / "Applications",
)


@dataclass(frozen=True)
class TerminalApp:
    """One terminal application and how to hand it a shell line."""
    name: str
    # macOS bundle name ("iTerm.app") or executable looked up on PATH
    locator: str
    uses_applescript: bool
    # Arguments placed before "bash -c <line>" for non-AppleScript terminals
    exec_args: Tuple[str, ...] = ("-e",)

    def build_argv(self, shell_line: str) -> List[str]:
        """Turn an already shell-escaped line into process arguments"""
        if self.uses_applescript:
            return ["osascript", "-e", self.applescript(shell_line)]
        return [self.locator, *self.exec_args, "bash", "-c", shell_line]

    def applescript(self, shell_line: str) -> str:
        script_line = applescript_escape(shell_line)
        if self.name == "iTerm":
            return (
                'tell application "iTerm"\n'
                '    activate\n'
                '    set newWindow to (create window with default profile)\n'
                '    tell current session of newWindow\n'
                f'        write text "{script_line}"\n'
                '    end tell\n'
                'end tell'
            )
        return (
            f'tell application "{self.name}"\n'
            '    activate\n'
            f'    do script "{script_line}"\n'
            'end tell'
        )


MACOS_TERMINALS: Tuple[TerminalApp, ...] = (
    TerminalApp("iTerm", "iTerm.app", uses_applescript=True),
    TerminalApp("Terminal", "Terminal.app", uses_applescript=True),
)

LINUX_TERMINALS: Tuple[TerminalApp, ...] = (
    TerminalApp("gnome-terminal", "gnome-terminal", uses_applescript=False, exec_args=("--",)),
    TerminalApp("konsole", "konsole", uses_applescript=False),
    TerminalApp("xfce4-terminal", "xfce4-terminal", uses_applescript=False, exec_args=("-x",)),
    TerminalApp("xterm", "xterm", uses_applescript=False),
)


class TerminalProbe:
    """Finds installed terminals; the first available one is the default."""

    def __init__(
        self,
        system: Optional[str] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
        path_exists: Callable[[str], bool] = os.path.exists,
        application_dirs: Sequence[Path] = APPLICATION_DIRS,
    ):
        self.system = system or platform.system()
        self.which = which
        self.path_exists = path_exists
        self.application_dirs = application_dirs

    def known_terminals(self) -> Tuple[TerminalApp, ...]:
        return MACOS_TERMINALS if self.system == "Darwin" else LINUX_TERMINALS

    def is_installed(self, terminal: TerminalApp) -> bool:
        if terminal.uses_applescript:
            if self.which("osascript") is None:
                return False
            return any(self.path_exists(str(d / terminal.locator)) for d in self.application_dirs)
        return self.which(terminal.locator) is not None

    def available(self, preferred: Optional[str] = None) -> List[TerminalApp]:
        """Installed terminals in fixed preference order, the preferred one first"""
        found = [t for t in self.known_terminals() if self.is_installed(t)]
        if preferred:
            wanted = preferred.lower()
            found.sort(key=lambda t: t.name.lower() != wanted)
        return found

    def default(self, preferred: Optional[str] = None) -> Optional[TerminalApp]:
        found = self.available(preferred)
        return found[0] if found else None

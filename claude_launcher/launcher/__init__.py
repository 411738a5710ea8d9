"""Terminal command construction and launching"""

from .escaping import (
    applescript_escape,
    build_command,
    manual_command,
    render_shell_command,
    shell_escape,
)
from .terminal_launcher import TerminalLauncher
from .terminals import TerminalApp, TerminalProbe

__all__ = [
    "TerminalApp",
    "TerminalLauncher",
    "TerminalProbe",
    "applescript_escape",
    "build_command",
    "manual_command",
    "render_shell_command",
    "shell_escape",
]

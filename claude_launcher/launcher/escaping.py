"""
Command construction and quoting for terminal launches.

A launch goes through three separate steps:
    build_command()         -> logical LaunchCommand, nothing escaped
    render_shell_command()  -> POSIX line, values escaped with shell_escape()
    applescript_escape()    -> that line made safe inside an AppleScript string

Each layer escapes exactly once. Never feed the output of one layer back
into the same layer.

AppleScript terminals type the shell line into an interactive shell, where
bash and zsh still apply history expansion to `!` inside double quotes.
shell_escape() leaves the double quotes around each `!` and single-quotes it
instead, so `wow!proj` becomes `wow"'!'"proj`.
"""

from typing import Optional

from claude_launcher.models import LaunchCommand

RESUME_FLAG = "-r"
ADD_DIR_FLAG = "--add-dir"

# Characters that keep a special meaning inside a double-quoted POSIX string
_SHELL_SPECIALS = ('"', "$", "`")


def build_command(
    directory: str,
    session_id: Optional[str] = None,
    add_dir: Optional[str] = None,
    cli_binary: str = "claude",
) -> LaunchCommand:
    """Describe `cd <directory> && <cli> [flag value]` without escaping anything"""
    if session_id and add_dir:
        raise ValueError("A launch either resumes a session or adds a directory, not both")
    if session_id:
        return LaunchCommand(directory, cli_binary, RESUME_FLAG, session_id)
    if add_dir:
        return LaunchCommand(directory, cli_binary, ADD_DIR_FLAG, add_dir)
    return LaunchCommand(directory, cli_binary)


def shell_escape(value: str) -> str:
    """Escape a value for use between double quotes in sh/bash/zsh"""
    escaped = value.replace("\\", "\\\\")
    for char in _SHELL_SPECIALS:
        escaped = escaped.replace(char, "\\" + char)
    return escaped.replace("!", "\"'!'\"")


def applescript_escape(value: str) -> str:
    """Escape a value for use inside an AppleScript string literal"""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_shell_command(command: LaunchCommand) -> str:
    """Render the shell line with every untrusted value quoted"""
    line = f'cd "{shell_escape(command.working_directory)}" && {command.cli_binary}'
    if command.flag and command.value is not None:
        line += f' {command.flag} "{shell_escape(command.value)}"'
    return line


def manual_command(command: LaunchCommand) -> str:
    """The line a user can paste into a shell when automatic launch fails"""
    return render_shell_command(command)

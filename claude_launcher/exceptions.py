"""Exception hierarchy for the Claude Code launcher"""


class LauncherError(Exception):
    """Base class for recoverable launcher failures"""


class ProjectsDirectoryError(LauncherError):
    """The Claude Code projects directory is missing or cannot be listed"""

    def __init__(self, projects_dir, reason: str = ""):
        self.projects_dir = projects_dir
        self.reason = reason
        message = f"Cannot read Claude Code projects directory {projects_dir}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class TerminalLaunchError(LauncherError):
    """A single terminal application failed to start the command"""

    def __init__(self, terminal: str, reason: str):
        self.terminal = terminal
        self.reason = reason
        super().__init__(f"{terminal}: {reason}")

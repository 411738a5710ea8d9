"""
Value types shared by the catalog, the project resolver and the launcher.

Everything here is produced by a single scan or refresh pass and is never
mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional

from claude_launcher.formatting import directory_name

DEFAULT_DESCRIPTION = "Claude Code Session"
HOME_SENTINEL = "~"
ERROR_MARKER = "❌ "


@dataclass(frozen=True)
class LogFileHandle:
    """A candidate session log found by the scanner."""
    path: Path
    size: int
    modified_time: datetime

    @property
    def group_key(self) -> str:
        """Name of the project-group directory holding this file."""
        return self.path.parent.name


class RecordKind(str, Enum):
    """Shape of one decoded log line."""
    HEADER = "header"
    SUMMARY = "summary"
    MESSAGE = "message"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class LogRecord:
    """One JSON-lines entry. Every payload field is optional."""
    kind: RecordKind
    session_id: Optional[str] = None
    cwd: Optional[str] = None
    timestamp: Optional[datetime] = None
    summary: Optional[str] = None
    content: object = None

    @property
    def is_valid(self) -> bool:
        return self.kind is not RecordKind.UNRECOGNIZED


UNRECOGNIZED = LogRecord(kind=RecordKind.UNRECOGNIZED)


@dataclass(frozen=True)
class Session:
    """Best-effort summary of one Claude Code session log."""
    id: str
    description: str
    directory: str
    created_at: datetime
    last_activity: datetime
    source_file: Path
    is_error: bool = False

    @property
    def directory_name(self) -> str:
        return directory_name(self.directory)


@dataclass(frozen=True)
class Project:
    """A working directory recovered from a project group's logs."""
    name: str
    working_directory: str
    last_activity: datetime
    exists_on_disk: bool
    source_group_key: str


@dataclass(frozen=True)
class CatalogSnapshot:
    """Result of one catalog refresh, published atomically."""
    sessions: List[Session] = field(default_factory=list)
    error: Optional[str] = None
    budget_exhausted: bool = False
    elapsed: float = 0.0
    refreshed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class LaunchCommand:
    """Logical command line before any escaping is applied."""
    working_directory: str
    cli_binary: str = "claude"
    flag: Optional[str] = None  # '-r' or '--add-dir'
    value: Optional[str] = None


@dataclass(frozen=True)
class LaunchResult:
    """Outcome of handing a command to a terminal application."""
    success: bool
    manual_command: str
    terminal_used: Optional[str] = None
    error: Optional[str] = None

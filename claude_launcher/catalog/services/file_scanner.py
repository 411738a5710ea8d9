"""File discovery and enumeration for Claude Code session logs"""

import asyncio
import logging
import os
from collections import defaultdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from claude_launcher.exceptions import ProjectsDirectoryError
from claude_launcher.models import LogFileHandle

logger = logging.getLogger(__name__)

LOG_EXTENSION = ".jsonl"
DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024


class FileScanner:
    """Collects session log files from <projects_dir>/<group>/*.jsonl"""

    def __init__(self, projects_dir: Path | None = None, max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.projects_dir = projects_dir or Path.home() / ".claude" / "projects"
        self.max_file_size = max_file_size

    async def scan(self) -> List[LogFileHandle]:
        """Return a handle for every log file one level below the projects directory.

        Raises ProjectsDirectoryError only when the projects directory itself
        cannot be listed. Unreadable groups and files are skipped.
        """
        return await asyncio.to_thread(self._scan_sync)

    async def group_files(self) -> Dict[str, List[LogFileHandle]]:
        """Scan and bucket handles by project-group directory name"""
        groups: Dict[str, List[LogFileHandle]] = defaultdict(list)
        for handle in await self.scan():
            groups[handle.group_key].append(handle)
        return dict(groups)

    def _scan_sync(self) -> List[LogFileHandle]:
        try:
            group_entries = list(os.scandir(self.projects_dir))
        except OSError as e:
            raise ProjectsDirectoryError(self.projects_dir, e.strerror or str(e)) from e

        handles: List[LogFileHandle] = []
        for group in group_entries:
            if group.name.startswith("."):
                continue
            try:
                if not group.is_dir():
                    continue
                file_entries = list(os.scandir(group.path))
            except OSError as e:
                logger.debug(f"Skipping unreadable project directory {group.path}: {e}")
                continue

            for entry in file_entries:
                if not entry.name.endswith(LOG_EXTENSION):
                    continue
                handle = self._stat_entry(entry)
                if handle is not None:
                    handles.append(handle)

        return handles

    def _stat_entry(self, entry: os.DirEntry) -> LogFileHandle | None:
        try:
            if not entry.is_file():
                return None
            stats = entry.stat()
        except OSError as e:
            logger.debug(f"Cannot stat {entry.path}: {e}")
            return None

        if stats.st_size > self.max_file_size:
            logger.info(
                f"Skipping large file: {entry.path} ({stats.st_size / 1024 / 1024:.1f}MB)"
            )
            return None

        return LogFileHandle(
            path=Path(entry.path),
            size=stats.st_size,
            modified_time=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
        )


def newest_first(handles: List[LogFileHandle]) -> List[LogFileHandle]:
    """Sort handles by modification time, newest first"""
    return sorted(handles, key=lambda h: h.modified_time, reverse=True)

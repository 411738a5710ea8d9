"""Recover a working directory for every Claude Code project group"""

import asyncio
import logging
import os
from itertools import islice
from pathlib import Path
from typing import Callable, List, Optional

from claude_launcher.exceptions import ProjectsDirectoryError
from claude_launcher.models import LogFileHandle, Project

from .file_scanner import FileScanner, newest_first
from .jsonl_reader import DEFAULT_MAX_LINES, decode_line

logger = logging.getLogger(__name__)


class ProjectResolver:
    """Maps each project group to the cwd recorded in its newest usable log"""

    def __init__(
        self,
        file_scanner: FileScanner | None = None,
        max_lines: int = DEFAULT_MAX_LINES,
        path_exists: Callable[[str], bool] = os.path.exists,
    ):
        self.file_scanner = file_scanner or FileScanner()
        self.max_lines = max_lines
        self.path_exists = path_exists

    async def resolve(self) -> List[Project]:
        """Build the project list, most recently active first.

        Raises ProjectsDirectoryError when the projects directory is missing.
        """
        try:
            groups = await self.file_scanner.group_files()
        except ProjectsDirectoryError as e:
            raise ProjectsDirectoryError(
                e.projects_dir,
                "Claude Code projects directory not found. Have you used Claude Code before?",
            ) from e

        projects: List[Project] = []
        for group_key, handles in groups.items():
            project = await self._resolve_group(group_key, handles)
            if project is not None:
                projects.append(project)
            else:
                logger.debug(f"No working directory recovered for project group {group_key}")

        projects.sort(key=lambda p: p.last_activity, reverse=True)
        return projects

    async def _resolve_group(self, group_key: str, handles: List[LogFileHandle]) -> Optional[Project]:
        for handle in newest_first(handles):
            working_directory = await asyncio.to_thread(self.extract_working_directory, handle.path)
            if working_directory:
                return Project(
                    name=Path(working_directory).name or working_directory,
                    working_directory=working_directory,
                    last_activity=handle.modified_time,
                    exists_on_disk=self.path_exists(working_directory),
                    source_group_key=group_key,
                )
        return None

    def extract_working_directory(self, path: Path) -> Optional[str]:
        """Return the first cwd that is neither empty nor the filesystem root"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                lines = (line for line in f if line.strip())
                for line in islice(lines, self.max_lines):
                    record = decode_line(line)
                    if record.cwd and record.cwd != "/":
                        return record.cwd
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read {path}: {e}")
        return None

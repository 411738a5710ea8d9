"""Claude Code session catalog orchestration"""

import logging
import time
from dataclasses import replace
from typing import Callable, List, Optional

from claude_launcher.config import LaunchConfig
from claude_launcher.exceptions import ProjectsDirectoryError
from claude_launcher.models import CatalogSnapshot, Project, Session

from .services import FileScanner, JsonlReader, ProjectResolver, newest_first

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = (
    "Failed to load Claude Code sessions. "
    "Make sure Claude Code CLI is installed and has been used."
)


class SessionCatalog:
    """Builds the ranked list of recent sessions under a wall-clock budget.

    One refresh runs at a time; a refresh requested while another is in
    flight returns None without touching the filesystem. The last published
    snapshot survives a failed refresh.
    """

    def __init__(
        self,
        config: LaunchConfig | None = None,
        file_scanner: FileScanner | None = None,
        reader: JsonlReader | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or LaunchConfig()
        self.file_scanner = file_scanner or FileScanner(
            self.config.projects_dir, self.config.max_file_size_bytes
        )
        self.reader = reader or JsonlReader(self.config.max_lines)
        self.clock = clock
        self.is_loading = False
        self.snapshot = CatalogSnapshot()

    @property
    def sessions(self) -> List[Session]:
        return self.snapshot.sessions

    async def refresh(self) -> Optional[CatalogSnapshot]:
        """Rebuild the session list and publish it; None if a refresh is already running"""
        if self.is_loading:
            logger.debug("Catalog refresh already in progress, ignoring request")
            return None

        self.is_loading = True
        try:
            snapshot = await self._load()
        finally:
            self.is_loading = False

        if snapshot.error:
            # Keep the last good session list visible alongside the error
            snapshot = replace(snapshot, sessions=self.snapshot.sessions)
        self.snapshot = snapshot
        return snapshot

    def _budget_exceeded(self, start: float) -> bool:
        return self.clock() - start > self.config.budget_seconds

    async def _load(self) -> CatalogSnapshot:
        start = self.clock()
        logger.info("Starting catalog refresh")

        if self._budget_exceeded(start):
            return CatalogSnapshot(budget_exhausted=True)

        try:
            candidates = await self.file_scanner.scan()
        except ProjectsDirectoryError as e:
            logger.warning(f"Error reading Claude projects directory: {e}")
            return CatalogSnapshot(error=LOAD_FAILED_MESSAGE)

        recent = newest_first(candidates)[: self.config.recent_file_limit]
        logger.debug(f"Loading {len(recent)} most recent of {len(candidates)} session files")

        sessions: List[Session] = []
        budget_exhausted = False
        # Sequential on purpose: only one file's content is resident at a time
        for handle in recent:
            if self._budget_exceeded(start):
                logger.info(f"Budget of {self.config.budget_seconds}s reached, stopping session loading")
                budget_exhausted = True
                break

            session = await self.reader.parse(handle)
            if session is None:
                logger.debug(f"No session recovered from {handle.path.name}")
                continue
            sessions.append(session)

        elapsed = self.clock() - start
        logger.info(f"Loaded {len(sessions)} sessions in {elapsed:.3f}s")
        return CatalogSnapshot(
            sessions=sessions,
            budget_exhausted=budget_exhausted,
            elapsed=elapsed,
        )


def filter_sessions(sessions: List[Session], query: str) -> List[Session]:
    """Case-insensitive search over description and directory"""
    if not query:
        return list(sessions)
    needle = query.lower()
    return [
        s for s in sessions
        if needle in s.description.lower()
        or needle in s.directory.lower()
        or needle in s.directory_name.lower()
    ]


def find_session(sessions: List[Session], session_id: str) -> Optional[Session]:
    """Find by exact id, falling back to a unique prefix match"""
    for session in sessions:
        if session.id == session_id:
            return session
    matches = [s for s in sessions if s.id.startswith(session_id)]
    return matches[0] if len(matches) == 1 else None


def find_project(projects: List[Project], key: str) -> Optional[Project]:
    """Find by group key or full path, falling back to a unique project name"""
    for project in projects:
        if key in (project.source_group_key, project.working_directory):
            return project
    matches = [p for p in projects if p.name == key]
    return matches[0] if len(matches) == 1 else None


__all__ = [
    "SessionCatalog",
    "FileScanner",
    "JsonlReader",
    "ProjectResolver",
    "filter_sessions",
    "find_project",
    "find_session",
]

"""Shared fixtures for launcher tests"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pytest

from claude_launcher.exceptions import TerminalLaunchError
from claude_launcher.models import LogFileHandle

SESSION_ID = "0f3c2a9e-5b7d-4e21-9a6c-1d2e3f4a5b6c"


def write_log(path: Path, lines: List[object], mtime: Optional[float] = None) -> Path:
    """Write a JSONL file; dict entries are serialized, strings written verbatim"""
    path.parent.mkdir(parents=True, exist_ok=True)
    rendered = [json.dumps(line) if isinstance(line, dict) else line for line in lines]
    path.write_text("\n".join(rendered) + "\n", encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def make_handle(path: Path, mtime: float = 1_700_000_000.0) -> LogFileHandle:
    return LogFileHandle(
        path=path,
        size=path.stat().st_size if path.exists() else 0,
        modified_time=datetime.fromtimestamp(mtime, tz=timezone.utc),
    )


class RecordingNotifier:
    """Notifier that keeps every event for assertions"""

    def __init__(self):
        self.events = []

    def success(self, title, message):
        self.events.append(("success", title, message))

    def failure(self, title, message):
        self.events.append(("failure", title, message))


class FakeRunner:
    """Stands in for process spawning; fails for the named terminals"""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def __call__(self, terminal, argv):
        self.calls.append((terminal.name, list(argv)))
        if terminal.name in self.failing:
            raise TerminalLaunchError(terminal.name, "osascript failed: boom")


@pytest.fixture
def projects_dir(tmp_path):
    root = tmp_path / "projects"
    root.mkdir()
    return root


@pytest.fixture
def notifier():
    return RecordingNotifier()

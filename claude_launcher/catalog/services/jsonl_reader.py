"""JSONL decoding and session-summary folding for Claude Code logs"""

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import islice
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from claude_launcher.models import (
    DEFAULT_DESCRIPTION,
    ERROR_MARKER,
    HOME_SENTINEL,
    UNRECOGNIZED,
    LogFileHandle,
    LogRecord,
    RecordKind,
    Session,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 500
MAX_DESCRIPTION_SOURCE = 199
DESCRIPTION_PREVIEW = 100
AUTH_FAILURE_MARKERS = ("Invalid API key", "Please run /login")

_FILENAME_ID_PATTERN = re.compile(r"([a-f0-9-]{36})\.jsonl$")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Convert an ISO-8601 string to an aware datetime; naive values are taken as UTC"""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def decode_line(line: str) -> LogRecord:
    """Decode one log line into a tagged record. Never raises."""
    try:
        data = json.loads(line)
    except (ValueError, RecursionError):
        return UNRECOGNIZED
    if not isinstance(data, dict):
        return UNRECOGNIZED

    message = data.get("message")
    content = message.get("content") if isinstance(message, dict) else None

    if data.get("type") == "summary":
        kind = RecordKind.SUMMARY
    elif content:
        kind = RecordKind.MESSAGE
    else:
        kind = RecordKind.HEADER

    return LogRecord(
        kind=kind,
        session_id=_optional_str(data.get("sessionId")),
        cwd=_optional_str(data.get("cwd")),
        timestamp=parse_timestamp(data.get("timestamp")),
        summary=_optional_str(data.get("summary")),
        content=content,
    )


def iter_lines(text: str, max_lines: int) -> Iterator[str]:
    """Yield at most max_lines non-blank lines"""
    non_blank = (line for line in text.split("\n") if line.strip())
    return islice(non_blank, max_lines)


def session_id_from_filename(path: Path) -> Optional[str]:
    match = _FILENAME_ID_PATTERN.search(path.name)
    return match.group(1) if match else None


@dataclass
class _SessionFold:
    """Running state while folding one file's records"""
    session_id: str = ""
    directory: str = ""
    created_at: Optional[datetime] = None
    last_activity: Optional[datetime] = None
    description: str = DEFAULT_DESCRIPTION
    valid_records: int = 0
    # Only summaries can flag an auth failure; once set it stays set
    is_error: bool = False

    def add(self, record: LogRecord) -> None:
        if not record.is_valid:
            return
        self.valid_records += 1

        # The first identified line seeds identity; later lines never override it
        if not self.session_id and record.session_id:
            self.session_id = record.session_id
            self.directory = record.cwd or ""
            self.created_at = record.timestamp

        if record.timestamp is not None:
            if self.last_activity is None or record.timestamp > self.last_activity:
                self.last_activity = record.timestamp

        if record.kind is RecordKind.SUMMARY:
            if record.summary:
                self.description = record.summary
                if any(marker in record.summary for marker in AUTH_FAILURE_MARKERS):
                    self.is_error = True
        elif record.kind is RecordKind.MESSAGE and self.description == DEFAULT_DESCRIPTION:
            content = record.content
            if isinstance(content, str) and 0 < len(content) <= MAX_DESCRIPTION_SOURCE:
                self.description = content[:DESCRIPTION_PREVIEW]
                if len(content) > DESCRIPTION_PREVIEW:
                    self.description += "..."


class JsonlReader:
    """Reads a session log and folds it into a best-effort Session"""

    def __init__(self, max_lines: int = DEFAULT_MAX_LINES):
        self.max_lines = max_lines

    def parse_records(self, records: Iterable[LogRecord], handle: LogFileHandle) -> Optional[Session]:
        """Fold decoded records into a Session, or None when no identity is recoverable"""
        fold = _SessionFold()
        for record in records:
            fold.add(record)

        if fold.valid_records == 0:
            return None

        session_id = fold.session_id or session_id_from_filename(handle.path)
        if not session_id:
            logger.debug(f"No sessionId found in content or filename for: {handle.path.name}")
            return None
        if not fold.session_id:
            logger.debug(f"Extracted sessionId from filename: {session_id}")

        description = fold.description
        directory = fold.directory
        is_error = fold.is_error
        if is_error:
            description = ERROR_MARKER + description

        created_at = fold.created_at or handle.modified_time
        last_activity = fold.last_activity or created_at

        return Session(
            id=session_id,
            description=description,
            directory=directory or HOME_SENTINEL,
            created_at=created_at,
            last_activity=last_activity,
            source_file=handle.path,
            is_error=is_error,
        )

    def parse_text(self, text: str, handle: LogFileHandle) -> Optional[Session]:
        """Parse already-decoded file content"""
        records = (decode_line(line) for line in iter_lines(text, self.max_lines))
        return self.parse_records(records, handle)

    def parse_bytes(self, data: bytes, handle: LogFileHandle) -> Optional[Session]:
        """Parse raw file bytes; undecodable content yields no session"""
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.debug(f"Cannot decode {handle.path.name}: {e}")
            return None
        return self.parse_text(text, handle)

    async def parse(self, handle: LogFileHandle) -> Optional[Session]:
        """Read and parse one log file. Never raises."""
        try:
            data = await asyncio.to_thread(handle.path.read_bytes)
        except OSError as e:
            logger.debug(f"Cannot read {handle.path}: {e}")
            return None
        return self.parse_bytes(data, handle)

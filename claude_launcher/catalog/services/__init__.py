"""Claude Code session log services"""

from .file_scanner import FileScanner, newest_first
from .jsonl_reader import JsonlReader, decode_line, parse_timestamp
from .project_resolver import ProjectResolver

__all__ = [
    "FileScanner",
    "JsonlReader",
    "ProjectResolver",
    "decode_line",
    "newest_first",
    "parse_timestamp",
]

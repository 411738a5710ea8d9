"""
Tests for session log discovery.

The scanner walks exactly two levels (projects dir -> group dir -> files)
and must tolerate unreadable entries while failing loudly only for a bad root.
"""

import asyncio
import os

import pytest

from claude_launcher.catalog.services import FileScanner, newest_first
from claude_launcher.exceptions import ProjectsDirectoryError
from conftest import SESSION_ID, write_log


class TestFileScanner:
    """Test candidate collection and filtering."""

    def test_collects_jsonl_files_from_group_directories(self, projects_dir):
        """Only .jsonl files one level below the root are returned."""
        write_log(projects_dir / "-Users-x-proj" / f"{SESSION_ID}.jsonl", [{"sessionId": "a"}])
        write_log(projects_dir / "-Users-x-other" / "b.jsonl", [{"sessionId": "b"}])
        (projects_dir / "-Users-x-proj" / "notes.txt").write_text("ignored")
        write_log(projects_dir / "stray.jsonl", [{"sessionId": "root-level"}])

        handles = asyncio.run(FileScanner(projects_dir).scan())

        names = sorted(h.path.name for h in handles)
        assert names == [f"{SESSION_ID}.jsonl", "b.jsonl"]
        assert all(h.size > 0 for h in handles)

    def test_does_not_recurse_deeper_than_group_level(self, projects_dir):
        """Logs nested below a group directory are not candidates."""
        write_log(projects_dir / "group" / "nested" / "deep.jsonl", [{"sessionId": "deep"}])
        write_log(projects_dir / "group" / "top.jsonl", [{"sessionId": "top"}])

        handles = asyncio.run(FileScanner(projects_dir).scan())

        assert [h.path.name for h in handles] == ["top.jsonl"]

    def test_skips_hidden_group_directories(self, projects_dir):
        """Entries such as .DS_Store or hidden folders are ignored."""
        write_log(projects_dir / ".cache" / "a.jsonl", [{"sessionId": "a"}])
        (projects_dir / ".DS_Store").write_text("")

        assert asyncio.run(FileScanner(projects_dir).scan()) == []

    def test_oversized_files_are_skipped(self, projects_dir):
        """Files above the size threshold are dropped without being read."""
        write_log(projects_dir / "group" / "small.jsonl", [{"sessionId": "s"}])
        write_log(projects_dir / "group" / "large.jsonl", [{"sessionId": "l", "pad": "x" * 500}])

        handles = asyncio.run(FileScanner(projects_dir, max_file_size=100).scan())

        assert [h.path.name for h in handles] == ["small.jsonl"]

    def test_missing_root_raises_projects_directory_error(self, tmp_path):
        """A root that cannot be listed is the only hard failure."""
        scanner = FileScanner(tmp_path / "does-not-exist")

        with pytest.raises(ProjectsDirectoryError):
            asyncio.run(scanner.scan())

    def test_root_that_is_a_file_raises(self, tmp_path):
        """A regular file in place of the root is reported, not crashed on."""
        root = tmp_path / "projects"
        root.write_text("not a directory")

        with pytest.raises(ProjectsDirectoryError):
            asyncio.run(FileScanner(root).scan())

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_unreadable_group_is_skipped(self, projects_dir):
        """A group directory without read permission does not abort the scan."""
        write_log(projects_dir / "readable" / "a.jsonl", [{"sessionId": "a"}])
        locked = projects_dir / "locked"
        write_log(locked / "b.jsonl", [{"sessionId": "b"}])
        locked.chmod(0)
        try:
            handles = asyncio.run(FileScanner(projects_dir).scan())
        finally:
            locked.chmod(0o755)

        assert [h.path.name for h in handles] == ["a.jsonl"]

    def test_group_files_buckets_by_directory_name(self, projects_dir):
        """Handles are grouped under their parent directory name."""
        write_log(projects_dir / "alpha" / "1.jsonl", [{"sessionId": "1"}])
        write_log(projects_dir / "alpha" / "2.jsonl", [{"sessionId": "2"}])
        write_log(projects_dir / "beta" / "3.jsonl", [{"sessionId": "3"}])

        groups = asyncio.run(FileScanner(projects_dir).group_files())

        assert sorted(groups) == ["alpha", "beta"]
        assert len(groups["alpha"]) == 2
        assert groups["beta"][0].group_key == "beta"

    def test_newest_first_orders_by_modified_time(self, projects_dir):
        """Callers sort explicitly; newest_first puts the latest mtime first."""
        write_log(projects_dir / "g" / "old.jsonl", [{"sessionId": "o"}], mtime=1_000_000)
        write_log(projects_dir / "g" / "new.jsonl", [{"sessionId": "n"}], mtime=2_000_000)
        write_log(projects_dir / "g" / "mid.jsonl", [{"sessionId": "m"}], mtime=1_500_000)

        handles = asyncio.run(FileScanner(projects_dir).scan())

        assert [h.path.name for h in newest_first(handles)] == ["new.jsonl", "mid.jsonl", "old.jsonl"]

"""
Claude Code launcher.

Browses Claude Code sessions and projects recorded under ~/.claude/projects/
and opens a terminal running the CLI against a chosen session or directory.
"""

from claude_launcher.config import LaunchConfig
from claude_launcher.models import CatalogSnapshot, LaunchResult, Project, Session

__all__ = ["CatalogSnapshot", "LaunchConfig", "LaunchResult", "Project", "Session"]

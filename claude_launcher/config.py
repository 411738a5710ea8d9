"""Launcher configuration with environment overrides."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "CLAUDE_LAUNCHER_"


def _default_projects_dir() -> Path:
    """Return <claude data dir>/projects. Honors CLAUDE_DATA_DIR, defaults to ~/.claude/."""
    data_dir = os.environ.get("CLAUDE_DATA_DIR")
    root = Path(data_dir) if data_dir else Path.home() / ".claude"
    return root / "projects"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


class LaunchConfig(BaseModel):
    """Tunables for session ingestion and terminal launching."""

    model_config = ConfigDict(frozen=True)

    projects_dir: Path = Field(default_factory=_default_projects_dir)
    max_file_size_bytes: int = Field(default=50 * 1024 * 1024, gt=0)
    max_lines: int = Field(
        default=500, gt=0, description="Lines examined per log file."
    )
    recent_file_limit: int = Field(
        default=15, gt=0, description="Most recent log files parsed per refresh."
    )
    budget_seconds: float = Field(
        default=10.0, gt=0, description="Wall-clock ceiling for one catalog refresh."
    )
    cli_binary: str = Field(default="claude", min_length=1)
    preferred_terminal: Optional[str] = None
    spawn_timeout_seconds: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls, **overrides) -> "LaunchConfig":
        """Build a config from CLAUDE_LAUNCHER_* variables; keyword overrides win."""
        defaults = cls()
        values = {
            "max_file_size_bytes": _env_int("MAX_FILE_SIZE", defaults.max_file_size_bytes),
            "max_lines": _env_int("MAX_LINES", defaults.max_lines),
            "recent_file_limit": _env_int("RECENT_FILES", defaults.recent_file_limit),
            "budget_seconds": _env_float("BUDGET_SECONDS", defaults.budget_seconds),
            "spawn_timeout_seconds": _env_float("SPAWN_TIMEOUT", defaults.spawn_timeout_seconds),
        }
        projects_dir = os.getenv(ENV_PREFIX + "PROJECTS_DIR")
        if projects_dir:
            values["projects_dir"] = Path(projects_dir).expanduser()
        cli_binary = os.getenv(ENV_PREFIX + "CLI")
        if cli_binary:
            values["cli_binary"] = cli_binary
        terminal = os.getenv(ENV_PREFIX + "TERMINAL")
        if terminal:
            values["preferred_terminal"] = terminal
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

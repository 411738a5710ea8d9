"""Formatting helpers for timestamps and paths"""

from datetime import datetime, timezone
from typing import Optional

import humanize


def format_time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    """Humanized distance from now, e.g. '3 hours ago'"""
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return humanize.naturaltime(now - moment)


def directory_name(path: str) -> str:
    """Last component of a path, or the path itself for '/' and similar"""
    parts = path.rstrip("/").split("/")
    return parts[-1] or path

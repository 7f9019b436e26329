"""
In-memory pipeline activity ring buffer.
Records refresh outcomes, parse drops and disclosure milestones for the
status API. Newest entry first; oldest entries fall off at ACTIVITY_LOG_SIZE.
"""
from collections import deque
from datetime import datetime
from typing import TypedDict

from devlog.config import settings


class ActivityEntry(TypedDict):
    time: str        # HH:MM:SS local
    level: str       # "info" | "success" | "error" | "warn"
    category: str    # "fetch" | "parse" | "disclosure" | "system"
    message: str
    generation: int


ACTIVITY_LOG: deque[ActivityEntry] = deque(maxlen=settings.ACTIVITY_LOG_SIZE)


def log_activity(level: str, category: str, message: str, generation: int = 0) -> None:
    ACTIVITY_LOG.appendleft(
        ActivityEntry(
            time=datetime.now().strftime("%H:%M:%S"),
            level=level,
            category=category,
            message=message,
            generation=generation,
        )
    )


def recent_activity(limit: int = 60) -> list[ActivityEntry]:
    return list(ACTIVITY_LOG)[:limit]

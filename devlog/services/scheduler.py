import logging
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from devlog.config import settings
from devlog.services.refresh import RefreshCoordinator

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "refresh_job"


def create_scheduler(
    coordinator: RefreshCoordinator,
    interval_seconds: int | None = None,
) -> AsyncIOScheduler:
    """
    One interval job that refreshes the feed. First run fires immediately;
    overlapping runs are refused here as well as by the coordinator itself.
    """
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        refresh_feed,
        "interval",
        seconds=interval_seconds or settings.REFRESH_INTERVAL_SECONDS,
        args=[coordinator],
        id=REFRESH_JOB_ID,
        next_run_time=datetime.now(),
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    return scheduler


async def refresh_feed(coordinator: RefreshCoordinator) -> None:
    outcome = await coordinator.refresh()
    logger.debug("Refresh cycle finished: %s", outcome.value)

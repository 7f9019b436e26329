import logging

from fastapi import APIRouter, Depends, Request

from devlog.config import settings
from devlog.runtime import get_coordinator
from devlog.services.refresh import RefreshCoordinator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(
    request: Request,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> dict:
    # Scheduler state
    scheduler = getattr(request.app.state, "scheduler", None)
    scheduler_status = "running" if scheduler and scheduler.running else "stopped"

    last_refresh = "never"
    if coordinator.last_success_at:
        last_refresh = coordinator.last_success_at.strftime("%Y-%m-%d %H:%M:%S")

    overall_status = "ok"
    if coordinator.stale or coordinator.generation == 0:
        overall_status = "degraded"

    return {
        "status": overall_status,
        "scheduler": scheduler_status,
        "feed_url": settings.FEED_URL,
        "generation": coordinator.generation,
        "groups_total": coordinator.cursor.total,
        "groups_revealed": coordinator.cursor.revealed_count,
        "stale": coordinator.stale,
        "last_error": coordinator.last_error,
        "last_refresh": last_refresh,
        "refresh_interval_seconds": settings.REFRESH_INTERVAL_SECONDS,
    }

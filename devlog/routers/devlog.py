import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, Response

from devlog.config import settings
from devlog.runtime import get_coordinator
from devlog.services.activity_log import log_activity
from devlog.services.refresh import RefreshCoordinator
from devlog.services.render import render_groups, templates

logger = logging.getLogger(__name__)

router = APIRouter()

# htmx reloads the whole page when it sees this header
RELOAD_HEADERS = {"HX-Refresh": "true"}


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> HTMLResponse:
    cursor = coordinator.cursor
    groups = cursor.revealed_groups()
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": settings.APP_NAME,
            "groups": groups,
            "groups_html": render_groups(groups),
            "exhausted": cursor.exhausted,
            "generation": coordinator.generation,
            "stale": coordinator.stale,
            "last_success_at": coordinator.last_success_at,
            "refresh_seconds": settings.REFRESH_INTERVAL_SECONDS,
        },
    )


@router.get("/devlog/next", response_class=HTMLResponse)
async def next_batch(
    request: Request,
    generation: int | None = None,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> Response:
    """Sentinel target: appends the next batch of date groups."""
    if generation is not None and generation != coordinator.generation:
        logger.debug(
            "Batch request for generation %d, current is %d; reloading page",
            generation, coordinator.generation,
        )
        return Response(status_code=200, headers=RELOAD_HEADERS)

    batch = coordinator.cursor.next_batch()
    if not batch.groups:
        # Redundant trigger after exhaustion: swap the sentinel for nothing
        return Response(status_code=200, content="")

    if batch.exhausted:
        log_activity(
            "info", "disclosure",
            f"All {coordinator.cursor.total} days disclosed",
            coordinator.generation,
        )
    return templates.TemplateResponse(
        request,
        "partials/batch.html",
        {
            "groups_html": render_groups(batch.groups),
            "exhausted": batch.exhausted,
            "generation": coordinator.generation,
        },
    )


@router.get("/devlog/generation")
async def check_generation(
    generation: int,
    stale: bool = False,
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> Response:
    """
    Page poll. The page sends the generation and stale flag it was rendered
    with; a change in either reloads it, so a new snapshot or a failed
    refresh reaches a page that is already open.
    """
    if generation != coordinator.generation or stale != coordinator.stale:
        logger.debug(
            "Page at generation %d (stale=%s) is out of date; reloading",
            generation, stale,
        )
        return Response(status_code=200, headers=RELOAD_HEADERS)
    return Response(status_code=204)

import logging
from collections.abc import Iterable

from fastapi import APIRouter, Depends, Query

from devlog.config import settings
from devlog.models import DateGroup
from devlog.runtime import get_coordinator
from devlog.schemas import (
    BatchSchema,
    DateGroupSchema,
    DisclosureStatusSchema,
    LogRecordSchema,
    RefreshResultSchema,
    SnapshotSchema,
)
from devlog.services.activity_log import recent_activity
from devlog.services.refresh import RefreshCoordinator
from devlog.services.render import activity_icon, date_heading, entry_line

logger = logging.getLogger(__name__)

router = APIRouter()


def _groups_out(groups: Iterable[DateGroup]) -> list[DateGroupSchema]:
    return [
        DateGroupSchema(
            date=group.date,
            heading=date_heading(group.date),
            records=[
                LogRecordSchema(
                    date=record.date,
                    time=record.time,
                    activity=record.activity.value,
                    activity_label=record.activity_label,
                    repository=record.repository,
                    description=record.description,
                    icon=activity_icon(record.activity),
                    line=entry_line(record),
                )
                for record in group.records
            ],
        )
        for group in groups
    ]


def _status_out(coordinator: RefreshCoordinator) -> DisclosureStatusSchema:
    cursor = coordinator.cursor
    return DisclosureStatusSchema(
        state=cursor.state.value,
        revealed_count=cursor.revealed_count,
        total=cursor.total,
        batch_size=cursor.batch_size,
        generation=coordinator.generation,
        stale=coordinator.stale,
        last_error=coordinator.last_error,
        last_success_at=coordinator.last_success_at,
        last_attempt_at=coordinator.last_attempt_at,
        refresh_count=coordinator.refresh_count,
        failure_count=coordinator.failure_count,
    )


@router.get("/snapshot", response_model=SnapshotSchema)
async def get_snapshot(
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> SnapshotSchema:
    snapshot = coordinator.cursor.snapshot
    if snapshot is None:
        return SnapshotSchema(
            generation=coordinator.generation, record_count=0, dropped_rows=0, groups=[]
        )
    return SnapshotSchema(
        generation=coordinator.generation,
        record_count=snapshot.record_count,
        dropped_rows=snapshot.dropped_rows,
        groups=_groups_out(snapshot.groups),
    )


@router.get("/disclosure", response_model=DisclosureStatusSchema)
async def get_disclosure(
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> DisclosureStatusSchema:
    return _status_out(coordinator)


@router.post("/disclosure/next", response_model=BatchSchema)
async def disclose_next(
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> BatchSchema:
    cursor = coordinator.cursor
    batch = cursor.next_batch()
    return BatchSchema(
        generation=coordinator.generation,
        offset=batch.offset,
        exhausted=batch.exhausted,
        revealed_count=cursor.revealed_count,
        total=cursor.total,
        groups=_groups_out(batch.groups),
    )


@router.post("/refresh", response_model=RefreshResultSchema)
async def trigger_refresh(
    coordinator: RefreshCoordinator = Depends(get_coordinator),
) -> RefreshResultSchema:
    outcome = await coordinator.refresh()
    logger.info("Manual refresh: %s", outcome.value)
    return RefreshResultSchema(
        outcome=outcome.value,
        generation=coordinator.generation,
        stale=coordinator.stale,
        last_error=coordinator.last_error,
    )


@router.get("/activity")
async def get_activity(
    limit: int = Query(60, ge=1, le=settings.ACTIVITY_LOG_SIZE),
) -> list[dict]:
    """Recent pipeline events, newest first."""
    return recent_activity(limit)

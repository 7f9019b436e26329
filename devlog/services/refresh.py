"""
Refresh coordinator: fetch -> parse -> group -> reset disclosure.

Runs are triggered by the scheduler (and the manual refresh endpoint).
Guarantees:
- at most one fetch outstanding; triggers arriving meanwhile are dropped
- a failed run leaves the cursor exactly as it was and marks the feed stale
- a run whose generation moved on while fetching (teardown) is discarded
"""
import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Protocol

from devlog.config import settings
from devlog.errors import DevlogError
from devlog.models import DisclosureBatch
from devlog.services.activity_log import log_activity
from devlog.services.csv_parser import parse_records
from devlog.services.disclosure import DisclosureCursor
from devlog.services.grouping import group_records

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self) -> str: ...

    async def close(self) -> None: ...


class RefreshOutcome(str, Enum):
    UPDATED = "updated"
    FAILED = "failed"
    SKIPPED = "skipped"
    DISCARDED = "discarded"


BatchHook = Callable[[int, DisclosureBatch], None]
ErrorHook = Callable[[Exception], None]


class RefreshCoordinator:
    def __init__(
        self,
        fetcher: Fetcher,
        cursor: DisclosureCursor | None = None,
        *,
        on_batch: BatchHook | None = None,
        on_error: ErrorHook | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.cursor = cursor or DisclosureCursor(settings.BATCH_SIZE)
        self._on_batch = on_batch
        self._on_error = on_error

        self._generation = 0
        self._in_flight = False
        self._closed = False

        self.stale = False
        self.last_error: str | None = None
        self.refresh_count = 0
        self.failure_count = 0
        self.last_attempt_at: datetime | None = None
        self.last_success_at: datetime | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    @property
    def closed(self) -> bool:
        return self._closed

    async def refresh(self) -> RefreshOutcome:
        if self._closed:
            return RefreshOutcome.DISCARDED
        if self._in_flight:
            logger.info("Refresh skipped: a fetch is already in flight")
            return RefreshOutcome.SKIPPED

        self._in_flight = True
        started = self._generation
        self.last_attempt_at = datetime.now()
        try:
            try:
                text = await self.fetcher.fetch()
                parsed = parse_records(text)
            except DevlogError as exc:
                return self._fail(exc, started)
            except Exception as exc:
                logger.error("Unexpected error during refresh", exc_info=True)
                return self._fail(exc, started)

            if started != self._generation:
                logger.info("Discarding refresh started in generation %d", started)
                return RefreshOutcome.DISCARDED

            snapshot = group_records(parsed.records, dropped_rows=parsed.dropped_rows)
            self._generation += 1
            self.cursor.reset(snapshot)
            first_batch = self.cursor.next_batch()

            self.refresh_count += 1
            self.last_success_at = datetime.now()
            if self.stale:
                logger.info("Feed recovered after %d failed refresh(es)", self.failure_count)
            self.stale = False
            self.last_error = None

            logger.info(
                "Refresh complete: %d records in %d groups (%d rows dropped), generation %d",
                snapshot.record_count, len(snapshot.groups), snapshot.dropped_rows,
                self._generation,
            )
            log_activity(
                "success", "fetch",
                f"Loaded {snapshot.record_count} records across {len(snapshot.groups)} days",
                self._generation,
            )
            if snapshot.dropped_rows:
                log_activity(
                    "warn", "parse",
                    f"Dropped {snapshot.dropped_rows} unusable row(s)",
                    self._generation,
                )
            if self._on_batch is not None:
                self._notify(self._on_batch, self._generation, first_batch)
            return RefreshOutcome.UPDATED
        finally:
            self._in_flight = False

    def _fail(self, exc: Exception, started: int) -> RefreshOutcome:
        if started != self._generation:
            logger.info("Discarding failed refresh from generation %d", started)
            return RefreshOutcome.DISCARDED

        self.failure_count += 1
        self.last_error = str(exc) or exc.__class__.__name__
        logger.error("Error loading devlog data: %s", self.last_error)
        log_activity("error", "fetch", f"Refresh failed: {self.last_error}", self._generation)

        if not self.stale:
            self.stale = True
            if self._on_error is not None:
                self._notify(self._on_error, exc)
        return RefreshOutcome.FAILED

    def _notify(self, hook: Callable, *args) -> None:
        try:
            hook(*args)
        except Exception:
            logger.exception("Refresh hook %r raised", hook)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Any fetch still in flight now belongs to a dead generation
        self._generation += 1
        await self.fetcher.close()
        log_activity("info", "system", "Refresh coordinator stopped", self._generation)

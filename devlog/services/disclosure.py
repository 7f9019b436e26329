"""
Incremental disclosure of a LogSnapshot.

The cursor hands out date groups in fixed-size batches, newest first.
A new snapshot resets it to the top: scroll position is not carried over
a refresh, only grouping, ordering and batch size are.
"""
import logging
from enum import Enum

from devlog.models import DateGroup, DisclosureBatch, DisclosureState, LogSnapshot

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5


class CursorState(str, Enum):
    EMPTY = "empty"
    READY = "ready"
    EXHAUSTED = "exhausted"


class DisclosureCursor:
    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self._batch_size = batch_size
        self._snapshot: LogSnapshot | None = None
        self._revealed = 0

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def snapshot(self) -> LogSnapshot | None:
        return self._snapshot

    @property
    def revealed_count(self) -> int:
        return self._revealed

    @property
    def total(self) -> int:
        return len(self._snapshot.groups) if self._snapshot is not None else 0

    @property
    def state(self) -> CursorState:
        if self._snapshot is None:
            return CursorState.EMPTY
        if self._revealed >= self.total:
            return CursorState.EXHAUSTED
        return CursorState.READY

    @property
    def exhausted(self) -> bool:
        return self.state is CursorState.EXHAUSTED

    def state_snapshot(self) -> DisclosureState:
        return DisclosureState(
            snapshot=self._snapshot,
            revealed_count=self._revealed,
            batch_size=self._batch_size,
        )

    def reset(self, snapshot: LogSnapshot) -> None:
        self._snapshot = snapshot
        self._revealed = 0
        logger.debug("Disclosure reset: %d groups available", len(snapshot.groups))

    def revealed_groups(self) -> tuple[DateGroup, ...]:
        if self._snapshot is None:
            return ()
        return self._snapshot.groups[: self._revealed]

    def next_batch(self) -> DisclosureBatch:
        """
        Reveal up to batch_size further groups. Safe to call repeatedly:
        with no snapshot, or once exhausted, it returns an empty batch.
        """
        if self._snapshot is None:
            return DisclosureBatch(offset=0, exhausted=False)

        start = self._revealed
        groups = self._snapshot.groups[start : start + self._batch_size]
        self._revealed = start + len(groups)
        exhausted = self._revealed >= self.total
        if groups:
            logger.debug(
                "Disclosed groups %d-%d of %d",
                start + 1, self._revealed, self.total,
            )
        return DisclosureBatch(groups=groups, offset=start, exhausted=exhausted)

from datetime import date

import pytest

from devlog.services.csv_parser import parse_records
from devlog.services.disclosure import CursorState, DisclosureCursor
from devlog.services.grouping import group_records
from helpers import make_feed


def _snapshot(days: int, start: date = date(2024, 1, 1)):
    return group_records(parse_records(make_feed(days, start)).records)


class TestNextBatch:
    def test_twelve_groups_in_batches_of_five(self):
        cursor = DisclosureCursor(batch_size=5)
        cursor.reset(_snapshot(12))

        sizes = [len(cursor.next_batch()) for _ in range(5)]
        assert sizes == [5, 5, 2, 0, 0]
        assert cursor.revealed_count == 12
        assert cursor.exhausted

    def test_batches_are_consecutive_newest_first(self):
        snapshot = _snapshot(7)
        cursor = DisclosureCursor(batch_size=3)
        cursor.reset(snapshot)

        first = cursor.next_batch()
        second = cursor.next_batch()
        third = cursor.next_batch()
        assert first.offset == 0 and second.offset == 3 and third.offset == 6
        assert first.groups + second.groups + third.groups == snapshot.groups
        assert first.groups[0].date == date(2024, 1, 7)

    def test_final_batch_signals_exhausted(self):
        cursor = DisclosureCursor(batch_size=5)
        cursor.reset(_snapshot(7))
        assert cursor.next_batch().exhausted is False
        assert cursor.next_batch().exhausted is True

    def test_exact_multiple_exhausts_on_last_full_batch(self):
        cursor = DisclosureCursor(batch_size=5)
        cursor.reset(_snapshot(10))
        cursor.next_batch()
        assert cursor.next_batch().exhausted is True
        assert len(cursor.next_batch()) == 0

    def test_redundant_calls_after_exhaustion_are_noops(self):
        cursor = DisclosureCursor(batch_size=5)
        cursor.reset(_snapshot(3))
        cursor.next_batch()
        before = cursor.state_snapshot()
        for _ in range(3):
            batch = cursor.next_batch()
            assert batch.groups == ()
            assert batch.exhausted is True
        assert cursor.state_snapshot() == before

    def test_next_batch_before_any_snapshot(self):
        cursor = DisclosureCursor()
        batch = cursor.next_batch()
        assert batch.groups == ()
        assert batch.exhausted is False
        assert cursor.state is CursorState.EMPTY

    def test_revealed_groups_tracks_progress(self):
        snapshot = _snapshot(4)
        cursor = DisclosureCursor(batch_size=3)
        cursor.reset(snapshot)
        assert cursor.revealed_groups() == ()
        cursor.next_batch()
        assert cursor.revealed_groups() == snapshot.groups[:3]


class TestStateMachine:
    def test_transitions(self):
        cursor = DisclosureCursor(batch_size=2)
        assert cursor.state is CursorState.EMPTY

        cursor.reset(_snapshot(3))
        assert cursor.state is CursorState.READY
        assert cursor.revealed_count == 0

        cursor.next_batch()
        assert cursor.state is CursorState.READY
        cursor.next_batch()
        assert cursor.state is CursorState.EXHAUSTED

    def test_empty_snapshot_is_immediately_exhausted(self):
        cursor = DisclosureCursor()
        cursor.reset(_snapshot(0))
        assert cursor.state is CursorState.EXHAUSTED
        batch = cursor.next_batch()
        assert batch.groups == () and batch.exhausted is True

    def test_reset_mid_disclosure(self):
        cursor = DisclosureCursor(batch_size=5)
        cursor.reset(_snapshot(12))
        cursor.next_batch()
        cursor.next_batch()
        assert cursor.revealed_count == 10

        fresh = _snapshot(8, start=date(2024, 6, 1))
        cursor.reset(fresh)
        assert cursor.revealed_count == 0
        assert cursor.snapshot is fresh

        batch = cursor.next_batch()
        assert batch.offset == 0
        assert batch.groups == fresh.groups[:5]
        assert batch.groups[0].date == date(2024, 6, 8)

    def test_reset_from_exhausted(self):
        cursor = DisclosureCursor(batch_size=5)
        cursor.reset(_snapshot(2))
        cursor.next_batch()
        assert cursor.exhausted
        cursor.reset(_snapshot(3))
        assert cursor.state is CursorState.READY

    def test_revealed_count_within_bounds(self):
        cursor = DisclosureCursor(batch_size=4)
        cursor.reset(_snapshot(9))
        for _ in range(6):
            cursor.next_batch()
            assert 0 <= cursor.revealed_count <= cursor.total

    @pytest.mark.parametrize("size", [0, -1])
    def test_rejects_non_positive_batch_size(self, size):
        with pytest.raises(ValueError):
            DisclosureCursor(batch_size=size)

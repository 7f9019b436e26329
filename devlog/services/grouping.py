from collections.abc import Iterable
from datetime import date

from devlog.models import DateGroup, LogRecord, LogSnapshot


def group_records(records: Iterable[LogRecord], dropped_rows: int = 0) -> LogSnapshot:
    """
    Bucket records by calendar date. Groups run newest date first; records
    inside a group run earliest time first, equal timestamps keeping input
    order (sorted() is stable).
    """
    buckets: dict[date, list[LogRecord]] = {}
    for record in records:
        buckets.setdefault(record.date, []).append(record)

    groups = tuple(
        DateGroup(
            date=day,
            records=tuple(sorted(buckets[day], key=lambda r: r.timestamp)),
        )
        for day in sorted(buckets, reverse=True)
    )
    return LogSnapshot(groups=groups, dropped_rows=dropped_rows)

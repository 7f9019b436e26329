from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum


class Activity(str, Enum):
    COMMIT = "commit"
    ISSUE = "issue"
    PULL_REQUEST = "pull_request"
    FORK = "fork"
    RELEASE = "release"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: str) -> "Activity":
        try:
            activity = cls(label)
        except ValueError:
            return cls.UNKNOWN
        return activity


@dataclass(frozen=True)
class LogRecord:
    date: date
    time: time
    activity: Activity
    repository: str
    description: str
    activity_label: str = ""
    line_number: int = 0

    @property
    def timestamp(self) -> datetime:
        # Naive on purpose: feed times are local wall-clock
        return datetime.combine(self.date, self.time)


@dataclass(frozen=True)
class DateGroup:
    date: date
    records: tuple[LogRecord, ...]

    def __post_init__(self) -> None:
        if not self.records:
            raise ValueError("DateGroup must contain at least one record")
        for record in self.records:
            if record.date != self.date:
                raise ValueError(
                    f"record dated {record.date} does not belong in group {self.date}"
                )


@dataclass(frozen=True)
class LogSnapshot:
    groups: tuple[DateGroup, ...] = ()
    dropped_rows: int = 0

    @property
    def record_count(self) -> int:
        return sum(len(group.records) for group in self.groups)

    def __len__(self) -> int:
        return len(self.groups)


@dataclass(frozen=True)
class DisclosureState:
    snapshot: LogSnapshot | None
    revealed_count: int
    batch_size: int


@dataclass(frozen=True)
class DisclosureBatch:
    groups: tuple[DateGroup, ...] = ()
    offset: int = 0
    exhausted: bool = False

    def __len__(self) -> int:
        return len(self.groups)


@dataclass(frozen=True)
class ParseResult:
    records: tuple[LogRecord, ...] = ()
    headers: tuple[str, ...] = ()
    defective_rows: int = 0
    invalid_records: int = 0

    @property
    def dropped_rows(self) -> int:
        return self.defective_rows + self.invalid_records

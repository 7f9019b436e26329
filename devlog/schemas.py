from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel


class LogRecordSchema(BaseModel):
    date: date
    time: time
    activity: str
    activity_label: str
    repository: str
    description: str
    icon: str
    line: str


class DateGroupSchema(BaseModel):
    date: date
    heading: str
    records: list[LogRecordSchema]


class SnapshotSchema(BaseModel):
    generation: int
    record_count: int
    dropped_rows: int
    groups: list[DateGroupSchema]


class BatchSchema(BaseModel):
    generation: int
    offset: int
    exhausted: bool
    revealed_count: int
    total: int
    groups: list[DateGroupSchema]


class DisclosureStatusSchema(BaseModel):
    state: str
    revealed_count: int
    total: int
    batch_size: int
    generation: int
    stale: bool
    last_error: Optional[str]
    last_success_at: Optional[datetime]
    last_attempt_at: Optional[datetime]
    refresh_count: int
    failure_count: int


class RefreshResultSchema(BaseModel):
    outcome: str
    generation: int
    stale: bool
    last_error: Optional[str]

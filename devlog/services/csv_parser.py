"""
Devlog CSV parser.

The feed is a header line followed by comma-separated rows. A comma inside a
double-quoted span is literal content. Each field is trimmed and loses one
layer of surrounding quotes; doubled quotes are NOT unescaped.

One bad row never aborts the batch: unsplittable rows and rows with an
unparsable date/time are dropped and counted. Only a header missing the
date/time columns fails the whole pass (FeedFormatError).
"""
import logging
import re
from datetime import date, time

from devlog.errors import FeedFormatError, RecordInvalid, RowParseDefect
from devlog.models import Activity, LogRecord, ParseResult

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "time")

# Separator only when an even number of quotes follows up to end of line
_FIELD_SPLIT = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')
_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_TIME_RE = re.compile(r"([0-9]{2}):([0-9]{2}):([0-9]{2})")


def split_fields(line: str) -> list[str]:
    return [_clean(value) for value in _FIELD_SPLIT.split(line)]


def _clean(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value


def _map_row(headers: tuple[str, ...], line: str, line_number: int) -> dict[str, str]:
    if line.count('"') % 2:
        raise RowParseDefect(line_number, "unbalanced double quotes")
    values = split_fields(line)
    # Short rows pad with "", extra trailing fields are ignored
    return {
        header: values[i] if i < len(values) else ""
        for i, header in enumerate(headers)
    }


def _data_lines(text: str) -> tuple[tuple[str, ...], list[tuple[int, str]]]:
    text = text.strip()
    if not text:
        return (), []
    # Rows end at \n only; other Unicode line breaks are field content
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    headers = tuple(h.strip() for h in lines[0].split(","))
    body = [
        (line_number, line)
        for line_number, line in enumerate(lines[1:], start=2)
        if line.strip()
    ]
    return headers, body


def parse_rows(text: str) -> list[dict[str, str]]:
    """
    Map each data row to {header: value}. Rows that cannot be split are
    skipped with a warning.
    """
    headers, body = _data_lines(text)
    rows: list[dict[str, str]] = []
    for line_number, line in body:
        try:
            rows.append(_map_row(headers, line, line_number))
        except RowParseDefect as exc:
            logger.warning("Dropping malformed row: %s", exc)
    return rows


def parse_date(value: str, line_number: int = 0) -> date:
    match = _DATE_RE.fullmatch(value)
    if match:
        try:
            return date(*(int(part) for part in match.groups()))
        except ValueError:
            pass
    raise RecordInvalid(line_number, "date", value)


def parse_time(value: str, line_number: int = 0) -> time:
    match = _TIME_RE.fullmatch(value)
    if match:
        try:
            return time(*(int(part) for part in match.groups()))
        except ValueError:
            pass
    raise RecordInvalid(line_number, "time", value)


def to_record(row: dict[str, str], line_number: int = 0) -> LogRecord:
    """Interpret a header-mapped row as a LogRecord. Raises RecordInvalid."""
    label = row.get("activity", "")
    return LogRecord(
        date=parse_date(row.get("date", ""), line_number),
        time=parse_time(row.get("time", ""), line_number),
        activity=Activity.from_label(label),
        repository=row.get("repository", ""),
        description=row.get("description", ""),
        activity_label=label,
        line_number=line_number,
    )


def parse_records(text: str) -> ParseResult:
    headers, body = _data_lines(text)
    if not headers:
        logger.info("Feed is empty, no records")
        return ParseResult()

    missing = [column for column in REQUIRED_COLUMNS if column not in headers]
    if missing:
        raise FeedFormatError(
            f"Feed header is missing required column(s): {', '.join(missing)}"
        )

    records: list[LogRecord] = []
    defective = 0
    invalid = 0

    for line_number, line in body:
        try:
            records.append(to_record(_map_row(headers, line, line_number), line_number))
        except RowParseDefect as exc:
            defective += 1
            logger.warning("Dropping malformed row: %s", exc)
            continue
        except RecordInvalid as exc:
            invalid += 1
            logger.debug("Dropping invalid record: %s", exc)
            continue

    if defective or invalid:
        logger.info(
            "Parsed %d records (%d malformed rows, %d invalid records dropped)",
            len(records), defective, invalid,
        )
    return ParseResult(
        records=tuple(records),
        headers=headers,
        defective_rows=defective,
        invalid_records=invalid,
    )

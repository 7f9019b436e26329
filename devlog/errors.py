"""
Pipeline error taxonomy.

Row- and record-level problems are recovered inside the parser and never
escape it. Fetch and format errors abort a single refresh; the coordinator
catches them and keeps the last good state.
"""


class DevlogError(Exception):
    pass


class RowParseDefect(DevlogError):
    """A data row whose shape cannot be split into fields."""

    def __init__(self, line_number: int, reason: str) -> None:
        super().__init__(f"line {line_number}: {reason}")
        self.line_number = line_number
        self.reason = reason


class RecordInvalid(DevlogError):
    """A well-shaped row whose date or time does not parse."""

    def __init__(self, line_number: int, field: str, value: str) -> None:
        super().__init__(f"line {line_number}: invalid {field} {value!r}")
        self.line_number = line_number
        self.field = field
        self.value = value


class FeedFetchError(DevlogError):
    pass


class FeedFormatError(DevlogError):
    pass

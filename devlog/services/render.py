"""
Presentation helpers for date groups: icons, headings, Jinja2 partials.
No filtering or ordering happens here; groups render in the order given.
"""
from collections.abc import Iterable
from datetime import date, time
from pathlib import Path

from fastapi.templating import Jinja2Templates

from devlog.models import Activity, DateGroup, LogRecord

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

ACTIVITY_ICONS: dict[Activity, str] = {
    Activity.COMMIT:       "📌",
    Activity.ISSUE:        "⚠️",
    Activity.PULL_REQUEST: "🔨",
    Activity.FORK:         "🍴",
    Activity.RELEASE:      "🏷️",
}


def activity_icon(activity: Activity) -> str:
    """Icon for an activity; unknown activities get an empty marker."""
    return ACTIVITY_ICONS.get(activity, "")


def date_heading(day: date) -> str:
    """e.g. 'January 2, 2024'."""
    return f"{day:%B} {day.day}, {day.year}"


def clock(value: time) -> str:
    return value.strftime("%H:%M:%S")


def entry_line(record: LogRecord) -> str:
    """Plain-text form of an entry: time - icon activity on repo: description."""
    label = record.activity_label or record.activity.value
    return (
        f"{clock(record.time)} - {activity_icon(record.activity)} "
        f"{label} on {record.repository}: {record.description}"
    )


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["activity_icon"] = activity_icon
templates.env.filters["date_heading"] = date_heading
templates.env.filters["clock"] = clock


def render_group(group: DateGroup) -> str:
    return templates.get_template("partials/date_group.html").render(group=group)


def render_groups(groups: Iterable[DateGroup]) -> str:
    return "".join(render_group(group) for group in groups)

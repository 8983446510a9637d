"""Rendering of enriched reminders as plain lines or JSON."""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..core.models import (
    EnrichedReminder,
    RecurrenceRule,
    Reminder,
    ReminderList,
    WORKWEEK,
    priority_ordinal,
)
from ..utils.date import format_timestamp, relative_day, relative_time
from ..utils.notes import decode_notes

UNKNOWN_TITLE = "<unknown>"
REMINDER_URL_PREFIX = "x-apple-reminderkit://REMCDReminder/"


class OutputFormat(Enum):
    PLAIN = "plain"
    JSON = "json"


def recurrence_label(rule: RecurrenceRule) -> str:
    """Human-readable label for a recurrence rule."""
    if rule.frequency == "daily":
        label = "daily"
    elif rule.frequency == "weekly":
        days = rule.days_of_week or ()
        if len(days) == 5 and set(days) == WORKWEEK:
            label = "weekdays"
        elif rule.interval == 2:
            label = "biweekly"
        else:
            label = "weekly"
    elif rule.frequency in ("monthly", "yearly"):
        label = rule.frequency
    else:
        label = "custom"

    if rule.interval > 1 and label != "biweekly":
        return f"every {rule.interval} {label}"
    return label


def format_due(reminder: Reminder, now: datetime) -> Optional[str]:
    due = reminder.due
    if due is None:
        return None
    text = relative_day(due.day, now.date())
    if due.time is not None:
        text = f"{text} {due.time.hour:02d}:{due.time.minute:02d}"
    return text


def format_line(item: EnrichedReminder, now: datetime, show_list: bool = False) -> str:
    """One display line: list, index, title, then parenthesised details."""
    reminder = item.reminder
    parts: List[str] = []

    if show_list:
        parts.append(f"{reminder.list_name}: ")
    if item.index is not None:
        parts.append(f"{item.index}: ")
    parts.append(reminder.title if reminder.title is not None else UNKNOWN_TITLE)

    content = decode_notes(reminder.notes)[0]
    if content:
        parts.append(f" ({content})")

    due = format_due(reminder, now)
    if due:
        parts.append(f" ({due})")
    if reminder.priority is not None:
        parts.append(f" (priority: {reminder.priority.value})")
    if item.flagged:
        parts.append(" (flagged)")
    if item.tags:
        parts.append(" (tags: " + ", ".join(f"#{tag}" for tag in item.tags) + ")")
    if item.section is not None:
        parts.append(f" (section: {item.section})")
    if reminder.recurrence is not None:
        parts.append(f" (repeats: {recurrence_label(reminder.recurrence)})")

    alarm = reminder.remind_me_alarm
    if alarm is not None and alarm.absolute_date is not None:
        parts.append(f" (reminder: {relative_time(alarm.absolute_date, now)})")

    return "".join(parts)


def to_record(item: EnrichedReminder) -> Dict[str, Any]:
    """Serialize an enriched reminder. Absent optional fields are omitted."""
    reminder = item.reminder
    record: Dict[str, Any] = {
        "title": reminder.title,
        "isCompleted": reminder.completed,
        "priority": priority_ordinal(reminder.priority),
        "list": reminder.list_name,
        "flagged": item.flagged,
    }

    def put(key: str, value: Any) -> None:
        if value is not None:
            record[key] = value

    content, url = decode_notes(reminder.notes)
    put("notes", content)
    put("url", url)
    put("completionDate", format_timestamp(reminder.completion_date))
    put("lastModified", format_timestamp(reminder.modified_at))
    put("creationDate", format_timestamp(reminder.created_at))

    if reminder.identifier:
        record["externalId"] = reminder.identifier
        record["reminderUrl"] = f"{REMINDER_URL_PREFIX}{reminder.identifier}"

    for alarm in reminder.alarms:
        if alarm.location is not None:
            put("locationTitle", alarm.location.title)
            if alarm.location.latitude is not None and alarm.location.longitude is not None:
                record["location"] = f"{alarm.location.latitude}, {alarm.location.longitude}"
            break

    if reminder.start is not None:
        record["startDate"] = format_timestamp(reminder.start.to_datetime())
    if reminder.due is not None:
        record["dueDate"] = format_timestamp(reminder.due.to_datetime())
        record["allDay"] = reminder.due.all_day

    alarm = reminder.remind_me_alarm
    if alarm is not None:
        put("remindMeDate", format_timestamp(alarm.absolute_date))

    if reminder.recurrence is not None:
        record["recurrence"] = reminder.recurrence.to_dict()

    if item.tags:
        record["tags"] = list(item.tags)
    put("section", item.section)
    return record


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False)


def render(
    items: Sequence[EnrichedReminder],
    fmt: OutputFormat,
    now: Optional[datetime] = None,
    show_list: bool = False,
) -> str:
    if fmt is OutputFormat.JSON:
        return render_json([to_record(item) for item in items])

    now = now or datetime.now().astimezone()
    return "\n".join(format_line(item, now, show_list=show_list) for item in items)


def render_lists(lists: Sequence[ReminderList], fmt: OutputFormat, show_color: bool = False) -> str:
    if fmt is OutputFormat.JSON:
        return render_json([lst.name for lst in lists])

    lines = []
    for lst in lists:
        if show_color:
            lines.append(f"{lst.name} ({lst.color or '#000000'})")
        else:
            lines.append(lst.name)
    return "\n".join(lines)

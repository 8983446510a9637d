"""
Tests for plain and JSON rendering (reminders_cli/query/presenter.py).

Relative phrases are computed against a fixed "now".
"""

import json
from datetime import date, datetime, time, timedelta, timezone

import pytest

from reminders_cli.core.models import (
    Alarm,
    DueDate,
    EnrichedReminder,
    Location,
    Priority,
    RecurrenceRule,
    ReminderList,
)
from reminders_cli.query.presenter import (
    OutputFormat,
    format_line,
    recurrence_label,
    render,
    render_lists,
    to_record,
)
from reminders_cli.utils.date import format_timestamp


class TestRecurrenceLabel:

    @pytest.mark.parametrize("rule,expected", [
        (RecurrenceRule("daily"), "daily"),
        (RecurrenceRule("weekly"), "weekly"),
        (RecurrenceRule("weekly", 1, ("MO", "TU", "WE", "TH", "FR")), "weekdays"),
        (RecurrenceRule("weekly", 2), "biweekly"),
        (RecurrenceRule("weekly", 3), "every 3 weekly"),
        (RecurrenceRule("monthly"), "monthly"),
        (RecurrenceRule("monthly", 3), "every 3 monthly"),
        (RecurrenceRule("yearly"), "yearly"),
        (RecurrenceRule("unknown"), "custom"),
    ])
    def test_labels(self, rule, expected):
        assert recurrence_label(rule) == expected


class TestFormatLine:
    """Plain output lines."""

    def test_full_line(self, make_reminder, fixed_now):
        reminder = make_reminder(
            "Call mom",
            list_name="Soon",
            notes="ask about trip\n\nURL: https://example.com",
            due=DueDate(date(2024, 5, 16), time(9, 30)),
            priority=Priority.HIGH,
            recurrence=RecurrenceRule("weekly"),
            alarms=[Alarm(absolute_date=fixed_now + timedelta(hours=3))],
        )
        item = EnrichedReminder(reminder, flagged=True, tags=["family", "phone"],
                                section="Personal", index=0)

        assert format_line(item, fixed_now) == (
            "0: Call mom (ask about trip) (tomorrow 09:30) (priority: high) (flagged)"
            " (tags: #family, #phone) (section: Personal) (repeats: weekly) (reminder: in 3 hours)"
        )

    def test_minimal_line(self, make_reminder, fixed_now):
        item = EnrichedReminder(make_reminder("Plain"))
        assert format_line(item, fixed_now) == "Plain"

    def test_list_prefix(self, make_reminder, fixed_now):
        item = EnrichedReminder(make_reminder("Plain", list_name="Soon"), index=2)
        assert format_line(item, fixed_now, show_list=True) == "Soon: 2: Plain"

    def test_missing_title_placeholder(self, make_reminder, fixed_now):
        item = EnrichedReminder(make_reminder(None))
        assert format_line(item, fixed_now) == "<unknown>"

    def test_url_only_notes_show_no_notes_segment(self, make_reminder, fixed_now):
        item = EnrichedReminder(make_reminder("Read", notes="URL: https://example.com"))
        assert format_line(item, fixed_now) == "Read"

    def test_all_day_due_relative_days(self, make_reminder, fixed_now):
        yesterday = EnrichedReminder(make_reminder("A", due=DueDate(date(2024, 5, 14))))
        later = EnrichedReminder(make_reminder("B", due=DueDate(date(2024, 5, 20))))
        assert format_line(yesterday, fixed_now) == "A (yesterday)"
        assert format_line(later, fixed_now) == "B (in 5 days)"

    def test_location_alarm_is_not_a_reminder_time(self, make_reminder, fixed_now):
        reminder = make_reminder("Pick up", alarms=[Alarm(location=Location("Store"))])
        assert format_line(EnrichedReminder(reminder), fixed_now) == "Pick up"


class TestToRecord:
    """JSON records."""

    def test_minimal_record(self, make_reminder):
        record = to_record(EnrichedReminder(make_reminder("Plain", list_name="Soon", identifier=None)))
        assert record == {
            "title": "Plain",
            "isCompleted": False,
            "priority": 0,
            "list": "Soon",
            "flagged": False,
        }

    def test_attributes_without_section(self, make_reminder):
        item = EnrichedReminder(make_reminder("Ship"), flagged=True, tags=["work", "urgent"], section=None)
        record = to_record(item)

        assert record["flagged"] is True
        assert record["tags"] == ["work", "urgent"]
        assert "section" not in record

    def test_missing_title_is_null(self, make_reminder):
        assert to_record(EnrichedReminder(make_reminder(None)))["title"] is None

    def test_full_record(self, make_reminder, fixed_now):
        due = DueDate(date(2024, 5, 16), time(9, 30))
        remind = fixed_now + timedelta(hours=1)
        reminder = make_reminder(
            "Call mom",
            list_name="Soon",
            identifier="ABC-123",
            notes="ask\n\nURL: https://example.com",
            priority=Priority.MEDIUM,
            due=due,
            created_at=datetime(2024, 1, 5, 14, 0, tzinfo=timezone.utc),
            modified_at=datetime(2024, 1, 6, 8, 0, tzinfo=timezone.utc),
            alarms=[
                Alarm(location=Location("Home", 52.5, 13.4)),
                Alarm(absolute_date=remind),
            ],
            recurrence=RecurrenceRule("weekly", 1, ("MO", "FR")),
        )
        record = to_record(EnrichedReminder(reminder, flagged=True, tags=["family"], section="Calls"))

        assert record["notes"] == "ask"
        assert record["url"] == "https://example.com"
        assert record["priority"] == 5
        assert record["flagged"] is True
        assert record["externalId"] == "ABC-123"
        assert record["reminderUrl"] == "x-apple-reminderkit://REMCDReminder/ABC-123"
        assert record["creationDate"] == "2024-01-05T14:00:00Z"
        assert record["lastModified"] == "2024-01-06T08:00:00Z"
        assert record["dueDate"] == format_timestamp(due.to_datetime())
        assert record["allDay"] is False
        assert record["remindMeDate"] == "2024-05-15T13:00:00Z"
        assert record["locationTitle"] == "Home"
        assert record["location"] == "52.5, 13.4"
        assert record["recurrence"] == {"frequency": "weekly", "interval": 1, "daysOfTheWeek": ["MO", "FR"]}
        assert record["tags"] == ["family"]
        assert record["section"] == "Calls"
        assert "completionDate" not in record
        assert "startDate" not in record

    def test_priority_ordinals(self, make_reminder):
        for priority, ordinal in ((Priority.HIGH, 1), (Priority.MEDIUM, 5), (Priority.LOW, 9)):
            record = to_record(EnrichedReminder(make_reminder(priority=priority)))
            assert record["priority"] == ordinal

    def test_all_day_due(self, make_reminder):
        record = to_record(EnrichedReminder(make_reminder(due=DueDate(date(2024, 5, 16)))))
        assert record["allDay"] is True


class TestRender:

    def test_json_is_sorted_and_indented(self, make_reminder):
        items = [EnrichedReminder(make_reminder("B", identifier=None), flagged=True, tags=["x"])]
        output = render(items, OutputFormat.JSON)

        assert json.loads(output) == [{
            "title": "B",
            "isCompleted": False,
            "priority": 0,
            "list": "Inbox",
            "flagged": True,
            "tags": ["x"],
        }]
        assert output.index('"flagged"') < output.index('"isCompleted"') < output.index('"title"')
        assert '\n  {' in output

    def test_plain_joins_lines(self, make_reminder, fixed_now):
        items = [EnrichedReminder(make_reminder("A"), index=0), EnrichedReminder(make_reminder("B"), index=1)]
        assert render(items, OutputFormat.PLAIN, now=fixed_now) == "0: A\n1: B"

    def test_empty_plain_output(self, fixed_now):
        assert render([], OutputFormat.PLAIN, now=fixed_now) == ""


class TestRenderLists:

    def _lists(self):
        return [ReminderList("Groceries", color="#FF9500"), ReminderList("Work")]

    def test_plain(self):
        assert render_lists(self._lists(), OutputFormat.PLAIN) == "Groceries\nWork"

    def test_plain_with_color(self):
        output = render_lists(self._lists(), OutputFormat.PLAIN, show_color=True)
        assert output == "Groceries (#FF9500)\nWork (#000000)"

    def test_json(self):
        assert json.loads(render_lists(self._lists(), OutputFormat.JSON)) == ["Groceries", "Work"]

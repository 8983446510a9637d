"""
Tests for RemindersTaskManager mutation flows (reminders_cli/reminders/tasks.py).

Validates add, edit, complete, delete and list creation against the
in-memory store, with the AppleScript bridge mocked out.
"""

from datetime import date, datetime, time, timezone
from unittest.mock import Mock

import pytest

from reminders_cli.core.exceptions import ConfigurationError, RemindersError
from reminders_cli.core.models import (
    AddRequest,
    Alarm,
    DueDate,
    EditRequest,
    Location,
    Priority,
    Recurrence,
    RecurrenceRule,
    Reminder,
    ReminderSource,
)
from reminders_cli.reminders.applescript import AppleScriptBridge
from reminders_cli.reminders.tasks import RemindersTaskManager

REMIND_AT = datetime(2024, 5, 16, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def bridge():
    return Mock(spec=AppleScriptBridge)


@pytest.fixture
def manager(fake_store, bridge):
    fake_store.add_list("Inbox")
    return RemindersTaskManager(fake_store, bridge=bridge)


class TestAdd:
    """Creating reminders."""

    def test_add_basic(self, manager, fake_store, bridge):
        reminder = manager.add(fake_store.lists[0], AddRequest(title="Buy milk"))

        assert reminder.title == "Buy milk"
        assert reminder.list_name == "Inbox"
        assert reminder.identifier is not None
        assert fake_store.saved == [reminder]
        bridge.set_flagged.assert_not_called()

    def test_add_empty_title_rejected(self, manager, fake_store):
        with pytest.raises(ConfigurationError):
            manager.add(fake_store.lists[0], AddRequest(title="  "))
        assert fake_store.saved == []

    def test_add_notes_and_url(self, manager, fake_store):
        reminder = manager.add(fake_store.lists[0], AddRequest(
            title="Read", notes="chapter 3", url="https://example.com"))
        assert reminder.notes == "chapter 3\n\nURL: https://example.com"

    def test_timed_due_date_adds_alarm(self, manager, fake_store):
        due = DueDate(date(2024, 5, 16), time(9, 30))
        reminder = manager.add(fake_store.lists[0], AddRequest(title="Call", due=due))

        assert reminder.due == due
        assert reminder.remind_me_alarm.absolute_date == due.to_datetime()

    def test_all_day_due_date_adds_no_alarm(self, manager, fake_store):
        reminder = manager.add(fake_store.lists[0], AddRequest(title="Call", due=DueDate(date(2024, 5, 16))))
        assert reminder.alarms == []

    def test_explicit_remind_me_wins(self, manager, fake_store):
        due = DueDate(date(2024, 5, 16), time(9, 30))
        reminder = manager.add(fake_store.lists[0], AddRequest(title="Call", due=due, remind_me=REMIND_AT))

        assert len(reminder.alarms) == 1
        assert reminder.remind_me_alarm.absolute_date == REMIND_AT

    def test_priority_and_recurrence(self, manager, fake_store):
        reminder = manager.add(fake_store.lists[0], AddRequest(
            title="Standup", priority=Priority.HIGH, recurrence=Recurrence.WEEKDAYS))

        assert reminder.priority is Priority.HIGH
        assert reminder.recurrence == RecurrenceRule("weekly", 1, ("MO", "TU", "WE", "TH", "FR"))

    def test_flagged_set_after_save(self, manager, fake_store, bridge):
        reminder = manager.add(fake_store.lists[0], AddRequest(title="Urgent", flagged=True))
        bridge.set_flagged.assert_called_once_with(True, reminder.identifier)


class TestEdit:
    """Editing existing reminders."""

    @pytest.fixture
    def reminder(self, fake_store):
        return fake_store.add(Reminder(
            "Inbox", "Old title",
            notes="keep me\n\nURL: https://old.example.com",
            priority=Priority.LOW,
            due=DueDate(date(2024, 5, 16), time(9, 0)),
            alarms=[Alarm(absolute_date=REMIND_AT), Alarm(location=Location("Home"))],
            recurrence=RecurrenceRule("daily"),
        ))

    def test_title_change_keeps_notes(self, manager, reminder):
        manager.edit(reminder, EditRequest(title="New title"))
        assert reminder.title == "New title"
        assert reminder.notes == "keep me\n\nURL: https://old.example.com"

    def test_notes_change_keeps_url(self, manager, reminder):
        manager.edit(reminder, EditRequest(notes="fresh"))
        assert reminder.content == "fresh"
        assert reminder.url == "https://old.example.com"

    def test_url_change_keeps_content(self, manager, reminder):
        manager.edit(reminder, EditRequest(url="https://new.example.com"))
        assert reminder.notes == "keep me\n\nURL: https://new.example.com"

    def test_clear_url(self, manager, reminder):
        manager.edit(reminder, EditRequest(clear_url=True))
        assert reminder.notes == "keep me"

    def test_clear_priority(self, manager, reminder):
        manager.edit(reminder, EditRequest(clear_priority=True))
        assert reminder.priority is None

    def test_clear_due_drops_time_alarms_only(self, manager, reminder):
        manager.edit(reminder, EditRequest(clear_due=True))
        assert reminder.due is None
        assert [alarm.is_time_based for alarm in reminder.alarms] == [False]

    def test_new_timed_due_resets_alarm(self, manager, reminder):
        due = DueDate(date(2024, 6, 1), time(14, 0))
        manager.edit(reminder, EditRequest(due=due))

        assert reminder.due == due
        assert reminder.remind_me_alarm.absolute_date == due.to_datetime()
        assert len(reminder.alarms) == 2

    def test_new_all_day_due_clears_alarm(self, manager, reminder):
        manager.edit(reminder, EditRequest(due=DueDate(date(2024, 6, 1))))
        assert reminder.remind_me_alarm is None

    def test_remind_me_replaces_alarm(self, manager, reminder):
        when = datetime(2024, 5, 20, 7, 0, tzinfo=timezone.utc)
        manager.edit(reminder, EditRequest(remind_me=when))
        assert reminder.remind_me_alarm.absolute_date == when
        assert reminder.due == DueDate(date(2024, 5, 16), time(9, 0))

    def test_clear_remind_me(self, manager, reminder):
        manager.edit(reminder, EditRequest(clear_remind_me=True))
        assert reminder.remind_me_alarm is None

    def test_recurrence_set_and_clear(self, manager, reminder):
        manager.edit(reminder, EditRequest(recurrence=Recurrence.BIWEEKLY))
        assert reminder.recurrence == RecurrenceRule("weekly", 2)

        manager.edit(reminder, EditRequest(clear_recurrence=True))
        assert reminder.recurrence is None

    def test_unflag_goes_through_bridge(self, manager, reminder, bridge):
        manager.edit(reminder, EditRequest(flagged=False))
        bridge.set_flagged.assert_called_once_with(False, reminder.identifier)

    @pytest.mark.parametrize("request_kwargs", [
        {"due": DueDate(date(2024, 6, 1)), "clear_due": True},
        {"url": "https://x", "clear_url": True},
        {"priority": Priority.HIGH, "clear_priority": True},
        {"remind_me": REMIND_AT, "clear_remind_me": True},
        {"recurrence": Recurrence.DAILY, "clear_recurrence": True},
    ])
    def test_set_and_clear_rejected(self, manager, reminder, fake_store, request_kwargs):
        with pytest.raises(ConfigurationError, match="at the same time"):
            manager.edit(reminder, EditRequest(**request_kwargs))
        assert fake_store.saved == []

    def test_empty_edit_rejected(self, manager, reminder):
        with pytest.raises(ConfigurationError, match="Must specify"):
            manager.edit(reminder, EditRequest())


class TestCompleteAndDelete:

    def test_complete_and_uncomplete(self, manager, fake_store):
        reminder = fake_store.add(Reminder("Inbox", "Task"))

        manager.set_completed(reminder, True)
        assert reminder.completed is True

        manager.set_completed(reminder, False)
        assert reminder.completed is False
        assert fake_store.saved == [reminder, reminder]

    def test_delete(self, manager, fake_store):
        reminder = fake_store.add(Reminder("Inbox", "Task"))
        manager.delete(reminder)
        assert fake_store.reminders == []
        assert fake_store.removed == [reminder]


class TestCreateList:
    """Choosing a source for new lists."""

    def test_single_source_is_default(self, manager, fake_store):
        created = manager.create_list("Errands")
        assert created.name == "Errands"
        assert created.source_name == "iCloud"

    def test_named_source(self, manager, fake_store):
        fake_store.sources.append(ReminderSource(title="Local"))
        assert manager.create_list("Errands", "Local").source_name == "Local"

    def test_unknown_source(self, manager):
        with pytest.raises(RemindersError, match="No source named 'Exchange'"):
            manager.create_list("Errands", "Exchange")

    def test_multiple_sources_need_choice(self, manager, fake_store):
        fake_store.sources.append(ReminderSource(title="Local"))
        with pytest.raises(ConfigurationError, match="Local, iCloud"):
            manager.create_list("Errands")

    def test_no_sources(self, manager, fake_store):
        fake_store.sources = []
        with pytest.raises(RemindersError, match="No existing list sources"):
            manager.create_list("Errands")

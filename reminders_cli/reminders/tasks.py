"""Task manager for Reminders create/edit/complete/delete operations."""

from typing import Optional
import logging

from ..core.exceptions import ConfigurationError, RemindersError
from ..core.models import AddRequest, EditRequest, Reminder, ReminderList
from .applescript import AppleScriptBridge
from .gateway import RemindersGateway


class RemindersTaskManager:
    """Applies mutations through the store; flagged state goes through AppleScript."""

    def __init__(
        self,
        gateway: RemindersGateway,
        bridge: Optional[AppleScriptBridge] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.gateway = gateway
        self.logger = logger or logging.getLogger(__name__)
        self.bridge = bridge or AppleScriptBridge(logger=self.logger)

    def add(self, reminder_list: ReminderList, request: AddRequest) -> Reminder:
        """Create and save a new reminder on a list."""
        request.validate()

        reminder = self.gateway.new_reminder(reminder_list)
        reminder.title = request.title
        reminder.set_notes(request.notes, request.url)
        reminder.due = request.due
        reminder.priority = request.priority

        # An explicit remind-me date wins over the due-date alarm
        if request.remind_me is not None:
            reminder.set_remind_me(request.remind_me)
        elif request.due is not None and not request.due.all_day:
            reminder.set_remind_me(request.due.to_datetime())

        if request.recurrence is not None:
            reminder.recurrence = request.recurrence.to_rule()

        self.gateway.save_reminder(reminder)
        self.logger.debug(f"Created reminder '{reminder.title}' on {reminder_list.name}")

        if request.flagged:
            self.bridge.set_flagged(True, reminder.identifier)
        return reminder

    def edit(self, reminder: Reminder, request: EditRequest) -> Reminder:
        """Apply an edit request to an existing reminder and save it."""
        request.validate()

        if request.title:
            reminder.title = request.title

        content, url = reminder.content, reminder.url
        if request.notes is not None:
            content = request.notes
        if request.clear_url:
            url = None
        elif request.url is not None:
            url = request.url
        reminder.set_notes(content, url)

        if request.clear_priority:
            reminder.priority = None
        elif request.priority is not None:
            reminder.priority = request.priority

        if request.clear_due or request.due is not None:
            reminder.due = None
            reminder.clear_time_alarms()
        if request.due is not None:
            reminder.due = request.due
            if request.remind_me is None and not request.clear_remind_me and not request.due.all_day:
                reminder.set_remind_me(request.due.to_datetime())

        if request.clear_remind_me:
            reminder.clear_time_alarms()
        elif request.remind_me is not None:
            reminder.set_remind_me(request.remind_me)

        if request.clear_recurrence:
            reminder.recurrence = None
        elif request.recurrence is not None:
            reminder.recurrence = request.recurrence.to_rule()

        self.gateway.save_reminder(reminder)

        if request.flagged is not None:
            self.bridge.set_flagged(request.flagged, reminder.identifier)
        return reminder

    def set_completed(self, reminder: Reminder, completed: bool) -> Reminder:
        reminder.completed = completed
        self.gateway.save_reminder(reminder)
        return reminder

    def delete(self, reminder: Reminder) -> None:
        self.gateway.remove_reminder(reminder)

    def create_list(self, name: str, source_name: Optional[str] = None) -> ReminderList:
        """Create a list, choosing the source when only one exists.

        Raises:
            RemindersError: If there are no sources or the named one is missing
            ConfigurationError: If several sources exist and none was named
        """
        sources = self.gateway.get_sources()
        if not sources:
            raise RemindersError(
                "No existing list sources were found, please create a list in Reminders.app"
            )

        if source_name is not None:
            matching = [src for src in sources if src.title == source_name]
            if not matching:
                raise RemindersError(f"No source named '{source_name}'")
            source = matching[0]
        else:
            titles = sorted({src.title for src in sources})
            if len(titles) > 1:
                raise ConfigurationError(
                    "Multiple sources were found, please specify one with --source: "
                    + ", ".join(titles)
                )
            source = sources[0]

        return self.gateway.create_list(name, source)

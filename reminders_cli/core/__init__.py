"""
Core module for reminders-cli - contains domain models, configuration, and exceptions.
"""

from .models import (
    Alarm,
    AddRequest,
    CliConfig,
    DueDate,
    EditRequest,
    EnrichedReminder,
    Location,
    Priority,
    Recurrence,
    RecurrenceRule,
    Reminder,
    ReminderList,
    ReminderSource,
)

from .exceptions import (
    RemindersCliError,
    ConfigurationError,
    RemindersError,
    AccessDeniedError,
    EventKitImportError,
    ListNotFoundError,
    ReminderNotFoundError,
    PersistError,
)

__all__ = [
    # Models
    'Alarm',
    'AddRequest',
    'CliConfig',
    'DueDate',
    'EditRequest',
    'EnrichedReminder',
    'Location',
    'Priority',
    'Recurrence',
    'RecurrenceRule',
    'Reminder',
    'ReminderList',
    'ReminderSource',
    # Exceptions
    'RemindersCliError',
    'ConfigurationError',
    'RemindersError',
    'AccessDeniedError',
    'EventKitImportError',
    'ListNotFoundError',
    'ReminderNotFoundError',
    'PersistError',
]

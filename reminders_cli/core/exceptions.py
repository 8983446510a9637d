"""
Exception classes for reminders-cli.
"""


class RemindersCliError(Exception):
    """Base exception for all reminders-cli errors."""
    pass


class ConfigurationError(RemindersCliError):
    """Raised when configuration or command options are invalid."""
    pass


class RemindersError(RemindersCliError):
    """Base exception for Reminders store errors."""
    pass


class AccessDeniedError(RemindersError):
    """Raised when access to Reminders is refused."""
    pass


class EventKitImportError(RemindersError):
    """Raised when EventKit/PyObjC dependencies are not available."""
    pass


class ListNotFoundError(RemindersError):
    """Raised when no reminders list matches the requested name."""

    def __init__(self, name: str):
        super().__init__(f"No reminders list matching {name}")
        self.name = name


class ReminderNotFoundError(RemindersError):
    """Raised when an index or identifier does not resolve to a reminder."""

    def __init__(self, index: str, list_name: str):
        super().__init__(f"No reminder at index {index} on {list_name}")
        self.index = index
        self.list_name = list_name


class PersistError(RemindersError):
    """Raised when the store rejects a save or remove."""
    pass

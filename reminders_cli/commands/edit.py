"""Edit, complete and delete commands - mutate a reminder addressed by index or id."""

from ..core.models import EditRequest
from ..query.filters import CompletionState
from .base import BaseCommand


class EditCommand(BaseCommand):
    """Edit an incomplete reminder."""

    def run(self, list_name: str, index: str, request: EditRequest) -> bool:
        request.validate()
        reminder = self.build_engine().find_reminder(list_name, index, CompletionState.INCOMPLETE)
        self.build_manager().edit(reminder, request)
        print(f"Updated reminder '{reminder.title}'")
        return True


class CompleteCommand(BaseCommand):
    """Mark a reminder complete, or incomplete again."""

    def run(self, list_name: str, index: str, complete: bool = True) -> bool:
        # Completing addresses incomplete items, uncompleting addresses completed ones
        completion = CompletionState.INCOMPLETE if complete else CompletionState.COMPLETE
        reminder = self.build_engine().find_reminder(list_name, index, completion)
        self.build_manager().set_completed(reminder, complete)
        action = "Completed" if complete else "Uncompleted"
        print(f"{action} '{reminder.title}'")
        return True


class DeleteCommand(BaseCommand):
    """Delete an incomplete reminder."""

    def run(self, list_name: str, index: str) -> bool:
        reminder = self.build_engine().find_reminder(list_name, index, CompletionState.INCOMPLETE)
        self.build_manager().delete(reminder)
        print(f"Deleted '{reminder.title}'")
        return True

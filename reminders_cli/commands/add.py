"""Add command - create a reminder on a list."""

from ..core.models import AddRequest, EnrichedReminder
from ..query.presenter import OutputFormat, render_json, to_record
from .base import BaseCommand


class AddCommand(BaseCommand):
    """Add a reminder to a list."""

    def run(self, list_name: str, request: AddRequest,
            output_format: OutputFormat = OutputFormat.PLAIN) -> bool:
        request.validate()
        reminder_list = self.build_engine().resolve_list(list_name)
        reminder = self.build_manager().add(reminder_list, request)

        if output_format is OutputFormat.JSON:
            print(render_json(to_record(EnrichedReminder(reminder, flagged=request.flagged))))
        else:
            print(f"Added '{reminder.title}' to '{reminder_list.name}'")
        return True

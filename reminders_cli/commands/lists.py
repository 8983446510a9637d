"""List commands - show the available lists and create new ones."""

from typing import Optional

from ..query.presenter import OutputFormat, render_lists
from .base import BaseCommand


class ShowListsCommand(BaseCommand):
    """Print the names of lists to pass to other commands."""

    def run(self, output_format: OutputFormat = OutputFormat.PLAIN, show_color: bool = False) -> bool:
        lists = self.gateway.get_lists()
        output = render_lists(lists, output_format, show_color=show_color)
        if output:
            print(output)
        return True


class NewListCommand(BaseCommand):
    """Create a new reminders list."""

    def run(self, name: str, source: Optional[str] = None) -> bool:
        created = self.build_manager().create_list(name, source)
        print(f"Created new list '{created.name}'!")
        return True

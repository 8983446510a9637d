"""Show commands - print reminders from one list or from every list."""

from datetime import datetime
from typing import Optional

from ..query.filters import FilterCriteria
from ..query.presenter import OutputFormat, render
from ..query.sorting import SortKey, SortOrder
from .base import BaseCommand


class ShowCommand(BaseCommand):
    """Print the reminders of a list, or of all lists when no name is given."""

    def run(
        self,
        list_name: Optional[str] = None,
        criteria: Optional[FilterCriteria] = None,
        sort_key: SortKey = SortKey.NONE,
        sort_order: SortOrder = SortOrder.ASCENDING,
        output_format: OutputFormat = OutputFormat.PLAIN,
        now: Optional[datetime] = None,
    ) -> bool:
        engine = self.build_engine()
        items = engine.query(
            list_name=list_name,
            criteria=criteria,
            sort_key=sort_key,
            sort_order=sort_order,
        )

        output = render(items, output_format, now=now, show_list=list_name is None)
        if output:
            print(output)
        return True

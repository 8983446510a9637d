"""Filter predicates applied to enriched reminders."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..core.exceptions import ConfigurationError
from ..core.models import EnrichedReminder, Reminder


class CompletionState(Enum):
    ALL = "all"
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


@dataclass(frozen=True)
class FilterCriteria:
    """Independently optional filter knobs. All set knobs must match."""

    completion: CompletionState = CompletionState.INCOMPLETE
    has_due_date: bool = False
    due_on: Optional[date] = None
    include_overdue: bool = False
    only_flagged: bool = False
    required_tag: Optional[str] = None
    required_section: Optional[str] = None

    @classmethod
    def from_flags(cls, only_completed: bool = False, include_completed: bool = False,
                   **knobs) -> "FilterCriteria":
        """Build criteria from the command line's completion flags."""
        if only_completed and include_completed:
            raise ConfigurationError(
                "Cannot specify both --include-completed and --only-completed"
            )
        if only_completed:
            completion = CompletionState.COMPLETE
        elif include_completed:
            completion = CompletionState.ALL
        else:
            completion = CompletionState.INCOMPLETE
        return cls(completion=completion, **knobs)

    @property
    def needs_attributes(self) -> bool:
        return self.only_flagged or self.required_tag is not None or self.required_section is not None


def matches_completion(reminder: Reminder, completion: CompletionState) -> bool:
    if completion is CompletionState.INCOMPLETE:
        return not reminder.completed
    if completion is CompletionState.COMPLETE:
        return reminder.completed
    return True


def matches_due(reminder: Reminder, due_on: date, include_overdue: bool) -> bool:
    """Same calendar day, or any earlier day when overdue items are included."""
    if reminder.due is None:
        return False
    if reminder.due.day == due_on:
        return True
    return include_overdue and reminder.due.day < due_on


def matches(item: EnrichedReminder, criteria: FilterCriteria) -> bool:
    reminder = item.reminder

    if not matches_completion(reminder, criteria.completion):
        return False
    if criteria.only_flagged and not item.flagged:
        return False
    if criteria.has_due_date and reminder.due is None:
        return False
    if criteria.required_section is not None and item.section != criteria.required_section:
        return False
    if criteria.required_tag is not None and criteria.required_tag not in item.tags:
        return False
    if criteria.due_on is not None and not matches_due(reminder, criteria.due_on, criteria.include_overdue):
        return False
    return True

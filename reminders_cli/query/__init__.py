"""Querying reminders: filtering, sorting, rendering."""

from .engine import ReminderQueryEngine
from .filters import CompletionState, FilterCriteria, matches
from .presenter import OutputFormat, render, render_lists, to_record
from .sorting import SortKey, SortOrder, compare, sort_reminders

__all__ = [
    'ReminderQueryEngine',
    'CompletionState',
    'FilterCriteria',
    'matches',
    'OutputFormat',
    'render',
    'render_lists',
    'to_record',
    'SortKey',
    'SortOrder',
    'compare',
    'sort_reminders',
]

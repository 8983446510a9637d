"""Ordering of reminders for display."""

from datetime import datetime
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Dict, List, Optional, Sequence

from ..core.models import EnrichedReminder, Reminder


class SortKey(Enum):
    NONE = "none"
    DUE_DATE = "due-date"
    CREATION_DATE = "creation-date"
    MODIFICATION_DATE = "modification-date"
    COMPLETION_DATE = "completion-date"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class SortOrder(Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


def _due(reminder: Reminder) -> Optional[datetime]:
    return reminder.due.to_datetime() if reminder.due else None


_EXTRACTORS: Dict[SortKey, Callable[[Reminder], Optional[datetime]]] = {
    SortKey.DUE_DATE: _due,
    SortKey.CREATION_DATE: lambda r: r.created_at,
    SortKey.MODIFICATION_DATE: lambda r: r.modified_at,
    SortKey.COMPLETION_DATE: lambda r: r.completion_date,
}


def sort_value(reminder: Reminder, key: SortKey) -> Optional[datetime]:
    extractor = _EXTRACTORS.get(key)
    if extractor is None:
        return None
    value = extractor(reminder)
    if value is not None and value.tzinfo is None:
        value = value.astimezone()
    return value


def compare(a: Reminder, b: Reminder, key: SortKey, order: SortOrder) -> int:
    """
    Three-way comparison for the given key.

    A missing value sorts after every present value regardless of order;
    the order only flips comparisons between two present values.
    """
    if key is SortKey.NONE:
        return 0

    left, right = sort_value(a, key), sort_value(b, key)
    if left is None and right is None:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1

    result = (left > right) - (left < right)
    return -result if order is SortOrder.DESCENDING else result


def sort_reminders(
    items: Sequence[EnrichedReminder],
    key: SortKey,
    order: SortOrder = SortOrder.ASCENDING,
) -> List[EnrichedReminder]:
    """Stable sort; equal keys keep their fetch order."""
    if key is SortKey.NONE:
        return list(items)
    return sorted(
        items,
        key=cmp_to_key(lambda a, b: compare(a.reminder, b.reminder, key, order)),
    )

"""Query engine: fetch, enrich, filter, sort.

The primary store fetch runs on the calling thread while the attribute index
is built on a worker thread; the two touch disjoint resources. Store failures
propagate, attribute failures degrade to an empty index.
"""

import logging
import threading
from typing import Callable, List, Optional

from ..core.exceptions import ListNotFoundError, ReminderNotFoundError
from ..core.models import EnrichedReminder, Reminder, ReminderList
from ..reminders.attributes import AttributeIndex, lookup_key
from ..reminders.database import RemindersDatabase, build_attribute_index
from ..reminders.gateway import RemindersGateway
from .filters import CompletionState, FilterCriteria, matches, matches_completion
from .sorting import SortKey, SortOrder, sort_reminders


class ReminderQueryEngine:
    """Answers reminder queries against an explicit store handle."""

    def __init__(
        self,
        store: RemindersGateway,
        database: Optional[RemindersDatabase] = None,
        enrich: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.database = database
        self.enrich_attributes = enrich and database is not None
        self.logger = logger or logging.getLogger(__name__)

    def get_lists(self) -> List[ReminderList]:
        return self.store.get_lists()

    def resolve_list(self, name: str) -> ReminderList:
        """Find a list by case-insensitive name.

        Raises:
            ListNotFoundError: If no list matches
        """
        wanted = name.lower()
        for reminder_list in self.store.get_lists():
            if reminder_list.name.lower() == wanted:
                return reminder_list
        raise ListNotFoundError(name)

    def build_index(self) -> AttributeIndex:
        if not self.enrich_attributes:
            return AttributeIndex.empty()
        try:
            return build_attribute_index(self.database, logger=self.logger)
        except Exception as e:
            self.logger.debug(f"Attribute index unavailable: {e}")
            return AttributeIndex.empty()

    def _start_index_build(self) -> Callable[[], AttributeIndex]:
        """Build the index on a worker thread; the returned callable joins it."""
        holder = {'index': AttributeIndex.empty()}

        def run():
            holder['index'] = self.build_index()

        worker = threading.Thread(target=run, name="attribute-index", daemon=True)
        worker.start()

        def join() -> AttributeIndex:
            worker.join()
            return holder['index']

        return join

    def fetch_candidates(self, lists: List[ReminderList], completion: CompletionState) -> List[Reminder]:
        """Fetch reminders and keep those in the requested completion state.

        Positional indices refer to this sequence.
        """
        reminders = self.store.fetch_reminders(lists)
        return [r for r in reminders if matches_completion(r, completion)]

    @staticmethod
    def enrich(reminder: Reminder, index: AttributeIndex,
               position: Optional[int] = None) -> EnrichedReminder:
        key = lookup_key(reminder.list_name, reminder.title)
        return EnrichedReminder(
            reminder=reminder,
            flagged=index.is_flagged(key),
            tags=index.tags_for(key),
            section=index.section_for(key),
            index=position,
        )

    def query(
        self,
        list_name: Optional[str] = None,
        criteria: Optional[FilterCriteria] = None,
        sort_key: SortKey = SortKey.NONE,
        sort_order: SortOrder = SortOrder.ASCENDING,
    ) -> List[EnrichedReminder]:
        """Run one query over a single list, or every list when none is given."""
        criteria = criteria or FilterCriteria()

        lists = [self.resolve_list(list_name)] if list_name else self.get_lists()

        self.logger.debug("Fetching candidates and building attribute index")
        join_index = self._start_index_build()
        try:
            candidates = self.fetch_candidates(lists, criteria.completion)
        finally:
            index = join_index()
        self.logger.debug(f"Fetched {len(candidates)} candidates")

        positional = sort_key is SortKey.NONE
        enriched = [
            self.enrich(reminder, index, position if positional else None)
            for position, reminder in enumerate(candidates)
        ]

        ordered = sort_reminders(enriched, sort_key, sort_order)
        results = [item for item in ordered if matches(item, criteria)]
        self.logger.debug(f"{len(results)} reminders matched")
        return results

    def find_reminder(self, list_name: str, index: str,
                      completion: CompletionState = CompletionState.INCOMPLETE) -> Reminder:
        """Resolve a positional index or external identifier on a list.

        Raises:
            ListNotFoundError: If the list does not exist
            ReminderNotFoundError: If nothing matches
        """
        reminder_list = self.resolve_list(list_name)
        candidates = self.fetch_candidates([reminder_list], completion)

        if index.isdigit():
            position = int(index)
            if position < len(candidates):
                return candidates[position]
        else:
            for reminder in candidates:
                if reminder.identifier == index:
                    return reminder

        raise ReminderNotFoundError(index, list_name)

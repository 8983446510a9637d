"""Reminder attributes that EventKit does not expose (flagged, tags, section).

EventKit identifiers and the identifiers stored in the Reminders database use
unrelated schemes, so the two views are joined on list name + title. Two
reminders with the same title in the same list share one key and therefore
one attribute set.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

KEY_SEPARATOR = "\0"


def lookup_key(list_name: str, title: Optional[str]) -> str:
    """Build the composite "listName\\0title" key."""
    return f"{list_name}{KEY_SEPARATOR}{title or ''}"


def split_key(key: str) -> Tuple[str, str]:
    """Inverse of lookup_key."""
    list_name, _, title = key.partition(KEY_SEPARATOR)
    return list_name, title


@dataclass(frozen=True)
class AttributeIndex:
    """Read-only lookup tables built once per invocation."""

    flagged_keys: FrozenSet[str] = frozenset()
    tags: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    sections: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def empty(cls) -> "AttributeIndex":
        return cls()

    @classmethod
    def build(
        cls,
        flagged_keys: Iterable[str],
        tags: Dict[str, List[str]],
        sections: Dict[str, str],
    ) -> "AttributeIndex":
        return cls(
            flagged_keys=frozenset(flagged_keys),
            tags=MappingProxyType({key: tuple(values) for key, values in tags.items()}),
            sections=MappingProxyType(dict(sections)),
        )

    def is_flagged(self, key: str) -> bool:
        return key in self.flagged_keys

    def tags_for(self, key: str) -> List[str]:
        return list(self.tags.get(key, ()))

    def section_for(self, key: str) -> Optional[str]:
        return self.sections.get(key)

    @property
    def is_empty(self) -> bool:
        return not (self.flagged_keys or self.tags or self.sections)

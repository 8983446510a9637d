"""Read-only access to the Reminders app SQLite stores.

The Reminders app keeps one CoreData store per account under its group
container. These stores hold attributes EventKit does not expose, so they are
queried directly. They are never written: CloudKit sync owns them.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import sqlite3
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple, TypeVar

from ..core.models import DEFAULT_DATABASE_DIR, INCOMPATIBLE_DATABASES
from .attributes import AttributeIndex, lookup_key

T = TypeVar("T")

FLAGGED_SQL = """
    SELECT r.ZTITLE, l.ZNAME
    FROM ZREMCDREMINDER r
    JOIN ZREMCDBASELIST l ON r.ZLIST = l.Z_PK
    WHERE r.ZFLAGGED = 1 AND r.ZMARKEDFORDELETION = 0
"""

TAGS_SQL = """
    SELECT r.ZTITLE, l.ZNAME, h.ZNAME
    FROM ZREMCDOBJECT o
    JOIN ZREMCDHASHTAGLABEL h ON o.ZHASHTAGLABEL = h.Z_PK
    JOIN ZREMCDREMINDER r ON o.ZREMINDER3 = r.Z_PK
    JOIN ZREMCDBASELIST l ON r.ZLIST = l.Z_PK
    WHERE o.ZMARKEDFORDELETION = 0 AND r.ZMARKEDFORDELETION = 0
    ORDER BY o.Z_PK
"""

SECTIONS_SQL = """
    SELECT ZCKIDENTIFIER, ZDISPLAYNAME FROM ZREMCDBASESECTION
    WHERE ZMARKEDFORDELETION = 0 AND ZDISPLAYNAME IS NOT NULL
"""

REMINDER_KEYS_SQL = """
    SELECT r.ZCKIDENTIFIER, r.ZTITLE, l.ZNAME
    FROM ZREMCDREMINDER r
    JOIN ZREMCDBASELIST l ON r.ZLIST = l.Z_PK
    WHERE r.ZMARKEDFORDELETION = 0
"""

MEMBERSHIPS_SQL = """
    SELECT ZMEMBERSHIPSOFREMINDERSINSECTIONSASDATA
    FROM ZREMCDBASELIST
    WHERE ZMEMBERSHIPSOFREMINDERSINSECTIONSASDATA IS NOT NULL
"""


def _text(value) -> Optional[str]:
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return None
    return value if isinstance(value, str) else None


class FlaggedRow(NamedTuple):
    title: str
    list_name: str

    @classmethod
    def from_row(cls, row: Sequence) -> Optional[FlaggedRow]:
        title, list_name = _text(row[0]), _text(row[1])
        if title is None or list_name is None:
            return None
        return cls(title, list_name)


class TagRow(NamedTuple):
    title: str
    list_name: str
    tag: str

    @classmethod
    def from_row(cls, row: Sequence) -> Optional[TagRow]:
        title, list_name, tag = _text(row[0]), _text(row[1]), _text(row[2])
        if title is None or list_name is None or tag is None:
            return None
        return cls(title, list_name, tag)


class SectionRow(NamedTuple):
    identifier: str
    display_name: str

    @classmethod
    def from_row(cls, row: Sequence) -> Optional[SectionRow]:
        identifier, name = _text(row[0]), _text(row[1])
        if identifier is None or name is None:
            return None
        return cls(identifier, name)


class ReminderKeyRow(NamedTuple):
    identifier: str
    key: str

    @classmethod
    def from_row(cls, row: Sequence) -> Optional[ReminderKeyRow]:
        identifier, title, list_name = _text(row[0]), _text(row[1]), _text(row[2])
        if identifier is None or title is None or list_name is None:
            return None
        return cls(identifier, lookup_key(list_name, title))


class Membership(NamedTuple):
    member_id: str
    group_id: str


def decode_memberships(blob) -> List[Membership]:
    """Decode a list's section membership blob.

    Returns an empty list when the blob is missing or malformed.
    """
    if blob is None:
        return []
    if isinstance(blob, memoryview):
        blob = blob.tobytes()
    try:
        data = json.loads(blob)
    except (TypeError, ValueError):
        return []
    if not isinstance(data, dict) or not isinstance(data.get("memberships"), list):
        return []

    memberships = []
    for entry in data["memberships"]:
        if not isinstance(entry, dict):
            continue
        member_id, group_id = entry.get("memberID"), entry.get("groupID")
        if isinstance(member_id, str) and isinstance(group_id, str):
            memberships.append(Membership(member_id, group_id))
    return memberships


class RemindersDatabase:
    """Queries the Data-*.sqlite stores in the Reminders group container."""

    def __init__(
        self,
        container_path: str = DEFAULT_DATABASE_DIR,
        excluded_names: Sequence[str] = INCOMPATIBLE_DATABASES,
        logger: Optional[logging.Logger] = None,
    ):
        self.container_path = os.path.abspath(os.path.expanduser(container_path))
        self.excluded_names = set(excluded_names) | set(INCOMPATIBLE_DATABASES)
        self.logger = logger or logging.getLogger(__name__)

    def find_databases(self) -> List[str]:
        """List readable store partitions, sorted by file name."""
        try:
            names = os.listdir(self.container_path)
        except OSError as e:
            self.logger.debug(f"Reminders database directory unavailable: {e}")
            return []

        paths = []
        for name in sorted(names):
            if not (name.startswith("Data-") and name.endswith(".sqlite")):
                continue
            if name in self.excluded_names:
                self.logger.debug(f"Skipping incompatible store {name}")
                continue
            paths.append(os.path.join(self.container_path, name))
        return paths

    @contextlib.contextmanager
    def _connect(self, db_path: str) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True, timeout=5.0)
        try:
            yield conn
        finally:
            conn.close()

    def query_rows(
        self,
        db_path: str,
        sql: str,
        decode: Callable[[Sequence], Optional[T]],
    ) -> List[T]:
        """Run a query and decode each row, dropping rows that fail to decode.

        Any SQLite error yields an empty result.
        """
        try:
            with self._connect(db_path) as conn:
                rows = conn.execute(sql).fetchall()
        except sqlite3.Error as e:
            self.logger.debug(f"Query failed on {os.path.basename(db_path)}: {e}")
            return []

        decoded = []
        for row in rows:
            item = decode(row)
            if item is not None:
                decoded.append(item)
        return decoded

    def flagged_keys(self, db_path: str) -> List[str]:
        rows = self.query_rows(db_path, FLAGGED_SQL, FlaggedRow.from_row)
        return [lookup_key(row.list_name, row.title) for row in rows]

    def tag_rows(self, db_path: str) -> List[Tuple[str, str]]:
        rows = self.query_rows(db_path, TAGS_SQL, TagRow.from_row)
        return [(lookup_key(row.list_name, row.title), row.tag) for row in rows]

    def section_assignments(self, db_path: str) -> Dict[str, str]:
        """Map reminder keys to section names for one store.

        Sections have no direct foreign key to reminders; the link lives in a
        JSON blob on each list mapping reminder identifiers to section
        identifiers.
        """
        section_names = {
            row.identifier: row.display_name
            for row in self.query_rows(db_path, SECTIONS_SQL, SectionRow.from_row)
        }
        if not section_names:
            return {}

        keys_by_identifier: Dict[str, str] = {}
        for row in self.query_rows(db_path, REMINDER_KEYS_SQL, ReminderKeyRow.from_row):
            keys_by_identifier[row.identifier] = row.key

        blobs = self.query_rows(db_path, MEMBERSHIPS_SQL, lambda row: row[0])

        result: Dict[str, str] = {}
        for blob in blobs:
            for membership in decode_memberships(blob):
                key = keys_by_identifier.get(membership.member_id)
                section = section_names.get(membership.group_id)
                if key is None or section is None:
                    continue
                result[key] = section
        return result


def build_attribute_index(
    database: Optional[RemindersDatabase],
    logger: Optional[logging.Logger] = None,
) -> AttributeIndex:
    """Scan every store partition and build the attribute index.

    An unreadable container produces an empty index.
    """
    logger = logger or logging.getLogger(__name__)
    if database is None:
        return AttributeIndex.empty()

    flagged: List[str] = []
    tags: Dict[str, List[str]] = {}
    sections: Dict[str, str] = {}

    for db_path in database.find_databases():
        flagged.extend(database.flagged_keys(db_path))
        for key, tag in database.tag_rows(db_path):
            tags.setdefault(key, []).append(tag)
        sections.update(database.section_assignments(db_path))

    index = AttributeIndex.build(flagged, tags, sections)
    logger.debug(
        f"Attribute index: {len(index.flagged_keys)} flagged, "
        f"{len(index.tags)} tagged, {len(index.sections)} in sections"
    )
    return index

"""
Domain models for reminders-cli.

This module contains the data structures shared by the store adapter, the
attribute reader, the query engine and the presenter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time as dtime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import json
import os

from ..utils.notes import decode_notes, encode_notes
from .exceptions import ConfigurationError


DEFAULT_DATABASE_DIR = (
    "~/Library/Group Containers/group.com.apple.reminders/Container_v1/Stores"
)

# Data-local.sqlite has no ZREMCDREMINDER table
INCOMPATIBLE_DATABASES = ("Data-local.sqlite",)

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
WORKWEEK = frozenset(WEEKDAY_CODES[:5])


def _normalize_path(path: str) -> str:
    """Expand user and convert to absolute path."""
    return os.path.abspath(os.path.expanduser(path))


def _parse_bool(value: Any, default: bool) -> bool:
    """Read a JSON flag; strings like "false" or "no" are falsy."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "on", "1"):
            return True
        if text in ("false", "no", "off", "0"):
            return False
    return default


def _parse_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class Priority(Enum):
    """Reminder priority levels. "none" is modelled as an absent priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def to_ordinal(self) -> int:
        return _PRIORITY_ORDINALS[self]

    @classmethod
    def from_ordinal(cls, value: Optional[int]) -> Optional[Priority]:
        """Map an EventKit priority (0-9) onto the domain enum.

        EventKit treats 1-4 as high, 5 as medium and 6-9 as low.
        """
        if not value or value < 0:
            return None
        if value <= 4:
            return cls.HIGH
        if value == 5:
            return cls.MEDIUM
        if value <= 9:
            return cls.LOW
        return None

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[Priority]:
        if value is None:
            return None
        value = value.strip().lower()
        if value in ("", "none"):
            return None
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Unknown priority '{value}', expected one of: none, low, medium, high"
            )


_PRIORITY_ORDINALS = {Priority.HIGH: 1, Priority.MEDIUM: 5, Priority.LOW: 9}


def priority_ordinal(priority: Optional[Priority]) -> int:
    return priority.to_ordinal() if priority else 0


@dataclass(frozen=True)
class RecurrenceRule:
    """A single recurrence rule as read from the store."""

    frequency: str
    interval: int = 1
    days_of_week: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "frequency": self.frequency,
            "interval": self.interval,
        }
        if self.days_of_week:
            data["daysOfTheWeek"] = list(self.days_of_week)
        return data


class Recurrence(Enum):
    """Recurrence presets accepted on the command line."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    def to_rule(self) -> RecurrenceRule:
        if self is Recurrence.WEEKDAYS:
            return RecurrenceRule("weekly", 1, WEEKDAY_CODES[:5])
        if self is Recurrence.BIWEEKLY:
            return RecurrenceRule("weekly", 2)
        return RecurrenceRule(self.value, 1)

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


@dataclass(frozen=True)
class DueDate:
    """A calendar day with an optional time of day.

    Without a time the due date is all-day.
    """

    day: date
    time: Optional[dtime] = None

    @property
    def all_day(self) -> bool:
        return self.time is None

    def to_datetime(self) -> datetime:
        """Local, timezone-aware instant (midnight for all-day dates)."""
        return datetime.combine(self.day, self.time or dtime()).astimezone()


@dataclass(frozen=True)
class Location:
    title: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class Alarm:
    """An alarm is either time-based (absolute date) or location-based."""

    absolute_date: Optional[datetime] = None
    location: Optional[Location] = None

    @property
    def is_time_based(self) -> bool:
        return self.location is None


@dataclass
class ReminderList:
    """Represents an Apple Reminders list."""

    name: str
    identifier: str = ""
    source_name: Optional[str] = None
    color: Optional[str] = None
    allows_modification: bool = True
    native: Any = field(default=None, repr=False, compare=False)


@dataclass
class ReminderSource:
    """An account that can own reminders lists (iCloud, local, ...)."""

    title: str
    identifier: str = ""
    native: Any = field(default=None, repr=False, compare=False)


@dataclass
class Reminder:
    """A reminder as read from the primary store."""

    list_name: str
    title: Optional[str] = None
    identifier: Optional[str] = None
    notes: Optional[str] = None
    completed: bool = False
    completion_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    due: Optional[DueDate] = None
    start: Optional[DueDate] = None
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    alarms: List[Alarm] = field(default_factory=list)
    recurrence: Optional[RecurrenceRule] = None
    native: Any = field(default=None, repr=False, compare=False)

    @property
    def content(self) -> Optional[str]:
        return decode_notes(self.notes)[0]

    @property
    def url(self) -> Optional[str]:
        return decode_notes(self.notes)[1]

    def set_notes(self, content: Optional[str], url: Optional[str]) -> None:
        self.notes = encode_notes(content, url)

    @property
    def remind_me_alarm(self) -> Optional[Alarm]:
        """The first time-based alarm, treated as the canonical one."""
        for alarm in self.alarms:
            if alarm.is_time_based:
                return alarm
        return None

    def clear_time_alarms(self) -> None:
        self.alarms = [alarm for alarm in self.alarms if not alarm.is_time_based]

    def set_remind_me(self, when: datetime) -> None:
        """Replace every time-based alarm; location alarms are kept."""
        self.clear_time_alarms()
        self.alarms.append(Alarm(absolute_date=when))


@dataclass
class EnrichedReminder:
    """A reminder merged with the attributes read from the Reminders database."""

    reminder: Reminder
    flagged: bool = False
    tags: List[str] = field(default_factory=list)
    section: Optional[str] = None
    index: Optional[int] = None

    @property
    def list_name(self) -> str:
        return self.reminder.list_name


@dataclass
class AddRequest:
    """Everything needed to create a reminder."""

    title: str
    notes: Optional[str] = None
    url: Optional[str] = None
    due: Optional[DueDate] = None
    priority: Optional[Priority] = None
    remind_me: Optional[datetime] = None
    recurrence: Optional[Recurrence] = None
    flagged: bool = False

    def validate(self) -> None:
        if not self.title or not self.title.strip():
            raise ConfigurationError("Reminder contents cannot be empty.")


@dataclass
class EditRequest:
    """Changes to apply to an existing reminder. ``None`` means unchanged."""

    title: Optional[str] = None
    notes: Optional[str] = None
    url: Optional[str] = None
    clear_url: bool = False
    due: Optional[DueDate] = None
    clear_due: bool = False
    priority: Optional[Priority] = None
    clear_priority: bool = False
    remind_me: Optional[datetime] = None
    clear_remind_me: bool = False
    recurrence: Optional[Recurrence] = None
    clear_recurrence: bool = False
    flagged: Optional[bool] = None

    def validate(self) -> None:
        pairs = [
            (self.due is not None, self.clear_due, "due date"),
            (self.url is not None, self.clear_url, "URL"),
            (self.priority is not None, self.clear_priority, "priority"),
            (self.remind_me is not None, self.clear_remind_me, "remind-me date"),
            (self.recurrence is not None, self.clear_recurrence, "recurrence"),
        ]
        for is_set, is_cleared, label in pairs:
            if is_set and is_cleared:
                raise ConfigurationError(
                    f"Don't try to set & clear the {label} at the same time."
                )

        if not self.has_changes():
            raise ConfigurationError(
                "Must specify new reminder content, new notes, a new URL, a new due date, "
                "a priority, a remind-me date, a recurrence, or a flag change."
            )

    def has_changes(self) -> bool:
        return any([
            self.title, self.notes is not None, self.url is not None, self.clear_url,
            self.due is not None, self.clear_due,
            self.priority is not None, self.clear_priority,
            self.remind_me is not None, self.clear_remind_me,
            self.recurrence is not None, self.clear_recurrence,
            self.flagged is not None,
        ])


@dataclass
class CliConfig:
    """User configuration for reminders-cli."""

    database_dir: str = DEFAULT_DATABASE_DIR
    excluded_databases: List[str] = field(
        default_factory=lambda: list(INCOMPATIBLE_DATABASES)
    )
    enrich_attributes: bool = True
    default_format: str = "plain"
    osascript_path: str = "/usr/bin/osascript"
    fetch_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.default_format not in ("plain", "json"):
            raise ConfigurationError(
                f"default_format must be 'plain' or 'json', got '{self.default_format}'"
            )
        for name in INCOMPATIBLE_DATABASES:
            if name not in self.excluded_databases:
                self.excluded_databases.append(name)

    @property
    def database_path(self) -> str:
        return _normalize_path(self.database_dir)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database_dir": self.database_dir,
            "excluded_databases": self.excluded_databases,
            "enrich_attributes": self.enrich_attributes,
            "default_format": self.default_format,
            "osascript_path": self.osascript_path,
            "fetch_timeout": self.fetch_timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CliConfig:
        defaults = cls()
        return cls(
            database_dir=data.get("database_dir", defaults.database_dir),
            excluded_databases=list(
                data.get("excluded_databases", defaults.excluded_databases)
            ),
            enrich_attributes=_parse_bool(
                data.get("enrich_attributes"), defaults.enrich_attributes
            ),
            default_format=data.get("default_format", defaults.default_format),
            osascript_path=data.get("osascript_path", defaults.osascript_path),
            fetch_timeout=_parse_float(data.get("fetch_timeout"), defaults.fetch_timeout),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> CliConfig:
        config_path = _normalize_path(config_path)
        if not os.path.exists(config_path):
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError:
            return cls()

        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def save_to_file(self, config_path: str) -> None:
        config_path = _normalize_path(config_path)
        with open(config_path, "w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2)

"""Apple Reminders gateway using EventKit."""

import threading
import time
from datetime import datetime, timezone, time as dtime
from typing import Any, Dict, List, Optional, Sequence
import logging

from ..core.exceptions import (
    AccessDeniedError,
    EventKitImportError,
    PersistError,
    RemindersError,
)
from ..core.models import (
    Alarm,
    DueDate,
    Location,
    Priority,
    RecurrenceRule,
    Reminder,
    ReminderList,
    ReminderSource,
    priority_ordinal,
)

# EKRecurrenceFrequency values
FREQUENCIES = {0: "daily", 1: "weekly", 2: "monthly", 3: "yearly"}
FREQUENCY_VALUES = {name: value for value, name in FREQUENCIES.items()}

# EKWeekday runs Sunday=1 .. Saturday=7
WEEKDAYS = {1: "SU", 2: "MO", 3: "TU", 4: "WE", 5: "TH", 6: "FR", 7: "SA"}
WEEKDAY_VALUES = {code: value for value, code in WEEKDAYS.items()}


def _to_datetime(nsdate) -> Optional[datetime]:
    if nsdate is None:
        return None
    return datetime.fromtimestamp(nsdate.timeIntervalSince1970(), tz=timezone.utc)


def _components_to_due(components) -> Optional[DueDate]:
    """Convert NSDateComponents to a DueDate.

    Unset components report NSDateComponentUndefined, which is never a valid
    hour; such dates are all-day.
    """
    if components is None:
        return None
    try:
        year, month, day = components.year(), components.month(), components.day()
        due_day = datetime(int(year), int(month), int(day)).date()
    except (TypeError, ValueError, OverflowError):
        return None

    hour = components.hour()
    if hour is None or not 0 <= hour <= 23:
        return DueDate(due_day)
    minute = components.minute()
    if minute is None or not 0 <= minute <= 59:
        minute = 0
    return DueDate(due_day, dtime(int(hour), int(minute)))


def _to_alarms(natives) -> List[Alarm]:
    """Convert EKAlarms; relative-offset alarms come back with no absolute date."""
    alarms = []
    for alarm in natives:
        location = alarm.structuredLocation()
        if location is not None:
            geo = location.geoLocation()
            coordinate = geo.coordinate() if geo is not None else None
            alarms.append(Alarm(location=Location(
                title=str(location.title()) if location.title() else None,
                latitude=coordinate.latitude if coordinate is not None else None,
                longitude=coordinate.longitude if coordinate is not None else None,
            )))
        else:
            alarms.append(Alarm(absolute_date=_to_datetime(alarm.absoluteDate())))
    return alarms


def _color_to_hex(color) -> Optional[str]:
    if color is None:
        return None
    try:
        c = color.colorUsingColorSpaceName_("NSCalibratedRGBColorSpace")
        if c is None:
            return None
        r = int(round(c.redComponent() * 255))
        g = int(round(c.greenComponent() * 255))
        b = int(round(c.blueComponent() * 255))
        return f"#{r:02X}{g:02X}{b:02X}"
    except (AttributeError, TypeError, ValueError):
        return None


class RemindersGateway:
    """Primary reminder store backed by EventKit."""

    def __init__(self, logger: Optional[logging.Logger] = None, fetch_timeout: float = 30.0):
        self.logger = logger or logging.getLogger(__name__)
        self.fetch_timeout = fetch_timeout
        self._store = None
        self._ek: Dict[str, Any] = {}

    def _ensure_eventkit(self):
        """Import EventKit with specific error handling."""
        if self._ek:
            return
        try:
            import EventKit
            import Foundation
        except ImportError as e:
            self.logger.error(f"EventKit import failed: {e}")
            raise EventKitImportError(
                "EventKit not available. Please install PyObjC framework:\n"
                "  pip install pyobjc-framework-EventKit\n"
                f"Import error details: {e}"
            )

        self._ek = {
            "EKEventStore": EventKit.EKEventStore,
            "EKReminder": EventKit.EKReminder,
            "EKAlarm": EventKit.EKAlarm,
            "EKCalendar": EventKit.EKCalendar,
            "EKRecurrenceRule": EventKit.EKRecurrenceRule,
            "EKRecurrenceDayOfWeek": EventKit.EKRecurrenceDayOfWeek,
            "EKEntityTypeReminder": EventKit.EKEntityTypeReminder,
            "NSDateComponents": Foundation.NSDateComponents,
            "NSDate": Foundation.NSDate,
            "NSRunLoop": Foundation.NSRunLoop,
        }

    def _get_store(self):
        if self._store is not None:
            return self._store

        self._ensure_eventkit()
        try:
            self._store = self._ek["EKEventStore"].alloc().init()
            self.logger.debug("EventKit store created successfully")
        except Exception as e:
            self.logger.error(f"Failed to create EventKit store: {e}")
            raise RemindersError(
                f"Failed to initialize EventKit store: {e}\n"
                "This may indicate a system-level EventKit issue."
            )
        return self._store

    def _wait(self, done: threading.Event, action: str):
        """Pump the run loop until a completion handler fires."""
        start_time = time.time()
        while not done.is_set():
            if self.fetch_timeout and time.time() - start_time > self.fetch_timeout:
                raise RemindersError(
                    f"{action} timed out after {self.fetch_timeout:.0f} seconds.\n"
                    "The system may be showing an authorization dialog."
                )
            self._ek["NSRunLoop"].currentRunLoop().runUntilDate_(
                self._ek["NSDate"].dateWithTimeIntervalSinceNow_(0.1)
            )

    def request_access(self) -> bool:
        """Ask for access to reminders, blocking until the user answers.

        Raises:
            AccessDeniedError: If access is refused
        """
        store = self._get_store()
        done = threading.Event()
        result = {'granted': False, 'error': None}

        def completion(granted, error):
            result['granted'] = bool(granted)
            result['error'] = error
            done.set()

        # macOS 14 replaced requestAccessToEntityType with a full-access API
        if hasattr(store, "requestFullAccessToRemindersWithCompletion_"):
            store.requestFullAccessToRemindersWithCompletion_(completion)
        else:
            store.requestAccessToEntityType_completion_(
                self._ek["EKEntityTypeReminder"], completion
            )
        self._wait(done, "Authorization request")

        if not result['granted']:
            message = "You need to grant reminders access"
            if result['error'] is not None:
                message = f"{message}: {result['error']}"
            raise AccessDeniedError(message)

        self.logger.debug("EventKit authorization granted")
        return True

    def get_lists(self) -> List[ReminderList]:
        """Get all reminder lists that allow modification."""
        store = self._get_store()
        try:
            calendars = store.calendarsForEntityType_(self._ek["EKEntityTypeReminder"]) or []
            lists = []
            for cal in calendars:
                if not cal.allowsContentModifications():
                    continue
                source = cal.source()
                lists.append(ReminderList(
                    name=str(cal.title() or 'Untitled'),
                    identifier=str(cal.calendarIdentifier()),
                    source_name=str(source.title()) if source is not None else None,
                    color=_color_to_hex(cal.color()),
                    native=cal,
                ))
            return lists
        except Exception as e:
            self.logger.error(f"Failed to fetch reminder lists: {e}")
            raise RemindersError(f"Failed to retrieve reminder lists: {e}")

    def get_sources(self) -> List[ReminderSource]:
        store = self._get_store()
        return [
            ReminderSource(
                title=str(src.title()),
                identifier=str(src.sourceIdentifier()),
                native=src,
            )
            for src in (store.sources() or [])
        ]

    def fetch_reminders(self, lists: Sequence[ReminderList]) -> List[Reminder]:
        """Fetch every reminder on the given lists, in store order."""
        store = self._get_store()
        calendars = [lst.native for lst in lists if lst.native is not None]
        if not calendars:
            return []

        fetched: List[Any] = []
        done = threading.Event()

        def completion(reminders):
            if reminders:
                fetched.extend(list(reminders))
            done.set()

        try:
            predicate = store.predicateForRemindersInCalendars_(calendars)
            store.fetchRemindersMatchingPredicate_completion_(predicate, completion)
        except Exception as e:
            self.logger.error(f"Failed to fetch reminders: {e}")
            raise RemindersError(f"Failed to fetch reminders: {e}")
        self._wait(done, "Reminder fetch")

        return [self._to_reminder(rem) for rem in fetched]

    def _to_reminder(self, rem) -> Reminder:
        cal = rem.calendar()
        external_id = rem.calendarItemExternalIdentifier()

        return Reminder(
            list_name=str(cal.title()) if cal is not None else "",
            title=str(rem.title()) if rem.title() is not None else None,
            identifier=str(external_id) if external_id else None,
            notes=str(rem.notes()) if rem.notes() else None,
            completed=bool(rem.isCompleted()),
            completion_date=_to_datetime(rem.completionDate()),
            priority=Priority.from_ordinal(int(rem.priority() or 0)),
            due=_components_to_due(rem.dueDateComponents()),
            start=_components_to_due(rem.startDateComponents()),
            created_at=_to_datetime(rem.creationDate()),
            modified_at=_to_datetime(rem.lastModifiedDate()),
            alarms=_to_alarms(rem.alarms() or []),
            recurrence=self._to_rule((rem.recurrenceRules() or [None])[0]),
            native=rem,
        )

    @staticmethod
    def _to_rule(rule) -> Optional[RecurrenceRule]:
        if rule is None:
            return None
        days = [
            WEEKDAYS[int(day.dayOfTheWeek())]
            for day in (rule.daysOfTheWeek() or [])
            if int(day.dayOfTheWeek()) in WEEKDAYS
        ]
        return RecurrenceRule(
            frequency=FREQUENCIES.get(int(rule.frequency()), "unknown"),
            interval=int(rule.interval()),
            days_of_week=tuple(days) or None,
        )

    def new_reminder(self, reminder_list: ReminderList) -> Reminder:
        """Create an unsaved reminder on a list."""
        store = self._get_store()
        native = self._ek["EKReminder"].reminderWithEventStore_(store)
        native.setCalendar_(reminder_list.native)
        return Reminder(list_name=reminder_list.name, native=native)

    def _components(self, due: DueDate):
        components = self._ek["NSDateComponents"].alloc().init()
        components.setYear_(due.day.year)
        components.setMonth_(due.day.month)
        components.setDay_(due.day.day)
        if due.time is not None:
            components.setHour_(due.time.hour)
            components.setMinute_(due.time.minute)
        return components

    def _native_rule(self, rule: RecurrenceRule):
        days = None
        if rule.days_of_week:
            days = [
                self._ek["EKRecurrenceDayOfWeek"].dayOfWeek_(WEEKDAY_VALUES[code])
                for code in rule.days_of_week
                if code in WEEKDAY_VALUES
            ]
        return self._ek["EKRecurrenceRule"].alloc().initRecurrenceWithFrequency_interval_daysOfTheWeek_daysOfTheMonth_monthsOfTheYear_weeksOfTheYear_daysOfTheYear_setPositions_end_(
            FREQUENCY_VALUES[rule.frequency], rule.interval, days,
            None, None, None, None, None, None,
        )

    def _apply(self, reminder: Reminder):
        """Write the dataclass fields onto the native EKReminder.

        Due components, time-based alarms and recurrence are only rewritten
        when they differ from what the native reminder already holds, so a
        save never loses relative alarms or the due date's time zone.
        """
        native = reminder.native
        native.setTitle_(reminder.title)
        native.setNotes_(reminder.notes)
        native.setCompleted_(reminder.completed)
        native.setPriority_(priority_ordinal(reminder.priority))

        if _components_to_due(native.dueDateComponents()) != reminder.due:
            native.setDueDateComponents_(
                self._components(reminder.due) if reminder.due else None
            )

        wanted = [alarm for alarm in reminder.alarms if alarm.is_time_based]
        existing = [alarm for alarm in native.alarms() or [] if alarm.structuredLocation() is None]
        if _to_alarms(existing) != wanted:
            for alarm in existing:
                native.removeAlarm_(alarm)
            for alarm in wanted:
                if alarm.absolute_date is not None:
                    nsdate = self._ek["NSDate"].dateWithTimeIntervalSince1970_(
                        alarm.absolute_date.timestamp()
                    )
                    native.addAlarm_(self._ek["EKAlarm"].alarmWithAbsoluteDate_(nsdate))

        current = self._to_rule((native.recurrenceRules() or [None])[0])
        if current != reminder.recurrence:
            for rule in list(native.recurrenceRules() or []):
                native.removeRecurrenceRule_(rule)
            if reminder.recurrence and reminder.recurrence.frequency in FREQUENCY_VALUES:
                native.addRecurrenceRule_(self._native_rule(reminder.recurrence))

    def save_reminder(self, reminder: Reminder) -> Reminder:
        """Persist a reminder.

        Raises:
            PersistError: If EventKit rejects the save
        """
        store = self._get_store()
        if reminder.native is None:
            raise PersistError("Reminder is not attached to the store")

        self._apply(reminder)
        success, error = store.saveReminder_commit_error_(reminder.native, True, None)
        if not success:
            raise PersistError(f"Failed to save reminder with error: {error}")

        external_id = reminder.native.calendarItemExternalIdentifier()
        reminder.identifier = str(external_id) if external_id else None
        return reminder

    def remove_reminder(self, reminder: Reminder) -> None:
        store = self._get_store()
        success, error = store.removeReminder_commit_error_(reminder.native, True, None)
        if not success:
            raise PersistError(f"Failed to delete reminder with error: {error}")

    def create_list(self, name: str, source: ReminderSource) -> ReminderList:
        store = self._get_store()
        calendar = self._ek["EKCalendar"].calendarForEntityType_eventStore_(
            self._ek["EKEntityTypeReminder"], store
        )
        calendar.setTitle_(name)
        calendar.setSource_(source.native)
        success, error = store.saveCalendar_commit_error_(calendar, True, None)
        if not success:
            raise PersistError(f"Failed create new list with error: {error}")
        return ReminderList(
            name=str(calendar.title()),
            identifier=str(calendar.calendarIdentifier()),
            source_name=source.title,
            native=calendar,
        )

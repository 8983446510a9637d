"""Bridge to Reminders.app via AppleScript for attributes EventKit cannot set."""

import logging
import subprocess
from typing import Optional

DEFAULT_OSASCRIPT = "/usr/bin/osascript"


def build_flag_script(value: bool, reminder_id: str) -> str:
    """AppleScript that sets the flagged state of one reminder.

    ``reminder_id`` is EventKit's external identifier, which matches the UUID
    AppleScript exposes as ``x-apple-reminder://<id>``.
    """
    value_str = "true" if value else "false"
    return (
        'tell application "Reminders"\n'
        f'    set flagged of (reminder id "x-apple-reminder://{reminder_id}") to {value_str}\n'
        'end tell'
    )


class AppleScriptBridge:
    """Fire-and-forget osascript invocations. Failures are warnings only."""

    def __init__(self, osascript_path: str = DEFAULT_OSASCRIPT,
                 logger: Optional[logging.Logger] = None):
        self.osascript_path = osascript_path
        self.logger = logger or logging.getLogger(__name__)

    def set_flagged(self, value: bool, reminder_id: Optional[str]) -> bool:
        """Set or clear the flagged state. Returns True on success."""
        if not reminder_id:
            self.logger.warning("Cannot set flagged state: reminder has no identifier")
            return False

        try:
            result = subprocess.run(
                [self.osascript_path, "-e", build_flag_script(value, reminder_id)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            self.logger.warning(f"Failed to run AppleScript: {e}")
            return False

        if result.returncode != 0:
            self.logger.warning("Failed to set flagged via AppleScript")
            return False

        self.logger.debug(f"Set flagged={value} on reminder {reminder_id}")
        return True

"""
Utilities for storing a URL inside the Reminders notes field.

EventKit's ``EKReminder.URL`` does not sync with the Reminders app, so the URL
is appended to the notes instead:

    content          -> "content"
    url              -> "URL: https://..."
    content + url    -> "content\\n\\nURL: https://..."
"""

from typing import Optional, Tuple

URL_MARKER = "URL: "
URL_SEPARATOR = "\n\n" + URL_MARKER


def encode_notes(content: Optional[str], url: Optional[str]) -> Optional[str]:
    """
    Combine user content and a URL into a single notes string.

    Empty strings are treated as absent.

    Returns:
        The notes string, or None when both parts are absent
    """
    content = content or None
    url = url or None

    if content is None and url is None:
        return None
    if url is None:
        return content
    if content is None:
        return f"{URL_MARKER}{url}"
    return f"{content}{URL_SEPARATOR}{url}"


def decode_notes(notes: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a notes string into (content, url).

    The separator is searched from the end so content may itself mention
    "URL: " lines.
    """
    if not notes:
        return None, None

    position = notes.rfind(URL_SEPARATOR)
    if position != -1:
        content = notes[:position]
        url = notes[position + len(URL_SEPARATOR):].strip()
        return content or None, url or None

    if notes.startswith(URL_MARKER):
        url = notes[len(URL_MARKER):].strip()
        return None, url or None

    return notes, None

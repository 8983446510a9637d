"""
Utility functions for reminders-cli.
"""

from .notes import encode_notes, decode_notes, URL_MARKER, URL_SEPARATOR

__all__ = [
    # Notes field encoding
    'encode_notes',
    'decode_notes',
    'URL_MARKER',
    'URL_SEPARATOR',
]

"""Reminders module for Apple Reminders integration."""

from .applescript import AppleScriptBridge
from .attributes import AttributeIndex, lookup_key
from .database import RemindersDatabase, build_attribute_index
from .gateway import RemindersGateway
from .tasks import RemindersTaskManager

__all__ = [
    'AppleScriptBridge',
    'AttributeIndex',
    'lookup_key',
    'RemindersDatabase',
    'build_attribute_index',
    'RemindersGateway',
    'RemindersTaskManager',
]

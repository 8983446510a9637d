"""
Command implementations for reminders-cli.
"""

from .add import AddCommand
from .edit import CompleteCommand, DeleteCommand, EditCommand
from .lists import NewListCommand, ShowListsCommand
from .show import ShowCommand

__all__ = [
    'AddCommand',
    'CompleteCommand',
    'DeleteCommand',
    'EditCommand',
    'NewListCommand',
    'ShowListsCommand',
    'ShowCommand',
]

"""
Test suite for reminders-cli.

This package contains:
- Unit tests for the codec, filters, sorting and presenter
- Tests against throwaway Reminders SQLite stores
- Command and CLI tests using an in-memory store
"""

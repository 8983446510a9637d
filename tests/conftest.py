#!/usr/bin/env python3
"""
Global pytest configuration and fixtures.

This module provides:
- Platform-specific test skipping (macOS/EventKit tests)
- Reminder factories and an in-memory store
- Builders for Reminders app SQLite stores
"""

import os
import platform
import shutil
import sys
import tempfile
from datetime import datetime, timezone
from typing import Generator

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from reminders_cli.core.models import CliConfig, Reminder  # noqa: E402
from tests.fake_store import FakeStore  # noqa: E402
from tests.sqlite_store import SqliteStoreBuilder  # noqa: E402

HAS_EVENTKIT = False

try:
    if platform.system() == "Darwin":
        import objc  # noqa: F401
        import EventKit  # noqa: F401
        HAS_EVENTKIT = True
except ImportError:
    pass


def pytest_configure(config):
    """Configure pytest environment."""
    config.addinivalue_line("markers", "macos: test requires macOS")
    config.addinivalue_line("markers", "eventkit: test requires EventKit framework")


def pytest_collection_modifyitems(config, items):
    """
    Skip platform-specific tests.

    macOS tests are skipped on other platforms, EventKit tests when PyObjC
    is not installed.
    """
    skip_macos = pytest.mark.skip(reason="macOS tests require Darwin platform")
    skip_eventkit = pytest.mark.skip(reason="Test requires EventKit framework")

    for item in items:
        if "macos" in item.keywords and platform.system() != "Darwin":
            item.add_marker(skip_macos)
        if "eventkit" in item.keywords and not HAS_EVENTKIT:
            item.add_marker(skip_eventkit)


# Common test fixtures

@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = tempfile.mkdtemp(prefix="reminders_cli_test_")
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed, timezone-aware "now" for rendering tests."""
    return datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_reminder():
    """Factory for Reminder objects with sensible defaults."""
    def _make(title="Task", list_name="Inbox", **kwargs) -> Reminder:
        return Reminder(list_name=list_name, title=title, **kwargs)
    return _make


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def store_dir(temp_dir: str) -> str:
    """A directory laid out like the Reminders group container Stores dir."""
    path = os.path.join(temp_dir, "Stores")
    os.makedirs(path)
    return path


@pytest.fixture
def sqlite_store(store_dir: str) -> SqliteStoreBuilder:
    """A single Data-*.sqlite partition ready to be populated."""
    return SqliteStoreBuilder(os.path.join(store_dir, "Data-ABC123.sqlite"))


@pytest.fixture
def test_config(store_dir: str) -> CliConfig:
    return CliConfig(database_dir=store_dir)

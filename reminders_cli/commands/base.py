"""Shared wiring for reminders-cli commands."""

import logging
from typing import Optional

from ..core.models import CliConfig
from ..query.engine import ReminderQueryEngine
from ..reminders.applescript import AppleScriptBridge
from ..reminders.database import RemindersDatabase
from ..reminders.gateway import RemindersGateway
from ..reminders.tasks import RemindersTaskManager


class BaseCommand:
    """Builds the store, query engine and task manager for a command."""

    def __init__(self, config: CliConfig, verbose: bool = False,
                 gateway: Optional[RemindersGateway] = None):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(self.__class__.__module__)
        if verbose:
            self.logger.setLevel(logging.DEBUG)
        self._gateway = gateway
        self._authorized = False

    @property
    def gateway(self) -> RemindersGateway:
        if self._gateway is None:
            self._gateway = RemindersGateway(fetch_timeout=self.config.fetch_timeout)
        if not self._authorized:
            self._gateway.request_access()
            self._authorized = True
        return self._gateway

    def build_engine(self) -> ReminderQueryEngine:
        database = RemindersDatabase(
            self.config.database_path,
            excluded_names=self.config.excluded_databases,
        )
        return ReminderQueryEngine(
            self.gateway,
            database=database,
            enrich=self.config.enrich_attributes,
        )

    def build_manager(self) -> RemindersTaskManager:
        bridge = AppleScriptBridge(osascript_path=self.config.osascript_path)
        return RemindersTaskManager(self.gateway, bridge=bridge)

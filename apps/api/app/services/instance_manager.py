from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from app.exceptions import ConfigurationError
from app.schemas.datasource import DataSourceInstanceSettings
from app.services.datasource import Datasource, new_datasource

logger = logging.getLogger(__name__)


class InstanceManager:
    """Keeps one Datasource per settings version.

    A settings change builds a fresh instance through the factory and
    disposes the previous one. Instances are never mutated in place.
    """

    def __init__(self, factory: Callable[[DataSourceInstanceSettings], Datasource] = new_datasource) -> None:
        self._factory = factory
        self._lock = threading.Lock()
        self._settings: DataSourceInstanceSettings | None = None
        self._instance: Datasource | None = None

    @property
    def settings(self) -> DataSourceInstanceSettings | None:
        return self._settings

    def update(self, settings: DataSourceInstanceSettings) -> Datasource:
        with self._lock:
            if self._instance is not None and not self._needs_update(settings):
                return self._instance

            instance = self._factory(settings)
            previous = self._instance
            self._settings = settings
            self._instance = instance

        if previous is not None:
            logger.info("Datasource settings for %s changed; disposing previous instance", settings.uid)
            previous.dispose()
        return instance

    def get(self) -> Datasource:
        instance = self._instance
        if instance is None:
            raise ConfigurationError("datasource is not configured")
        return instance

    def dispose(self) -> None:
        with self._lock:
            instance = self._instance
            self._instance = None
            self._settings = None
        if instance is not None:
            instance.dispose()

    def _needs_update(self, settings: DataSourceInstanceSettings) -> bool:
        current = self._settings
        if current is None:
            return True
        return (current.uid, current.updated) != (settings.uid, settings.updated)

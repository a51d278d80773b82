"""Datasource exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.schemas.datasource import CheckHealthResult


class DatasourceError(Exception):
    """Base error for the datasource backend."""


class ConfigurationError(DatasourceError):
    """Raised when instance settings cannot be turned into a datasource."""


class SigningError(DatasourceError):
    """Raised when the presigner fails for a single object key."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key
        self.message = message


class HealthCheckError(DatasourceError):
    """Raised when the canary presign fails; carries the structured result."""

    def __init__(self, result: CheckHealthResult) -> None:
        super().__init__(result.message)
        self.result = result


class DatasourceDisposedError(DatasourceError):
    """Raised when a disposed instance is asked to do work."""

"""Anomaly engine exception hierarchy.

All package-specific exceptions derive from :class:`AnomalyError` so callers
can catch every engine-related error uniformly.
"""

from __future__ import annotations


class AnomalyError(Exception):
    """Base class for anomaly-engine exceptions.

    Derived exceptions should extend this class so that callers can catch all
    package-specific errors uniformly.
    """


class ConfigError(AnomalyError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(AnomalyError):
    """Raised when accessing or processing a data source fails."""


class DataValidationError(AnomalyError):
    """Raised when a price series fails validation checks.

    Named DataValidationError to avoid conflict with pydantic's ValidationError.
    """


__all__ = [
    "AnomalyError",
    "ConfigError",
    "DataSourceError",
    "DataValidationError",
]

"""
Domain-specific exception hierarchy for the free/busy calendar.
"""


class FreeBusyError(Exception):
    """Base class for all application-level errors."""


class SnapshotError(FreeBusyError):
    """Raised when a free/busy snapshot cannot be fetched or parsed."""


class ConfigurationError(FreeBusyError):
    """Raised when the application configuration is unusable."""

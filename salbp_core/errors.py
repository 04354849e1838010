# salbp_core/errors.py
from __future__ import annotations


class SalbpError(Exception):
    """Base class for errors surfaced to the trainer UI."""

    pass


class ResourceUnavailableError(SalbpError):
    """Raised when instance, solution or catalog text cannot be retrieved."""

    def __init__(self, resource: str, reason: str = ""):
        self.resource = resource
        self.reason = reason
        msg = f"Could not load {resource}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class CatalogEmptyError(SalbpError):
    """Raised when the instance catalog lists no instances."""

    pass


class ConfigError(SalbpError):
    """Raised when the configuration file is unreadable or has invalid values."""

    pass

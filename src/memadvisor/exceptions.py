"""Exception hierarchy."""

from __future__ import annotations


class MemadvisorError(Exception):
    """Base exception for all memadvisor errors."""


class ObservationError(MemadvisorError, ValueError):
    """Observation has negative or inconsistent values."""


class ConfigError(MemadvisorError):
    """Configuration loading or validation failure."""


class FormatError(MemadvisorError, ValueError):
    """Byte quantity string cannot be parsed exactly."""

"""memadvisor — learned memory reservations for recurring workflow tasks."""

from __future__ import annotations

__version__ = "0.1.0"

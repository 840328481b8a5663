"""Pydantic-validated config loaded from TOML.

TOML loading uses ``tomllib`` (3.11+) with ``tomli`` fallback.
"""

from __future__ import annotations

import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

from memadvisor.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path("~/.config/memadvisor").expanduser()
_DEFAULT_CONFIG_PATH = _CONFIG_DIR / "config.toml"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class PredictorConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    algorithm: Literal["constant", "none"] = "constant"
    decay_factor: Decimal = Decimal("0.8")
    growth_factor: Decimal = Decimal("1.5")

    @field_validator("decay_factor")
    @classmethod
    def _check_decay_factor(cls, v: Decimal) -> Decimal:
        if not (0 < v < 1):
            msg = "decay_factor must be between 0 and 1 (exclusive)"
            raise ValueError(msg)
        return v

    @field_validator("growth_factor")
    @classmethod
    def _check_growth_factor(cls, v: Decimal) -> Decimal:
        if not v > 1:
            msg = "growth_factor must be greater than 1"
            raise ValueError(msg)
        return v


class HistoryConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    history_length: int = 1000

    @field_validator("history_length")
    @classmethod
    def _check_history_length(cls, v: int) -> int:
        if v < 1:
            msg = "history_length must be at least 1"
            raise ValueError(msg)
        return v


class ExportConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    csv_path: Path | None = None


class MemadvisorConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    predictor: PredictorConfig = PredictorConfig()
    history: HistoryConfig = HistoryConfig()
    export: ExportConfig = ExportConfig()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_config(path: Path | None = None) -> MemadvisorConfig:
    """Load config from *path*, default locations, or built-in defaults.

    Resolution order:
    1. Explicit *path* (error if missing or invalid).
    2. ``~/.config/memadvisor/config.toml`` (skip silently if absent).
    3. Built-in defaults.

    Raises :class:`ConfigError` on parse/validation failure.
    """
    if path is not None:
        return _load_from_path(path)

    if _DEFAULT_CONFIG_PATH.is_file():
        return _load_from_path(_DEFAULT_CONFIG_PATH)

    return MemadvisorConfig()


def _load_from_path(path: Path) -> MemadvisorConfig:
    """Parse a TOML file and return a validated config."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        data = tomllib.loads(raw.decode())
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        config = MemadvisorConfig(**data)
    except Exception as exc:
        raise ConfigError(f"Config validation error in {path}: {exc}") from exc

    logger.debug("Loaded config from %s", path)
    return config

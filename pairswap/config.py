"""
Runtime configuration for the pair engine.

Only operational knobs live here. The swap fee (3/1000) and the 112-bit reserve
width are protocol constants (`core.math`, `state.reserves`) and cannot be
configured.

Environment:
- PAIRSWAP_LOG_LEVEL        logging level name for the `pairswap` logger (default WARNING)
- PAIRSWAP_EVENT_LOG_LIMIT  retained in-memory events per pool, 0 = unbounded (default 0)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, TextIO


_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


@dataclass(frozen=True)
class EngineConfig:
    """Operational settings shared by pools created through `create_pool`."""

    log_level: str = "WARNING"
    event_log_limit: int = 0

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}: {self.log_level!r}")
        if self.event_log_limit < 0:
            raise ValueError(f"event_log_limit must be non-negative: {self.event_log_limit}")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        level = _env_str("PAIRSWAP_LOG_LEVEL", "WARNING").upper()
        if level not in _LOG_LEVELS:
            level = "WARNING"
        return cls(
            log_level=level,
            event_log_limit=_env_int("PAIRSWAP_EVENT_LOG_LIMIT", 0, lo=0, hi=10_000_000),
        )


def configure_logging(config: EngineConfig, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a single stream handler to the `pairswap` logger.

    Calling this repeatedly replaces the handler instead of stacking duplicates.
    """
    logger = logging.getLogger("pairswap")
    logger.setLevel(getattr(logging, config.log_level.upper()))
    for handler in list(logger.handlers):
        if getattr(handler, "_pairswap", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler._pairswap = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger

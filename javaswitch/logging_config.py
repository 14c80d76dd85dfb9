from __future__ import annotations

import logging
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "WARNING"
    format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(cfg: LoggingConfig) -> None:
    """Configure Python logging.

    Diagnostics go to stderr so they never mix with the interactive listing;
    callers should use logging.getLogger.
    """

    level = getattr(logging, cfg.level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=cfg.format)

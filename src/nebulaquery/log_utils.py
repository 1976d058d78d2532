"""Shared logger for the service."""
from __future__ import annotations

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger("nebulaquery")


def set_level(level: str) -> None:
    """Apply the configured log level to the service logger."""
    logger.setLevel(level.upper())

"""Refnet: referral network graph engine and analytics."""

from __future__ import annotations

import logging

from refnet.config.settings import settings
from refnet.errors import ConfigurationError, ReferralError, UnknownUserError
from refnet.graph import (
    ExpansionStep,
    LoadStats,
    ReferralAnalysis,
    ReferralEngine,
    ReferralGraph,
    ReferralLoader,
    UserScore,
)

__version__ = "0.1.0"


def configure_logging(level: str | None = None) -> None:
    """Install a basic stderr handler at ``level`` (default ``settings.LOG_LEVEL``)."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


__all__ = [
    "ReferralEngine",
    "ReferralGraph",
    "ReferralAnalysis",
    "ReferralLoader",
    "LoadStats",
    "UserScore",
    "ExpansionStep",
    "ReferralError",
    "UnknownUserError",
    "ConfigurationError",
    "configure_logging",
]

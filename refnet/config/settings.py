"""Refnet configuration via environment / .env file."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REFNET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Ranking ---
    # Order among users with equal reach / centrality scores.
    TIE_BREAK: Literal["registration", "lexicographic"] = "registration"

    # --- Query contract ---
    # When True, queries on unregistered users raise UnknownUserError
    # instead of returning empty results.
    STRICT_USERS: bool = False

    # --- Bulk loading ---
    MAX_USERS: int = 50_000

    # --- Flow centrality ---
    # Above this many users the O(U^3) scoring pass logs a warning.
    FLOW_CENTRALITY_WARN_USERS: int = 2_000

    # --- Logging ---
    LOG_LEVEL: str = "WARNING"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v!r}")
        return level

    @field_validator("MAX_USERS", "FLOW_CENTRALITY_WARN_USERS")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v


settings = Settings()

"""Error types raised by the referral engine.

Mutating calls never raise for bad input: they return ``False``. These
exceptions cover the opt-in strict query mode and invalid configuration.
"""

from __future__ import annotations


class ReferralError(Exception):
    """Base class for referral engine errors."""


class UnknownUserError(ReferralError, KeyError):
    """Raised by strict-mode queries that name an unregistered user."""

    def __init__(self, user_id: object) -> None:
        self.user_id = user_id
        super().__init__(user_id)

    def __str__(self) -> str:
        return f"Unknown user: {self.user_id!r}"


class ConfigurationError(ReferralError, ValueError):
    """Raised when an engine option has an unsupported value."""

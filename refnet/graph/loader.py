"""Bulk construction of a referral graph from (referrer, candidate) pairs.

Pairs are applied in order through :meth:`ReferralGraph.add_referral`, so
the first edge to claim a candidate wins and later conflicting edges are
counted as rejected rather than raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from refnet.config.settings import settings
from refnet.graph.store import ReferralGraph

logger = logging.getLogger(__name__)


@dataclass
class LoadStats:
    """Statistics from a graph loading operation."""

    users_loaded: int = 0
    referrals_loaded: int = 0
    referrals_rejected: int = 0
    users_skipped: int = 0
    auto_registered: int = 0


class ReferralLoader:
    """Build :class:`ReferralGraph` instances from plain data.

    Parameters
    ----------
    max_users:
        Safety cap on graph size. Defaults to ``settings.MAX_USERS``.
    register_missing:
        Register ids that appear in a referral pair but not in the
        explicit user list. When False such pairs are rejected.
    strict:
        Passed through to the created :class:`ReferralGraph`.
    """

    def __init__(
        self,
        max_users: int | None = None,
        register_missing: bool = True,
        strict: bool | None = None,
    ) -> None:
        self._max_users = settings.MAX_USERS if max_users is None else max_users
        self._register_missing = register_missing
        self._strict = strict

    def load(
        self,
        referrals: Iterable[tuple[str, str]],
        users: Iterable[str] = (),
    ) -> tuple[ReferralGraph, LoadStats]:
        """Create a graph holding ``users`` and every acceptable referral.

        Returns
        -------
        Tuple of (graph, load_stats).
        """
        store = ReferralGraph(strict=self._strict)
        stats = LoadStats()
        cap_logged = False

        def register(user_id: str) -> bool:
            nonlocal cap_logged
            if store.user_count >= self._max_users:
                if not cap_logged:
                    logger.warning(
                        "User cap reached (%d). Skipping further registrations.",
                        self._max_users,
                    )
                    cap_logged = True
                return False
            return store.register_user(user_id)

        for user_id in users:
            if register(user_id):
                stats.users_loaded += 1
            else:
                stats.users_skipped += 1

        for referrer, candidate in referrals:
            if self._register_missing:
                for user_id in (referrer, candidate):
                    if store.has_user(user_id):
                        continue
                    if register(user_id):
                        stats.users_loaded += 1
                        stats.auto_registered += 1
                    else:
                        stats.users_skipped += 1

            if store.add_referral(referrer, candidate):
                stats.referrals_loaded += 1
            else:
                stats.referrals_rejected += 1

        logger.info(
            "Referral graph loaded: %d users, %d referrals (%d rejected, "
            "%d users skipped)",
            stats.users_loaded, stats.referrals_loaded,
            stats.referrals_rejected, stats.users_skipped,
        )
        return store, stats

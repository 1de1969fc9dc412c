"""Referral engine: the in-process API over one referral graph.

Usage::

    engine = ReferralEngine()
    engine.ensure_users("alice", "bob", "carol")
    engine.add_referral("alice", "bob")      # True
    engine.add_referral("bob", "alice")      # False: would close a cycle

    engine.total_reach("alice")
    engine.top_k_by_reach(10)
    engine.unique_reach_expansion(3)
    engine.flow_centrality()

Each engine owns its graph store exclusively. Mutations (``register_user``,
``add_referral``) must come from a single writer; analytics are read-only
and recompute from the current graph on every call.
"""

from __future__ import annotations

from typing import Any, Iterable

from refnet.errors import ConfigurationError
from refnet.graph.algorithms import ExpansionStep, ReferralAnalysis, UserScore
from refnet.graph.loader import LoadStats, ReferralLoader
from refnet.graph.store import ReferralGraph


class ReferralEngine:
    """Register users, record referrals and query network analytics.

    Parameters
    ----------
    strict:
        Raise :class:`~refnet.errors.UnknownUserError` from per-user
        queries on unregistered ids. Defaults to ``settings.STRICT_USERS``.
    tie_break:
        Order among equal scores, ``"registration"`` or
        ``"lexicographic"``. Defaults to ``settings.TIE_BREAK``.
    store:
        An existing graph store to wrap. It keeps its own strict mode, so
        passing ``strict`` as well raises :class:`ConfigurationError`.
    """

    def __init__(
        self,
        strict: bool | None = None,
        tie_break: str | None = None,
        store: ReferralGraph | None = None,
    ) -> None:
        if store is not None and strict is not None:
            raise ConfigurationError(
                "strict cannot be combined with store; the store carries its own mode"
            )
        self._store = store if store is not None else ReferralGraph(strict=strict)
        self._analysis = ReferralAnalysis(self._store, tie_break=tie_break)

    @classmethod
    def from_referrals(
        cls,
        referrals: Iterable[tuple[str, str]],
        users: Iterable[str] = (),
        max_users: int | None = None,
        register_missing: bool = True,
        strict: bool | None = None,
        tie_break: str | None = None,
    ) -> tuple["ReferralEngine", LoadStats]:
        """Build an engine from referral pairs via :class:`ReferralLoader`."""
        loader = ReferralLoader(
            max_users=max_users,
            register_missing=register_missing,
            strict=strict,
        )
        store, stats = loader.load(referrals, users=users)
        return cls(tie_break=tie_break, store=store), stats

    @property
    def store(self) -> ReferralGraph:
        return self._store

    @property
    def analysis(self) -> ReferralAnalysis:
        return self._analysis

    @property
    def user_count(self) -> int:
        return self._store.user_count

    @property
    def referral_count(self) -> int:
        return self._store.referral_count

    # -- Registry and graph store --------------------------------------------

    def register_user(self, user_id: str) -> bool:
        return self._store.register_user(user_id)

    def ensure_users(self, *user_ids: str) -> int:
        return self._store.ensure_users(*user_ids)

    def list_users(self) -> frozenset[str]:
        return self._store.list_users()

    def add_referral(self, referrer: str, candidate: str) -> bool:
        return self._store.add_referral(referrer, candidate)

    def get_direct_referrals(self, user_id: str) -> frozenset[str]:
        return self._store.get_direct_referrals(user_id)

    def get_referrer(self, user_id: str) -> str | None:
        return self._store.get_referrer(user_id)

    def upline(self, user_id: str, max_levels: int | None = None) -> list[str]:
        return self._store.upline(user_id, max_levels=max_levels)

    # -- Analytics -----------------------------------------------------------

    def total_reach(self, user_id: str) -> int:
        return self._analysis.total_reach(user_id)

    def top_k_by_reach(self, k: int) -> list[UserScore]:
        return self._analysis.top_k_by_reach(k)

    def unique_reach_expansion(self, limit: int) -> list[str]:
        return self._analysis.unique_reach_expansion(limit)

    def unique_reach_expansion_steps(self, limit: int) -> list[ExpansionStep]:
        return self._analysis.unique_reach_expansion_steps(limit)

    def flow_centrality(self) -> list[UserScore]:
        return self._analysis.flow_centrality()

    def summary(self) -> dict[str, Any]:
        return self._analysis.summary()

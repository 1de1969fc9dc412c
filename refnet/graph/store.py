"""User registry and referral graph store.

The store owns a NetworkX ``DiGraph`` (referrer → candidate) and a parent
map (candidate → referrer). Every insertion is validated against the
current graph so the accepted edge set is always a forest of out-trees:

  - no self-referral
  - at most one referrer per candidate
  - no directed cycle (rejected when the candidate already reaches the
    referrer)

Node insertion order in the ``DiGraph`` is registration order, which the
analytics layer uses as its default tie-break.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

import networkx as nx

from refnet.config.settings import settings
from refnet.errors import UnknownUserError
from refnet.graph.traversal import is_reachable

logger = logging.getLogger(__name__)


def is_valid_user_id(user_id: Any) -> bool:
    """A user id is any string with at least one non-whitespace character."""
    return isinstance(user_id, str) and bool(user_id.strip())


class ReferralGraph:
    """Append-only referral graph with invariant-checked insertion.

    Parameters
    ----------
    strict:
        When True, per-user queries on an unregistered id raise
        :class:`UnknownUserError` instead of returning an empty result.
        Defaults to ``settings.STRICT_USERS``.
    """

    def __init__(self, strict: bool | None = None) -> None:
        self._graph = nx.DiGraph()
        self._parents: dict[str, str] = {}
        self._strict = settings.STRICT_USERS if strict is None else strict

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def graph(self) -> nx.DiGraph:
        """Read-only view of the adjacency structure."""
        return self._graph.copy(as_view=True)

    @property
    def user_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def referral_count(self) -> int:
        return self._graph.number_of_edges()

    def __len__(self) -> int:
        return self.user_count

    def __contains__(self, user_id: object) -> bool:
        return self.has_user(user_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self.users_in_order())

    # -- User registry -------------------------------------------------------

    def register_user(self, user_id: str) -> bool:
        """Register a user. Returns False for invalid or duplicate ids."""
        if not is_valid_user_id(user_id):
            logger.debug("Rejected user registration: invalid id %r", user_id)
            return False
        if user_id in self._graph:
            return False
        self._graph.add_node(user_id)
        return True

    def ensure_users(self, *user_ids: str) -> int:
        """Register each id, returning how many were newly added."""
        return sum(1 for user_id in user_ids if self.register_user(user_id))

    def has_user(self, user_id: object) -> bool:
        return is_valid_user_id(user_id) and user_id in self._graph

    def list_users(self) -> frozenset[str]:
        return frozenset(self._graph.nodes)

    def users_in_order(self) -> list[str]:
        """Registered users in registration order."""
        return list(self._graph.nodes)

    def check_user(self, user_id: str) -> bool:
        """Whether ``user_id`` is registered; raises instead in strict mode."""
        if self.has_user(user_id):
            return True
        if self._strict:
            raise UnknownUserError(user_id)
        return False

    # -- Referral edges ------------------------------------------------------

    def add_referral(self, referrer: str, candidate: str) -> bool:
        """Insert the edge referrer → candidate if every invariant holds."""
        reason = self._rejection_reason(referrer, candidate)
        if reason:
            logger.debug(
                "Rejected referral %r -> %r: %s", referrer, candidate, reason,
            )
            return False

        self._graph.add_edge(referrer, candidate)
        self._parents[candidate] = referrer
        logger.debug("Accepted referral %r -> %r", referrer, candidate)
        return True

    def _rejection_reason(self, referrer: str, candidate: str) -> str:
        if referrer is None or candidate is None:
            return "missing user id"
        if referrer == candidate:
            return "self-referral"
        if not self.has_user(referrer) or not self.has_user(candidate):
            return "unregistered user"
        if candidate in self._parents:
            return f"candidate already referred by {self._parents[candidate]!r}"
        if is_reachable(self._graph, candidate, referrer):
            return "would create a cycle"
        return ""

    def get_direct_referrals(self, user_id: str) -> frozenset[str]:
        if not self.check_user(user_id):
            return frozenset()
        return frozenset(self._graph.successors(user_id))

    def get_referrer(self, user_id: str) -> str | None:
        if not self.check_user(user_id):
            return None
        return self._parents.get(user_id)

    def upline(self, user_id: str, max_levels: int | None = None) -> list[str]:
        """Ancestors of ``user_id``, nearest referrer first."""
        if not self.check_user(user_id):
            return []
        chain: list[str] = []
        current = user_id
        while current in self._parents:
            if max_levels is not None and len(chain) >= max_levels:
                break
            current = self._parents[current]
            chain.append(current)
        return chain

    def roots(self) -> list[str]:
        """Users nobody referred, in registration order."""
        return [u for u in self._graph.nodes if u not in self._parents]

    def referrals(self) -> list[tuple[str, str]]:
        """Accepted (referrer, candidate) edges in insertion order."""
        return [(parent, child) for child, parent in self._parents.items()]

"""Referral network analytics.

Three independent algorithms over the current state of a
:class:`~refnet.graph.store.ReferralGraph`:

  - Reach ranking: downstream network size per user, O(V+E) per user.
  - Unique reach expansion: greedy set cover choosing a bounded number of
    users whose combined downstream reach is largest, O(U·(V+E)) to
    precompute plus O(limit·U·|reach|) to select.
  - Flow centrality: for every ordered pair (s, t), count each broker v
    lying on some shortest s → t path. BFS from every user, then an
    O(U³) scoring pass.

Every call recomputes from the live graph. Equal scores are ordered by
the configured tie-break: registration order (default) or lexicographic
user id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, NamedTuple

import networkx as nx

from refnet.config.settings import settings
from refnet.errors import ConfigurationError
from refnet.graph.store import ReferralGraph
from refnet.graph.traversal import hop_distances, reach_set

logger = logging.getLogger(__name__)

TIE_BREAKS = ("registration", "lexicographic")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


class UserScore(NamedTuple):
    """A user paired with an integer score (reach or centrality)."""
    user_id: str
    score: int


@dataclass
class ExpansionStep:
    """One pick of the greedy unique reach expansion."""
    user_id: str
    gain: int  # newly covered users contributed by this pick
    covered: int  # cumulative covered users after this pick
    new_users: set[str] = field(default_factory=set)


# ---------------------------------------------------------------------------
# Analysis engine
# ---------------------------------------------------------------------------


class ReferralAnalysis:
    """Run referral analytics on a graph store.

    Parameters
    ----------
    store:
        The graph store to analyse. Read only; never mutated here.
    tie_break:
        ``"registration"`` or ``"lexicographic"``. Defaults to
        ``settings.TIE_BREAK``.
    """

    def __init__(self, store: ReferralGraph, tie_break: str | None = None) -> None:
        tie_break = tie_break or settings.TIE_BREAK
        if tie_break not in TIE_BREAKS:
            raise ConfigurationError(
                f"tie_break must be one of {TIE_BREAKS}, got {tie_break!r}"
            )
        self._store = store
        self._tie_break = tie_break

    @property
    def store(self) -> ReferralGraph:
        return self._store

    @property
    def tie_break(self) -> str:
        return self._tie_break

    def _rank(self, scores: dict[str, int]) -> list[UserScore]:
        """Sort descending by score; ``scores`` must be in registration order."""
        if self._tie_break == "lexicographic":
            ranked = sorted(scores.items(), key=lambda x: (-x[1], x[0]))
        else:
            # sorted() is stable, so equal scores keep registration order
            ranked = sorted(scores.items(), key=lambda x: x[1], reverse=True)
        return [UserScore(user_id, score) for user_id, score in ranked]

    # -- Reach ---------------------------------------------------------------

    def reach_set(self, user_id: str) -> set[str]:
        """Users downstream of ``user_id`` (excluding it)."""
        if not self._store.check_user(user_id):
            return set()
        return reach_set(self._store.graph, user_id)

    def total_reach(self, user_id: str) -> int:
        return len(self.reach_set(user_id))

    def top_k_by_reach(self, k: int) -> list[UserScore]:
        """Rank users by total reach.

        ``k <= 0`` or ``k >= user count`` returns the full ranking.
        """
        graph = self._store.graph
        scores = {u: len(reach_set(graph, u)) for u in self._store.users_in_order()}
        ranking = self._rank(scores)
        if k <= 0 or k >= len(ranking):
            return ranking
        return ranking[:k]

    # -- Unique reach expansion ----------------------------------------------

    def precompute_reach_sets(self) -> dict[str, set[str]]:
        """Reach set of every user, keyed in registration order."""
        graph = self._store.graph
        return {u: reach_set(graph, u) for u in self._store.users_in_order()}

    def unique_reach_expansion_steps(self, limit: int) -> list[ExpansionStep]:
        """Greedy selection of up to ``limit`` users maximising covered reach.

        Each round scans the remaining users in tie-break order and
        picks the one adding the most not-yet-covered users; the first one
        seen wins a tie. Stops early once no remaining user adds anything.
        """
        reach = self.precompute_reach_sets()
        covered: set[str] = set()
        available = list(reach)
        if self._tie_break == "lexicographic":
            available.sort()
        steps: list[ExpansionStep] = []

        while len(steps) < limit and available:
            best: str | None = None
            best_gain = -1
            for user_id in available:
                gain = len(reach[user_id] - covered)
                if gain > best_gain:
                    best, best_gain = user_id, gain
            if best is None or best_gain <= 0:
                break

            new_users = reach[best] - covered
            covered |= new_users
            available.remove(best)
            steps.append(ExpansionStep(
                user_id=best,
                gain=best_gain,
                covered=len(covered),
                new_users=new_users,
            ))

        logger.info(
            "Unique reach expansion: %d of %d requested picks cover %d users",
            len(steps), max(limit, 0), len(covered),
        )
        return steps

    def unique_reach_expansion(self, limit: int) -> list[str]:
        return [step.user_id for step in self.unique_reach_expansion_steps(limit)]

    # -- Flow centrality -----------------------------------------------------

    def distance_matrix(self) -> tuple[list[str], list[list[int | None]]]:
        """All-pairs hop distances.

        Returns the users (registration order, defining the dense index) and
        ``dist[i][j]``, which is ``None`` when j is unreachable from i.
        """
        graph = self._store.graph
        users = self._store.users_in_order()
        index = {u: i for i, u in enumerate(users)}
        dist: list[list[int | None]] = [[None] * len(users) for _ in users]
        for i, source in enumerate(users):
            row = dist[i]
            for node, hops in hop_distances(graph, source).items():
                row[index[node]] = hops
        return users, dist

    def flow_centrality(self) -> list[UserScore]:
        """Score every user by how many ordered (s, t) pairs it brokers.

        v earns one point per pair (s, t), s ≠ t, v ∉ {s, t}, t reachable
        from s, whenever ``dist[s][v] + dist[v][t] == dist[s][t]``. A pair
        counts once no matter how many shortest paths pass through v.
        """
        n = self._store.user_count
        if n > settings.FLOW_CENTRALITY_WARN_USERS:
            logger.warning(
                "Flow centrality over %d users runs an O(U^3) scoring pass; "
                "expect a long computation",
                n,
            )

        users, dist = self.distance_matrix()
        scores = [0] * n
        for s in range(n):
            row_s = dist[s]
            for t in range(n):
                d_st = row_s[t]
                if s == t or d_st is None:
                    continue
                for v in range(n):
                    if v == s or v == t:
                        continue
                    d_sv = row_s[v]
                    d_vt = dist[v][t]
                    if d_sv is None or d_vt is None:
                        continue
                    if d_sv + d_vt == d_st:
                        scores[v] += 1

        logger.info("Flow centrality computed for %d users", n)
        return self._rank(dict(zip(users, scores)))

    # -- Summary statistics --------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """Return high-level referral network statistics."""
        graph = self._store.graph
        components = list(nx.weakly_connected_components(graph))

        return {
            "user_count": self._store.user_count,
            "referral_count": self._store.referral_count,
            "root_count": len(self._store.roots()),
            "leaf_count": sum(1 for _, d in graph.out_degree() if d == 0),
            "isolated_count": nx.number_of_isolates(graph),
            "tree_count": len(components),
            "largest_tree_size": max((len(c) for c in components), default=0),
            "max_depth": nx.dag_longest_path_length(graph) if graph.number_of_edges() else 0,
        }

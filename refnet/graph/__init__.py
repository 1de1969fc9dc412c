"""Refnet referral graph engine.

Stores referrer → candidate edges under three invariants (no
self-referral, one referrer per candidate, no cycles) and runs analytics
over the resulting forest: reach ranking, greedy unique reach expansion,
and shortest-path flow centrality.

Usage::

    from refnet.graph import ReferralEngine

    engine = ReferralEngine()
    engine.ensure_users("A", "B", "C")
    engine.add_referral("A", "B")
    engine.add_referral("B", "C")

    engine.top_k_by_reach(5)
    engine.flow_centrality()
"""

from refnet.graph.store import ReferralGraph
from refnet.graph.algorithms import ExpansionStep, ReferralAnalysis, UserScore
from refnet.graph.loader import LoadStats, ReferralLoader
from refnet.graph.engine import ReferralEngine

__all__ = [
    "ReferralEngine",
    "ReferralGraph",
    "ReferralAnalysis",
    "ReferralLoader",
    "LoadStats",
    "UserScore",
    "ExpansionStep",
]

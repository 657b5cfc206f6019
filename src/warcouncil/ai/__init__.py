"""AI decision layer for warcouncil.

Every module here reads kingdom snapshots and returns plans; nothing in this
package mutates a kingdom. The battle simulator and the world service apply
the chosen actions.

Modules:
    - personality: race + persona + playstyle synthesis
    - strategy: single-action choice from personality-weighted candidates
    - targeting: target scoring, recommendation buckets and attack plans
    - build_order: race build templates weighted by phase and pressure
    - resources: gold and turn budgets plus risk identification
    - coordinator: per-tick combination of all of the above
"""

from . import build_order, coordinator, personality, resources, strategy, targeting
from .coordinator import ComprehensiveDecision, Coordinator

__all__ = [
    "ComprehensiveDecision",
    "Coordinator",
    "build_order",
    "coordinator",
    "personality",
    "resources",
    "strategy",
    "targeting",
]

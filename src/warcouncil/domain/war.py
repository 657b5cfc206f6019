"""Per (attacker, defender) war-declaration tracking.

Each ordered pair of kingdoms walks through::

    NEUTRAL -> TRACKING(1) -> TRACKING(2) -> WAR_REQUIRED (3rd attack)
            -> AT_WAR (declare_war) -> NEUTRAL (make_peace)

The tracker is one of the two pieces of shared mutable state in a world, so
every public method takes the internal lock.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from warcouncil.domain.combat import requires_war_declaration
from warcouncil.domain.enums import WarState
from warcouncil.domain.models import KingdomID, WarDeclaration
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

PairKey = tuple[KingdomID, KingdomID]


class WarStateError(RuntimeError):
    """Raised for a transition the war state machine does not allow."""


class WarDeclarationRequired(RuntimeError):
    """Raised when policy forbids attacking again before declaring war."""


class WarTracker:
    """Attack counts and active wars keyed by ordered kingdom pair."""

    def __init__(self, *, rules: RulesConfig = DEFAULT_RULES) -> None:
        self._rules = rules
        self._lock = threading.Lock()
        self._records: dict[PairKey, WarDeclaration] = {}

    def _state_of(self, record: WarDeclaration | None) -> WarState:
        if record is None:
            return WarState.NEUTRAL
        if record.is_active:
            return WarState.AT_WAR
        if requires_war_declaration(record.attack_count, rules=self._rules):
            return WarState.WAR_REQUIRED
        if record.attack_count > 0:
            return WarState.TRACKING
        return WarState.NEUTRAL

    def state(self, attacker_id: KingdomID, defender_id: KingdomID) -> WarState:
        with self._lock:
            return self._state_of(self._records.get((attacker_id, defender_id)))

    def attack_count(self, attacker_id: KingdomID, defender_id: KingdomID) -> int:
        with self._lock:
            record = self._records.get((attacker_id, defender_id))
            return record.attack_count if record else 0

    def counts_from(self, attacker_id: KingdomID) -> dict[KingdomID, int]:
        with self._lock:
            return {
                defender: record.attack_count
                for (attacker, defender), record in self._records.items()
                if attacker == attacker_id
            }

    def check_attack(self, attacker_id: KingdomID, defender_id: KingdomID) -> WarState:
        """Validate that an attack may proceed under the current war policy.

        Raises:
            WarDeclarationRequired: when the pair is in ``WAR_REQUIRED`` and
                the policy does not allow further attacks without a declaration.
        """

        with self._lock:
            return self._check(attacker_id, defender_id, warn=True)

    def _check(
        self, attacker_id: KingdomID, defender_id: KingdomID, *, warn: bool
    ) -> WarState:
        state = self._state_of(self._records.get((attacker_id, defender_id)))
        if state is WarState.WAR_REQUIRED:
            if not self._rules.war.allow_attacks_after_war_required:
                raise WarDeclarationRequired(
                    f"{attacker_id} must declare war on {defender_id} before attacking again"
                )
            if warn:
                logger.warning(
                    "%s attacking %s without a war declaration (policy allows it)",
                    attacker_id,
                    defender_id,
                )
        return state

    def record_attack(self, attacker_id: KingdomID, defender_id: KingdomID) -> WarState:
        """Count one attack and return the pair's new state.

        The policy is enforced again here; the warning is left to
        :meth:`check_attack`, which callers run before resolving the battle.
        """

        with self._lock:
            self._check(attacker_id, defender_id, warn=False)
            key = (attacker_id, defender_id)
            record = self._records.get(key)
            if record is None:
                record = WarDeclaration(attacker_id=attacker_id, defender_id=defender_id)
                self._records[key] = record
            record.attack_count += 1
            return self._state_of(record)

    def declare_war(
        self, attacker_id: KingdomID, defender_id: KingdomID, tick: int
    ) -> WarDeclaration:
        with self._lock:
            record = self._records.get((attacker_id, defender_id))
            state = self._state_of(record)
            if state is not WarState.WAR_REQUIRED or record is None:
                raise WarStateError(
                    f"cannot declare war on {defender_id} from state {state.value}"
                )
            record.is_active = True
            record.declared_at_tick = tick
            return record

    def make_peace(self, attacker_id: KingdomID, defender_id: KingdomID) -> None:
        with self._lock:
            key = (attacker_id, defender_id)
            state = self._state_of(self._records.get(key))
            if state is not WarState.AT_WAR:
                raise WarStateError(f"no active war between {attacker_id} and {defender_id}")
            del self._records[key]

    def is_at_war(self, attacker_id: KingdomID, defender_id: KingdomID) -> bool:
        return self.state(attacker_id, defender_id) is WarState.AT_WAR

    def records(self) -> list[WarDeclaration]:
        with self._lock:
            return [
                WarDeclaration(
                    attacker_id=record.attacker_id,
                    defender_id=record.defender_id,
                    attack_count=record.attack_count,
                    is_active=record.is_active,
                    declared_at_tick=record.declared_at_tick,
                )
                for record in self._records.values()
            ]

    def restore(self, records: Iterable[WarDeclaration]) -> None:
        with self._lock:
            self._records = {
                (record.attacker_id, record.defender_id): record for record in records
            }

"""World handle: every piece of mutable game state for one game.

A ``World`` is passed by reference to the services that need it. Separate
worlds never share state, so batch games can run on parallel threads.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from warcouncil.ai import personality as personality_generator
from warcouncil.domain.enums import Persona, Playstyle, RestorationType
from warcouncil.domain.models import (
    BattleID,
    BattleReport,
    Kingdom,
    KingdomID,
    Personality,
    WarDeclaration,
    validate_kingdom,
)
from warcouncil.domain.restoration import RestorationStatus, restoration_status
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig
from warcouncil.domain.war import WarTracker
from warcouncil.interfaces.random_source import RandomSource
from warcouncil.utils.rng import SeededRandom, generate_seed

logger = logging.getLogger(__name__)


class UnknownKingdomError(LookupError):
    """Raised when a kingdom id is not registered in the world."""


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class WorldSnapshot:
    """Plain-data copy of a world, suitable for JSON persistence."""

    game_id: int = 0
    tick: int = 0
    next_battle_id: int = 1
    kingdoms: list[Kingdom] = field(default_factory=list)
    personalities: list[Personality] = field(default_factory=list)
    wars: list[WarDeclaration] = field(default_factory=list)
    battles: list[BattleReport] = field(default_factory=list)
    restorations: dict[str, RestorationStatus] = field(default_factory=dict)


class World:
    """Kingdoms, personalities, wars, battles and restorations for one game."""

    def __init__(
        self,
        *,
        game_id: int = 0,
        rng: RandomSource | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        clock: Callable[[], datetime] = utc_now,
        seed_prefix: str = "personality",
    ) -> None:
        self.game_id = game_id
        self.rules = rules
        self.rng: RandomSource = rng or SeededRandom(generate_seed(game_id, 0, "world"))
        self.clock = clock
        self.seed_prefix = seed_prefix
        self.tick = 0
        self.wars = WarTracker(rules=rules)
        # Held for the whole of one battle so a resolution is never interleaved.
        self.battle_lock = threading.RLock()

        self._kingdoms: dict[KingdomID, Kingdom] = {}
        self._personalities: dict[KingdomID, Personality] = {}
        self._personality_lock = threading.Lock()
        self._battles: deque[BattleReport] = deque(
            maxlen=rules.simulation.battle_history_limit
        )
        self._next_battle_id = 1
        self._restorations: dict[KingdomID, RestorationStatus] = {}
        self._restoration_lock = threading.Lock()

    # --- Kingdoms -------------------------------------------------------------

    def add_kingdom(self, kingdom: Kingdom) -> Kingdom:
        validate_kingdom(kingdom)
        self._kingdoms[kingdom.id] = kingdom
        return kingdom

    def kingdom(self, kingdom_id: KingdomID) -> Kingdom:
        try:
            return self._kingdoms[kingdom_id]
        except KeyError:
            raise UnknownKingdomError(f"unknown kingdom {kingdom_id!r}") from None

    def kingdoms(self) -> list[Kingdom]:
        return list(self._kingdoms.values())

    def living_kingdoms(self) -> list[Kingdom]:
        return [kingdom for kingdom in self._kingdoms.values() if kingdom.resources.land > 0]

    # --- Personalities --------------------------------------------------------

    def personality(
        self,
        kingdom_id: KingdomID,
        race: str,
        *,
        persona: Persona | str | None = None,
        playstyle: Playstyle | str | None = None,
    ) -> Personality:
        """Return the cached personality, generating it on first reference.

        An explicit ``persona``/``playstyle`` pair is only honoured the first
        time; afterwards the cached personality is returned unchanged.
        """

        with self._personality_lock:
            cached = self._personalities.get(kingdom_id)
            if cached is not None:
                return cached
            if persona is not None and playstyle is not None:
                created = personality_generator.create_specific(
                    kingdom_id, race, persona, playstyle, seed_prefix=self.seed_prefix
                )
            else:
                created = personality_generator.generate(
                    kingdom_id, race, seed_prefix=self.seed_prefix
                )
            self._personalities[kingdom_id] = created
            logger.debug(
                "Generated %s (%s/%s) for %s",
                created.name,
                created.persona.value,
                created.playstyle.value,
                kingdom_id,
            )
            return created

    def personalities(self) -> list[Personality]:
        with self._personality_lock:
            return list(self._personalities.values())

    # --- Battles --------------------------------------------------------------

    def next_battle_id(self) -> BattleID:
        with self.battle_lock:
            battle_id = BattleID(self._next_battle_id)
            self._next_battle_id += 1
            return battle_id

    def record_battle(self, report: BattleReport) -> None:
        with self.battle_lock:
            self._battles.append(report)

    def battle_history(self) -> list[BattleReport]:
        """Recent battles, newest first."""

        with self.battle_lock:
            return list(reversed(self._battles))

    # --- Restoration ----------------------------------------------------------

    def now(self) -> datetime:
        return self.clock()

    def begin_restoration(
        self, kingdom_id: KingdomID, restoration_type: RestorationType
    ) -> RestorationStatus:
        now = self.now()
        status = restoration_status(now, restoration_type, now, rules=self.rules)
        with self._restoration_lock:
            self._restorations[kingdom_id] = status
        logger.info(
            "%s entered %s restoration until %s",
            kingdom_id,
            status.type.value,
            status.end_time.isoformat(),
        )
        return status

    def restoration(self, kingdom_id: KingdomID) -> RestorationStatus | None:
        """Active restoration for ``kingdom_id``; expired entries are dropped."""

        with self._restoration_lock:
            status = self._restorations.get(kingdom_id)
            if status is None:
                return None
            now = self.now()
            if not status.is_active(now):
                del self._restorations[kingdom_id]
                return None
            status.remaining_hours = (status.end_time - now).total_seconds() / 3600
            return status

    def protected_ids(self) -> frozenset[KingdomID]:
        with self._restoration_lock:
            kingdom_ids = list(self._restorations)
        return frozenset(
            kingdom_id for kingdom_id in kingdom_ids if self.restoration(kingdom_id) is not None
        )

    # --- Ticks ----------------------------------------------------------------

    def advance_tick(self) -> int:
        """Pay income and turns to every kingdom and move the clock forward."""

        simulation = self.rules.simulation
        for kingdom in self._kingdoms.values():
            kingdom.resources.gold += kingdom.resources.land * simulation.income_per_acre
            kingdom.resources.turns = min(
                kingdom.resources.turns + simulation.turns_per_tick,
                simulation.max_stored_turns,
            )
        self.tick += 1
        return self.tick

    # --- Persistence ----------------------------------------------------------

    def snapshot(self) -> WorldSnapshot:
        with self._restoration_lock:
            restorations = {str(k): v for k, v in self._restorations.items()}
        return WorldSnapshot(
            game_id=self.game_id,
            tick=self.tick,
            next_battle_id=self._next_battle_id,
            kingdoms=self.kingdoms(),
            personalities=self.personalities(),
            wars=self.wars.records(),
            battles=list(self._battles),
            restorations=restorations,
        )

    def restore(self, snapshot: WorldSnapshot) -> None:
        """Replace every piece of state with ``snapshot``'s contents.

        Every kingdom is validated first; an invalid snapshot leaves the
        world untouched.

        Raises:
            InvalidInputError: if any kingdom in the snapshot is invalid.
        """

        for kingdom in snapshot.kingdoms:
            validate_kingdom(kingdom)
        kingdoms = {kingdom.id: kingdom for kingdom in snapshot.kingdoms}
        personalities = {p.kingdom_id: p for p in snapshot.personalities}
        restorations = {
            KingdomID(kingdom_id): status for kingdom_id, status in snapshot.restorations.items()
        }

        with self.battle_lock:
            self.game_id = snapshot.game_id
            self.tick = snapshot.tick
            self._next_battle_id = snapshot.next_battle_id
            self._kingdoms = kingdoms
            with self._personality_lock:
                self._personalities = personalities
            self.wars.restore(snapshot.wars)
            self._battles.clear()
            self._battles.extend(snapshot.battles)
            with self._restoration_lock:
                self._restorations = restorations

    def load_kingdoms(self, kingdoms: Iterable[Kingdom]) -> None:
        for kingdom in kingdoms:
            self.add_kingdom(kingdom)

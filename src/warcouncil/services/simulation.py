"""Batch AI-vs-AI simulation for race balance analysis."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from warcouncil.ai.coordinator import Coordinator
from warcouncil.domain.enums import ActionType, Race, WarState
from warcouncil.domain.models import Buildings, Kingdom, KingdomID, Resources, StrategicDecision
from warcouncil.domain.restoration import RestorationActiveError
from warcouncil.domain.rules_config import DEFAULT_RULES, RulesConfig
from warcouncil.domain.war import WarDeclarationRequired
from warcouncil.interfaces.combat import ICombatService
from warcouncil.services.combat_service import CombatService
from warcouncil.services.world import World
from warcouncil.utils.rng import SeededRandom, generate_seed

logger = logging.getLogger(__name__)

SIMULATION_EPOCH = datetime(2000, 1, 1, tzinfo=UTC)


@dataclass(slots=True)
class GameResult:
    index: int
    winner_id: KingdomID
    winner_race: str
    turns: int
    final_networth: dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class GameFailure:
    index: int
    error: str


@dataclass(slots=True)
class BalanceReport:
    games_requested: int
    results: list[GameResult] = field(default_factory=list)
    failures: list[GameFailure] = field(default_factory=list)
    race_wins: dict[str, int] = field(default_factory=dict)
    race_win_rates: dict[str, float] = field(default_factory=dict)
    average_game_length: float = 0.0
    balance_score: float = 100.0
    dominant_races: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def completed(self) -> int:
        return len(self.results)


class BatchSimulator:
    """Run many independent seeded games and summarise which races win."""

    def __init__(
        self,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        base_seed: str = "warcouncil",
        max_turns: int | None = None,
    ) -> None:
        self.rules = rules
        self.base_seed = base_seed
        self.max_turns = max_turns if max_turns is not None else rules.simulation.max_turns

    def run(
        self,
        game_count: int,
        race_distribution: Mapping[str, int],
        *,
        should_cancel: Callable[[], bool] | None = None,
        workers: int = 1,
    ) -> BalanceReport:
        """Play ``game_count`` games with ``race_distribution`` kingdoms per race.

        ``should_cancel`` is polled before each game starts; games already
        running finish normally.
        """

        if game_count < 0:
            raise ValueError("game_count cannot be negative")
        races = self._resolve_races(race_distribution)
        report = BalanceReport(games_requested=game_count)

        def play(index: int) -> GameResult | GameFailure | None:
            if should_cancel is not None and should_cancel():
                return None
            try:
                return self.run_game(index, races)
            except Exception as exc:
                logger.exception("Simulated game %d failed", index)
                return GameFailure(index=index, error=str(exc))

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(play, range(game_count)))
        else:
            outcomes = []
            for index in range(game_count):
                outcome = play(index)
                outcomes.append(outcome)
                if outcome is None:
                    break

        for outcome in outcomes:
            if outcome is None:
                report.cancelled = True
            elif isinstance(outcome, GameFailure):
                report.failures.append(outcome)
            else:
                report.results.append(outcome)
        if report.cancelled:
            logger.warning(
                "Batch cancelled after %d of %d games", report.completed, game_count
            )
        self._summarise(report, races)
        return report

    @staticmethod
    def _resolve_races(race_distribution: Mapping[str, int]) -> dict[str, int]:
        races: dict[str, int] = {}
        for race, count in race_distribution.items():
            parsed = Race.parse(race)
            if parsed is None:
                raise ValueError(f"unknown race {race!r}")
            if count < 0:
                raise ValueError(f"kingdom count for {race} cannot be negative")
            if count:
                races[parsed.value] = races.get(parsed.value, 0) + count
        if sum(races.values()) < 2:
            raise ValueError("a game needs at least two kingdoms")
        return races

    def _summarise(self, report: BalanceReport, races: Mapping[str, int]) -> None:
        wins = {race: 0 for race in races}
        for result in report.results:
            wins[result.winner_race] = wins.get(result.winner_race, 0) + 1
        report.race_wins = wins
        if not report.results:
            return
        completed = report.completed
        report.race_win_rates = {race: count / completed for race, count in wins.items()}
        report.average_game_length = sum(r.turns for r in report.results) / completed
        rates = list(report.race_win_rates.values())
        report.balance_score = 100 - (max(rates) - min(rates)) * 100
        report.dominant_races = [
            race
            for race, rate in report.race_win_rates.items()
            if rate > self.rules.simulation.dominant_win_rate
        ]

    # --- One game -------------------------------------------------------------

    def new_world(self, index: int, races: Mapping[str, int]) -> World:
        simulation = self.rules.simulation
        world = World(
            game_id=index,
            rng=SeededRandom(generate_seed(index, 0, f"{self.base_seed}:battles")),
            rules=self.rules,
            seed_prefix=f"{self.base_seed}:{index}",
        )
        world.clock = lambda: SIMULATION_EPOCH + timedelta(hours=world.tick)
        for race, count in races.items():
            for number in range(1, count + 1):
                world.add_kingdom(
                    Kingdom(
                        id=KingdomID(f"g{index}-{race.lower()}-{number}"),
                        name=f"{race} {number}",
                        race=race,
                        resources=Resources(
                            gold=simulation.start_gold,
                            land=simulation.start_land,
                            population=simulation.start_population,
                            turns=simulation.start_turns,
                        ),
                        units={"tier1": 100, "tier2": 50},
                        buildings=Buildings(structures=simulation.start_land // 2),
                    )
                )
        return world

    def run_game(self, index: int, races: Mapping[str, int]) -> GameResult:
        world = self.new_world(index, races)
        coordinator = Coordinator(rules=self.rules)
        combat = CombatService(world)

        while world.tick < self.max_turns:
            for kingdom in world.living_kingdoms():
                if kingdom.resources.land <= 0:
                    continue
                decision = coordinator.make_decision(kingdom, world, world.tick + 1)
                self.apply_action(world, combat, kingdom, decision.primary_action)
            world.advance_tick()
            if len(world.living_kingdoms()) <= 1:
                break

        winner = max(world.kingdoms(), key=lambda kingdom: kingdom.networth)
        return GameResult(
            index=index,
            winner_id=winner.id,
            winner_race=winner.race,
            turns=world.tick,
            final_networth={str(k.id): k.networth for k in world.kingdoms()},
        )

    def apply_action(
        self,
        world: World,
        combat: ICombatService,
        kingdom: Kingdom,
        decision: StrategicDecision,
    ) -> None:
        simulation = self.rules.simulation
        resources = kingdom.resources
        allocation = decision.allocation
        gold = min(allocation.gold_spend, resources.gold) if allocation else 0
        turns = allocation.turns_spend if allocation else 0

        match decision.action:
            case ActionType.BUILD:
                acres = max(simulation.build_acres_per_action, math.floor(gold / 500))
                resources.land += acres
                kingdom.buildings.structures += acres
            case ActionType.TRAIN:
                kingdom.units["tier1"] = (
                    kingdom.units.get("tier1", 0) + simulation.train_units_per_action
                )
            case ActionType.DEFEND:
                kingdom.units["tier2"] = (
                    kingdom.units.get("tier2", 0) + simulation.defend_units_per_action
                )
            case ActionType.ATTACK if decision.target_id is not None:
                gold = 0
                self._attack(world, combat, kingdom, decision.target_id)
            case _:
                return

        resources.gold -= gold
        resources.turns = max(0, resources.turns - turns)

    @staticmethod
    def _attack(
        world: World, combat: ICombatService, kingdom: Kingdom, target_id: KingdomID
    ) -> None:
        if world.wars.state(kingdom.id, target_id) is WarState.WAR_REQUIRED:
            world.wars.declare_war(kingdom.id, target_id, world.tick)
        try:
            combat.attack(kingdom.id, target_id)
        except (RestorationActiveError, WarDeclarationRequired) as exc:
            logger.debug("%s skipped attack on %s: %s", kingdom.id, target_id, exc)

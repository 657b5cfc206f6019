"""Declarative rule configuration for the combat and AI layers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CombatRules:
    """Turn costs, outcome bands, casualties and land acquisition."""

    base_turn_cost: int = 4
    networth_threshold: float = 0.5  # below 0.5 or above 1/0.5 scales the cost
    easy_target_multiplier: float = 1.5  # 6 turns
    hard_target_multiplier: float = 2.0  # 8 turns
    attacks_before_declaration: int = 3
    ambush_effectiveness: float = 0.95
    with_ease_ratio: float = 2.0
    good_fight_ratio: float = 1.2
    zero_defense_ratio: float = 999.0
    with_ease_land_min: float = 0.070
    with_ease_land_max: float = 0.0735
    good_fight_land_min: float = 0.0679
    good_fight_land_max: float = 0.070
    controlled_strike_min: float = 0.01
    controlled_strike_max: float = 1.0
    mob_assault_land_factor: float = 0.8
    gold_per_acre: int = 1000
    structures_per_acre: float = 0.1
    with_ease_attacker_casualties: float = 0.05
    with_ease_defender_casualties: float = 0.20
    good_fight_attacker_casualties: float = 0.15
    good_fight_defender_casualties: float = 0.15
    failed_attacker_casualties: float = 0.25
    failed_defender_casualties: float = 0.05
    defense_casualty_weight: float = 0.05
    min_casualty_weight: float = 0.5
    army_reduction_rate: float = 0.25
    default_fort_defense: int = 250
    default_summon_rate: float = 0.025
    default_war_stat: int = 3


@dataclass(frozen=True, slots=True)
class SorceryRules:
    """Temple thresholds and elan generation."""

    tier_thresholds: tuple[float, float, float, float] = (0.02, 0.04, 0.08, 0.12)
    optimal_defense: float = 0.16
    attacker_advantage: float = 1.15
    high_magic_elan_rate: float = 0.005
    standard_elan_rate: float = 0.003
    max_kill_casts: int = 100
    train_rate_per_structure: float = 0.15
    max_temple_percentage: float = 0.20


@dataclass(frozen=True, slots=True)
class ThieveryRules:
    """Detection, theft and scum attrition."""

    minimum_scum: int = 100
    optimal_detection: float = 0.85
    detection_cap: float = 0.95
    base_theft_amount: int = 3_500_000
    theft_cash_fraction: float = 0.10
    success_casualty_rate: float = 0.015
    failure_casualty_rate: float = 0.05
    green_death_min: float = 0.01
    green_death_max: float = 0.025
    elite_death_min: float = 0.0088
    elite_death_max: float = 0.0094
    protection_buffer: float = 1.2
    large_kingdom_land: int = 20_000


@dataclass(frozen=True, slots=True)
class RestorationRules:
    """Restoration triggers and protection windows."""

    damage_based_hours: int = 48
    death_based_hours: int = 72
    structure_loss_minimum: float = 0.70
    population_loss_minimum: float = 0.80
    critical_infrastructure: tuple[str, ...] = ("palace", "fortress", "major_temples")


@dataclass(frozen=True, slots=True)
class StrategyRules:
    """Candidate thresholds for the strategy engine."""

    min_attack_turns: int = 4
    min_attack_success: float = 0.7
    high_efficiency: float = 2.0
    build_cost_per_acre: float = 2.5
    gold_per_built_acre: int = 500
    train_cost_per_unit: int = 10
    train_base_cost: int = 1000
    max_units_per_acre: float = 3.0
    low_units_per_acre: float = 1.5
    rival_networth_ratio: float = 0.8
    rival_min_turns: int = 4
    defense_gold_fraction: float = 0.3
    allocation_min: float = 10.0
    allocation_max: float = 70.0


@dataclass(frozen=True, slots=True)
class TargetingRules:
    """Score weights and recommendation thresholds for target selection."""

    efficiency_points: float = 40.0
    efficiency_cap: float = 3.0
    success_points: float = 30.0
    strategic_points: float = 15.0
    risk_points: float = 10.0
    war_penalty: float = 20.0
    war_penalty_success_cutoff: float = 0.9
    war_risk_attack_count: int = 2
    prime_score: float = 70.0
    prime_efficiency: float = 2.0
    good_score: float = 50.0
    good_success: float = 0.7
    risky_score: float = 30.0
    loot_fraction: float = 0.1
    plan_strike_turns: int = 4
    controlled_strike_ratio: float = 1.2
    full_strike_ratio: float = 1.3
    max_alternatives: int = 3


@dataclass(frozen=True, slots=True)
class CoordinatorRules:
    """Phase boundaries, threat bands and confidence weights."""

    early_phase_max_turn: int = 20
    mid_phase_max_turn: int = 60
    threat_ratio: float = 1.2
    opportunity_min_ratio: float = 0.3
    opportunity_max_ratio: float = 0.8
    competitive_rank_fraction: float = 0.3
    struggling_rank_fraction: float = 0.7
    base_confidence: float = 0.5
    min_confidence: float = 0.1
    max_confidence: float = 1.0
    history_limit: int = 50


@dataclass(frozen=True, slots=True)
class WarRules:
    """War-declaration policy."""

    # When true, attacks past the threshold are logged instead of rejected.
    allow_attacks_after_war_required: bool = True


@dataclass(frozen=True, slots=True)
class SimulationRules:
    """Batch simulation tuning."""

    max_turns: int = 200
    battle_history_limit: int = 50
    income_per_acre: int = 10
    turns_per_tick: int = 1
    max_stored_turns: int = 100
    build_acres_per_action: int = 5
    train_units_per_action: int = 50
    defend_units_per_action: int = 40
    dominant_win_rate: float = 0.6
    start_gold: int = 10_000
    start_land: int = 250
    start_population: int = 5_000
    start_turns: int = 20


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    combat: CombatRules = CombatRules()
    sorcery: SorceryRules = SorceryRules()
    thievery: ThieveryRules = ThieveryRules()
    restoration: RestorationRules = RestorationRules()
    strategy: StrategyRules = StrategyRules()
    targeting: TargetingRules = TargetingRules()
    coordinator: CoordinatorRules = CoordinatorRules()
    war: WarRules = WarRules()
    simulation: SimulationRules = SimulationRules()


DEFAULT_RULES = RulesConfig()

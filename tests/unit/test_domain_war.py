"""Unit tests for the war-declaration tracker."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

import pytest

from warcouncil.domain.enums import WarState
from warcouncil.domain.models import KingdomID
from warcouncil.domain.rules_config import DEFAULT_RULES, WarRules
from warcouncil.domain.war import WarDeclarationRequired, WarStateError, WarTracker

A = KingdomID("a")
B = KingdomID("b")
C = KingdomID("c")

STRICT_RULES = replace(DEFAULT_RULES, war=WarRules(allow_attacks_after_war_required=False))


def test_state_progression_over_three_attacks():
    tracker = WarTracker()
    assert tracker.state(A, B) is WarState.NEUTRAL
    states = [tracker.record_attack(A, B) for _ in range(3)]
    assert states == [WarState.TRACKING, WarState.TRACKING, WarState.WAR_REQUIRED]


def test_pairs_are_ordered():
    tracker = WarTracker()
    tracker.record_attack(A, B)
    assert tracker.attack_count(A, B) == 1
    assert tracker.attack_count(B, A) == 0
    assert tracker.state(B, A) is WarState.NEUTRAL


def test_counts_from_lists_every_defender():
    tracker = WarTracker()
    tracker.record_attack(A, B)
    tracker.record_attack(A, B)
    tracker.record_attack(A, C)
    tracker.record_attack(B, A)
    assert tracker.counts_from(A) == {B: 2, C: 1}


def test_permissive_policy_warns_once_and_allows(caplog):
    tracker = WarTracker()
    for _ in range(3):
        tracker.record_attack(A, B)

    with caplog.at_level(logging.WARNING, logger="warcouncil.domain.war"):
        assert tracker.check_attack(A, B) is WarState.WAR_REQUIRED
        tracker.record_attack(A, B)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert tracker.attack_count(A, B) == 4


def test_strict_policy_blocks_fourth_attack():
    tracker = WarTracker(rules=STRICT_RULES)
    for _ in range(3):
        tracker.record_attack(A, B)

    with pytest.raises(WarDeclarationRequired):
        tracker.check_attack(A, B)
    with pytest.raises(WarDeclarationRequired):
        tracker.record_attack(A, B)
    assert tracker.attack_count(A, B) == 3


def test_declare_war_and_make_peace():
    tracker = WarTracker(rules=STRICT_RULES)
    for _ in range(3):
        tracker.record_attack(A, B)

    record = tracker.declare_war(A, B, tick=12)
    assert record.is_active
    assert record.declared_at_tick == 12
    assert tracker.is_at_war(A, B)
    assert tracker.record_attack(A, B) is WarState.AT_WAR

    tracker.make_peace(A, B)
    assert tracker.state(A, B) is WarState.NEUTRAL
    assert tracker.attack_count(A, B) == 0


def test_declare_war_before_threshold_is_rejected():
    tracker = WarTracker()
    tracker.record_attack(A, B)
    with pytest.raises(WarStateError):
        tracker.declare_war(A, B, tick=1)


def test_make_peace_without_war_is_rejected():
    with pytest.raises(WarStateError):
        WarTracker().make_peace(A, B)


def test_records_round_trip_through_restore():
    tracker = WarTracker()
    tracker.record_attack(A, B)
    copy = WarTracker()
    copy.restore(tracker.records())
    assert copy.attack_count(A, B) == 1


def test_concurrent_attacks_are_all_counted():
    tracker = WarTracker()

    def attack_many() -> None:
        for _ in range(200):
            tracker.record_attack(A, B)

    threads = [threading.Thread(target=attack_many) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert tracker.attack_count(A, B) == 800

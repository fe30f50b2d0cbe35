"""
Tests for the class assignment state machine and the pool selector.

Covers:
  - Hybrid naming at tiers 1-2 (no class draw consumed)
  - Specialized path thresholds at tiers 3-6
  - Evolution table lookups
  - pool[0] fallback and EmptyPoolError
  - Trait rarity roll

Run:  py -3 -m protozoa_kernel.test_classes
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from protozoa_kernel.classes import (
    AssignmentState,
    assign_class,
    assign_class_with_state,
    choose_path,
    evolution_name,
    main_class_for,
)
from protozoa_kernel.domain_types import (
    HybridSubclass,
    MainClass,
    Rarity,
    Role,
    SpecializedPath,
    SpecializedSubclass,
    Tier,
)
from protozoa_kernel.errors import EmptyPoolError, UnknownRoleError
from protozoa_kernel.rng import SeededStreamRng
from protozoa_kernel.selection import roll_rarity, select

_pass = 0
_fail = 0


def _test(name, fn):
    global _pass, _fail
    try:
        fn()
        print(f"  [PASS] {name}")
        _pass += 1
    except Exception as exc:
        print(f"  [FAIL] {name}: {exc}")
        _fail += 1


class _FixedDraw:
    """Stand-in RandomSource returning a scripted value."""

    def __init__(self, value: float = 0.0, index: int = 0) -> None:
        self.value = value
        self.index = index
        self.draws = 0

    def next(self) -> float:
        self.draws += 1
        return self.value

    def index_below(self, n: int) -> int:
        self.draws += 1
        return min(self.index, n - 1)


@dataclass(frozen=True)
class _Entry:
    id: str
    role: Role
    rarity: Rarity


# ---------------------------------------------------------------------------
# Class assignment
# ---------------------------------------------------------------------------

def test_main_class_lookup():
    assert main_class_for(Role.CORE) is MainClass.HEALER
    assert main_class_for(Role.CONTROL) is MainClass.CASTER
    assert main_class_for(Role.MOVEMENT) is MainClass.ROGUE
    assert main_class_for(Role.DEFENSE) is MainClass.TANK
    assert main_class_for("attack") is MainClass.STRIKER


def test_hybrid_attack_defense():
    for tier in (Tier.TIER_1, Tier.TIER_2):
        rng = _FixedDraw(0.1)
        assignment, state = assign_class_with_state(Role.ATTACK, Role.DEFENSE, tier, rng)
        assert state is AssignmentState.HYBRID_ASSIGNED
        assert isinstance(assignment.subclass, HybridSubclass)
        assert assignment.subclass.name == "Battle Guardian Striker"
        assert assignment.main_class is MainClass.STRIKER
        assert assignment.tier is tier
        assert rng.draws == 0


def test_specialized_defense_attack_tier_4():
    assignment, state = assign_class_with_state(
        Role.DEFENSE, Role.ATTACK, Tier.TIER_4, _FixedDraw(0.69),
    )
    assert state is AssignmentState.SPECIALIZED_ASSIGNED
    assert isinstance(assignment.subclass, SpecializedSubclass)
    assert assignment.subclass.specialized_path is SpecializedPath.SENTINEL
    assert assignment.subclass.name == "Sentinel"

    other = assign_class(Role.DEFENSE, Role.ATTACK, Tier.TIER_4, _FixedDraw(0.7))
    assert other.subclass.specialized_path is SpecializedPath.GUARDIAN
    assert other.subclass.name == "Guardian"


def test_thresholds_by_secondary_role():
    assert choose_path(MainClass.STRIKER, Role.DEFENSE, 0.69) is SpecializedPath.BERSERKER
    assert choose_path(MainClass.HEALER, Role.CONTROL, 0.29) is SpecializedPath.RESTORATION_SPECIALIST
    assert choose_path(MainClass.HEALER, Role.CONTROL, 0.3) is SpecializedPath.FIELD_MEDIC
    assert choose_path(MainClass.CASTER, Role.MOVEMENT, 0.5) is SpecializedPath.ENCHANTER
    assert choose_path(MainClass.ROGUE, Role.CORE, 0.49) is SpecializedPath.ASSASSIN_ROGUE
    assert choose_path(MainClass.ROGUE, Role.CORE, 0.5) is SpecializedPath.ACROBAT


def test_one_class_draw_for_specialized():
    rng = SeededStreamRng(1).stream("class")
    assign_class(Role.CORE, Role.ATTACK, Tier.TIER_6, rng)
    assert rng.draws == 1


def test_evolution_names():
    assert evolution_name(SpecializedPath.SENTINEL, Tier.TIER_6) == "Living Fortress"
    assert evolution_name(SpecializedPath.FIELD_MEDIC, Tier.TIER_6) == "Divine Caretaker"
    assert evolution_name(SpecializedPath.ASSASSIN_STRIKER, Tier.TIER_3) == "Duelist"


def test_assignment_rejects_bad_roles():
    try:
        assign_class("WIZARD", Role.CORE, Tier.TIER_3, _FixedDraw())
        assert False, "Expected UnknownRoleError"
    except UnknownRoleError:
        pass
    try:
        assign_class(Role.CORE, Role.CORE, Tier.TIER_3, _FixedDraw())
        assert False, "Expected ValueError"
    except ValueError:
        pass


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def test_select_matching_entry():
    pool = [
        _Entry("a", Role.CORE, Rarity.COMMON),
        _Entry("b", Role.CORE, Rarity.RARE),
        _Entry("c", Role.CORE, Rarity.RARE),
    ]
    result = select(Role.CORE, Rarity.RARE, pool, _FixedDraw(index=1))
    assert result.entry.id == "c"
    assert result.fallback is False
    assert result.candidate_count == 2


def test_select_falls_back_to_first_entry():
    pool = [
        _Entry("first", Role.ATTACK, Rarity.COMMON),
        _Entry("second", Role.ATTACK, Rarity.UNCOMMON),
    ]
    rng = _FixedDraw(index=0)
    result = select(Role.ATTACK, Rarity.MYTHIC, pool, rng)
    assert result.entry.id == "first"
    assert result.fallback is True
    assert result.candidate_count == 0
    assert rng.draws == 1


def test_select_empty_pool():
    try:
        select(Role.CORE, Rarity.COMMON, [], _FixedDraw(), "trait pool")
        assert False, "Expected EmptyPoolError"
    except EmptyPoolError:
        pass


def test_roll_rarity_boundaries():
    assert roll_rarity(Tier.TIER_1, _FixedDraw(index=699)) is Rarity.COMMON
    assert roll_rarity(Tier.TIER_1, _FixedDraw(index=700)) is Rarity.UNCOMMON
    assert roll_rarity(Tier.TIER_1, _FixedDraw(index=950)) is Rarity.RARE
    assert roll_rarity(Tier.TIER_6, _FixedDraw(index=0)) is Rarity.UNCOMMON
    assert roll_rarity(Tier.TIER_6, _FixedDraw(index=999)) is Rarity.MYTHIC


def main():
    tests = [
        ("Main class lookup", test_main_class_lookup),
        ("Hybrid: Attack/Defense", test_hybrid_attack_defense),
        ("Specialized: Defense/Attack tier 4", test_specialized_defense_attack_tier_4),
        ("Specialized: thresholds", test_thresholds_by_secondary_role),
        ("Specialized: one draw", test_one_class_draw_for_specialized),
        ("Evolution names", test_evolution_names),
        ("Bad roles", test_assignment_rejects_bad_roles),
        ("Select: match", test_select_matching_entry),
        ("Select: fallback", test_select_falls_back_to_first_entry),
        ("Select: empty pool", test_select_empty_pool),
        ("Rarity roll boundaries", test_roll_rarity_boundaries),
    ]

    print(f"\nRunning {len(tests)} tests...\n")
    for name, fn in tests:
        _test(name, fn)

    print(f"\n{'='*60}")
    print(f"  {_pass} passed, {_fail} failed out of {_pass + _fail}")
    print(f"{'='*60}")

    if _fail > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Comprehensive tests for the deterministic creature generator.

Covers:
  - Golden traits and formations for nonce 12345 (regression)
  - Slot counts per tier, one formation per role
  - Fallback picks are flagged, counted and emitted as events
  - Pool loading: pydantic validation, duplicate ids, coverage gaps
  - Empty role pool fails with EmptyPoolError
  - Diagnostics, JSON export, verification harness

Run:  py -3 test_generator.py
"""

from __future__ import annotations

import json
import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from protozoa_kernel.domain_types import Rarity, Role, Tier
from protozoa_kernel.engine import IdentityEngine
from protozoa_kernel.errors import EmptyPoolError, PoolDataError
from protozoa_kernel.hashing import canonical_hash

from protozoa_generator import (
    CREATURE_FORMAT_VERSION,
    PoolBank,
    assemble_creature,
    compute_diagnostics,
    export_creature,
    load_default_bank,
    load_pool,
    parse_pool,
    verify_generated_creature,
)

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


def _record(id, role, tier, **extra):
    record = {
        "id": id,
        "name": id.title(),
        "role": role,
        "tier": tier,
        "pattern": {"type": "CLUSTER", "density": 0.5, "cohesion": 0.5, "flexibility": 0.5},
        "effect": {"type": "BUFF", "magnitude": 1, "duration": 0},
    }
    record.update(extra)
    return record


# (role, slot, rarity, entry id, fallback) for nonce 12345
_GOLDEN_TRAITS_12345 = [
    ("CORE", "primary", "LEGENDARY", "trait-core-common", True),
    ("CORE", "secondary", "EPIC", "trait-core-common", True),
    ("CORE", "tertiary", "EPIC", "trait-core-common", True),
    ("CONTROL", "primary", "LEGENDARY", "trait-control-common", True),
    ("CONTROL", "secondary", "RARE", "trait-control-rare", False),
    ("CONTROL", "tertiary", "RARE", "trait-control-rare", False),
    ("MOVEMENT", "primary", "EPIC", "trait-movement-common", True),
    ("MOVEMENT", "secondary", "LEGENDARY", "trait-movement-common", True),
    ("MOVEMENT", "tertiary", "LEGENDARY", "trait-movement-common", True),
    ("DEFENSE", "primary", "UNCOMMON", "trait-defense-uncommon", False),
    ("DEFENSE", "secondary", "LEGENDARY", "trait-defense-common", True),
    ("DEFENSE", "tertiary", "RARE", "trait-defense-rare", False),
    ("ATTACK", "primary", "UNCOMMON", "trait-attack-uncommon", False),
    ("ATTACK", "secondary", "LEGENDARY", "trait-attack-common", True),
    ("ATTACK", "tertiary", "EPIC", "trait-attack-epic", False),
]

_GOLDEN_FORMATIONS_12345 = [
    ("CORE", "MYTHIC", "formation-core-common", True),
    ("CONTROL", "UNCOMMON", "formation-control-uncommon", False),
    ("MOVEMENT", "COMMON", "formation-movement-common", False),
    ("DEFENSE", "COMMON", "formation-defense-common", False),
    ("ATTACK", "COMMON", "formation-attack-common", False),
]


# ---------------------------------------------------------------------------
# Golden assembly
# ---------------------------------------------------------------------------

def test_golden_traits():
    creature = assemble_creature(12345)
    got = [
        (t.role.value, t.slot, t.rarity.name, t.entry.id, t.fallback)
        for t in creature.traits
    ]
    assert got == _GOLDEN_TRAITS_12345, got


def test_golden_formations():
    creature = assemble_creature(12345)
    got = [
        (f.role.value, f.rarity.name, f.entry.id, f.fallback)
        for f in creature.formations
    ]
    assert got == _GOLDEN_FORMATIONS_12345, got


def test_nonce_0_has_no_fallbacks():
    creature = assemble_creature(0)
    assert creature.identity.class_assignment.tier is Tier.TIER_3
    assert len(creature.traits) == 10
    assert creature.fallbacks() == []


def test_slot_counts_and_formations():
    bank = load_default_bank()
    engine = IdentityEngine()
    expected_slots = {1: 1, 2: 1, 3: 2, 4: 2, 5: 3, 6: 3}
    for nonce in range(0, 400, 7):
        creature = assemble_creature(nonce, engine, bank)
        tier = int(creature.identity.class_assignment.tier)
        for role in Role:
            assert len(creature.traits_for(role)) == expected_slots[tier]
            assert creature.formation_for(role).role is role
        assert len(creature.formations) == 5


def test_assembly_deterministic():
    bank = load_default_bank()
    for nonce in (12345, 0, "0x1d00ffff", 4294967295):
        a = assemble_creature(nonce, IdentityEngine(), bank)
        b = assemble_creature(nonce, IdentityEngine(), load_default_bank())
        assert canonical_hash(a) == canonical_hash(b)


# ---------------------------------------------------------------------------
# Fallback signalling
# ---------------------------------------------------------------------------

def test_fallback_events():
    received = []
    engine = IdentityEngine(listeners=[received.append])
    creature = assemble_creature(12345, engine)

    types = [e.event_type for e in received]
    assert types[:2] == ["particle_groups_created", "class_assigned"]
    assert types.count("traits_assigned") == 5
    assert types[-1] == "formations_assigned"

    fallback_events = [e for e in received if e.event_type == "pool_fallback"]
    assert len(fallback_events) == len(creature.fallbacks()) == 10
    first = fallback_events[0].payload
    assert first == {
        "pool": "traits",
        "role": "CORE",
        "rarity": "LEGENDARY",
        "entry_id": "trait-core-common",
        "slot": "primary",
    }


def test_empty_role_pool():
    traits = parse_pool([_record("t-core", "CORE", "COMMON")])
    formations = load_pool(os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                        "protozoa_generator", "data", "formations.json"))
    bank = PoolBank(traits, formations)
    try:
        assemble_creature(12345, bank=bank)
        assert False, "Expected EmptyPoolError"
    except EmptyPoolError:
        pass


# ---------------------------------------------------------------------------
# Pool loading
# ---------------------------------------------------------------------------

def test_parse_pool_accepts_aliases():
    entries = parse_pool({"entries": [
        _record("a", "core", "rare"),
        _record("b", "ATTACK", "MYTHIC"),
    ]})
    assert entries[0].role is Role.CORE
    assert entries[0].rarity is Rarity.RARE
    assert entries[1].summary() == {"id": "b", "name": "B", "role": "ATTACK", "rarity": "MYTHIC"}


def test_parse_pool_rejects_bad_records():
    bad_inputs = [
        [_record("a", "WIZARD", "COMMON")],
        [_record("a", "CORE", "ULTRA")],
        [_record("", "CORE", "COMMON")],
        [{"id": "x", "role": "CORE", "tier": "COMMON"}],
        [_record("a", "CORE", "COMMON", pattern={"type": "X", "density": -1,
                                                  "cohesion": 0, "flexibility": 0})],
        {"records": []},
        "not a list",
    ]
    for bad in bad_inputs:
        try:
            parse_pool(bad, source="test")
            assert False, f"Expected PoolDataError for {bad!r}"
        except PoolDataError as exc:
            assert exc.source == "test"


def test_duplicate_ids_rejected():
    entries = parse_pool([_record("dup", "CORE", "COMMON"), _record("dup", "ATTACK", "COMMON")])
    try:
        PoolBank(entries, [])
        assert False, "Expected PoolDataError"
    except PoolDataError:
        pass


def test_load_pool_missing_and_malformed_files():
    with tempfile.TemporaryDirectory() as tmp:
        missing = os.path.join(tmp, "missing.json")
        broken = os.path.join(tmp, "broken.json")
        with open(broken, "w", encoding="utf-8") as f:
            f.write("{not json")
        for path in (missing, broken):
            try:
                load_pool(path)
                assert False, f"Expected PoolDataError for {path}"
            except PoolDataError:
                pass


def test_default_bank_coverage():
    bank = load_default_bank()
    assert bank.counts() == {"traits": 16, "formations": 20}
    gaps = bank.coverage_gaps()
    assert ("CORE", "MYTHIC") in gaps["traits"]
    assert ("ATTACK", "EPIC") not in gaps["traits"]
    assert len(gaps["formations"]) == 10
    assert len(bank.traits_for("defense")) == 3


# ---------------------------------------------------------------------------
# Diagnostics / export / verification
# ---------------------------------------------------------------------------

def test_diagnostics():
    creature = assemble_creature(12345)
    diag = compute_diagnostics(creature)
    assert diag["nonce"] == 12345
    assert diag["total_particles"] == 500
    assert diag["counts"] == {"CORE": 220, "CONTROL": 98, "MOVEMENT": 91, "DEFENSE": 43, "ATTACK": 48}
    assert diag["ranking"] == ["CORE", "CONTROL", "MOVEMENT", "ATTACK", "DEFENSE"]
    assert diag["dominant_share"] == 4400
    assert diag["tier"] == 6
    assert diag["main_class"] == "Healer"
    assert diag["subclass"] == "Divine Caretaker"
    assert diag["subclass_kind"] == "specialized"
    assert diag["trait_count"] == 15
    assert diag["fallback_count"] == 10
    assert diag["creature_hash"] == canonical_hash(creature)
    assert len(diag["warnings"]) == 11
    assert diag["warnings"][-1] == "1 mythic group(s): CORE"


def test_json_export():
    creature = assemble_creature(12345)
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "creature.json")
        export_creature(creature, path)
        with open(path, "r", encoding="utf-8") as f:
            doc = json.load(f)
    assert doc["metadata"] == {
        "nonce": 12345,
        "format_version": CREATURE_FORMAT_VERSION,
        "creature_hash": canonical_hash(creature),
    }
    assert doc["creature"] == json.loads(json.dumps(creature.to_dict()))


def test_verification_harness():
    result = verify_generated_creature("0x1d00ffff")
    assert result["deterministic"] is True
    assert result["diagnostics"]["nonce"] == 0x1D00FFFF
    assert result["identity_hash"] == canonical_hash(assemble_creature(486604799).identity)


def main():
    tests = [
        ("Golden: traits 12345", test_golden_traits),
        ("Golden: formations 12345", test_golden_formations),
        ("Golden: nonce 0 no fallbacks", test_nonce_0_has_no_fallbacks),
        ("Slots and formations per tier", test_slot_counts_and_formations),
        ("Determinism: assembly", test_assembly_deterministic),
        ("Fallback: events", test_fallback_events),
        ("Fallback: empty role pool", test_empty_role_pool),
        ("Pools: aliases", test_parse_pool_accepts_aliases),
        ("Pools: bad records", test_parse_pool_rejects_bad_records),
        ("Pools: duplicate ids", test_duplicate_ids_rejected),
        ("Pools: missing / malformed file", test_load_pool_missing_and_malformed_files),
        ("Pools: default coverage", test_default_bank_coverage),
        ("Diagnostics", test_diagnostics),
        ("JSON export", test_json_export),
        ("Verification harness", test_verification_harness),
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

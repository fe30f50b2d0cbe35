"""
Protozoa Runtime: Cache and Metrics Tests

  1-4:  GenerationCache miss / hit / key / persistence
  5:    Tampered cache entry raises DeterminismError
  6-7:  Invalid input and metrics

Run:  py -3 -m protozoa_runtime.test_runtime
"""

from __future__ import annotations

import os
import sqlite3
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from protozoa_kernel.domain_types import DistributionConstants
from protozoa_kernel.engine import IdentityEngine
from protozoa_kernel.errors import InvalidSeedError
from protozoa_kernel.hashing import canonical_hash
from protozoa_generator.assembler import assemble_creature
from protozoa_runtime import DeterminismError, GenerationCache, GenerationMetrics, collect_metrics

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


def _temp_db() -> str:
    db_fd, db_path = tempfile.mkstemp(suffix=".db", prefix="protozoa_runtime_test_")
    os.close(db_fd)
    return db_path


def _cleanup(db_path: str) -> None:
    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.remove(db_path + suffix)


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

def test_miss_then_hit():
    cache = GenerationCache()
    creature, creature_hash, hit = cache.get_or_generate(12345)
    assert hit is False
    assert creature_hash == canonical_hash(assemble_creature(12345))
    assert creature["identity"]["nonce"] == 12345

    again, again_hash, hit = cache.get_or_generate("12345")
    assert hit is True
    assert again_hash == creature_hash
    assert again == creature
    assert cache.count() == 1
    cache.close()


def test_key_includes_total_and_bounds():
    cache = GenerationCache()
    cache.get_or_generate(12345)
    _, _, hit = cache.get_or_generate(12345, total_particles=600)
    assert hit is False
    assert cache.count() == 2
    assert cache.lookup(12345, 700) is None
    cache.close()

    db_path = _temp_db()
    try:
        GenerationCache(db_path).get_or_generate(12345)
        narrow = GenerationCache(db_path, engine=IdentityEngine(
            DistributionConstants(min_particles_per_group=60, max_particles_per_group=200)))
        assert narrow.lookup(12345) is None
        assert GenerationCache(db_path).lookup(12345) is not None
        narrow.close()
    finally:
        _cleanup(db_path)


def test_lookup_returns_stored_pair():
    cache = GenerationCache()
    assert cache.lookup("0x1d00ffff") is None
    creature, creature_hash, _ = cache.get_or_generate("0x1d00ffff")
    stored = cache.lookup(486604799)
    assert stored == (creature, creature_hash)
    cache.close()


def test_persists_across_connections():
    db_path = _temp_db()
    try:
        first = GenerationCache(db_path)
        _, creature_hash, hit = first.get_or_generate(4294967295)
        assert hit is False
        first.close()

        second = GenerationCache(db_path)
        _, again_hash, hit = second.get_or_generate(4294967295)
        assert hit is True
        assert again_hash == creature_hash
        second.close()
    finally:
        _cleanup(db_path)


def test_tampered_entry_raises():
    db_path = _temp_db()
    try:
        cache = GenerationCache(db_path)
        cache.get_or_generate(0)

        conn = sqlite3.connect(db_path)
        with conn:
            conn.execute("UPDATE creatures SET creature_hash = ?", ("0" * 64,))
        conn.close()

        try:
            cache.get_or_generate(0, verify=True)
            assert False, "Expected DeterminismError"
        except DeterminismError as exc:
            assert exc.nonce == 0
            assert exc.expected == "0" * 64

        # Default hits are served from storage without re-assembly.
        _, stored_hash, hit = cache.get_or_generate(0)
        assert hit is True
        assert stored_hash == "0" * 64
        cache.close()
    finally:
        _cleanup(db_path)


def test_invalid_nonce_not_cached():
    cache = GenerationCache()
    try:
        cache.get_or_generate("not-a-nonce")
        assert False, "Expected InvalidSeedError"
    except InvalidSeedError:
        pass
    assert cache.count() == 0
    cache.close()


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

def test_collect_metrics():
    metrics = collect_metrics(12345)
    assert isinstance(metrics, GenerationMetrics)
    assert metrics.generation_latency_ms >= 0
    assert metrics.nonce == 12345
    assert metrics.tier == 6
    assert metrics.main_class == "Healer"
    assert metrics.subclass == "Divine Caretaker"
    assert metrics.fallback_count == 10
    assert metrics.creature_hash == canonical_hash(assemble_creature(12345))
    assert len(metrics.warnings) == 11


def main():
    tests = [
        ("Cache: miss then hit", test_miss_then_hit),
        ("Cache: key includes total and bounds", test_key_includes_total_and_bounds),
        ("Cache: lookup", test_lookup_returns_stored_pair),
        ("Cache: persistence", test_persists_across_connections),
        ("Cache: tampered entry", test_tampered_entry_raises),
        ("Cache: invalid nonce", test_invalid_nonce_not_cached),
        ("Metrics", test_collect_metrics),
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

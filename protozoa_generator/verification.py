"""
Verification Harness: assemble, re-assemble, and compare.

Provides single-nonce verification and a suite of smoke tests when
run as __main__.
"""

from __future__ import annotations

from typing import Any, Optional

from protozoa_kernel.engine import IdentityEngine
from protozoa_kernel.hashing import canonical_hash

from .assembler import assemble_creature
from .diagnostics import compute_diagnostics
from .pools import PoolBank, load_default_bank


def verify_generated_creature(
    nonce: Any,
    engine: Optional[IdentityEngine] = None,
    bank: Optional[PoolBank] = None,
) -> dict:
    """
    Assemble the creature twice from scratch and return diagnostics.

    Returns:
        {
            "creature_hash": str,
            "identity_hash": str,
            "deterministic": bool,
            "diagnostics": dict,
        }
    """
    engine = engine or IdentityEngine()
    bank = bank or load_default_bank()

    first = assemble_creature(nonce, engine, bank)
    second = assemble_creature(nonce, IdentityEngine(engine.constants), bank)

    first_hash = canonical_hash(first)
    return {
        "creature_hash": first_hash,
        "identity_hash": canonical_hash(first.identity),
        "deterministic": first_hash == canonical_hash(second),
        "diagnostics": compute_diagnostics(first),
    }


# ---------------------------------------------------------------------------
# CLI smoke tests
# ---------------------------------------------------------------------------

def _run_smoke_tests() -> None:
    """Run a suite of deterministic smoke tests."""
    import json

    nonces = [12345, 0, "0x1d00ffff", "2083236893", 4294967295]
    bank = load_default_bank()
    engine = IdentityEngine()
    all_ok = True

    for nonce in nonces:
        print(f"\n{'-'*60}")
        print(f"  nonce={nonce!r}")
        print(f"{'-'*60}")

        try:
            result = verify_generated_creature(nonce, engine, bank)
            diag = result["diagnostics"]
            print(f"  tier={diag['tier']} class={diag['main_class']} subclass={diag['subclass']!r}")
            print(f"  counts={json.dumps(diag['counts'])}")
            print(f"  hash={result['creature_hash'][:16]}... fallbacks={diag['fallback_count']}")
            if not result["deterministic"]:
                print("  FAIL: DETERMINISM FAILURE")
                all_ok = False
            else:
                print("  OK: Deterministic (hash stable)")
        except Exception as exc:
            print(f"  FAIL: {exc}")
            all_ok = False

    print(f"\n{'='*60}")
    if all_ok:
        print("  ALL SMOKE TESTS PASSED")
    else:
        print("  SOME TESTS FAILED")
    print(f"{'='*60}")


if __name__ == "__main__":
    _run_smoke_tests()

"""
Generation metrics.

One timed assembly, summarised from compute_diagnostics.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

from protozoa_kernel.engine import IdentityEngine
from protozoa_generator.assembler import assemble_creature
from protozoa_generator.diagnostics import compute_diagnostics
from protozoa_generator.pools import PoolBank, load_default_bank


@dataclass(frozen=True)
class GenerationMetrics:
    """Snapshot of observable metrics for one assembly."""

    generation_latency_ms: float
    nonce: int
    tier: int
    main_class: str
    subclass: str
    fallback_count: int
    creature_hash: str
    warnings: list


def collect_metrics(
    nonce: Any,
    engine: Optional[IdentityEngine] = None,
    bank: Optional[PoolBank] = None,
) -> GenerationMetrics:
    """Assemble the creature for *nonce* once and time it."""
    engine = engine or IdentityEngine()
    bank = bank or load_default_bank()

    start = time.perf_counter()
    creature = assemble_creature(nonce, engine, bank)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    diagnostics = compute_diagnostics(creature)
    return GenerationMetrics(
        generation_latency_ms=round(elapsed_ms, 2),
        nonce=diagnostics["nonce"],
        tier=diagnostics["tier"],
        main_class=diagnostics["main_class"],
        subclass=diagnostics["subclass"],
        fallback_count=diagnostics["fallback_count"],
        creature_hash=diagnostics["creature_hash"],
        warnings=diagnostics["warnings"],
    )

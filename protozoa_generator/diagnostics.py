"""
Creature Diagnostics

Compute a diagnostic snapshot of one assembled creature.
Pure: returns a dict, prints nothing.
"""

from __future__ import annotations

from typing import List

from protozoa_kernel.domain_types import Rarity
from protozoa_kernel.hashing import canonical_hash
from protozoa_kernel.ranking import ranked_roles

from .creature import Creature


def compute_diagnostics(creature: Creature) -> dict:
    """
    Return a diagnostic dict summarising the creature.
    warnings lists every fallback and any extreme group.
    """
    identity = creature.identity
    groups = identity.particle_groups
    assignment = identity.class_assignment
    counts = groups.counts()
    dominant = assignment.dominant_role

    warnings: List[str] = []

    for pick in creature.fallbacks():
        slot = getattr(pick, "slot", "formation")
        warnings.append(
            f"No {pick.rarity.name} {slot} entry for {pick.role.value}, "
            f"fell back to {pick.entry.id!r}"
        )

    mythic = sorted(g.role.value for g in groups if g.rarity is Rarity.MYTHIC)
    if mythic:
        warnings.append(f"{len(mythic)} mythic group(s): {', '.join(mythic)}")

    return {
        "nonce": identity.nonce,
        "total_particles": groups.total_particles,
        "counts": {role.value: count for role, count in counts.items()},
        "ranking": [role.value for role in ranked_roles(groups)],
        "dominant_share": counts[dominant] * 10_000 // groups.total_particles,
        "tier": int(assignment.tier),
        "main_class": assignment.main_class.value,
        "subclass": assignment.subclass.name,
        "subclass_kind": assignment.subclass.kind,
        "trait_count": len(creature.traits),
        "fallback_count": len(creature.fallbacks()),
        "creature_hash": canonical_hash(creature),
        "warnings": warnings,
    }

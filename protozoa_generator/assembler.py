"""
Creature Assembler: identity + traits + formations for one nonce.

assemble_creature(nonce, engine, bank) → Creature

Stream usage (all derived from the same root seed):
  "distribution", "class"  - inside IdentityEngine.generate()
  "traits"                 - per group in role order, per slot:
                             one rarity roll, then one selection draw
  "formations"             - per group in role order: one selection draw,
                             filtered by the group's own rarity

The assembled creature is re-checked before it is returned.
"""

from __future__ import annotations

from typing import Any, List, Optional

from protozoa_kernel.constants import (
    STREAM_FORMATIONS,
    STREAM_TRAITS,
    TRAIT_SLOT_COUNT,
    TRAIT_SLOTS,
)
from protozoa_kernel.domain_types import ROLE_ORDER, Identity
from protozoa_kernel.engine import IdentityEngine
from protozoa_kernel.errors import IdentityEngineError
from protozoa_kernel.events import (
    FormationsAssignedEvent,
    PoolFallbackEvent,
    TraitsAssignedEvent,
)
from protozoa_kernel.invariants import validate_particle_groups
from protozoa_kernel.rng import RandomSource, SeededStreamRng
from protozoa_kernel.selection import SelectionResult, roll_rarity, select

from .creature import Creature, FormationPick, TraitPick
from .pools import PoolBank, load_default_bank


class GeneratorInvariantError(Exception):
    """Raised when an assembled creature fails its post-assembly checks."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Assembled creature failed validation: {cause}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def assemble_creature(
    nonce: Any,
    engine: Optional[IdentityEngine] = None,
    bank: Optional[PoolBank] = None,
    total_particles: Optional[int] = None,
) -> Creature:
    """
    Generate the full creature for *nonce*.

    Engine errors (InvalidSeedError, DistributionError, EmptyPoolError)
    propagate unchanged. GeneratorInvariantError if the result is
    internally inconsistent.
    """
    engine = engine or IdentityEngine()
    bank = bank or load_default_bank()

    identity = engine.generate(nonce, total_particles)
    rng = SeededStreamRng(identity.nonce)

    traits = _assign_traits(identity, bank, rng.stream(STREAM_TRAITS), engine)
    formations = _assign_formations(identity, bank, rng.stream(STREAM_FORMATIONS), engine)

    creature = Creature(
        identity=identity,
        traits=tuple(traits),
        formations=tuple(formations),
    )

    try:
        verify_creature(creature, engine)
    except IdentityEngineError as exc:
        raise GeneratorInvariantError(exc) from exc
    return creature


def verify_creature(creature: Creature, engine: Optional[IdentityEngine] = None) -> None:
    """
    Post-assembly checks: distribution invariants, slot count per group,
    exactly one formation per role.
    """
    constants = engine.constants if engine is not None else None
    validate_particle_groups(creature.identity.particle_groups, constants)

    tier = creature.identity.class_assignment.tier
    expected_slots = list(TRAIT_SLOTS[:TRAIT_SLOT_COUNT[tier]])
    for role in ROLE_ORDER:
        slots = [t.slot for t in creature.traits_for(role)]
        if slots != expected_slots:
            raise GeneratorInvariantError(
                ValueError(f"Role {role.value} has trait slots {slots}, expected {expected_slots}")
            )

    formation_roles = tuple(f.role for f in creature.formations)
    if formation_roles != ROLE_ORDER:
        raise GeneratorInvariantError(
            ValueError(f"Expected one formation per role, got {[r.value for r in formation_roles]}")
        )


# ---------------------------------------------------------------------------
# Traits
# ---------------------------------------------------------------------------

def _assign_traits(
    identity: Identity,
    bank: PoolBank,
    stream: RandomSource,
    engine: IdentityEngine,
) -> List[TraitPick]:
    tier = identity.class_assignment.tier
    slots = TRAIT_SLOTS[:TRAIT_SLOT_COUNT[tier]]
    picks: List[TraitPick] = []

    for group in identity.particle_groups:
        role_picks: List[TraitPick] = []
        for slot in slots:
            rarity = roll_rarity(tier, stream)
            result = select(group.role, rarity, bank.traits_for(group.role), stream, "trait pool")
            if result.fallback:
                _emit_fallback(engine, identity.nonce, "traits", result, slot)
            role_picks.append(TraitPick(
                role=group.role,
                slot=slot,
                rarity=rarity,
                entry=result.entry,
                fallback=result.fallback,
            ))
        engine.emit(TraitsAssignedEvent(
            nonce=identity.nonce,
            payload={
                "role": group.role.value,
                "traits": [p.to_dict() for p in role_picks],
            },
        ))
        picks.extend(role_picks)

    return picks


# ---------------------------------------------------------------------------
# Formations
# ---------------------------------------------------------------------------

def _assign_formations(
    identity: Identity,
    bank: PoolBank,
    stream: RandomSource,
    engine: IdentityEngine,
) -> List[FormationPick]:
    picks: List[FormationPick] = []

    for group in identity.particle_groups:
        result = select(
            group.role, group.rarity, bank.formations_for(group.role), stream, "formation pool",
        )
        if result.fallback:
            _emit_fallback(engine, identity.nonce, "formations", result, "")
        picks.append(FormationPick(
            role=group.role,
            rarity=group.rarity,
            entry=result.entry,
            fallback=result.fallback,
        ))

    engine.emit(FormationsAssignedEvent(
        nonce=identity.nonce,
        payload={"formations": [p.to_dict() for p in picks]},
    ))
    return picks


def _emit_fallback(
    engine: IdentityEngine,
    nonce: int,
    pool: str,
    result: SelectionResult,
    slot: str,
) -> None:
    engine.emit(PoolFallbackEvent(
        nonce=nonce,
        payload={
            "pool": pool,
            "role": result.role.value,
            "rarity": result.rarity.name,
            "entry_id": result.entry.id,
            "slot": slot,
        },
    ))

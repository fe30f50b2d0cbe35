"""
Protozoa Kernel: Core Domain Types

Pure data. No behaviour, no generation logic.
Every value object is frozen: a generation run creates them once and
nothing mutates them afterwards.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Role:
    One of five functional categories a particle belongs to.

Tier:
    One of six ordered power bands derived from the dominant role's
    particle count.

Rarity:
    The same banding applied to every particle group individually.

Specialized Path:
    The lineage a creature follows from Tier 3 upwards.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterator, Tuple, Union

from .errors import UnknownRoleError


# ── Closed Variant Sets ───────────────────────────────────────

class Role(Enum):
    """Declaration order is the canonical tie-break order."""

    CORE = "CORE"
    CONTROL = "CONTROL"
    MOVEMENT = "MOVEMENT"
    DEFENSE = "DEFENSE"
    ATTACK = "ATTACK"

    @property
    def order(self) -> int:
        return ROLE_ORDER.index(self)


ROLE_ORDER: Tuple[Role, ...] = tuple(Role)


def coerce_role(value: Union[Role, str]) -> Role:
    """Accept a Role or its name (case-insensitive). Hard fail otherwise."""
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        try:
            return Role[value.strip().upper()]
        except KeyError:
            pass
    raise UnknownRoleError(value)


class Tier(IntEnum):
    TIER_1 = 1
    TIER_2 = 2
    TIER_3 = 3
    TIER_4 = 4
    TIER_5 = 5
    TIER_6 = 6


class Rarity(IntEnum):
    """Ordered Common..Mythic. Serialised by name."""

    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    EPIC = 4
    LEGENDARY = 5
    MYTHIC = 6


class MainClass(Enum):
    HEALER = "Healer"      # CORE dominant
    CASTER = "Caster"      # CONTROL dominant
    ROGUE = "Rogue"        # MOVEMENT dominant
    TANK = "Tank"          # DEFENSE dominant
    STRIKER = "Striker"    # ATTACK dominant


class SpecializedPath(Enum):
    # Healer
    RESTORATION_SPECIALIST = "RestorationSpecialist"
    FIELD_MEDIC = "FieldMedic"
    # Caster
    ARCHMAGE = "Archmage"
    ENCHANTER = "Enchanter"
    # Rogue
    ASSASSIN_ROGUE = "AssassinRogue"
    ACROBAT = "Acrobat"
    # Tank
    SENTINEL = "Sentinel"
    GUARDIAN = "Guardian"
    # Striker
    BERSERKER = "Berserker"
    ASSASSIN_STRIKER = "AssassinStriker"


# ── Particle Groups ───────────────────────────────────────────

@dataclass(frozen=True)
class ParticleGroup:
    """A group of particles sharing one role."""

    role: Role
    particle_count: int
    rarity: Rarity

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "particle_count": self.particle_count,
            "rarity": self.rarity.name,
        }


@dataclass(frozen=True)
class ParticleGroups:
    """
    One ParticleGroup per role plus the creature total.
    Invariant: sum of particle counts == total_particles.
    """

    groups: Tuple[ParticleGroup, ...]
    total_particles: int

    def __getitem__(self, role: Role) -> ParticleGroup:
        for group in self.groups:
            if group.role is role:
                return group
        raise UnknownRoleError(role)

    def __iter__(self) -> Iterator[ParticleGroup]:
        return iter(self.groups)

    def counts(self) -> Dict[Role, int]:
        return {g.role: g.particle_count for g in self.groups}

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "total_particles": self.total_particles,
        }


# ── Subclasses ────────────────────────────────────────────────

@dataclass(frozen=True)
class HybridSubclass:
    """Tier 1-2 subclass, named from the two leading roles."""

    name: str
    main_class: MainClass
    tier: Tier
    primary_role: Role
    secondary_role: Role

    kind = "hybrid"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "name": self.name,
            "main_class": self.main_class.value,
            "tier": int(self.tier),
            "primary_role": self.primary_role.value,
            "secondary_role": self.secondary_role.value,
        }


@dataclass(frozen=True)
class SpecializedSubclass:
    """Tier 3-6 subclass on a specialized path."""

    name: str
    main_class: MainClass
    tier: Tier
    specialized_path: SpecializedPath

    kind = "specialized"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "name": self.name,
            "main_class": self.main_class.value,
            "tier": int(self.tier),
            "specialized_path": self.specialized_path.value,
        }


Subclass = Union[HybridSubclass, SpecializedSubclass]


@dataclass(frozen=True)
class ClassAssignment:
    """Terminal output of the class assignment state machine."""

    main_class: MainClass
    subclass: Subclass
    dominant_role: Role
    secondary_role: Role
    tier: Tier

    def to_dict(self) -> dict:
        return {
            "main_class": self.main_class.value,
            "subclass": self.subclass.to_dict(),
            "dominant_role": self.dominant_role.value,
            "secondary_role": self.secondary_role.value,
            "tier": int(self.tier),
        }


@dataclass(frozen=True)
class DistributionConstants:
    """
    Distribution parameters for one engine instance.
    Defaults come from constants.py.
    """

    total_particles: int = 500
    min_particles_per_group: int = 43
    max_particles_per_group: int = 220


@dataclass(frozen=True)
class Identity:
    """Everything derived from one (nonce, total) generation call."""

    nonce: int
    particle_groups: ParticleGroups
    class_assignment: ClassAssignment

    def to_dict(self) -> dict:
        return {
            "nonce": self.nonce,
            "particle_groups": self.particle_groups.to_dict(),
            "class_assignment": self.class_assignment.to_dict(),
        }

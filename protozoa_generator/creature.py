"""
Creature: frozen aggregate of identity, traits and formations.

Canonical output (to_dict) carries record ids only, never the float
pattern / effect values of the external pools.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

from protozoa_kernel.domain_types import Identity, Rarity, Role

from .pools import PoolEntry

CREATURE_FORMAT_VERSION: int = 1


@dataclass(frozen=True)
class TraitPick:
    role: Role
    slot: str
    rarity: Rarity
    entry: PoolEntry
    fallback: bool

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "slot": self.slot,
            "rarity": self.rarity.name,
            "entry": self.entry.summary(),
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class FormationPick:
    role: Role
    rarity: Rarity
    entry: PoolEntry
    fallback: bool

    def to_dict(self) -> dict:
        return {
            "role": self.role.value,
            "rarity": self.rarity.name,
            "entry": self.entry.summary(),
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class Creature:
    identity: Identity
    traits: Tuple[TraitPick, ...]
    formations: Tuple[FormationPick, ...]

    @property
    def nonce(self) -> int:
        return self.identity.nonce

    def traits_for(self, role: Role) -> Tuple[TraitPick, ...]:
        return tuple(t for t in self.traits if t.role is role)

    def formation_for(self, role: Role) -> FormationPick:
        for pick in self.formations:
            if pick.role is role:
                return pick
        raise KeyError(role)

    def fallbacks(self) -> List[Union[TraitPick, FormationPick]]:
        """Every pick that used the pool[0] fallback."""
        return [p for p in (*self.traits, *self.formations) if p.fallback]

    def to_dict(self) -> dict:
        return {
            "format_version": CREATURE_FORMAT_VERSION,
            "identity": self.identity.to_dict(),
            "traits": [t.to_dict() for t in self.traits],
            "formations": [f.to_dict() for f in self.formations],
        }

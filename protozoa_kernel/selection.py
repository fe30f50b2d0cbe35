"""
Trait Pool Selector: deterministic pick from an external role/rarity table.

select(role, rarity, pool, rng) → SelectionResult

  candidates = entries of pool whose role and rarity both match
  draw       = rng.index_below(len(candidates) or 1)   (always one draw)
  entry      = candidates[draw], or pool[0] when candidates is empty

The pool[0] fallback is reported on the result, never silent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

from .constants import TRAIT_RARITY_WEIGHTS
from .domain_types import Rarity, Role, Tier, coerce_role
from .errors import EmptyPoolError
from .rng import RandomSource

E = TypeVar("E")


@dataclass(frozen=True)
class SelectionResult(Generic[E]):
    """Outcome of one selection. fallback=True means pool[0] was used."""

    entry: E
    role: Role
    rarity: Rarity
    fallback: bool
    candidate_count: int


def select(
    role: Role,
    rarity: Rarity,
    pool: Sequence[E],
    rng: RandomSource,
    pool_name: str = "pool",
) -> SelectionResult[E]:
    """
    Pick one entry for (role, rarity).

    Entries must expose ``role`` and ``rarity`` attributes.
    Raises EmptyPoolError only when *pool* itself is empty.
    """
    role = coerce_role(role)
    if not pool:
        raise EmptyPoolError(role, pool_name)

    candidates = [e for e in pool if _matches(e, role, rarity)]
    index = rng.index_below(len(candidates) or 1)

    if not candidates:
        return SelectionResult(
            entry=pool[0],
            role=role,
            rarity=rarity,
            fallback=True,
            candidate_count=0,
        )
    return SelectionResult(
        entry=candidates[index],
        role=role,
        rarity=rarity,
        fallback=False,
        candidate_count=len(candidates),
    )


def roll_rarity(
    tier: Tier,
    rng: RandomSource,
    weights: Optional[Mapping[Tier, Sequence[int]]] = None,
) -> Rarity:
    """
    Roll a trait rarity from the tier's per-mille distribution.
    One draw; point = floor(draw * 1000).
    """
    row = (weights or TRAIT_RARITY_WEIGHTS)[Tier(tier)]
    point = rng.index_below(1000)
    cumulative = 0
    for rarity, weight in zip(Rarity, row):
        cumulative += weight
        if point < cumulative:
            return rarity
    # Unreachable with a validated table (rows sum to 1000).
    return Rarity.COMMON


def _matches(entry: Any, role: Role, rarity: Rarity) -> bool:
    return entry.role is role and entry.rarity is rarity

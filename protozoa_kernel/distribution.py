"""
Particle Distributor: normalized random split across the five roles.

distribute(total, rng) → ParticleGroups

  1. One raw uint32 weight per role, drawn in role order from one stream.
  2. Ideal share of each role = weight * total / sum(weights).
  3. Floor every share; hand out the remainder one particle at a time by
     largest fractional part, ties broken by role order.
  4. Bounds: roles whose share falls below the minimum are pinned at the
     minimum (or above the maximum, at the maximum) and the rest of the
     total is split again among the remaining roles.

All arithmetic is integer. weight / 2**32 is exactly the [0, 1) float the
stream would return, so the integer split equals the real-valued one.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .domain_types import (
    ROLE_ORDER,
    DistributionConstants,
    ParticleGroup,
    ParticleGroups,
    Role,
)
from .errors import DistributionError
from .invariants import validate_particle_groups
from .rng import RandomSource
from .tiers import determine_rarity


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def distribute(
    total: int,
    rng: RandomSource,
    constants: Optional[DistributionConstants] = None,
) -> ParticleGroups:
    """
    Split *total* particles across the five roles.

    Raises DistributionError if the total cannot satisfy the per-role
    bounds. Feasibility is checked before any value is drawn.
    """
    constants = constants or DistributionConstants()
    low = constants.min_particles_per_group
    high = constants.max_particles_per_group
    check_feasible(total, low, high)

    weights = {role: rng.next_uint32() for role in ROLE_ORDER}
    counts = bounded_split(weights, total, low, high)

    particle_groups = ParticleGroups(
        groups=tuple(
            ParticleGroup(
                role=role,
                particle_count=counts[role],
                rarity=determine_rarity(counts[role]),
            )
            for role in ROLE_ORDER
        ),
        total_particles=total,
    )
    validate_particle_groups(particle_groups, constants)
    return particle_groups


def check_feasible(total: int, low: int, high: int) -> None:
    """Hard fail unless n*low <= total <= n*high."""
    n = len(ROLE_ORDER)
    if isinstance(total, bool) or not isinstance(total, int) or total <= 0:
        raise DistributionError("total", f"Total particles must be a positive int, got {total!r}")
    if low < 0 or high < low:
        raise DistributionError("bounds", f"Invalid per-role bounds [{low}, {high}]")
    if total < n * low:
        raise DistributionError(
            "infeasible",
            f"Total {total} is below {n} roles x minimum {low} = {n * low}",
        )
    if total > n * high:
        raise DistributionError(
            "infeasible",
            f"Total {total} is above {n} roles x maximum {high} = {n * high}",
        )


def apportion(weights: Dict[Role, int], total: int) -> Dict[Role, int]:
    """
    Largest-remainder apportionment of *total* by *weights*.

    Exact integer sum. Ties on equal fractional remainder go to the
    earlier role. All-zero weights are treated as equal weights.
    """
    roles = _in_role_order(weights)
    if not roles:
        if total != 0:
            raise DistributionError("apportion", f"Cannot place {total} particles on zero roles")
        return {}

    weight_sum = sum(weights[r] for r in roles)
    if weight_sum == 0:
        weights = {r: 1 for r in roles}
        weight_sum = len(roles)

    counts: Dict[Role, int] = {}
    remainders: Dict[Role, int] = {}
    for role in roles:
        counts[role], remainders[role] = divmod(weights[role] * total, weight_sum)

    leftover = total - sum(counts.values())
    by_remainder = sorted(roles, key=lambda r: (-remainders[r], r.order))
    for role in by_remainder[:leftover]:
        counts[role] += 1
    return counts


def bounded_split(
    weights: Dict[Role, int],
    total: int,
    low: int,
    high: int,
) -> Dict[Role, int]:
    """
    Proportional split with every count clamped to [low, high].

    The lightest roles sit at the minimum, the heaviest at the maximum,
    the middle shares what is left proportionally. Candidates are tried
    with the fewest pinned roles first, so an unconstrained split that
    already satisfies the bounds is returned unchanged.
    """
    roles = _in_role_order(weights)
    if sum(weights[r] for r in roles) == 0:
        weights = {r: 1 for r in roles}

    # Lightest first; equal weights keep role order.
    ascending = sorted(roles, key=lambda r: (weights[r], r.order))
    n = len(ascending)

    for pinned in range(n + 1):
        for n_low in range(pinned + 1):
            n_high = pinned - n_low
            at_low = ascending[:n_low]
            at_high = ascending[n - n_high:] if n_high else []
            middle = ascending[n_low:n - n_high]
            if _consistent(weights, total, low, high, at_low, at_high, middle):
                counts = {r: low for r in at_low}
                counts.update({r: high for r in at_high})
                remaining = total - n_low * low - n_high * high
                counts.update(apportion({r: weights[r] for r in middle}, remaining))
                return {r: counts[r] for r in roles}

    raise DistributionError(
        "infeasible",
        f"No bounded split of {total} over {n} roles within [{low}, {high}]",
    )


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _in_role_order(weights: Dict[Role, int]) -> List[Role]:
    return [r for r in ROLE_ORDER if r in weights]


def _consistent(
    weights: Dict[Role, int],
    total: int,
    low: int,
    high: int,
    at_low: Sequence[Role],
    at_high: Sequence[Role],
    middle: Sequence[Role],
) -> bool:
    """
    True when some scale factor L puts every middle role's ideal share
    L * w inside [low, high], every low-pinned role at or below low, and
    every high-pinned role at or above high. Cross-multiplied, no division.
    """
    remaining = total - len(at_low) * low - len(at_high) * high
    if remaining < 0:
        return False

    if not middle:
        if remaining != 0:
            return False
        return all(
            high * weights[i] <= low * weights[j]
            for i in at_low
            for j in at_high
        )

    middle_weight = sum(weights[r] for r in middle)
    if middle_weight == 0:
        # apportion() splits an all-zero middle evenly.
        return len(middle) * low <= remaining <= len(middle) * high

    # L = remaining / middle_weight
    for role in middle:
        scaled = weights[role] * remaining
        if scaled < low * middle_weight or scaled > high * middle_weight:
            return False
    for role in at_low:
        if weights[role] * remaining > low * middle_weight:
            return False
    for role in at_high:
        if weights[role] * remaining < high * middle_weight:
            return False
    return True


"""
Tier Classifier: inclusive range tables for tiers and per-group rarity.

A count outside every band is a configuration bug, not an input error,
and raises DistributionError.
"""

from __future__ import annotations

from typing import Mapping, Tuple, TypeVar

from .constants import (
    MAX_PARTICLES_PER_GROUP,
    MIN_PARTICLES_PER_GROUP,
    RARITY_PARTICLE_RANGES,
    TIER_PARTICLE_RANGES,
)
from .domain_types import Rarity, Tier
from .errors import DistributionError

K = TypeVar("K")


def classify(
    dominant_count: int,
    ranges: Mapping[Tier, Tuple[int, int]] = TIER_PARTICLE_RANGES,
) -> Tier:
    """Map the dominant role's particle count to its Tier."""
    return _lookup(dominant_count, ranges, "tier_range")


def determine_rarity(
    particle_count: int,
    ranges: Mapping[Rarity, Tuple[int, int]] = RARITY_PARTICLE_RANGES,
) -> Rarity:
    """Map a single group's particle count to its Rarity."""
    return _lookup(particle_count, ranges, "rarity_range")


def _lookup(count: int, ranges: Mapping[K, Tuple[int, int]], rule: str) -> K:
    for key in sorted(ranges):
        low, high = ranges[key]
        if low <= count <= high:
            return key
    raise DistributionError(rule, f"Particle count {count} falls outside every band")


def validate_ranges(
    ranges: Mapping[K, Tuple[int, int]],
    domain_min: int = MIN_PARTICLES_PER_GROUP,
    domain_max: int = MAX_PARTICLES_PER_GROUP,
    rule: str = "tier_range",
) -> None:
    """
    Hard-fail unless the bands, in key order, are non-overlapping,
    contiguous and cover every count in [domain_min, domain_max].
    """
    if not ranges:
        raise DistributionError(rule, "Range table is empty")

    keys = sorted(ranges)
    first_low = ranges[keys[0]][0]
    if first_low > domain_min:
        raise DistributionError(
            rule, f"Bands start at {first_low}, above the domain minimum {domain_min}"
        )

    expected_low = first_low
    for key in keys:
        low, high = ranges[key]
        if low > high:
            raise DistributionError(rule, f"{key!r} has inverted bounds ({low}, {high})")
        if low != expected_low:
            raise DistributionError(
                rule,
                f"{key!r} starts at {low}, expected {expected_low} "
                f"(gap or overlap with the previous band)",
            )
        expected_low = high + 1

    last_high = expected_low - 1
    if last_high < domain_max:
        raise DistributionError(
            rule, f"Bands end at {last_high}, below the domain maximum {domain_max}"
        )

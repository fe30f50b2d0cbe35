"""
Protozoa Kernel: Invariant Checks

Hard-fail validation, two families:

  validate_particle_groups  - exact sum, per-role bounds, one group per role
  validate_tables           - startup self-check of every static table

Particle-group failures raise DistributionError.
Incomplete class / trait tables raise TableConfigurationError.
Tier / rarity band failures raise DistributionError.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence, Tuple

from .constants import (
    EVOLUTION_NAMES,
    MAIN_CLASS_PATHS,
    PATH_THRESHOLDS,
    RARITY_PARTICLE_RANGES,
    ROLE_TO_MAIN_CLASS,
    SPECIALIZED_TIERS,
    SUBCLASS_PREFIX,
    TIER_PARTICLE_RANGES,
    TRAIT_RARITY_WEIGHTS,
    TRAIT_SLOT_COUNT,
    TRAIT_SLOTS,
)
from .domain_types import (
    ROLE_ORDER,
    DistributionConstants,
    MainClass,
    ParticleGroups,
    Rarity,
    Role,
    SpecializedPath,
    Tier,
)
from .errors import DistributionError, TableConfigurationError
from .tiers import validate_ranges


# ---------------------------------------------------------------------------
# Particle groups
# ---------------------------------------------------------------------------

def validate_particle_groups(
    particle_groups: ParticleGroups,
    constants: Optional[DistributionConstants] = None,
) -> None:
    """Raise DistributionError on the first violated distribution invariant."""
    constants = constants or DistributionConstants()
    _check_one_group_per_role(particle_groups)
    _check_exact_sum(particle_groups)
    _check_bounds(particle_groups, constants)


def _check_one_group_per_role(particle_groups: ParticleGroups) -> None:
    roles = tuple(g.role for g in particle_groups.groups)
    if roles != ROLE_ORDER:
        raise DistributionError(
            "group_roles",
            f"Expected one group per role in role order, got {[r.value for r in roles]}",
        )


def _check_exact_sum(particle_groups: ParticleGroups) -> None:
    total = sum(g.particle_count for g in particle_groups.groups)
    if total != particle_groups.total_particles:
        raise DistributionError(
            "exact_sum",
            f"Group counts sum to {total}, expected {particle_groups.total_particles}",
        )


def _check_bounds(particle_groups: ParticleGroups, constants: DistributionConstants) -> None:
    low = constants.min_particles_per_group
    high = constants.max_particles_per_group
    for group in particle_groups.groups:
        if group.particle_count < low:
            raise DistributionError(
                "minimum",
                f"Role {group.role.value} has {group.particle_count} particles, minimum is {low}",
            )
        if group.particle_count > high:
            raise DistributionError(
                "maximum",
                f"Role {group.role.value} has {group.particle_count} particles, maximum is {high}",
            )


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

def validate_tables(
    constants: Optional[DistributionConstants] = None,
    tier_ranges: Mapping[Tier, Tuple[int, int]] = TIER_PARTICLE_RANGES,
    rarity_ranges: Mapping[Rarity, Tuple[int, int]] = RARITY_PARTICLE_RANGES,
    role_to_main_class: Mapping[Role, MainClass] = ROLE_TO_MAIN_CLASS,
    prefixes: Mapping[Role, str] = SUBCLASS_PREFIX,
    class_paths: Mapping[MainClass, Sequence[SpecializedPath]] = MAIN_CLASS_PATHS,
    evolution_names: Mapping[SpecializedPath, Mapping[Tier, str]] = EVOLUTION_NAMES,
    thresholds: Mapping[Role, float] = PATH_THRESHOLDS,
    rarity_weights: Mapping[Tier, Sequence[int]] = TRAIT_RARITY_WEIGHTS,
    slot_counts: Mapping[Tier, int] = TRAIT_SLOT_COUNT,
) -> None:
    """
    Startup self-check. Every table must be complete before the first
    generation runs; the first problem found is raised.
    """
    constants = constants or DistributionConstants()
    low = constants.min_particles_per_group
    high = constants.max_particles_per_group

    _check_keys("tier_ranges", tier_ranges, tuple(Tier))
    validate_ranges(tier_ranges, low, high, rule="tier_range")
    _check_keys("rarity_ranges", rarity_ranges, tuple(Rarity))
    validate_ranges(rarity_ranges, low, high, rule="rarity_range")

    _check_role_to_main_class(role_to_main_class)
    _check_prefixes(prefixes)
    _check_class_paths(class_paths)
    _check_evolution_names(evolution_names)
    _check_thresholds(thresholds)
    _check_rarity_weights(rarity_weights)
    _check_slot_counts(slot_counts)


def _check_keys(table: str, mapping: Mapping, expected: Tuple) -> None:
    missing = [k for k in expected if k not in mapping]
    if missing:
        raise TableConfigurationError(table, f"Missing entries for {[_name(k) for k in missing]}")


def _check_role_to_main_class(table: Mapping[Role, MainClass]) -> None:
    _check_keys("role_to_main_class", table, ROLE_ORDER)
    classes = [table[r] for r in ROLE_ORDER]
    if len(set(classes)) != len(classes):
        raise TableConfigurationError(
            "role_to_main_class", "Each role must map to a distinct main class"
        )


def _check_prefixes(table: Mapping[Role, str]) -> None:
    _check_keys("subclass_prefix", table, ROLE_ORDER)
    for role in ROLE_ORDER:
        if not table[role].strip():
            raise TableConfigurationError("subclass_prefix", f"Empty prefix for {role.value}")


def _check_class_paths(table: Mapping[MainClass, Sequence[SpecializedPath]]) -> None:
    _check_keys("main_class_paths", table, tuple(MainClass))
    seen: Dict[SpecializedPath, MainClass] = {}
    for main_class in MainClass:
        paths = table[main_class]
        if len(paths) != 2 or paths[0] == paths[1]:
            raise TableConfigurationError(
                "main_class_paths",
                f"{main_class.value} needs exactly two distinct paths, got {list(paths)}",
            )
        for path in paths:
            if path in seen:
                raise TableConfigurationError(
                    "main_class_paths",
                    f"{path.value} is claimed by both {seen[path].value} and {main_class.value}",
                )
            seen[path] = main_class


def _check_evolution_names(table: Mapping[SpecializedPath, Mapping[Tier, str]]) -> None:
    _check_keys("evolution_names", table, tuple(SpecializedPath))
    for path in SpecializedPath:
        for tier in SPECIALIZED_TIERS:
            name = table[path].get(tier, "")
            if not name.strip():
                raise TableConfigurationError(
                    "evolution_names",
                    f"No evolution name for {path.value} at tier {int(tier)}",
                )


def _check_thresholds(table: Mapping[Role, float]) -> None:
    _check_keys("path_thresholds", table, ROLE_ORDER)
    for role in ROLE_ORDER:
        if not 0.0 < table[role] < 1.0:
            raise TableConfigurationError(
                "path_thresholds",
                f"Threshold for {role.value} must lie in (0, 1), got {table[role]}",
            )


def _check_rarity_weights(table: Mapping[Tier, Sequence[int]]) -> None:
    _check_keys("trait_rarity_weights", table, tuple(Tier))
    for tier in Tier:
        row = table[tier]
        if len(row) != len(Rarity) or any(w < 0 for w in row) or sum(row) != 1000:
            raise TableConfigurationError(
                "trait_rarity_weights",
                f"Tier {int(tier)} needs {len(Rarity)} non-negative per-mille weights "
                f"summing to 1000, got {list(row)}",
            )


def _check_slot_counts(table: Mapping[Tier, int]) -> None:
    _check_keys("trait_slot_count", table, tuple(Tier))
    for tier in Tier:
        if not 1 <= table[tier] <= len(TRAIT_SLOTS):
            raise TableConfigurationError(
                "trait_slot_count",
                f"Tier {int(tier)} slot count {table[tier]} outside 1..{len(TRAIT_SLOTS)}",
            )


def _name(key) -> str:
    return getattr(key, "name", str(key))

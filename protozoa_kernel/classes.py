"""
Class Assigner: main class + subclass from ranking, tier and one draw.

States:
  UNASSIGNED ──tier 1-2──▶ HYBRID_ASSIGNED        (terminal)
             ──tier 3-6──▶ SPECIALIZED_ASSIGNED   (terminal)

The hybrid branch consumes no randomness. The specialized branch consumes
exactly one draw from the class stream:

  threshold = PATH_THRESHOLDS[secondary_role]
  path      = paths[0] if draw < threshold else paths[1]
  name      = EVOLUTION_NAMES[path][tier]
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Sequence, Tuple

from .constants import (
    EVOLUTION_NAMES,
    HYBRID_TIERS,
    MAIN_CLASS_PATHS,
    PATH_THRESHOLDS,
    ROLE_TO_MAIN_CLASS,
    SUBCLASS_PREFIX,
)
from .domain_types import (
    ClassAssignment,
    HybridSubclass,
    MainClass,
    Role,
    SpecializedPath,
    SpecializedSubclass,
    Tier,
    coerce_role,
)
from .errors import TableConfigurationError
from .rng import RandomSource


class AssignmentState(Enum):
    UNASSIGNED = "unassigned"
    HYBRID_ASSIGNED = "hybrid_assigned"
    SPECIALIZED_ASSIGNED = "specialized_assigned"


def main_class_for(role: Role) -> MainClass:
    """Total lookup over the five roles."""
    role = coerce_role(role)
    return ROLE_TO_MAIN_CLASS[role]


def hybrid_name(primary_role: Role, secondary_role: Role, main_class: MainClass) -> str:
    return f"{SUBCLASS_PREFIX[primary_role]} {SUBCLASS_PREFIX[secondary_role]} {main_class.value}"


def path_threshold(secondary_role: Role) -> float:
    return PATH_THRESHOLDS[coerce_role(secondary_role)]


def choose_path(
    main_class: MainClass,
    secondary_role: Role,
    draw: float,
    class_paths: Mapping[MainClass, Sequence[SpecializedPath]] = MAIN_CLASS_PATHS,
) -> SpecializedPath:
    """Pick one of the main class's two paths from a single [0, 1) draw."""
    first, second = class_paths[main_class]
    return first if draw < path_threshold(secondary_role) else second


def evolution_name(path: SpecializedPath, tier: Tier) -> str:
    name = EVOLUTION_NAMES.get(path, {}).get(tier, "")
    if not name:
        raise TableConfigurationError(
            "evolution_names", f"No evolution name for {path.value} at tier {int(tier)}"
        )
    return name


def assign_class(
    dominant_role: Role,
    secondary_role: Role,
    tier: Tier,
    rng: RandomSource,
) -> ClassAssignment:
    """
    Run the assignment state machine to its terminal state.

    Raises UnknownRoleError for a role outside the canonical five and
    ValueError when dominant and secondary coincide.
    """
    assignment, _state = assign_class_with_state(dominant_role, secondary_role, tier, rng)
    return assignment


def assign_class_with_state(
    dominant_role: Role,
    secondary_role: Role,
    tier: Tier,
    rng: RandomSource,
) -> Tuple[ClassAssignment, AssignmentState]:
    dominant_role = coerce_role(dominant_role)
    secondary_role = coerce_role(secondary_role)
    if dominant_role is secondary_role:
        raise ValueError(
            f"Dominant and secondary role must differ, both are {dominant_role.value}"
        )
    tier = Tier(tier)

    main_class = main_class_for(dominant_role)

    if tier in HYBRID_TIERS:
        subclass = HybridSubclass(
            name=hybrid_name(dominant_role, secondary_role, main_class),
            main_class=main_class,
            tier=tier,
            primary_role=dominant_role,
            secondary_role=secondary_role,
        )
        state = AssignmentState.HYBRID_ASSIGNED
    else:
        path = choose_path(main_class, secondary_role, rng.next())
        subclass = SpecializedSubclass(
            name=evolution_name(path, tier),
            main_class=main_class,
            tier=tier,
            specialized_path=path,
        )
        state = AssignmentState.SPECIALIZED_ASSIGNED

    assignment = ClassAssignment(
        main_class=main_class,
        subclass=subclass,
        dominant_role=dominant_role,
        secondary_role=secondary_role,
        tier=tier,
    )
    return assignment, state

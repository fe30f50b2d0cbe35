"""
Role Ranker: dominant and secondary role from particle counts.

Pure function of the counts. Ties go to the earlier role in
CORE < CONTROL < MOVEMENT < DEFENSE < ATTACK.
"""

from __future__ import annotations

from typing import Tuple

from .domain_types import ParticleGroups, Role


def rank(particle_groups: ParticleGroups) -> Tuple[Role, Role]:
    """Return (dominant, secondary)."""
    ordered = ranked_roles(particle_groups)
    return ordered[0], ordered[1]


def ranked_roles(particle_groups: ParticleGroups) -> Tuple[Role, ...]:
    """All five roles, most particles first."""
    return tuple(
        g.role
        for g in sorted(
            particle_groups.groups,
            key=lambda g: (-g.particle_count, g.role.order),
        )
    )

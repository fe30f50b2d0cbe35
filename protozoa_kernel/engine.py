"""
Protozoa Kernel: Identity Engine

Top-level orchestrator of the pure pipeline:

  nonce → SeededStreamRng → distribute → rank → classify → assign_class

Validates every static table once, at construction. After that the
engine holds no mutable state: generate() is a function of its inputs,
and many generations may run concurrently on one instance.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

from .classes import assign_class
from .constants import STREAM_CLASS, STREAM_DISTRIBUTION
from .distribution import distribute
from .domain_types import DistributionConstants, Identity
from .events import ClassAssignedEvent, GenerationEvent, Listener, ParticleGroupsCreatedEvent
from .invariants import validate_tables
from .ranking import rank
from .rng import SeededStreamRng
from .tiers import classify


class IdentityEngine:
    """
    Stateless-after-construction wrapper around the pure pipeline.

      - Static tables validated in __init__ (hard fail)
      - Listeners receive pure-data events; their exceptions propagate
    """

    def __init__(
        self,
        constants: Optional[DistributionConstants] = None,
        listeners: Iterable[Listener] = (),
    ) -> None:
        self._constants = constants or DistributionConstants()
        validate_tables(self._constants)
        self._listeners: Tuple[Listener, ...] = tuple(listeners)

    @property
    def constants(self) -> DistributionConstants:
        return self._constants

    # -- Public API ---------------------------------------------------------

    def generate(self, nonce: Any, total_particles: Optional[int] = None) -> Identity:
        """
        Derive the creature identity for *nonce*.

        Raises InvalidSeedError for an unparseable nonce and
        DistributionError for an infeasible total.
        """
        rng = SeededStreamRng.from_nonce(nonce)
        total = self._constants.total_particles if total_particles is None else total_particles

        particle_groups = distribute(total, rng.stream(STREAM_DISTRIBUTION), self._constants)
        self.emit(ParticleGroupsCreatedEvent(
            nonce=rng.root_seed,
            payload=particle_groups.to_dict(),
        ))

        dominant, secondary = rank(particle_groups)
        tier = classify(particle_groups[dominant].particle_count)
        assignment = assign_class(dominant, secondary, tier, rng.stream(STREAM_CLASS))
        self.emit(ClassAssignedEvent(
            nonce=rng.root_seed,
            payload=assignment.to_dict(),
        ))

        return Identity(
            nonce=rng.root_seed,
            particle_groups=particle_groups,
            class_assignment=assignment,
        )

    def emit(self, event: GenerationEvent) -> None:
        for listener in self._listeners:
            listener(event)


def generate_identity(
    nonce: Any,
    total_particles: Optional[int] = None,
    constants: Optional[DistributionConstants] = None,
) -> Identity:
    """One-shot convenience wrapper around IdentityEngine.generate()."""
    return IdentityEngine(constants).generate(nonce, total_particles)

"""
Protozoa Kernel: Generation Events

Events are **pure data** handed to listener callbacks. The kernel never
logs; an orchestrator that wants a log line subscribes a listener.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict


@dataclass(frozen=True)
class GenerationEvent:
    """Base for all generation events."""

    event_type: str = ""
    nonce: int = 0
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "nonce": self.nonce,
            "payload": dict(self.payload),
        }


@dataclass(frozen=True)
class ParticleGroupsCreatedEvent(GenerationEvent):
    event_type: str = "particle_groups_created"
    # payload keys: groups, total_particles


@dataclass(frozen=True)
class ClassAssignedEvent(GenerationEvent):
    event_type: str = "class_assigned"
    # payload keys: main_class, subclass, dominant_role, secondary_role, tier


@dataclass(frozen=True)
class TraitsAssignedEvent(GenerationEvent):
    event_type: str = "traits_assigned"
    # payload keys: role, traits


@dataclass(frozen=True)
class FormationsAssignedEvent(GenerationEvent):
    event_type: str = "formations_assigned"
    # payload keys: formations


@dataclass(frozen=True)
class PoolFallbackEvent(GenerationEvent):
    """A role/rarity filter came up empty and pool[0] was used."""

    event_type: str = "pool_fallback"
    # payload keys: pool, role, rarity, entry_id, slot


Listener = Callable[[GenerationEvent], None]

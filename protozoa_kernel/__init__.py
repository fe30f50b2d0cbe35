"""
Protozoa Kernel
Deterministic procedural identity engine: one block nonce → particle
distribution, tier, main class and subclass. Pure, no I/O, no logging.
"""

from .domain_types import (
    Role, Tier, Rarity, MainClass, SpecializedPath,
    ParticleGroup, ParticleGroups, HybridSubclass, SpecializedSubclass,
    ClassAssignment, DistributionConstants, Identity, ROLE_ORDER, coerce_role,
)
from .errors import (
    IdentityEngineError,
    InvalidSeedError,
    DistributionError,
    UnknownRoleError,
    EmptyPoolError,
    TableConfigurationError,
    PoolDataError,
)
from .rng import RandomSource, SeededStreamRng, parse_nonce, derive_stream_seed
from .distribution import distribute, apportion, bounded_split
from .ranking import rank, ranked_roles
from .tiers import classify, determine_rarity, validate_ranges
from .classes import AssignmentState, assign_class, assign_class_with_state
from .selection import SelectionResult, select, roll_rarity
from .invariants import validate_particle_groups, validate_tables
from .events import (
    GenerationEvent,
    ParticleGroupsCreatedEvent,
    ClassAssignedEvent,
    TraitsAssignedEvent,
    FormationsAssignedEvent,
    PoolFallbackEvent,
)
from .engine import IdentityEngine, generate_identity
from .hashing import canonical_serialize, canonical_hash
from .constants import (
    TOTAL_PARTICLES,
    MIN_PARTICLES_PER_GROUP,
    MAX_PARTICLES_PER_GROUP,
    TIER_PARTICLE_RANGES,
    RARITY_PARTICLE_RANGES,
    STREAM_DISTRIBUTION,
    STREAM_CLASS,
    STREAM_TRAITS,
    STREAM_FORMATIONS,
)

__all__ = [
    "Role",
    "Tier",
    "Rarity",
    "MainClass",
    "SpecializedPath",
    "ParticleGroup",
    "ParticleGroups",
    "HybridSubclass",
    "SpecializedSubclass",
    "ClassAssignment",
    "DistributionConstants",
    "Identity",
    "ROLE_ORDER",
    "coerce_role",
    "IdentityEngineError",
    "InvalidSeedError",
    "DistributionError",
    "UnknownRoleError",
    "EmptyPoolError",
    "TableConfigurationError",
    "PoolDataError",
    "RandomSource",
    "SeededStreamRng",
    "parse_nonce",
    "derive_stream_seed",
    "distribute",
    "apportion",
    "bounded_split",
    "rank",
    "ranked_roles",
    "classify",
    "determine_rarity",
    "validate_ranges",
    "AssignmentState",
    "assign_class",
    "assign_class_with_state",
    "SelectionResult",
    "select",
    "roll_rarity",
    "validate_particle_groups",
    "validate_tables",
    "GenerationEvent",
    "ParticleGroupsCreatedEvent",
    "ClassAssignedEvent",
    "TraitsAssignedEvent",
    "FormationsAssignedEvent",
    "PoolFallbackEvent",
    "IdentityEngine",
    "generate_identity",
    "canonical_serialize",
    "canonical_hash",
    "TOTAL_PARTICLES",
    "MIN_PARTICLES_PER_GROUP",
    "MAX_PARTICLES_PER_GROUP",
    "TIER_PARTICLE_RANGES",
    "RARITY_PARTICLE_RANGES",
    "STREAM_DISTRIBUTION",
    "STREAM_CLASS",
    "STREAM_TRAITS",
    "STREAM_FORMATIONS",
]

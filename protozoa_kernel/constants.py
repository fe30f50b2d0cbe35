"""
Protozoa Kernel: Static Tables and Default Values

All magic numbers and lookup tables live here as module-level defaults.
Per-engine distribution overrides travel in DistributionConstants.
Tables are checked for completeness by invariants.validate_tables().
"""

from typing import Dict, Tuple

from .domain_types import MainClass, Rarity, Role, SpecializedPath, Tier

# --- Distribution ---
TOTAL_PARTICLES: int = 500
MIN_PARTICLES_PER_GROUP: int = 43
MAX_PARTICLES_PER_GROUP: int = 220

# --- Stream names ---
STREAM_DISTRIBUTION: str = "distribution"
STREAM_CLASS: str = "class"
STREAM_TRAITS: str = "traits"
STREAM_FORMATIONS: str = "formations"

# --- Tier bands (inclusive). Contiguous over [MIN, MAX]. ---
TIER_PARTICLE_RANGES: Dict[Tier, Tuple[int, int]] = {
    Tier.TIER_1: (43, 95),
    Tier.TIER_2: (96, 110),
    Tier.TIER_3: (111, 125),
    Tier.TIER_4: (126, 141),
    Tier.TIER_5: (142, 151),
    Tier.TIER_6: (152, 220),
}

# Same bands, applied per group.
RARITY_PARTICLE_RANGES: Dict[Rarity, Tuple[int, int]] = {
    Rarity(int(tier)): bounds for tier, bounds in TIER_PARTICLE_RANGES.items()
}

HYBRID_TIERS: Tuple[Tier, ...] = (Tier.TIER_1, Tier.TIER_2)
SPECIALIZED_TIERS: Tuple[Tier, ...] = (Tier.TIER_3, Tier.TIER_4, Tier.TIER_5, Tier.TIER_6)

# --- Class tables ---
ROLE_TO_MAIN_CLASS: Dict[Role, MainClass] = {
    Role.CORE: MainClass.HEALER,
    Role.CONTROL: MainClass.CASTER,
    Role.MOVEMENT: MainClass.ROGUE,
    Role.DEFENSE: MainClass.TANK,
    Role.ATTACK: MainClass.STRIKER,
}

SUBCLASS_PREFIX: Dict[Role, str] = {
    Role.CORE: "Vital",
    Role.CONTROL: "Arcane",
    Role.MOVEMENT: "Swift",
    Role.DEFENSE: "Guardian",
    Role.ATTACK: "Battle",
}

# Index 0 is taken when the class draw falls below the threshold.
MAIN_CLASS_PATHS: Dict[MainClass, Tuple[SpecializedPath, SpecializedPath]] = {
    MainClass.HEALER: (SpecializedPath.RESTORATION_SPECIALIST, SpecializedPath.FIELD_MEDIC),
    MainClass.CASTER: (SpecializedPath.ARCHMAGE, SpecializedPath.ENCHANTER),
    MainClass.ROGUE: (SpecializedPath.ASSASSIN_ROGUE, SpecializedPath.ACROBAT),
    MainClass.TANK: (SpecializedPath.SENTINEL, SpecializedPath.GUARDIAN),
    MainClass.STRIKER: (SpecializedPath.BERSERKER, SpecializedPath.ASSASSIN_STRIKER),
}

# Threshold on the class draw, keyed by secondary role.
PATH_THRESHOLDS: Dict[Role, float] = {
    Role.ATTACK: 0.7,
    Role.DEFENSE: 0.7,
    Role.CONTROL: 0.3,
    Role.MOVEMENT: 0.3,
    Role.CORE: 0.5,
}

EVOLUTION_NAMES: Dict[SpecializedPath, Dict[Tier, str]] = {
    SpecializedPath.RESTORATION_SPECIALIST: {
        Tier.TIER_3: "Lifebinder",
        Tier.TIER_4: "Vitalizer",
        Tier.TIER_5: "Soulweaver",
        Tier.TIER_6: "Eternal Guardian",
    },
    SpecializedPath.FIELD_MEDIC: {
        Tier.TIER_3: "Mender",
        Tier.TIER_4: "Rejuvenator",
        Tier.TIER_5: "Lifebloom",
        Tier.TIER_6: "Divine Caretaker",
    },
    SpecializedPath.ARCHMAGE: {
        Tier.TIER_3: "Spellweaver",
        Tier.TIER_4: "Arcanist",
        Tier.TIER_5: "Archmage",
        Tier.TIER_6: "Arcane Master",
    },
    SpecializedPath.ENCHANTER: {
        Tier.TIER_3: "Illusionist",
        Tier.TIER_4: "Enchanter",
        Tier.TIER_5: "Mystic",
        Tier.TIER_6: "Reality Bender",
    },
    SpecializedPath.ASSASSIN_ROGUE: {
        Tier.TIER_3: "Stalker",
        Tier.TIER_4: "Shadowblade",
        Tier.TIER_5: "Assassin",
        Tier.TIER_6: "Death's Shadow",
    },
    SpecializedPath.ACROBAT: {
        Tier.TIER_3: "Tumbler",
        Tier.TIER_4: "Acrobat",
        Tier.TIER_5: "Windwalker",
        Tier.TIER_6: "Phantom Dancer",
    },
    SpecializedPath.SENTINEL: {
        Tier.TIER_3: "Bulwark",
        Tier.TIER_4: "Sentinel",
        Tier.TIER_5: "Juggernaut",
        Tier.TIER_6: "Living Fortress",
    },
    SpecializedPath.GUARDIAN: {
        Tier.TIER_3: "Protector",
        Tier.TIER_4: "Guardian",
        Tier.TIER_5: "Aegis",
        Tier.TIER_6: "Divine Shield",
    },
    SpecializedPath.BERSERKER: {
        Tier.TIER_3: "Warrior",
        Tier.TIER_4: "Berserker",
        Tier.TIER_5: "Warlord",
        Tier.TIER_6: "Godslayer",
    },
    SpecializedPath.ASSASSIN_STRIKER: {
        Tier.TIER_3: "Duelist",
        Tier.TIER_4: "Blademaster",
        Tier.TIER_5: "Deathbringer",
        Tier.TIER_6: "Reaper",
    },
}

# --- Trait assignment ---
TRAIT_SLOTS: Tuple[str, ...] = ("primary", "secondary", "tertiary")

TRAIT_SLOT_COUNT: Dict[Tier, int] = {
    Tier.TIER_1: 1,
    Tier.TIER_2: 1,
    Tier.TIER_3: 2,
    Tier.TIER_4: 2,
    Tier.TIER_5: 3,
    Tier.TIER_6: 3,
}

# Per-mille weights, Common..Mythic. Each row sums to 1000.
TRAIT_RARITY_WEIGHTS: Dict[Tier, Tuple[int, int, int, int, int, int]] = {
    Tier.TIER_1: (700, 250, 50, 0, 0, 0),
    Tier.TIER_2: (500, 350, 150, 0, 0, 0),
    Tier.TIER_3: (300, 400, 250, 50, 0, 0),
    Tier.TIER_4: (200, 300, 350, 150, 0, 0),
    Tier.TIER_5: (100, 200, 300, 300, 100, 0),
    Tier.TIER_6: (0, 100, 200, 400, 250, 50),
}

"""
Deterministic Creature Generator.

Assembles identity, traits and formations for one nonce from the
kernel plus the external pool bank.
"""

from .assembler import assemble_creature, verify_creature, GeneratorInvariantError
from .creature import Creature, TraitPick, FormationPick, CREATURE_FORMAT_VERSION
from .diagnostics import compute_diagnostics
from .exporter import export_creature
from .pools import PoolBank, PoolEntry, load_pool, parse_pool, load_default_bank
from .verification import verify_generated_creature

__all__ = [
    "assemble_creature",
    "verify_creature",
    "GeneratorInvariantError",
    "Creature",
    "TraitPick",
    "FormationPick",
    "CREATURE_FORMAT_VERSION",
    "compute_diagnostics",
    "export_creature",
    "PoolBank",
    "PoolEntry",
    "load_pool",
    "parse_pool",
    "load_default_bank",
    "verify_generated_creature",
]

"""
Generation Cache: sqlite3-backed memoization of assembled creatures.

The cache is owned by the caller, never by the kernel. Entries are the
canonical creature dict + its SHA-256, keyed by
(nonce, total_particles, min_per_group, max_per_group).

A hit is served from storage without re-assembly. With verify=True it
is re-assembled first, and a mismatch raises DeterminismError instead
of serving the stored value.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from protozoa_kernel.engine import IdentityEngine
from protozoa_kernel.hashing import canonical_hash
from protozoa_kernel.rng import parse_nonce
from protozoa_generator.assembler import assemble_creature
from protozoa_generator.pools import PoolBank, load_default_bank

_SCHEMA = """
CREATE TABLE IF NOT EXISTS creatures (
    nonce           TEXT    NOT NULL,
    total_particles INTEGER NOT NULL,
    min_per_group   INTEGER NOT NULL,
    max_per_group   INTEGER NOT NULL,
    creature_json   TEXT    NOT NULL,
    creature_hash   TEXT    NOT NULL,
    created_at      TEXT    NOT NULL,
    PRIMARY KEY (nonce, total_particles, min_per_group, max_per_group)
);
"""


class DeterminismError(Exception):
    """Raised when regeneration produces a different hash than the stored one."""

    def __init__(self, nonce: int, expected: str, actual: str) -> None:
        self.nonce = nonce
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Determinism failure for nonce {nonce}: "
            f"stored hash={expected!r}, regenerated hash={actual!r}"
        )


class GenerationCache:
    """Creature memoization store backed by sqlite3."""

    def __init__(
        self,
        db_path: Union[str, Path] = ":memory:",
        engine: Optional[IdentityEngine] = None,
        bank: Optional[PoolBank] = None,
    ) -> None:
        self._db_path = str(db_path)
        self._engine = engine or IdentityEngine()
        self._bank = bank or load_default_bank()
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._lock = threading.Lock()
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def lookup(
        self, nonce: Any, total_particles: Optional[int] = None,
    ) -> Optional[Tuple[dict, str]]:
        """Return (creature_dict, creature_hash) or None."""
        key = self._key(nonce, total_particles)
        with self._lock:
            row = self._conn.execute(
                """
                SELECT creature_json, creature_hash
                FROM creatures
                WHERE nonce = ? AND total_particles = ?
                  AND min_per_group = ? AND max_per_group = ?
                """,
                key,
            ).fetchone()
        if row is None:
            return None
        return json.loads(row[0]), row[1]

    def count(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM creatures").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def get_or_generate(
        self,
        nonce: Any,
        total_particles: Optional[int] = None,
        verify: bool = False,
    ) -> Tuple[dict, str, bool]:
        """
        Return (creature_dict, creature_hash, cache_hit).

        On a miss the creature is assembled and stored. On a hit with
        verify=True it is re-assembled and compared first.
        """
        cached = self.lookup(nonce, total_particles)
        if cached is not None:
            creature_dict, stored_hash = cached
            if verify:
                self.verify(nonce, total_particles, stored_hash)
            return creature_dict, stored_hash, True

        creature = assemble_creature(nonce, self._engine, self._bank, total_particles)
        creature_dict = creature.to_dict()
        creature_hash = canonical_hash(creature)
        now = datetime.now(timezone.utc).isoformat()
        with self._lock, self._conn:
            self._conn.execute(
                """
                INSERT OR REPLACE INTO creatures
                    (nonce, total_particles, min_per_group, max_per_group,
                     creature_json, creature_hash, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    *self._key(nonce, total_particles),
                    json.dumps(creature_dict, ensure_ascii=True, separators=(",", ":")),
                    creature_hash,
                    now,
                ),
            )
        return creature_dict, creature_hash, False

    def verify(self, nonce: Any, total_particles: Optional[int], expected_hash: str) -> None:
        """Re-assemble and raise DeterminismError on hash mismatch."""
        creature = assemble_creature(nonce, self._engine, self._bank, total_particles)
        actual = canonical_hash(creature)
        if actual != expected_hash:
            raise DeterminismError(creature.nonce, expected_hash, actual)

    def close(self) -> None:
        self._conn.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _key(self, nonce: Any, total_particles: Optional[int]) -> Tuple[str, int, int, int]:
        constants = self._engine.constants
        total = constants.total_particles if total_particles is None else total_particles
        return (
            str(parse_nonce(nonce)),
            total,
            constants.min_particles_per_group,
            constants.max_particles_per_group,
        )

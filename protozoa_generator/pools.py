"""
Pool Bank: typed, validated trait / formation tables.

External JSON is loaded once, validated with pydantic and frozen.
Records look like:

  { "id", "name", "description", "role", "tier",
    "pattern": {"type", "density", "cohesion", "flexibility", "parameters"},
    "effect":  {"type", "magnitude", "duration", "parameters"} }

"tier" holds the record's rarity (COMMON..MYTHIC).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from protozoa_kernel.domain_types import ROLE_ORDER, Rarity, Role, coerce_role
from protozoa_kernel.errors import PoolDataError, UnknownRoleError

DATA_DIR = Path(__file__).parent / "data"
TRAITS_FILE = "traits.json"
FORMATIONS_FILE = "formations.json"


# ---------------------------------------------------------------------------
# Record models
# ---------------------------------------------------------------------------

class PatternSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    density: float = Field(ge=0.0)
    cohesion: float = Field(ge=0.0)
    flexibility: float = Field(ge=0.0)
    parameters: Dict[str, Any] = Field(default_factory=dict)


class EffectSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    magnitude: float
    duration: float = Field(ge=0.0)
    parameters: Dict[str, Any] = Field(default_factory=dict)


class PoolEntry(BaseModel):
    """One trait or formation record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    role: Role
    rarity: Rarity = Field(alias="tier")
    pattern: PatternSpec
    effect: EffectSpec

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: Any) -> Role:
        try:
            return coerce_role(value)
        except UnknownRoleError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("rarity", mode="before")
    @classmethod
    def _parse_rarity(cls, value: Any) -> Rarity:
        if isinstance(value, Rarity):
            return value
        if isinstance(value, str):
            try:
                return Rarity[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Unknown rarity: {value!r}")

    def summary(self) -> dict:
        """Float-free identity of the record, used in canonical output."""
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "rarity": self.rarity.name,
        }


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def parse_pool(records: Union[list, dict], source: str = "<memory>") -> List[PoolEntry]:
    """
    Validate raw records. Accepts a list, or {"entries": [...]}.
    Raises PoolDataError with the pydantic error text on failure.
    """
    if isinstance(records, dict):
        records = records.get("entries", None)
    if not isinstance(records, list):
        raise PoolDataError(source, "expected a list of records or {\"entries\": [...]}")
    try:
        return [PoolEntry.model_validate(r) for r in records]
    except ValidationError as exc:
        raise PoolDataError(source, str(exc)) from exc


def load_pool(path: Union[str, Path]) -> List[PoolEntry]:
    """Read and validate one JSON pool file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PoolDataError(str(path), str(exc)) from exc
    return parse_pool(raw, source=str(path))


# ---------------------------------------------------------------------------
# Bank
# ---------------------------------------------------------------------------

class PoolBank:
    """
    Immutable lookup of traits and formations, split per role.
    Record order inside each role follows the source file.
    """

    def __init__(
        self,
        traits: Sequence[PoolEntry],
        formations: Sequence[PoolEntry],
    ) -> None:
        _check_unique_ids("traits", traits)
        _check_unique_ids("formations", formations)
        self._traits = _by_role(traits)
        self._formations = _by_role(formations)

    @classmethod
    def from_directory(cls, directory: Union[str, Path] = DATA_DIR) -> "PoolBank":
        directory = Path(directory)
        return cls(
            traits=load_pool(directory / TRAITS_FILE),
            formations=load_pool(directory / FORMATIONS_FILE),
        )

    def traits_for(self, role: Role) -> Tuple[PoolEntry, ...]:
        return self._traits[coerce_role(role)]

    def formations_for(self, role: Role) -> Tuple[PoolEntry, ...]:
        return self._formations[coerce_role(role)]

    def coverage_gaps(self) -> Dict[str, List[Tuple[str, str]]]:
        """(role, rarity) pairs with no record; selection falls back for these."""
        return {
            "traits": _gaps(self._traits),
            "formations": _gaps(self._formations),
        }

    def counts(self) -> Dict[str, int]:
        return {
            "traits": sum(len(v) for v in self._traits.values()),
            "formations": sum(len(v) for v in self._formations.values()),
        }


def load_default_bank() -> PoolBank:
    """The sample pools shipped with the package."""
    return PoolBank.from_directory(DATA_DIR)


def _by_role(entries: Sequence[PoolEntry]) -> Dict[Role, Tuple[PoolEntry, ...]]:
    return {role: tuple(e for e in entries if e.role is role) for role in ROLE_ORDER}


def _check_unique_ids(source: str, entries: Sequence[PoolEntry]) -> None:
    seen = set()
    for entry in entries:
        if entry.id in seen:
            raise PoolDataError(source, f"duplicate id {entry.id!r}")
        seen.add(entry.id)


def _gaps(table: Dict[Role, Tuple[PoolEntry, ...]]) -> List[Tuple[str, str]]:
    gaps: List[Tuple[str, str]] = []
    for role in ROLE_ORDER:
        present = {e.rarity for e in table[role]}
        for rarity in Rarity:
            if rarity not in present:
                gaps.append((role.value, rarity.name))
    return gaps

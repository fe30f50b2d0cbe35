"""
JSON Creature Exporter.

Exports an assembled creature + metadata to a JSON file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from protozoa_kernel.hashing import canonical_hash

from .creature import CREATURE_FORMAT_VERSION, Creature


def export_creature(creature: Creature, path: Union[str, Path]) -> None:
    """
    Write creature + metadata to a JSON file.

    Output format:
    {
        "metadata": {"nonce": int, "format_version": int, "creature_hash": str},
        "creature": creature.to_dict()
    }
    """
    doc = {
        "metadata": {
            "nonce": creature.nonce,
            "format_version": CREATURE_FORMAT_VERSION,
            "creature_hash": canonical_hash(creature),
        },
        "creature": creature.to_dict(),
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(doc, f, ensure_ascii=True, indent=2)

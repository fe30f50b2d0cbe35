"""
Protozoa Kernel: Canonical Hashing

Deterministic canonical serialization + SHA-256 hashing.
Produces byte-identical output across platforms.

Rules:
  - Field order fixed by each value object's to_dict()
  - Groups in role order, enums by name / value
  - UTF-8 JSON, no whitespace, no float, no platform newline
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Union

Serializable = Union[dict, Any]


def canonical_serialize(value: Serializable) -> bytes:
    """
    Canonical serialization of a value object (anything with to_dict())
    or a plain dict to UTF-8 JSON bytes.
    """
    obj = value if isinstance(value, dict) else value.to_dict()
    return json.dumps(
        obj, ensure_ascii=True, separators=(",", ":"), sort_keys=False, allow_nan=False,
    ).encode("utf-8")


def canonical_hash(value: Serializable) -> str:
    """SHA-256 of canonical serialization. Lowercase hex string."""
    return hashlib.sha256(canonical_serialize(value)).hexdigest()

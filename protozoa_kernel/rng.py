"""
Seeded Stream RNG: Deterministic named sub-generators keyed by a nonce.

Every stream seed is derived from (root_seed, stream_name) with SHA-256,
then drives an independent Mulberry32 generator. Identical
(root_seed, stream_name) → identical sequence on every platform.
No global random state touched. No floats inside the generator.
"""

from __future__ import annotations

import hashlib
import re
from typing import Any

from .errors import InvalidSeedError

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296
_MULBERRY_INCREMENT = 0x6D2B79F5

_DECIMAL_PATTERN = re.compile(r"^[0-9]+$")
_HEX_PATTERN = re.compile(r"^0[xX][0-9a-fA-F]+$")


def parse_nonce(nonce: Any) -> int:
    """
    Convert a block nonce into the integer root seed.

    int (not bool) >= 0   → as-is
    "0x..." string        → hexadecimal
    all-digit string      → decimal
    anything else         → InvalidSeedError
    """
    if isinstance(nonce, bool):
        raise InvalidSeedError(nonce, "booleans are not nonces")
    if isinstance(nonce, int):
        if nonce < 0:
            raise InvalidSeedError(nonce, "nonce must be non-negative")
        return nonce
    if isinstance(nonce, str):
        text = nonce.strip()
        if _HEX_PATTERN.match(text):
            return int(text[2:], 16)
        if _DECIMAL_PATTERN.match(text):
            return int(text, 10)
        raise InvalidSeedError(nonce, "expected decimal digits or 0x-prefixed hex")
    raise InvalidSeedError(nonce, f"unsupported type {type(nonce).__name__}")


def derive_stream_seed(root_seed: int, stream_name: str) -> int:
    """First 4 bytes (big endian) of SHA-256(f"{root_seed}:{stream_name}")."""
    digest = hashlib.sha256(f"{root_seed}:{stream_name}".encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "big")


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class RandomSource:
    """One Mulberry32 stream. Stateful; not shared between streams."""

    def __init__(self, seed: int, name: str = "") -> None:
        self._state = seed & _MASK32
        self._name = name
        self._draws = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def draws(self) -> int:
        """Number of values drawn so far."""
        return self._draws

    def next_uint32(self) -> int:
        """Return the next raw 32-bit output."""
        self._state = (self._state + _MULBERRY_INCREMENT) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        self._draws += 1
        return (t ^ (t >> 14)) & _MASK32

    def next(self) -> float:
        """Return a float in [0, 1). Exact: next_uint32() / 2**32."""
        return self.next_uint32() / _TWO_POW_32

    def index_below(self, n: int) -> int:
        """floor(next() * n), computed in integers."""
        if n <= 0:
            raise ValueError(f"index_below requires n > 0, got {n}")
        return (self.next_uint32() * n) >> 32


class SeededStreamRng:
    """
    Root of all randomness for one generation call.

    stream(name) always returns a fresh RandomSource positioned at its
    first draw, so acquisition order never changes a stream's output.
    """

    def __init__(self, root_seed: int) -> None:
        if isinstance(root_seed, bool) or not isinstance(root_seed, int) or root_seed < 0:
            raise InvalidSeedError(root_seed, "root seed must be a non-negative int")
        self._root_seed = root_seed

    @classmethod
    def from_nonce(cls, nonce: Any) -> "SeededStreamRng":
        return cls(parse_nonce(nonce))

    @property
    def root_seed(self) -> int:
        return self._root_seed

    def stream(self, name: str) -> RandomSource:
        if not isinstance(name, str) or not name:
            raise ValueError(f"Stream name must be a non-empty string, got {name!r}")
        return RandomSource(derive_stream_seed(self._root_seed, name), name)

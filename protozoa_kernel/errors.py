"""
Protozoa Kernel: Exception Hierarchy

Every failure inside the identity engine is fail-fast and typed.
Nothing here is recovered from at this layer; the orchestrator decides
whether to skip, log or alert.
"""

from __future__ import annotations

from typing import Any


class IdentityEngineError(Exception):
    """Base exception for all identity engine failures."""


class InvalidSeedError(IdentityEngineError):
    """Raised when a nonce cannot be parsed into a usable integer seed."""

    def __init__(self, nonce: Any, reason: str) -> None:
        self.nonce = nonce
        self.reason = reason
        super().__init__(f"Invalid nonce {nonce!r}: {reason}")


class DistributionError(IdentityEngineError):
    """
    Raised when a sum / bound / tier-range invariant is violated, or when
    a distribution is provably infeasible.
    """

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[DISTRIBUTION:{rule}] {detail}")


class UnknownRoleError(IdentityEngineError):
    """Raised when a value outside the five canonical roles reaches the engine."""

    def __init__(self, role: Any) -> None:
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


class EmptyPoolError(IdentityEngineError):
    """Raised when a trait / formation pool handed to the selector is empty."""

    def __init__(self, role: Any, pool_name: str = "pool") -> None:
        self.role = role
        self.pool_name = pool_name
        super().__init__(f"Empty {pool_name} for role {role!r}")


class TableConfigurationError(IdentityEngineError):
    """Raised by the startup self-check when a static lookup table is incomplete."""

    def __init__(self, table: str, detail: str) -> None:
        self.table = table
        self.detail = detail
        super().__init__(f"[TABLE:{table}] {detail}")


class PoolDataError(IdentityEngineError):
    """Raised when external trait / formation data is malformed."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Malformed pool data in {source}: {detail}")

"""
Protozoa Runtime

Caller-owned memoization and metrics around the generator.
The kernel itself never caches.
"""

from .cache import GenerationCache, DeterminismError
from .observability import GenerationMetrics, collect_metrics

__all__ = [
    "GenerationCache",
    "DeterminismError",
    "GenerationMetrics",
    "collect_metrics",
]

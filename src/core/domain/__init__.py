"""
Domain models and value objects.

Contains the Matrix type and cache state snapshots.
"""

from src.core.domain.cache_state import CacheSnapshot, SlotState
from src.core.domain.matrix import Matrix, as_matrix

__all__ = [
    # Matrix
    "Matrix",
    "as_matrix",
    # Cache state
    "CacheSnapshot",
    "SlotState",
]

"""Cache — однослотовый кэш обратной матрицы.

- CachingMatrix: handle {матрица, слот обратной}, инвалидация при замене
- cache_solve: обратная с переиспользованием кэша
"""

from .caching_matrix import CachingMatrix
from .cache_solve import cache_solve

__all__ = [
    "CachingMatrix",
    "cache_solve",
]

"""cache_solve — обратная матрица с мемоизацией в CachingMatrix.

Алгоритм:
1. Слот заполнен → вернуть закэшированную обратную (0 вызовов примитива)
2. Слот пуст → inverter(get_matrix(), ...) → set_inverse → вернуть результат
3. Ошибка примитива пробрасывается без изменений; слот остаётся пустым,
   следующий вызов снова попытается обратить матрицу

Вся последовательность выполняется под handle.lock, поэтому при
конкурентных вызовах на один handle примитив вызывается не более одного
раза за эпоху с пустым слотом.
"""

import logging
from typing import Any, Callable

from src.cache.caching_matrix import CachingMatrix
from src.core.domain.matrix import Matrix
from src.core.math.inversion import invert_matrix

logger = logging.getLogger(__name__)

Inverter = Callable[..., Matrix]


def cache_solve(
    handle: CachingMatrix,
    *args: Any,
    inverter: Inverter = invert_matrix,
    **kwargs: Any,
) -> Matrix:
    """Обратная к текущей матрице handle, с переиспользованием кэша.

    Args:
        handle: CachingMatrix
        *args, **kwargs: пробрасываются в inverter как есть
            (например, config=InversionConfig(...) для invert_matrix)
        inverter: примитив обращения (default: invert_matrix)

    Returns:
        Обратная матрица (read-only), хранимая в слоте handle

    Raises:
        Любое исключение inverter (MatrixInversionError для invert_matrix)
    """
    with handle.lock:
        cached = handle.get_inverse()
        if cached is not None:
            logger.info("getting cached data")
            return cached

        matrix = handle.get_matrix()
        logger.debug("Cache miss at epoch %d, inverting %s matrix", handle.epoch, matrix.shape)
        inverse = inverter(matrix, *args, **kwargs)

        handle.set_inverse(inverse)
        logger.debug("Stored inverse for epoch %d", handle.epoch)
        return handle.get_inverse()

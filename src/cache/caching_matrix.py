"""CachingMatrix — матрица с однослотовым кэшем обратной матрицы.

Handle владеет текущей матрицей и опциональной закэшированной обратной:
- set_matrix: замена матрицы + немедленная инвалидация слота
- get_matrix: текущая матрица
- set_inverse: запись обратной (без проверки корректности)
- get_inverse: обратная или None, если слот пуст

Инвариант: если слот заполнен, в нём обратная к текущей матрице.
Поддерживается исключительно eager-инвалидацией в set_matrix.
"""

import logging
import threading
from typing import Optional

from numpy.typing import ArrayLike

from src.core.domain.cache_state import CacheSnapshot, SlotState
from src.core.domain.matrix import Matrix, as_matrix

logger = logging.getLogger(__name__)


class CachingMatrix:
    """Handle: {matrix, слот обратной матрицы}.

    States слота:
    - EMPTY: после создания и после каждого set_matrix
    - POPULATED: после set_inverse, до следующего set_matrix

    Эпоха: период между заменами матрицы; epoch считает замены и
    используется только для диагностики.

    lock сериализует критическую секцию read-slot / compute / write-slot
    в cache_solve при общем handle между потоками.
    """

    def __init__(self, matrix: ArrayLike):
        """
        Args:
            matrix: начальная матрица (форма и обратимость не проверяются)
        """
        self._matrix: Matrix = as_matrix(matrix)
        self._inverse: Optional[Matrix] = None
        self._epoch = 0
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return (
            f"CachingMatrix(shape={self._matrix.shape}, "
            f"slot={self.slot_state.value}, epoch={self._epoch})"
        )

    @property
    def lock(self):
        return self._lock

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def has_inverse(self) -> bool:
        return self._inverse is not None

    @property
    def slot_state(self) -> SlotState:
        return SlotState.POPULATED if self.has_inverse else SlotState.EMPTY

    def set_matrix(self, matrix: ArrayLike) -> None:
        """Замена матрицы. Слот очищается безусловно, даже если новая
        матрица равна старой по значению."""
        new_matrix = as_matrix(matrix)
        with self._lock:
            self._matrix = new_matrix
            self._inverse = None
            self._epoch += 1
            epoch = self._epoch
        logger.debug(
            "Matrix replaced: epoch=%d shape=%s, cached inverse invalidated",
            epoch,
            new_matrix.shape,
        )

    def get_matrix(self) -> Matrix:
        return self._matrix

    def set_inverse(self, inverse: ArrayLike) -> None:
        """Запись обратной матрицы в слот.

        Корректность (inverse @ matrix ≈ I) не проверяется: за неё отвечает
        вызывающий код (cache_solve).
        """
        stored = as_matrix(inverse)
        with self._lock:
            self._inverse = stored

    def get_inverse(self) -> Optional[Matrix]:
        """Закэшированная обратная или None, если слот пуст."""
        return self._inverse

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            return CacheSnapshot(
                slot_state=self.slot_state,
                epoch=self._epoch,
                shape=tuple(int(dim) for dim in self._matrix.shape),
            )

"""
CacheSnapshot — снапшот состояния кэша обратной матрицы

Immutable Pydantic модель, описывающая состояние одного CachingMatrix:
состояние слота, эпоха (число замен матрицы) и форма текущей матрицы.
Используется для диагностики; решения о пересчёте на неё не опираются.
"""

from enum import Enum

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class SlotState(str, Enum):
    """
    Состояние слота закэшированной обратной матрицы.

    Допустимые переходы:
    - EMPTY → POPULATED: set_inverse (один раз за эпоху)
    - POPULATED → EMPTY: set_matrix (немедленная инвалидация)
    """

    EMPTY = "EMPTY"
    POPULATED = "POPULATED"


# =============================================================================
# SNAPSHOT
# =============================================================================


class CacheSnapshot(BaseModel):
    """Снапшот состояния CachingMatrix."""

    slot_state: SlotState = Field(..., description="Состояние слота обратной матрицы")
    epoch: int = Field(..., ge=0, description="Число замен матрицы с момента создания")
    shape: tuple[int, ...] = Field(..., description="Форма текущей матрицы")

    model_config = {"frozen": True}

    @property
    def is_populated(self) -> bool:
        return self.slot_state == SlotState.POPULATED

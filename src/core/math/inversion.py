"""
Inversion — примитив обращения матрицы

Тонкая обёртка над numpy.linalg.inv с явной таксономией ошибок:
- Не 2-D / не квадратная матрица → MatrixDimensionMismatch
- NaN/Inf элементы на входе или в результате → MatrixNotInvertible
- Точно вырожденная матрица (LinAlgError) → MatrixNotInvertible
- Численно вырожденная (cond > max_condition_number) → MatrixNotInvertible

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Примитив чистый и детерминированный: вход не модифицируется
2. При любой ошибке результат не возвращается (только exception)
3. Результат: новая матрица той же формы
"""

import logging
from dataclasses import dataclass
from typing import Final, Optional

import numpy as np
from numpy.typing import ArrayLike

from src.core.domain.matrix import Matrix, inexact_dtype
from src.core.math.numerical_safeguards import (
    is_finite_matrix,
    validate_positive,
    validate_square_matrix,
)

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

# Порог числа обусловленности, выше которого матрица считается численно
# вырожденной (~ 1 / machine epsilon для float64)
DEFAULT_MAX_CONDITION_NUMBER: Final[float] = 1.0 / np.finfo(np.float64).eps


# =============================================================================
# EXCEPTIONS
# =============================================================================


class MatrixInversionError(Exception):
    """Базовая ошибка примитива обращения матрицы."""
    pass


class MatrixNotInvertible(MatrixInversionError):
    """
    Матрица необратима: вырождена, численно вырождена или содержит NaN/Inf.
    """
    pass


class MatrixDimensionMismatch(MatrixInversionError):
    """
    Матрица имеет недопустимую форму: не 2-D или не квадратная.
    """
    pass


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class InversionConfig:
    """Конфигурация примитива обращения.

    check_finite: отклонять матрицы с NaN/Inf до вызова LAPACK
    max_condition_number: если задан, матрицы с cond(A) выше порога
        отклоняются как численно вырожденные (None: проверка отключена)
    """

    check_finite: bool = True
    max_condition_number: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_condition_number is not None:
            validate_positive(self.max_condition_number, "max_condition_number")


# =============================================================================
# INVERT
# =============================================================================


def invert_matrix(matrix: ArrayLike, config: InversionConfig | None = None) -> Matrix:
    """
    Обращение квадратной матрицы.

    Args:
        matrix: Квадратная 2-D матрица (array-like)
        config: Конфигурация проверок (default: InversionConfig())

    Returns:
        Обратная матрица A^-1, такая что A @ A^-1 ≈ I. Целочисленный вход
        обращается в float64, complex вход сохраняет complex dtype.

    Raises:
        MatrixDimensionMismatch: если матрица не 2-D или не квадратная
        MatrixNotInvertible: если матрица вырождена, содержит NaN/Inf
            или результат обращения не конечен

    Examples:
        >>> invert_matrix([[2.0, 0.0], [0.0, 2.0]])
        array([[0.5, 0. ],
               [0. , 0.5]])
    """
    cfg = config or InversionConfig()
    data = np.asarray(matrix)
    data = data.astype(inexact_dtype(data), copy=False)

    try:
        validate_square_matrix(data)
    except ValueError as exc:
        logger.debug("Rejecting matrix with shape %s: %s", data.shape, exc)
        raise MatrixDimensionMismatch(str(exc)) from exc

    if cfg.check_finite and not is_finite_matrix(data):
        logger.debug("Rejecting %s matrix with NaN/Inf entries", data.shape)
        raise MatrixNotInvertible("matrix contains NaN/Inf entries")

    try:
        if cfg.max_condition_number is not None:
            _check_condition_number(data, cfg.max_condition_number)
        inverse = np.linalg.inv(data)
    except np.linalg.LinAlgError as exc:
        logger.debug("numpy.linalg failed for %s matrix: %s", data.shape, exc)
        raise MatrixNotInvertible(f"matrix is singular: {exc}") from exc

    # Без check_finite NaN/Inf на входе дают NaN/Inf на выходе
    if not is_finite_matrix(inverse):
        logger.debug("Rejecting non-finite inverse of %s matrix", data.shape)
        raise MatrixNotInvertible("inverse contains NaN/Inf entries")

    return inverse


def _check_condition_number(data: Matrix, max_condition_number: float) -> None:
    cond = float(np.linalg.cond(data))
    # cond = inf для точно вырожденных, nan для матриц с NaN
    if not cond <= max_condition_number:
        logger.debug(
            "Rejecting %s matrix: cond=%.3e > %.3e",
            data.shape,
            cond,
            max_condition_number,
        )
        raise MatrixNotInvertible(
            f"matrix is numerically singular: condition number {cond:.3e} "
            f"exceeds {max_condition_number:.3e}"
        )

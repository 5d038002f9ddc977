"""
Numerical Safeguards — Safe Matrix Primitives

Модуль обеспечивает численную устойчивость операций над матрицами:
- NaN/Inf проверки для скаляров и матриц
- Epsilon-сравнения матриц (real и complex) с учётом машинной точности
- Проверка формы (2-D, квадратная) перед обращением
- Валидация параметров конфигурации

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не попадают в примитив обращения незамеченными
2. Сравнения матриц всегда учитывают машинную точность
3. Проверки не модифицируют входные массивы
"""

import math
from typing import Final

import numpy as np
from numpy.typing import ArrayLike

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для общих вычислений и сравнений
EPS_CALC: Final[float] = 1e-12

# Epsilon для сравнения float (относительная толерантность)
# Используется в matrices_close
EPS_FLOAT_COMPARE_REL: Final[float] = 1e-9

# Epsilon для сравнения float (абсолютная толерантность)
EPS_FLOAT_COMPARE_ABS: Final[float] = 1e-12


# =============================================================================
# NaN/Inf ПРОВЕРКИ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение валидное (finite), False если NaN или Inf
    """
    return math.isfinite(value)


def is_finite_matrix(matrix: ArrayLike) -> bool:
    """
    Проверка, что все элементы матрицы конечны.

    Пустая матрица считается конечной.

    Examples:
        >>> is_finite_matrix([[1.0, 2.0], [3.0, 4.0]])
        True
        >>> is_finite_matrix([[1.0, float('nan')], [3.0, 4.0]])
        False
    """
    return bool(np.all(np.isfinite(np.asarray(matrix))))


# =============================================================================
# ПРОВЕРКА ФОРМЫ
# =============================================================================


def is_square_matrix(matrix: ArrayLike) -> bool:
    """
    Проверка, что массив двумерный и квадратный (n x n, n >= 1).

    Examples:
        >>> is_square_matrix([[1.0, 0.0], [0.0, 1.0]])
        True
        >>> is_square_matrix([[1.0, 2.0, 3.0]])
        False
        >>> is_square_matrix([1.0, 2.0])
        False
    """
    shape = np.shape(matrix)
    return len(shape) == 2 and shape[0] == shape[1] and shape[0] > 0


def validate_square_matrix(matrix: ArrayLike, name: str = "matrix") -> None:
    """
    Валидация, что массив является квадратной 2-D матрицей.

    Args:
        matrix: Проверяемый массив
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если массив не 2-D или не квадратный
    """
    shape = np.shape(matrix)

    if len(shape) != 2:
        raise ValueError(f"{name} must be 2-dimensional, got shape {shape}")

    if shape[0] != shape[1] or shape[0] == 0:
        raise ValueError(f"{name} must be square (n x n, n >= 1), got shape {shape}")


# =============================================================================
# EPSILON-СРАВНЕНИЯ
# =============================================================================


def matrices_close(
    a: ArrayLike,
    b: ArrayLike,
    rel_tol: float = EPS_FLOAT_COMPARE_REL,
    abs_tol: float = EPS_FLOAT_COMPARE_ABS,
) -> bool:
    """
    Поэлементное сравнение двух матриц с учётом толерантности.

    Матрицы разной формы никогда не равны (без broadcasting).
    NaN не равен ничему, в том числе NaN.

    Args:
        a: Первая матрица
        b: Вторая матрица
        rel_tol: Относительная толерантность (default: 1e-9)
        abs_tol: Абсолютная толерантность (default: 1e-12)

    Returns:
        True если формы совпадают и все элементы близки

    Examples:
        >>> matrices_close([[0.5, 0.0], [0.0, 0.5]], [[0.5, 0.0], [0.0, 0.5 + 1e-13]])
        True
        >>> matrices_close([[1.0]], [[1.0, 0.0]])
        False
    """
    arr_a = np.asarray(a)
    arr_b = np.asarray(b)

    if arr_a.shape != arr_b.shape:
        return False

    return bool(np.allclose(arr_a, arr_b, rtol=rel_tol, atol=abs_tol, equal_nan=False))


# =============================================================================
# ВАЛИДАЦИЯ ПАРАМЕТРОВ
# =============================================================================


def validate_positive(value: float, name: str, eps: float = EPS_CALC) -> None:
    """
    Валидация, что значение положительное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        eps: Минимальный порог (default: EPS_CALC)

    Raises:
        ValueError: Если value <= eps или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if value <= eps:
        raise ValueError(f"{name} must be positive (> {eps}), got {value}")

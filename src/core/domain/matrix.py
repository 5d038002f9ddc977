"""
Matrix — базовый тип матрицы

Matrix: двумерный numpy массив (float64 или complex). Immutable по соглашению:
владелец (CachingMatrix) хранит read-only копию и заменяет её целиком,
никогда не изменяя элементы in place.
"""

from typing import TypeAlias

import numpy as np
from numpy.typing import ArrayLike

Matrix: TypeAlias = np.ndarray


def as_matrix(data: ArrayLike) -> Matrix:
    """
    Нормализация входа в read-only копию с inexact dtype.

    Целые и bool повышаются до float64; float32, complex и т.п. сохраняют
    свой dtype (complex никогда не обрезается до вещественной части).
    Форма и обратимость здесь не проверяются: это забота примитива обращения.
    Копия гарантирует, что последующие изменения исходного массива вызывающим
    кодом не затронут значение, которым владеет handle.

    Args:
        data: Любой array-like (list of lists, ndarray, ...)

    Returns:
        Новый ndarray с writeable=False

    Examples:
        >>> as_matrix([[2, 0], [0, 2]]).dtype
        dtype('float64')
        >>> as_matrix([[1j, 0], [0, 2]]).dtype
        dtype('complex128')
        >>> as_matrix([[2, 0], [0, 2]]).flags.writeable
        False
    """
    matrix = np.array(data, dtype=inexact_dtype(data), copy=True)
    matrix.flags.writeable = False
    return matrix


def inexact_dtype(data: ArrayLike) -> np.dtype:
    """dtype входа, повышенный минимум до float64 (int/bool → float64)."""
    return np.result_type(np.asarray(data), np.float64)

"""
Core math modules

Численные примитивы для матриц и примитив обращения.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    EPS_CALC,
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    # NaN/Inf checks
    is_finite_matrix,
    is_valid_float,
    # Shape checks
    is_square_matrix,
    validate_square_matrix,
    # Epsilon comparisons
    matrices_close,
    # Validation
    validate_positive,
)

# Inversion
from src.core.math.inversion import (
    DEFAULT_MAX_CONDITION_NUMBER,
    InversionConfig,
    MatrixDimensionMismatch,
    MatrixInversionError,
    MatrixNotInvertible,
    invert_matrix,
)

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "EPS_CALC",
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    # Numerical Safeguards — NaN/Inf checks
    "is_finite_matrix",
    "is_valid_float",
    # Numerical Safeguards — Shape checks
    "is_square_matrix",
    "validate_square_matrix",
    # Numerical Safeguards — Epsilon comparisons
    "matrices_close",
    # Numerical Safeguards — Validation
    "validate_positive",
    # Inversion — Constants
    "DEFAULT_MAX_CONDITION_NUMBER",
    # Inversion — Config
    "InversionConfig",
    # Inversion — Exceptions
    "MatrixDimensionMismatch",
    "MatrixInversionError",
    "MatrixNotInvertible",
    # Inversion — Functions
    "invert_matrix",
]

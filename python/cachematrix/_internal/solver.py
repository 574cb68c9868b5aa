from __future__ import annotations

import logging
import warnings
from typing import Any

import numpy as np

from .config import get_settings
from .errors import NotInvertibleError, ShapeError
from .warnings import CacheMatrixConditionWarning

logger = logging.getLogger(__name__)


def reciprocal_condition(a: np.ndarray, a_inv: np.ndarray) -> float:
    """Reciprocal 1-norm condition number of ``a`` given its inverse."""
    norm_a = float(np.linalg.norm(a, 1))
    norm_inv = float(np.linalg.norm(a_inv, 1))
    if norm_a == 0.0 or norm_inv == 0.0 or not np.isfinite(norm_inv):
        return 0.0
    return 1.0 / (norm_a * norm_inv)


def solve(a: Any, *, tol: float | None = None) -> np.ndarray:
    """Invert a square matrix.

    Raises ``ShapeError`` for non-square input and ``NotInvertibleError`` when
    the matrix is singular or its reciprocal condition number is below
    ``tol`` (machine epsilon unless configured otherwise; ``tol <= 0``
    disables that check).
    """
    return invert_square(a, 3, tol=tol)


def invert_square(a: Any, stacklevel: int, *, tol: float | None = None) -> np.ndarray:
    """``solve`` with the stack level used for ill-conditioning warnings."""
    array = np.asarray(a, dtype=np.float64)
    if array.ndim != 2 or array.shape[0] != array.shape[1]:
        raise ShapeError(array.shape)

    n = array.shape[0]
    if n == 0:
        return np.empty((0, 0), dtype=np.float64)

    try:
        inverse = np.linalg.inv(array)
    except np.linalg.LinAlgError as exc:
        raise NotInvertibleError(f"Matrix is singular and cannot be inverted: {exc}", rcond=0.0) from exc

    if not np.all(np.isfinite(inverse)):
        raise NotInvertibleError("Matrix inverse contains non-finite values.", rcond=0.0)

    settings = get_settings()
    threshold = settings.default_tol if tol is None else float(tol)
    rcond = reciprocal_condition(array, inverse)
    if threshold > 0 and rcond < threshold:
        raise NotInvertibleError(
            f"System is computationally singular: reciprocal condition number = {rcond:g}",
            rcond=rcond,
        )
    if rcond < settings.ill_conditioned_rcond:
        warnings.warn(
            f"Matrix is ill-conditioned (rcond={rcond:g}); its inverse may be inaccurate.",
            CacheMatrixConditionWarning,
            stacklevel=stacklevel,
        )

    logger.debug("inverted %dx%d matrix (rcond=%g)", n, n, rcond)
    return inverse

"""cachematrix exception types.

Both concrete errors also derive from the standard exception a caller would
already be catching (``ValueError`` for bad shapes, numpy's ``LinAlgError``
for singular input).
"""
from __future__ import annotations

import numpy as np


class CacheMatrixError(Exception):
    """Base class for errors raised by cachematrix."""


class ShapeError(CacheMatrixError, ValueError):
    """The stored matrix is not a 2D square matrix."""

    def __init__(self, shape: tuple[int, ...]) -> None:
        self.shape = tuple(int(n) for n in shape)
        super().__init__(f"Matrix must be square to be inverted; got shape {self.shape}.")


class NotInvertibleError(CacheMatrixError, np.linalg.LinAlgError):
    """The stored matrix is singular, or numerically singular under ``tol``."""

    def __init__(self, message: str, *, rcond: float | None = None) -> None:
        self.rcond = rcond
        super().__init__(message)

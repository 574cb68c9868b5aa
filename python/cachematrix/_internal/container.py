from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from . import linalg_cache as _linalg_cache
from .coercion import coerce_matrix, empty_matrix
from .formatting import MatrixMixin

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Counters describing how a container's inverse cache has been used.

    Attributes:
        n_hits: Inverse requests served from the cache
        n_misses: Inverse requests that ran the inversion routine
        n_invalidations: Cached inverses discarded by ``set_matrix``
    """

    n_hits: int = 0
    n_misses: int = 0
    n_invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.n_hits + self.n_misses
        return self.n_hits / total if total > 0 else 0.0


class CacheableMatrix(MatrixMixin):
    """A matrix that remembers its inverse until the matrix is replaced.

    The stored matrix and the cached inverse are read-only float64 copies, so
    the only way to change what the container represents is ``set_matrix``,
    which always drops the cached inverse (even when the new value equals the
    old one).

    Example:
        >>> cm = CacheableMatrix([[2.0, 0.0], [0.0, 2.0]])
        >>> cm.invert()
        array([[0.5, 0. ],
               [0. , 0.5]])
        >>> cm.set_matrix([[1.0, 0.0], [0.0, 1.0]])
        >>> cm.get_cached_inverse() is None
        True
    """

    def __init__(self, initial: Any = None) -> None:
        self._matrix: np.ndarray = empty_matrix() if initial is None else coerce_matrix(initial)
        self._cached_inverse: np.ndarray | None = None
        self.stats = CacheStats()

    def get_matrix(self) -> np.ndarray:
        return self._matrix

    def set_matrix(self, value: Any) -> None:
        """Replace the matrix and invalidate the cached inverse."""
        matrix = coerce_matrix(value)
        if self._cached_inverse is not None:
            self.stats.n_invalidations += 1
            logger.debug("matrix replaced; discarding cached inverse")
        self._matrix = matrix
        self._cached_inverse = None

    def get_cached_inverse(self) -> np.ndarray | None:
        return self._cached_inverse

    def set_cached_inverse(self, inverse: Any) -> None:
        # Only resolve_inverse should call this; it must hold the inverse of
        # the current matrix.
        self._cached_inverse = coerce_matrix(inverse)

    def has_cached_inverse(self) -> bool:
        return self._cached_inverse is not None

    @property
    def matrix(self) -> np.ndarray:
        return self.get_matrix()

    @matrix.setter
    def matrix(self, value: Any) -> None:
        self.set_matrix(value)

    @property
    def cached_inverse(self) -> np.ndarray | None:
        return self.get_cached_inverse()

    @property
    def shape(self) -> tuple[int, int]:
        rows, cols = self._matrix.shape
        return int(rows), int(cols)

    def invert(self, *, solver: Any = None, **options: Any) -> np.ndarray:
        """Compute or retrieve the cached inverse; see ``resolve_inverse``."""
        return _linalg_cache.resolve_with(self, solver, options)

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

import numpy as np

from .config import get_settings
from .solver import invert_square

if TYPE_CHECKING:
    from .container import CacheableMatrix

logger = logging.getLogger(__name__)

Solver = Callable[..., Any]

# invert_square -> resolve_with -> public entry point -> caller
_CALLER_STACKLEVEL = 4


def resolve_inverse(
    container: "CacheableMatrix",
    *,
    solver: Solver | None = None,
    **options: Any,
) -> np.ndarray:
    """Return the inverse of the matrix held by ``container``.

    A cached inverse is returned as is. Otherwise the current matrix is passed
    to ``solver`` (``solve`` by default) together with ``options``, untouched,
    and the result is cached before being returned.

    Errors from the solver propagate unchanged and nothing is cached, so the
    next call computes again.
    """
    return resolve_with(container, solver, options)


def resolve_with(
    container: "CacheableMatrix",
    solver: Solver | None,
    options: dict[str, Any],
) -> np.ndarray:
    # Must stay exactly one frame below resolve_inverse and
    # CacheableMatrix.invert (see _CALLER_STACKLEVEL).
    inverse = container.get_cached_inverse()
    if inverse is not None:
        container.stats.n_hits += 1
        settings = get_settings()
        if settings.log_cache_hits:
            logger.log(settings.hit_log_level, "getting cached data")
        return inverse

    container.stats.n_misses += 1
    matrix = container.get_matrix()
    logger.debug("computing inverse of %dx%d matrix", *matrix.shape)

    if solver is None:
        result = invert_square(matrix, _CALLER_STACKLEVEL, **options)
    else:
        result = solver(matrix, **options)
    container.set_cached_inverse(result)
    return container.get_cached_inverse()

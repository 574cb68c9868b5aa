"""Matrices that cache their inverse until they are replaced."""
from __future__ import annotations

from ._version import version as __version__

import logging

from ._internal.config import Settings, configure, get_settings, reset_settings
from ._internal.container import CacheableMatrix, CacheStats
from ._internal.errors import CacheMatrixError, NotInvertibleError, ShapeError
from ._internal.linalg_cache import resolve_inverse
from ._internal.solver import solve
from ._internal.warnings import CacheMatrixConditionWarning, CacheMatrixWarning

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Aliases matching the makeCacheMatrix/cacheSolve naming.
make_cache_matrix = CacheableMatrix
cache_solve = resolve_inverse

__all__ = [
    "CacheableMatrix",
    "CacheStats",
    "resolve_inverse",
    "solve",
    "make_cache_matrix",
    "cache_solve",
    "CacheMatrixError",
    "ShapeError",
    "NotInvertibleError",
    "CacheMatrixWarning",
    "CacheMatrixConditionWarning",
    "Settings",
    "get_settings",
    "configure",
    "reset_settings",
    "__version__",
]

from __future__ import annotations

from collections.abc import Sequence as _SequenceABC
from typing import Any

import numpy as np


def is_sequence_like(value: Any) -> bool:
    return isinstance(value, _SequenceABC) and not isinstance(value, (str, bytes, bytearray))


def _is_row_like(value: Any) -> bool:
    return is_sequence_like(value) or isinstance(value, np.ndarray)


def coerce_sequence_rows(candidate: Any) -> list[list[Any]]:
    if not is_sequence_like(candidate):
        raise TypeError(
            "Matrix data must be provided as a nested sequence of rows or a NumPy array."
        )
    rows = [list(row) if _is_row_like(row) else row for row in candidate]
    if not rows:
        return []
    width = None
    for row in rows:
        if not isinstance(row, list):
            raise TypeError("Each matrix row must be a sequence of entries.")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise ValueError("Matrix data must be rectangular (all rows the same length).")
    return rows


def _matrix_protocol_array(candidate: Any) -> np.ndarray | None:
    rows_attr: Any = getattr(candidate, "rows", None)
    cols_attr: Any = getattr(candidate, "cols", None)
    get_attr: Any = getattr(candidate, "get", None)
    if not (callable(rows_attr) and callable(cols_attr) and callable(get_attr)):
        return None
    n_rows = int(rows_attr())
    n_cols = int(cols_attr())
    if n_rows < 0 or n_cols < 0:
        raise ValueError("Matrix dimensions must be non-negative.")
    values = [[get_attr(i, j) for j in range(n_cols)] for i in range(n_rows)]
    return np.array(values, dtype=np.float64).reshape(n_rows, n_cols)


def coerce_matrix(candidate: Any) -> np.ndarray:
    """Return a read-only float64 2D copy of a matrix-like value.

    Shape is only checked for being two dimensional; squareness is left to
    the inversion routine.
    """
    array = _matrix_protocol_array(candidate)
    if array is None:
        try:
            array = np.array(candidate, dtype=np.float64)
        except (TypeError, ValueError):
            array = None

        if array is None or array.ndim != 2:
            if not isinstance(candidate, np.ndarray):
                # Raises a descriptive error for scalars, strings and ragged rows.
                if not coerce_sequence_rows(candidate):
                    return empty_matrix()
            if array is None:
                raise ValueError("Matrix data could not be converted to a float64 array.")

    if array.ndim != 2:
        raise ValueError(f"Matrix input must be two dimensional; got ndim={array.ndim}.")
    array.setflags(write=False)
    return array


def empty_matrix() -> np.ndarray:
    array = np.empty((0, 0), dtype=np.float64)
    array.setflags(write=False)
    return array

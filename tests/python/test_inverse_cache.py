import os
import unittest
import warnings

import numpy as np

import cachematrix
from cachematrix import (
    CacheableMatrix,
    CacheMatrixConditionWarning,
    NotInvertibleError,
    resolve_inverse,
)


class CountingSolver:
    def __init__(self):
        self.calls = []

    def __call__(self, matrix, **options):
        self.calls.append((np.array(matrix), dict(options)))
        return cachematrix.solve(matrix)


class TestInverseCache(unittest.TestCase):
    def setUp(self):
        cachematrix.reset_settings()

    def test_inverse_times_matrix_is_identity(self):
        m = np.array([[4.0, 7.0, 2.0], [2.0, 6.0, 1.0], [1.0, 3.0, 5.0]])
        cm = CacheableMatrix(m)

        inv = resolve_inverse(cm)

        np.testing.assert_allclose(m @ inv, np.eye(3), atol=1e-12)
        np.testing.assert_allclose(inv @ m, np.eye(3), atol=1e-12)

    def test_second_call_is_cache_hit(self):
        solver = CountingSolver()
        cm = CacheableMatrix([[4.0, 7.0], [2.0, 6.0]])

        first = resolve_inverse(cm, solver=solver)
        second = resolve_inverse(cm, solver=solver)

        self.assertIs(first, second)
        self.assertEqual(len(solver.calls), 1)
        self.assertEqual(cm.stats.n_misses, 1)
        self.assertEqual(cm.stats.n_hits, 1)
        self.assertAlmostEqual(cm.stats.hit_rate, 0.5)

    def test_scaled_identity_then_identity(self):
        solver = CountingSolver()
        cm = CacheableMatrix([[2, 0], [0, 2]])

        inv = resolve_inverse(cm, solver=solver)
        np.testing.assert_allclose(inv, [[0.5, 0.0], [0.0, 0.5]])
        self.assertEqual(cm.stats.n_misses, 1)

        again = resolve_inverse(cm, solver=solver)
        np.testing.assert_array_equal(again, inv)
        self.assertEqual(cm.stats.n_hits, 1)

        cm.set_matrix([[1, 0], [0, 1]])
        self.assertIsNone(cm.get_cached_inverse())

        inv2 = resolve_inverse(cm, solver=solver)
        np.testing.assert_allclose(inv2, np.eye(2))
        self.assertEqual(cm.stats.n_misses, 2)
        self.assertEqual(cm.stats.n_hits, 1)
        self.assertEqual(len(solver.calls), 2)

    def test_recomputes_from_new_matrix(self):
        solver = CountingSolver()
        cm = CacheableMatrix([[1.0, 2.0], [3.0, 4.0]])
        resolve_inverse(cm, solver=solver)

        m2 = np.array([[5.0, 1.0], [2.0, 3.0]])
        cm.set_matrix(m2)
        inv = resolve_inverse(cm, solver=solver)

        np.testing.assert_array_equal(solver.calls[-1][0], m2)
        np.testing.assert_allclose(m2 @ inv, np.eye(2), atol=1e-12)

    def test_singular_matrix_is_not_cached(self):
        solver = CountingSolver()
        cm = CacheableMatrix([[1, 2], [2, 4]])

        with self.assertRaises(NotInvertibleError):
            resolve_inverse(cm, solver=solver)
        self.assertIsNone(cm.get_cached_inverse())

        with self.assertRaises(NotInvertibleError):
            resolve_inverse(cm, solver=solver)
        self.assertEqual(len(solver.calls), 2)
        self.assertEqual(cm.stats.n_hits, 0)

    def test_singular_error_is_numpy_linalg_error(self):
        cm = CacheableMatrix([[1, 2], [2, 4]])
        with self.assertRaises(np.linalg.LinAlgError):
            cm.invert()

    def test_options_are_forwarded_unchanged(self):
        received = []
        sentinel = object()

        def fake_solver(matrix, **options):
            received.append(options)
            return np.eye(2)

        cm = CacheableMatrix([[3.0, 0.0], [0.0, 3.0]])
        resolve_inverse(cm, solver=fake_solver, tol=1e-3, method="lu", extra=sentinel)

        self.assertEqual(len(received), 1)
        self.assertEqual(set(received[0]), {"tol", "method", "extra"})
        self.assertEqual(received[0]["tol"], 1e-3)
        self.assertEqual(received[0]["method"], "lu")
        self.assertIs(received[0]["extra"], sentinel)

    def test_solver_errors_propagate_unchanged(self):
        class Boom(RuntimeError):
            pass

        def failing_solver(matrix, **options):
            raise Boom("no inverse today")

        cm = CacheableMatrix(np.eye(2))
        with self.assertRaises(Boom):
            resolve_inverse(cm, solver=failing_solver)
        self.assertFalse(cm.has_cached_inverse())

        np.testing.assert_allclose(resolve_inverse(cm), np.eye(2))

    def test_tol_is_passed_to_default_solver(self):
        m = [[1.0, 1.0], [1.0, 1.0 + 1e-10]]
        cm = CacheableMatrix(m)

        with self.assertRaises(NotInvertibleError):
            resolve_inverse(cm, tol=1e-6)
        self.assertIsNone(cm.get_cached_inverse())

    def test_solver_may_return_ndarray_rows(self):
        cm = CacheableMatrix([[4.0, 7.0], [2.0, 6.0]])

        inv = cm.invert(solver=lambda m, **options: list(np.linalg.inv(m)))

        np.testing.assert_allclose(inv, np.linalg.inv([[4.0, 7.0], [2.0, 6.0]]))
        self.assertIs(cm.get_cached_inverse(), inv)
        self.assertEqual(cm.stats.n_misses, 1)

    def test_condition_warning_points_at_caller(self):
        near_singular = [[1.0, 1.0], [1.0, 1.0 + 1e-10]]

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            resolve_inverse(CacheableMatrix(near_singular), tol=0)
            CacheableMatrix(near_singular).invert(tol=0)
            cachematrix.solve(near_singular, tol=0)

        condition = [w for w in caught if issubclass(w.category, CacheMatrixConditionWarning)]
        self.assertEqual(len(condition), 3)
        for w in condition:
            self.assertEqual(os.path.basename(w.filename), os.path.basename(__file__))

    def test_invert_method_matches_accessor(self):
        cm = CacheableMatrix([[4.0, 7.0], [2.0, 6.0]])
        inv = cm.invert()
        self.assertIs(resolve_inverse(cm), inv)
        self.assertEqual(cm.stats.n_hits, 1)

    def test_compat_aliases(self):
        cm = cachematrix.make_cache_matrix([[2.0, 0.0], [0.0, 4.0]])
        self.assertIsInstance(cm, CacheableMatrix)
        np.testing.assert_allclose(cachematrix.cache_solve(cm), [[0.5, 0.0], [0.0, 0.25]])


if __name__ == "__main__":
    unittest.main()

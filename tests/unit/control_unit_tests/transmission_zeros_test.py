# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Unit Tests for Transmission Zeros

Tests cover:
- SISO systems with and without feedthrough
- Non-minimum-phase zeros
- Systems whose zeros all lie at infinity
- Non-square (p != m) and MIMO systems
- Rank drop of the system pencil at every reported zero
- Cross-check against the symbolic Rosenbrock determinant (SymPy)
- Staircase reduction building blocks
- Degenerate systems (DegenerateSystemWarning)
- Error handling (shape mismatch, non-finite data)
"""

import unittest
import warnings

import numpy as np
import pytest
import sympy as sp
from numpy.testing import assert_allclose

from ltimodel.control.structural_analysis_functions import sort_eigenvalues
from ltimodel.control.transmission_zeros import (
    default_tolerance,
    normal_rank,
    reduce_dual,
    reduce_system,
    system_pencil,
    transmission_zeros,
    transmission_zeros_info,
    zero_pencil,
)
from ltimodel.exceptions import AnalysisFailure, DegenerateSystemWarning, DimensionMismatch


# ============================================================================
# Test Fixtures and Utilities
# ============================================================================


class ZerosTestCase(unittest.TestCase):
    """Base class with common test systems."""

    def setUp(self):
        # G(s) = (s + 3) / ((s + 1)(s + 2))
        self.A = np.array([[0.0, 1.0], [-2.0, -3.0]])
        self.B = np.array([[0.0], [1.0]])
        self.C = np.array([[3.0, 1.0]])
        self.D = np.zeros((1, 1))

        # G(s) = 1 + 1 / (s² + 5s + 4) = (s² + 5s + 5) / (s² + 5s + 4)
        self.A_ft = np.array([[0.0, 1.0], [-4.0, -5.0]])
        self.B_ft = np.array([[0.0], [1.0]])
        self.C_ft = np.array([[1.0, 0.0]])
        self.D_ft = np.array([[1.0]])

        # Two outputs, one input: G(s) = [(s + 3)/((s + 1)(s + 2)), (s + 3)/(s + 1)]
        self.A_tall = np.diag([-1.0, -2.0])
        self.B_tall = np.array([[1.0], [1.0]])
        self.C_tall = np.array([[2.0, -1.0], [2.0, 0.0]])
        self.D_tall = np.array([[0.0], [1.0]])

    def assert_pencil_drops_rank(self, A, B, C, D, zeros):
        """Every reported zero must make the system pencil lose rank."""
        L, N = system_pencil(A, B, C, D)
        full = min(L.shape)
        for z in zeros:
            s = np.linalg.svd(L - z * N, compute_uv=False)
            self.assertLess(
                s[full - 1], 1e-8 * s[0], f"Pencil keeps full rank at z = {z}"
            )

    def symbolic_zeros(self, A, B, C, D):
        """Roots of det([[sI - A, -B], [C, D]]) for a square system."""
        s = sp.symbols("s")
        n = A.shape[0]
        A, B, C, D = (sp.Matrix(M.tolist()).applyfunc(sp.nsimplify) for M in (A, B, C, D))
        P = (s * sp.eye(n) - A).row_join(-B).col_join(C.row_join(D))
        det = sp.Poly(sp.expand(P.det()), s)
        if det.degree() <= 0:
            return np.empty(0, dtype=complex)
        roots = np.array([complex(r) for r in det.nroots()])
        return sort_eigenvalues(roots)


# ============================================================================
# SISO Systems
# ============================================================================


class TestSISOZeros(ZerosTestCase):

    def test_strictly_proper(self):
        zeros = transmission_zeros(self.A, self.B, self.C, self.D)
        assert_allclose(zeros, [-3.0], atol=1e-10)

    def test_with_feedthrough(self):
        zeros = transmission_zeros(self.A_ft, self.B_ft, self.C_ft, self.D_ft)
        expected = [(-5 + np.sqrt(5)) / 2, (-5 - np.sqrt(5)) / 2]
        assert_allclose(zeros, expected, atol=1e-10)

    def test_missing_feedthrough_is_zero(self):
        assert_allclose(
            transmission_zeros(self.A, self.B, self.C),
            transmission_zeros(self.A, self.B, self.C, self.D),
        )

    def test_non_minimum_phase(self):
        # G(s) = (s - 1) / ((s + 1)(s + 2))
        zeros = transmission_zeros(self.A, self.B, np.array([[-1.0, 1.0]]), self.D)
        assert_allclose(zeros, [1.0], atol=1e-10)

    def test_no_finite_zeros(self):
        # G(s) = 1 / ((s + 1)(s + 2))
        zeros = transmission_zeros(self.A, self.B, np.array([[1.0, 0.0]]), self.D)
        self.assertEqual(zeros.size, 0)

    def test_pole_zero_cancellation_keeps_invariant_zero(self):
        # Controllable canonical form of (s + 2)(s + 3) / ((s + 1)(s + 2)(s + 5))
        A = np.array([[0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [-10.0, -17.0, -8.0]])
        B = np.array([[0.0], [0.0], [1.0]])
        C = np.array([[6.0, 5.0, 1.0]])
        zeros = transmission_zeros(A, B, C, np.zeros((1, 1)))
        assert_allclose(zeros, [-2.0, -3.0], atol=1e-8)

    def test_zeros_are_sorted(self):
        zeros = transmission_zeros(self.A_ft, self.B_ft, self.C_ft, self.D_ft)
        self.assertGreaterEqual(zeros[0].real, zeros[1].real)

    def test_complex_zeros(self):
        # Numerator s² + 2s + 5, zeros at -1 ± 2j
        A = np.array([[0.0, 1.0, 0.0], [0.0, 0.0, 1.0], [-6.0, -11.0, -6.0]])
        B = np.array([[0.0], [0.0], [1.0]])
        C = np.array([[5.0, 2.0, 1.0]])
        zeros = transmission_zeros(A, B, C, np.zeros((1, 1)))
        assert_allclose(zeros, [-1 + 2j, -1 - 2j], atol=1e-8)

    def test_rank_drop_at_zeros(self):
        for A, B, C, D in [
            (self.A, self.B, self.C, self.D),
            (self.A_ft, self.B_ft, self.C_ft, self.D_ft),
        ]:
            with self.subTest(D=D):
                zeros = transmission_zeros(A, B, C, D)
                self.assert_pencil_drops_rank(A, B, C, D, zeros)


class TestSymbolicCrossCheck(ZerosTestCase):
    """Numerical zeros against the symbolic Rosenbrock determinant."""

    def test_strictly_proper(self):
        expected = self.symbolic_zeros(self.A, self.B, self.C, self.D)
        assert_allclose(transmission_zeros(self.A, self.B, self.C, self.D), expected, atol=1e-8)

    def test_with_feedthrough(self):
        expected = self.symbolic_zeros(self.A_ft, self.B_ft, self.C_ft, self.D_ft)
        actual = transmission_zeros(self.A_ft, self.B_ft, self.C_ft, self.D_ft)
        assert_allclose(actual, expected, atol=1e-8)

    def test_square_mimo(self):
        A = np.array([[-1.0, 0.0, 1.0], [0.0, -2.0, 0.0], [1.0, 1.0, -3.0]])
        B = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        C = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 1.0]])
        D = np.array([[0.0, 0.0], [0.0, 1.0]])

        # det P(s) = (s + 3)(s + 5)
        expected = self.symbolic_zeros(A, B, C, D)
        actual = transmission_zeros(A, B, C, D)
        assert_allclose(actual, expected, atol=1e-8)
        assert_allclose(actual, [-3.0, -5.0], atol=1e-8)


# ============================================================================
# Non-Square and MIMO Systems
# ============================================================================


class TestMIMOZeros(ZerosTestCase):

    def test_tall_system(self):
        zeros = transmission_zeros(self.A_tall, self.B_tall, self.C_tall, self.D_tall)
        assert_allclose(zeros, [-3.0], atol=1e-10)
        self.assert_pencil_drops_rank(self.A_tall, self.B_tall, self.C_tall, self.D_tall, zeros)

    def test_wide_system_is_dual_of_tall(self):
        zeros = transmission_zeros(self.A_tall.T, self.C_tall.T, self.B_tall.T, self.D_tall.T)
        assert_allclose(zeros, [-3.0], atol=1e-10)

    def test_tall_system_without_common_zero(self):
        zeros = transmission_zeros(self.A_tall, self.B_tall, np.eye(2), np.zeros((2, 1)))
        self.assertEqual(zeros.size, 0)

    def test_block_diagonal(self):
        # diag((s + 3)/((s + 1)(s + 2)), 1/(s + 4))
        A = np.zeros((3, 3))
        A[:2, :2] = self.A
        A[2, 2] = -4.0
        B = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
        C = np.array([[3.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        D = np.zeros((2, 2))

        zeros = transmission_zeros(A, B, C, D)
        assert_allclose(zeros, [-3.0], atol=1e-10)


# ============================================================================
# Diagnostics
# ============================================================================


class TestZerosInfo(ZerosTestCase):

    def test_info_fields(self):
        info = transmission_zeros_info(self.A_ft, self.B_ft, self.C_ft, self.D_ft)

        self.assertEqual(set(info), {"zeros", "num_infinite", "reduced_order", "is_degenerate"})
        self.assertFalse(info["is_degenerate"])
        self.assertEqual(info["reduced_order"], 2)
        self.assertEqual(info["num_infinite"], 0)

    def test_infinity_threshold_discards_large_zeros(self):
        info = transmission_zeros_info(
            self.A, self.B, self.C, self.D, infinity_threshold=1e-3
        )
        self.assertEqual(info["zeros"].size, 0)
        self.assertGreaterEqual(info["num_infinite"], 1)

    def test_missing_input_or_output_path(self):
        for B, C in [(None, self.C), (self.B, None), (None, None)]:
            with self.subTest(B=B, C=C):
                info = transmission_zeros_info(self.A, B, C, None)
                self.assertEqual(info["zeros"].size, 0)
                self.assertFalse(info["is_degenerate"])

    def test_static_gain(self):
        self.assertEqual(transmission_zeros(None, None, None, np.eye(2)).size, 0)

    def test_explicit_rank_tolerance(self):
        zeros = transmission_zeros(self.A, self.B, self.C, self.D, tol=1e-12)
        assert_allclose(zeros, [-3.0], atol=1e-10)


class TestDegenerateSystems(ZerosTestCase):

    def test_zero_input_matrix_warns(self):
        with pytest.warns(DegenerateSystemWarning, match="rank deficient"):
            info = transmission_zeros_info(self.A, np.zeros((2, 1)), self.C, self.D)

        self.assertTrue(info["is_degenerate"])
        self.assertEqual(info["zeros"].size, 0)

    def test_duplicated_input_in_square_system_warns(self):
        # Two identical input columns: G(s) has rank 1 everywhere
        B = np.array([[0.0, 0.0], [1.0, 1.0]])
        C = np.eye(2)
        with pytest.warns(DegenerateSystemWarning):
            zeros = transmission_zeros(self.A, B, C, np.zeros((2, 2)))
        self.assertEqual(zeros.size, 0)

    def test_regular_system_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", DegenerateSystemWarning)
            transmission_zeros(self.A, self.B, self.C, self.D)


# ============================================================================
# Building Blocks
# ============================================================================


class TestSystemPencil(ZerosTestCase):

    def test_blocks(self):
        L, N = system_pencil(self.A_tall, self.B_tall, self.C_tall, self.D_tall)

        self.assertEqual(L.shape, (4, 3))
        self.assertEqual(N.shape, (4, 3))
        assert_allclose(L[:2, :2], self.A_tall)
        assert_allclose(L[2:, 2:], self.D_tall)
        assert_allclose(N[:2, :2], np.eye(2))
        self.assertEqual(np.count_nonzero(N), 2)

    def test_normal_rank_full(self):
        self.assertEqual(normal_rank(self.A, self.B, self.C, self.D), 3)
        self.assertEqual(normal_rank(self.A_tall, self.B_tall, self.C_tall, self.D_tall), 3)

    def test_normal_rank_deficient(self):
        self.assertEqual(normal_rank(self.A, np.zeros((2, 1)), self.C, self.D), 2)

    def test_default_tolerance_scales_with_norm(self):
        small = default_tolerance(self.A, self.B, self.C, self.D)
        large = default_tolerance(1e3 * self.A, 1e3 * self.B, 1e3 * self.C, 1e3 * self.D)
        self.assertGreater(small, 0.0)
        self.assertAlmostEqual(large / small, 1e3)


class TestStaircaseReduction(ZerosTestCase):

    def test_reduce_strictly_proper_siso(self):
        Ar, Br, Cr, Dr = reduce_system(self.A, self.B, self.C, self.D)

        self.assertEqual(Ar.shape, (1, 1))
        self.assertEqual(Dr.shape, (1, 1))
        self.assertGreater(abs(Dr[0, 0]), 1e-12)

    def test_reduction_preserves_zeros(self):
        Ar, Br, Cr, Dr = reduce_system(self.A, self.B, self.C, self.D)
        assert_allclose(transmission_zeros(Ar, Br, Cr, Dr), [-3.0], atol=1e-10)

    def test_full_rank_feedthrough_is_untouched(self):
        Ar, Br, Cr, Dr = reduce_system(self.A_ft, self.B_ft, self.C_ft, self.D_ft)

        assert_allclose(Ar, self.A_ft)
        assert_allclose(Dr, self.D_ft)

    def test_dual_reduction_gives_full_column_rank(self):
        Ar, Br, Cr, Dr = reduce_system(self.A_tall, self.B_tall, self.C_tall, self.D_tall)
        Ar, Br, Cr, Dr = reduce_dual(Ar, Br, Cr, Dr)

        self.assertEqual(np.linalg.matrix_rank(Dr), Dr.shape[1])

    def test_zero_pencil_is_square(self):
        Ar, Br, Cr, Dr = reduce_system(self.A_ft, self.B_ft, self.C_ft, self.D_ft)
        Ar, Br, Cr, Dr = reduce_dual(Ar, Br, Cr, Dr)
        Af, Ef = zero_pencil(Ar, Br, Cr, Dr)

        self.assertEqual(Af.shape, (2, 2))
        self.assertEqual(Ef.shape, (2, 2))


# ============================================================================
# Error Handling
# ============================================================================


class TestZerosErrors(ZerosTestCase):

    def test_row_mismatch(self):
        with pytest.raises(DimensionMismatch, match="B must have 2 rows"):
            transmission_zeros(self.A, np.ones((3, 1)), self.C, self.D)

    def test_column_mismatch(self):
        with pytest.raises(DimensionMismatch, match="C must have 2 columns"):
            transmission_zeros(self.A, self.B, np.ones((1, 3)), self.D)

    def test_feedthrough_mismatch(self):
        with pytest.raises(DimensionMismatch, match="D must have shape"):
            transmission_zeros(self.A, self.B, self.C, np.ones((2, 2)))

    def test_non_square_state_matrix(self):
        with pytest.raises(DimensionMismatch, match="square"):
            transmission_zeros(np.ones((2, 3)), self.B, self.C, self.D)

    def test_non_finite(self):
        C = self.C.copy()
        C[0, 1] = np.nan
        with pytest.raises(AnalysisFailure, match="C contains non-finite"):
            transmission_zeros(self.A, self.B, C, self.D)


if __name__ == "__main__":
    unittest.main()

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
Unit Tests for SystemAnalysis Wrapper

Tests cover:
- Initialization and backend validation
- Routing to the pure pole, zero and stability functions
- Minimum-phase test in both time domains
- Structural summary of a built model
- Backend conversion of returned arrays (NumPy, PyTorch, JAX)
"""

import unittest

import numpy as np
import pytest
from numpy.testing import assert_allclose

# Optional backends for testing
try:
    import torch

    HAS_TORCH = True
except ImportError:
    HAS_TORCH = False

try:
    import jax.numpy as jnp

    HAS_JAX = True
except ImportError:
    HAS_JAX = False

from ltimodel import build
from ltimodel.control.structural_analysis_functions import analyze_stability, compute_poles
from ltimodel.control.system_analysis import SystemAnalysis
from ltimodel.control.transmission_zeros import transmission_zeros


class AnalysisTestCase(unittest.TestCase):
    """Base class with common test systems."""

    def setUp(self):
        # G(s) = (s + 3) / ((s + 1)(s + 2))
        self.A = np.array([[0.0, 1.0], [-2.0, -3.0]])
        self.B = np.array([[0.0], [1.0]])
        self.C = np.array([[3.0, 1.0]])
        self.D = np.zeros((1, 1))

        # Same poles, zero at +1
        self.C_nmp = np.array([[-1.0, 1.0]])


# ============================================================================
# Initialization Tests
# ============================================================================


class TestSystemAnalysisInit(AnalysisTestCase):

    def test_default_initialization(self):
        analyzer = SystemAnalysis()
        self.assertEqual(analyzer.backend, "numpy")

    def test_initialization_with_backend(self):
        for backend in ["numpy", "torch", "jax"]:
            with self.subTest(backend=backend):
                self.assertEqual(SystemAnalysis(backend=backend).backend, backend)

    def test_invalid_backend(self):
        with pytest.raises(ValueError, match="Invalid backend"):
            SystemAnalysis(backend="tensorflow")

    def test_is_stateless(self):
        """Only the backend is stored."""
        analyzer = SystemAnalysis(backend="numpy")
        self.assertEqual(list(vars(analyzer)), ["backend"])


# ============================================================================
# Routing Tests
# ============================================================================


class TestSystemAnalysisRouting(AnalysisTestCase):

    def setUp(self):
        super().setUp()
        self.analyzer = SystemAnalysis()

    def test_poles_match_function(self):
        assert_allclose(self.analyzer.poles(self.A), compute_poles(self.A))

    def test_poles_static_gain(self):
        self.assertEqual(self.analyzer.poles(None).size, 0)

    def test_zeros_match_function(self):
        assert_allclose(
            self.analyzer.zeros(self.A, self.B, self.C, self.D),
            transmission_zeros(self.A, self.B, self.C, self.D),
        )

    def test_zeros_accept_lists(self):
        zeros = self.analyzer.zeros(self.A.tolist(), self.B.tolist(), self.C.tolist())
        assert_allclose(zeros, [-3.0], atol=1e-10)

    def test_stability_matches_function(self):
        poles = compute_poles(self.A)
        expected = analyze_stability(poles, dt=0.0)
        result = self.analyzer.stability(poles, dt=0.0)

        self.assertEqual(result["is_stable"], expected["is_stable"])
        self.assertAlmostEqual(result["stability_margin"], expected["stability_margin"])

    def test_returned_arrays_are_copies(self):
        first = self.analyzer.poles(self.A)
        first[0] = 100.0
        assert_allclose(self.analyzer.poles(self.A), [-1.0, -2.0], atol=1e-12)


# ============================================================================
# Minimum Phase Tests
# ============================================================================


class TestMinimumPhase(AnalysisTestCase):

    def setUp(self):
        super().setUp()
        self.analyzer = SystemAnalysis()

    def test_minimum_phase(self):
        zeros = self.analyzer.zeros(self.A, self.B, self.C, self.D)
        self.assertTrue(self.analyzer.is_minimum_phase(zeros, dt=0.0))

    def test_non_minimum_phase(self):
        zeros = self.analyzer.zeros(self.A, self.B, self.C_nmp, self.D)
        self.assertFalse(self.analyzer.is_minimum_phase(zeros, dt=0.0))

    def test_no_zeros_is_minimum_phase(self):
        self.assertTrue(self.analyzer.is_minimum_phase(np.array([]), dt=0.0))

    def test_discrete_uses_unit_circle(self):
        zeros = np.array([-3.0])
        self.assertTrue(self.analyzer.is_minimum_phase(zeros, dt=0.0))
        self.assertFalse(self.analyzer.is_minimum_phase(zeros, dt=0.1))
        self.assertTrue(self.analyzer.is_minimum_phase(np.array([0.5]), dt=0.1))


# ============================================================================
# Model Summary Tests
# ============================================================================


class TestAnalyzeModel(AnalysisTestCase):

    def test_summary_of_dynamic_model(self):
        model = build(self.A, self.B, self.C, self.D)
        summary = model.analysis.analyze_model(model)

        self.assertEqual(summary["nx"], 2)
        self.assertEqual(summary["nu"], 1)
        self.assertEqual(summary["ny"], 1)
        self.assertEqual(summary["domain"], "continuous")
        self.assertFalse(summary["is_gain"])
        self.assertTrue(summary["is_siso"])
        assert_allclose(summary["poles"], [-1.0, -2.0], atol=1e-12)
        assert_allclose(summary["zeros"], [-3.0], atol=1e-10)
        self.assertTrue(summary["stability"]["is_stable"])
        self.assertTrue(summary["minimum_phase"])

    def test_summary_of_non_minimum_phase_model(self):
        model = build(self.A, self.B, self.C_nmp, self.D)
        summary = model.analysis.analyze_model(model)

        self.assertTrue(summary["stability"]["is_stable"])
        self.assertFalse(summary["minimum_phase"])

    def test_summary_of_static_gain(self):
        model = build(D=np.array([[1.0, 2.0]]))
        summary = model.analysis.analyze_model(model)

        self.assertTrue(summary["is_gain"])
        self.assertEqual(summary["nx"], 0)
        self.assertIsNone(summary["minimum_phase"])
        self.assertEqual(summary["poles"].size, 0)

    def test_summary_does_not_alias_model_arrays(self):
        model = build(self.A, self.B, self.C, self.D)
        summary = model.analysis.analyze_model(model)

        summary["poles"][0] = 42.0
        assert_allclose(model.poles, [-1.0, -2.0], atol=1e-12)


# ============================================================================
# Backend Tests
# ============================================================================


class TestAnalysisBackends(AnalysisTestCase):

    @unittest.skipIf(not HAS_TORCH, "PyTorch not installed")
    def test_torch_poles(self):
        analyzer = SystemAnalysis(backend="torch")
        poles = analyzer.poles(torch.tensor(self.A))

        self.assertIsInstance(poles, torch.Tensor)
        assert_allclose(poles.numpy(), [-1.0, -2.0], atol=1e-12)

    @unittest.skipIf(not HAS_TORCH, "PyTorch not installed")
    def test_torch_zeros(self):
        analyzer = SystemAnalysis(backend="torch")
        zeros = analyzer.zeros(
            torch.tensor(self.A), torch.tensor(self.B), torch.tensor(self.C), torch.tensor(self.D)
        )

        self.assertIsInstance(zeros, torch.Tensor)
        assert_allclose(zeros.numpy(), [-3.0], atol=1e-10)

    @unittest.skipIf(not HAS_JAX, "JAX not installed")
    def test_jax_poles(self):
        analyzer = SystemAnalysis(backend="jax")
        poles = analyzer.poles(jnp.array(self.A))

        self.assertEqual(len(poles), 2)
        assert_allclose(np.asarray(poles).real, [-1.0, -2.0], atol=1e-5)

    @unittest.skipIf(not HAS_TORCH, "PyTorch not installed")
    def test_stability_accepts_torch_poles(self):
        analyzer = SystemAnalysis(backend="torch")
        info = analyzer.stability(analyzer.poles(self.A), dt=0.0)
        self.assertTrue(info["is_stable"])


if __name__ == "__main__":
    unittest.main()

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
System Analysis Wrapper

Thin wrapper around the structural analysis functions for composition
with StateSpaceModel.

Provides backend consistency with the parent model while delegating to
pure functions in structural_analysis_functions.py and
transmission_zeros.py. This is NOT a heavy utility - it simply routes to
stateless algorithms.

Design Philosophy
-----------------
- Composition not inheritance
- Thin wrapper (no state beyond the backend, no caching)
- Routes to pure functions
- Backend consistency with parent model

Usage
-----
>>> from ltimodel.control.system_analysis import SystemAnalysis
>>> import numpy as np
>>>
>>> analyzer = SystemAnalysis(backend='numpy')
>>> A = np.array([[0, 1], [-2, -3]])
>>> poles = analyzer.poles(A)
>>> analyzer.stability(poles, dt=0.0)['is_stable']
True
>>>
>>> # Typical usage - via model composition
>>> model = build(A, B, C, D, dt=0.0)
>>> summary = model.analysis.analyze_model(model)
"""

from typing import TYPE_CHECKING, Optional

import numpy as np

from ltimodel.control.structural_analysis_functions import (
    analyze_stability,
    classify_stability,
    compute_poles,
)
from ltimodel.control.transmission_zeros import transmission_zeros
from ltimodel.systems.utils.backend_conversion import from_numpy, to_numpy
from ltimodel.types.backends import (
    DEFAULT_INFINITY_THRESHOLD,
    DEFAULT_STABILITY_TOLERANCE,
    Backend,
    validate_backend,
)
from ltimodel.types.core import (
    FeedthroughMatrix,
    InputMatrix,
    OutputMatrix,
    PoleArray,
    StateMatrix,
    ZeroArray,
)
from ltimodel.types.structural import StabilityInfo, StructuralSummary

if TYPE_CHECKING:
    from ltimodel.systems.state_space_model import StateSpaceModel


class SystemAnalysis:
    """
    System analysis wrapper for composition.

    Attributes
    ----------
    backend : Backend
        Backend that pole and zero arrays are returned in
        ('numpy', 'torch', 'jax')

    Examples
    --------
    >>> model = build(A, B, C, D, dt=0.1)
    >>> info = model.analysis.stability(model.poles, dt=model.dt)
    >>> if info['is_marginally_stable']:
    ...     print("Pole on the unit circle")
    >>>
    >>> summary = model.analysis.analyze_model(model)
    >>> summary['minimum_phase']
    True

    Notes
    -----
    Stability reports are always NumPy based; only the pole/zero arrays
    returned by poles() and zeros() follow the backend setting.
    """

    def __init__(self, backend: Backend = "numpy"):
        """
        Initialize system analysis wrapper.

        Args:
            backend: Backend from parent model ('numpy', 'torch', 'jax')
        """
        self.backend = validate_backend(backend)

    def poles(self, A: Optional[StateMatrix]):
        """
        Poles of the state matrix.

        Routes to structural_analysis_functions.compute_poles().

        Args:
            A: State matrix (nx, nx), or None for a static gain

        Returns:
            Sorted complex poles in the wrapper's backend
        """
        A_np = None if A is None else to_numpy(A)
        return from_numpy(compute_poles(A_np), self.backend)

    def zeros(
        self,
        A: Optional[StateMatrix],
        B: Optional[InputMatrix],
        C: Optional[OutputMatrix],
        D: Optional[FeedthroughMatrix] = None,
        tol: Optional[float] = None,
        infinity_threshold: float = DEFAULT_INFINITY_THRESHOLD,
    ):
        """
        Transmission zeros of (A, B, C, D).

        Routes to transmission_zeros.transmission_zeros().

        Returns:
            Sorted complex zeros in the wrapper's backend
        """
        blocks = [None if M is None else to_numpy(M) for M in (A, B, C, D)]
        zeros = transmission_zeros(*blocks, tol=tol, infinity_threshold=infinity_threshold)
        return from_numpy(zeros, self.backend)

    def stability(
        self,
        poles: PoleArray,
        dt: float = 0.0,
        tolerance: float = DEFAULT_STABILITY_TOLERANCE,
    ) -> StabilityInfo:
        """
        Stability report for a pole set.

        Routes to structural_analysis_functions.analyze_stability().

        Stability criteria:
            Continuous (dt == 0): All Re(λ) < 0 (left half-plane)
            Discrete   (dt > 0):  All |λ| < 1 (inside unit circle)
        """
        return analyze_stability(to_numpy(poles), dt, tolerance)

    def is_minimum_phase(
        self,
        zeros: ZeroArray,
        dt: float = 0.0,
        tolerance: float = DEFAULT_STABILITY_TOLERANCE,
    ) -> bool:
        """
        True if every transmission zero lies strictly inside the stability region.

        Uses the same region test as the pole stability classification.
        """
        return classify_stability(to_numpy(zeros), dt, tolerance)

    def analyze_model(self, model: "StateSpaceModel") -> StructuralSummary:
        """
        Structural summary of a built model.

        Reads the poles, zeros and stability already computed by the model;
        nothing is recomputed.

        Returns:
            StructuralSummary with dimensions, classification flags, poles,
            zeros, the stability report and the minimum-phase flag

        Examples
        --------
        >>> model = build(A, B, C, D, dt=0.0)
        >>> summary = model.analysis.analyze_model(model)
        >>> summary['stability']['is_stable'], summary['minimum_phase']
        (True, True)
        """
        zeros = np.asarray(model.zeros)
        minimum_phase = None
        if not model.is_gain:
            minimum_phase = self.is_minimum_phase(
                zeros, model.dt, model.config["stability_tolerance"]
            )

        return {
            "nx": model.nx,
            "nu": model.nu,
            "ny": model.ny,
            "domain": model.domain,
            "is_gain": model.is_gain,
            "is_siso": model.is_siso,
            "poles": from_numpy(np.asarray(model.poles), self.backend),
            "zeros": from_numpy(zeros, self.backend),
            "stability": model.stability_info(),
            "minimum_phase": minimum_phase,
        }


# ============================================================================
# Export
# ============================================================================

__all__ = [
    "SystemAnalysis",
]

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
Structural Analysis Types

Result types for the structural analysis of state-space models:
- Stability classification (pole location test)
- Transmission zero computation
- Combined model summary

Mathematical Background
----------------------
Poles are the eigenvalues of A. Transmission zeros are the values z for
which the system pencil

    M(z) = [[z·I - A, B],
            [C,       D]]

drops below its normal rank.

Stability:
    Continuous (dt == 0): All Re(λ) < 0 (open left half-plane)
    Discrete   (dt > 0):  All |λ| < 1   (open unit disk)

Usage
-----
>>> from ltimodel.types.structural import StabilityInfo
>>>
>>> info: StabilityInfo = analyze_stability(poles, dt=0.0)
>>> if info['is_marginally_stable']:
...     print("Pole on the boundary")
"""

from typing import List, Optional

import numpy as np
from typing_extensions import TypedDict

from .core import PoleArray, SamplingDomain, ZeroArray


# ============================================================================
# Stability Analysis Types
# ============================================================================


class StabilityInfo(TypedDict):
    """
    Stability analysis result dictionary.

    Stability Criteria:
    - Continuous: All Re(λ) < 0 (left half-plane)
    - Discrete: All |λ| < 1 (inside unit circle)

    Poles on the boundary (within stability_tolerance) are marginal and
    never counted as stable.

    Fields
    ------
    eigenvalues : np.ndarray
        Poles the classification was made on (complex)
    magnitudes : np.ndarray
        |λ| of each pole
    max_magnitude : float
        Maximum |λ| (0.0 for a static gain)
    spectral_radius : float
        Same as max_magnitude
    max_real_part : float
        Spectral abscissa, -inf for a static gain
    stability_margin : float
        Distance of the worst pole from the boundary, positive when stable
        (-max Re(λ) for continuous, 1 - max|λ| for discrete, inf for a gain)
    is_stable : bool
        True if every pole lies strictly inside the stability region
    is_marginally_stable : bool
        True if the worst pole sits on the boundary
    is_unstable : bool
        True if some pole lies strictly outside the region
    domain : SamplingDomain
        'continuous' or 'discrete'

    Examples
    --------
    >>> info: StabilityInfo = analyze_stability(np.array([-1.0, -2.0]), dt=0.0)
    >>> info['is_stable']
    True
    >>> info['stability_margin']
    1.0
    """

    eigenvalues: np.ndarray
    magnitudes: np.ndarray
    max_magnitude: float
    spectral_radius: float
    max_real_part: float
    stability_margin: float
    is_stable: bool
    is_marginally_stable: bool
    is_unstable: bool
    domain: SamplingDomain


# ============================================================================
# Zero Analysis Types
# ============================================================================


class ZerosInfo(TypedDict, total=False):
    """
    Transmission zero computation result.

    Fields
    ------
    zeros : ZeroArray
        Finite transmission zeros, sorted
    num_infinite : int
        Generalized eigenvalues discarded as lying at infinity
    reduced_order : int
        Number of states left after the staircase reduction
        (size of the final square pencil)
    is_degenerate : bool
        True if the system matrix is rank deficient for every z
    """

    zeros: ZeroArray
    num_infinite: int
    reduced_order: int
    is_degenerate: bool


# ============================================================================
# Combined Summary
# ============================================================================


class StructuralSummary(TypedDict, total=False):
    """
    Combined structural description of a model.

    Returned by SystemAnalysis.analyze_model().

    Fields
    ------
    nx, nu, ny : int
        Dimensions
    domain : SamplingDomain
        Sampling domain
    is_gain, is_siso : bool
        Classification flags
    poles : PoleArray
        System poles
    zeros : ZeroArray
        Transmission zeros
    stability : StabilityInfo
        Full stability report
    minimum_phase : Optional[bool]
        True if every zero lies strictly inside the stability region,
        None for static gains
    """

    nx: int
    nu: int
    ny: int
    domain: SamplingDomain
    is_gain: bool
    is_siso: bool
    poles: PoleArray
    zeros: ZeroArray
    stability: StabilityInfo
    minimum_phase: Optional[bool]


__all__: List[str] = [
    "StabilityInfo",
    "ZerosInfo",
    "StructuralSummary",
]

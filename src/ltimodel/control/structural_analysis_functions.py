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
Structural Analysis Functions

Pure stateless functions for the structural analysis of state-space models:

**Poles:**
- Eigenvalues of the state matrix, deterministically ordered

**Stability:**
- Pole location test for continuous and discrete time
- Full stability report (margins, spectral radius, marginal detection)

**Sampling domain:**
- 'continuous' / 'discrete' tag from the sampling period

Transmission zeros live in transmission_zeros.py.

All functions are pure (no side effects, no state) and work like scipy.

Mathematical Background
-----------------------
Stability:
    Continuous (dt == 0): All Re(λ) < 0 (left half-plane)
    Discrete   (dt > 0):  All |λ| < 1 (inside unit circle)

Poles within `tolerance` of the boundary are marginally stable, which is
reported separately and never counted as stable.

Usage
-----
>>> from ltimodel.control.structural_analysis_functions import (
...     compute_poles,
...     analyze_stability,
... )
>>> import numpy as np
>>>
>>> A = np.array([[0, 1], [-2, -3]])
>>> poles = compute_poles(A)
>>> poles
array([-1.+0.j, -2.+0.j])
>>> analyze_stability(poles, dt=0.0)['is_stable']
True
"""

from typing import Optional

import numpy as np
from scipy import linalg

from ltimodel.exceptions import AnalysisFailure
from ltimodel.types.backends import DEFAULT_STABILITY_TOLERANCE
from ltimodel.types.core import PoleArray, SamplingDomain, SamplingSet, StateMatrix
from ltimodel.types.structural import StabilityInfo

# Real parts closer than this are treated as ties when ordering eigenvalues,
# so conjugate pairs order by imaginary part instead of rounding noise.
_ORDERING_DECIMALS = 12


# ============================================================================
# Sampling Domain
# ============================================================================


def sampling_domain(dt: float) -> SamplingDomain:
    """
    Sampling domain implied by the sampling period.

    Args:
        dt: Sampling period (0 for continuous time)

    Returns:
        'continuous' if dt == 0, else 'discrete'
    """
    return "continuous" if dt == 0 else "discrete"


def sampling_set(dt: float) -> SamplingSet:
    """Index set of the time axis: 'R' for continuous, 'Z' for discrete."""
    return "R" if dt == 0 else "Z"


# ============================================================================
# Poles
# ============================================================================


def sort_eigenvalues(values: np.ndarray) -> np.ndarray:
    """
    Order eigenvalues by descending real part, then descending imaginary part.

    Args:
        values: Complex (or real) 1-D array

    Returns:
        New complex array in canonical order

    Examples
    --------
    >>> sort_eigenvalues(np.array([-2.0, -1 - 1j, -1 + 1j]))
    array([-1.+1.j, -1.-1.j, -2.+0.j])
    """
    values = np.asarray(values, dtype=complex).ravel()
    if values.size == 0:
        return values
    real_key = np.round(values.real, _ORDERING_DECIMALS)
    order = np.lexsort((-values.imag, -real_key))
    return values[order]


def compute_poles(A: Optional[StateMatrix]) -> PoleArray:
    """
    Compute the poles of a state-space model (eigenvalues of A).

    Args:
        A: State matrix (nx, nx), or None for a static gain

    Returns:
        Complex array of length nx, sorted by sort_eigenvalues();
        empty for a static gain

    Raises:
        AnalysisFailure: If A contains NaN/inf or the eigenvalue
            iteration does not converge
        ValueError: If A is not square

    Examples
    --------
    >>> compute_poles(np.array([[0, 1], [-4, -5]]))
    array([-1.+0.j, -4.+0.j])
    >>> compute_poles(None)
    array([], dtype=complex128)
    """
    if A is None:
        return np.empty(0, dtype=complex)

    A_np = np.asarray(A, dtype=float)
    if A_np.ndim != 2 or A_np.shape[0] != A_np.shape[1]:
        raise ValueError(f"A must be square matrix, got shape {A_np.shape}")
    if A_np.size == 0:
        return np.empty(0, dtype=complex)
    if not np.all(np.isfinite(A_np)):
        raise AnalysisFailure("Cannot compute poles: A contains non-finite entries")

    try:
        eigenvalues = linalg.eigvals(A_np, check_finite=False)
    except linalg.LinAlgError as err:
        raise AnalysisFailure(f"Eigenvalue decomposition of A did not converge: {err}") from err

    return sort_eigenvalues(eigenvalues)


# ============================================================================
# Stability Analysis
# ============================================================================


def classify_stability(
    poles: PoleArray,
    dt: float = 0.0,
    tolerance: float = DEFAULT_STABILITY_TOLERANCE,
) -> bool:
    """
    Decide whether every pole lies strictly inside the stability region.

    Args:
        poles: Pole locations (complex)
        dt: Sampling period; 0 selects the continuous-time test
        tolerance: Boundary band; poles within it count as marginal

    Returns:
        True if asymptotically stable. An empty pole set (static gain)
        is stable. Boundary poles are not.
        With tolerance=0 this is the exact strict test (Re < 0, |λ| < 1).

    Examples
    --------
    >>> classify_stability(np.array([-1.0, -2.0]), dt=0.0)
    True
    >>> classify_stability(np.array([1j, -1j]), dt=0.0)  # on imaginary axis
    False
    >>> classify_stability(np.array([-1.0]), dt=0.1)     # on unit circle
    False
    """
    poles = np.asarray(poles, dtype=complex)
    if poles.size == 0:
        return True

    if sampling_domain(dt) == "continuous":
        return bool(np.all(poles.real < -tolerance))
    return bool(np.all(np.abs(poles) < 1.0 - tolerance))


def analyze_stability(
    poles: PoleArray,
    dt: float = 0.0,
    tolerance: float = DEFAULT_STABILITY_TOLERANCE,
) -> StabilityInfo:
    """
    Full stability report for a pole set.

    Stability criteria:
        Continuous (dt == 0): All Re(λ) < 0 (left half-plane)
        Discrete   (dt > 0):  All |λ| < 1 (inside unit circle)

    Args:
        poles: Pole locations (complex)
        dt: Sampling period; 0 selects the continuous-time test
        tolerance: Tolerance for marginal stability detection

    Returns:
        StabilityInfo containing:
            - eigenvalues: The poles
            - magnitudes: |λ| for all poles
            - max_magnitude / spectral_radius: max(|λ|)
            - max_real_part: max(Re(λ))
            - stability_margin: distance of the worst pole from the boundary
            - is_stable / is_marginally_stable / is_unstable
            - domain: 'continuous' or 'discrete'

    Examples
    --------
    >>> info = analyze_stability(np.array([0.9, 0.8]), dt=0.1)
    >>> info['spectral_radius']
    0.9
    >>> info['is_stable']
    True
    >>>
    >>> # Pure oscillator sits on the boundary
    >>> info = analyze_stability(np.array([1j, -1j]), dt=0.0)
    >>> info['is_marginally_stable'], info['is_stable']
    (True, False)

    Notes
    -----
    - Exactly one of is_stable, is_marginally_stable, is_unstable is True.
    - Static gains (no poles) are stable with an infinite margin.
    """
    eigenvalues = np.array(poles, dtype=complex).ravel()
    domain = sampling_domain(dt)

    if eigenvalues.size == 0:
        return {
            "eigenvalues": eigenvalues,
            "magnitudes": np.empty(0),
            "max_magnitude": 0.0,
            "spectral_radius": 0.0,
            "max_real_part": float("-inf"),
            "stability_margin": float("inf"),
            "is_stable": True,
            "is_marginally_stable": False,
            "is_unstable": False,
            "domain": domain,
        }

    magnitudes = np.abs(eigenvalues)
    max_magnitude = float(np.max(magnitudes))
    max_real = float(np.max(eigenvalues.real))

    if domain == "continuous":
        margin = -max_real
    else:
        margin = 1.0 - max_magnitude

    is_stable = classify_stability(eigenvalues, dt, tolerance)
    is_unstable = margin < -tolerance
    is_marginally_stable = not is_stable and not is_unstable

    result: StabilityInfo = {
        "eigenvalues": eigenvalues,
        "magnitudes": magnitudes,
        "max_magnitude": max_magnitude,
        "spectral_radius": max_magnitude,
        "max_real_part": max_real,
        "stability_margin": float(margin),
        "is_stable": bool(is_stable),
        "is_marginally_stable": bool(is_marginally_stable),
        "is_unstable": bool(is_unstable),
        "domain": domain,
    }

    return result


# ============================================================================
# Export
# ============================================================================

__all__ = [
    "sampling_domain",
    "sampling_set",
    "sort_eigenvalues",
    "compute_poles",
    "classify_stability",
    "analyze_stability",
]

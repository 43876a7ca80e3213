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
Backend and Configuration Types

Defines types related to:
- Computational backends (NumPy, PyTorch, JAX)
- Structural analysis configuration (rank and infinity tolerances)

Numerical work always happens in NumPy/SciPy. The backend only decides
which array type matrices are handed back in.

Usage
-----
>>> from ltimodel.types.backends import AnalysisConfig, validate_analysis_config
>>>
>>> config: AnalysisConfig = {'infinity_threshold': 1e6}
>>> full = validate_analysis_config(config)
>>> full['stability_tolerance']
1e-10
"""

import math
from typing import Any, Literal, Mapping, Optional

import numpy as np
from typing_extensions import TypedDict


# ============================================================================
# Backend Types
# ============================================================================

Backend = Literal["numpy", "torch", "jax"]
"""
Backend identifier for returned arrays.

Valid values:
- 'numpy': NumPy arrays (default, always available)
- 'torch': PyTorch tensors (requires the 'torch' extra)
- 'jax': JAX arrays (requires the 'jax' extra)
"""


# ============================================================================
# Analysis Configuration
# ============================================================================


class AnalysisConfig(TypedDict, total=False):
    """
    Configuration for structural analysis of a state-space model.

    Attributes
    ----------
    rank_tolerance : Optional[float]
        Singular values at or below this are treated as zero during the
        staircase reduction. None selects max(shape) * eps * ||S||, S being the
        system matrix [[A, B], [C, D]].
    infinity_threshold : float
        Generalized eigenvalues with modulus above this are treated as
        zeros at infinity and discarded. Measured relative to
        max(1, ||S||).
    stability_tolerance : float
        Width of the band around the stability boundary that counts as
        marginal. Poles inside the band are never classified stable.
    backend : Backend
        Array type returned by StateSpaceModel.matrices() by default.

    Examples
    --------
    >>> # Looser zero filtering for badly scaled models
    >>> config: AnalysisConfig = {
    ...     'rank_tolerance': 1e-9,
    ...     'infinity_threshold': 1e6,
    ... }
    """

    rank_tolerance: Optional[float]
    infinity_threshold: float
    stability_tolerance: float
    backend: Backend


# ============================================================================
# Constants - Valid Values
# ============================================================================

VALID_BACKENDS = ("numpy", "torch", "jax")
"""Tuple of valid backend names."""

DEFAULT_BACKEND: Backend = "numpy"
"""Default backend if not specified."""

DEFAULT_DTYPE = np.float64
"""Precision every matrix is stored in."""

DEFAULT_INFINITY_THRESHOLD = 1e8

DEFAULT_STABILITY_TOLERANCE = 1e-10

DEFAULT_ANALYSIS_CONFIG: AnalysisConfig = {
    "rank_tolerance": None,
    "infinity_threshold": DEFAULT_INFINITY_THRESHOLD,
    "stability_tolerance": DEFAULT_STABILITY_TOLERANCE,
    "backend": DEFAULT_BACKEND,
}
"""
Defaults applied to every model unless overridden.

Examples
--------
>>> DEFAULT_ANALYSIS_CONFIG['infinity_threshold']
100000000.0
"""


# ============================================================================
# Validation Utilities
# ============================================================================


def validate_backend(backend: str) -> Backend:
    """
    Validate and normalize backend string.

    Parameters
    ----------
    backend : str
        Backend name to validate

    Returns
    -------
    Backend
        Validated backend (typed)

    Raises
    ------
    ValueError
        If backend is not valid

    Examples
    --------
    >>> validate_backend('numpy')
    'numpy'
    >>> validate_backend('pytorch')  # ValueError
    """
    if backend not in VALID_BACKENDS:
        raise ValueError(f"Invalid backend '{backend}'. " f"Choose from: {VALID_BACKENDS}")
    return backend


def validate_analysis_config(config: Optional[Mapping[str, Any]] = None) -> AnalysisConfig:
    """
    Merge user overrides onto DEFAULT_ANALYSIS_CONFIG and check them.

    Parameters
    ----------
    config : Optional[Mapping]
        Partial configuration; missing keys take their defaults

    Returns
    -------
    AnalysisConfig
        Complete configuration (a new dict)

    Raises
    ------
    ValueError
        If a key is unknown or a value is out of range

    Examples
    --------
    >>> validate_analysis_config({'stability_tolerance': 1e-9})['stability_tolerance']
    1e-09
    >>> validate_analysis_config({'tolerance': 1e-9})  # ValueError - unknown key
    """
    merged: AnalysisConfig = dict(DEFAULT_ANALYSIS_CONFIG)
    if config is None:
        return merged

    unknown = set(config) - set(DEFAULT_ANALYSIS_CONFIG)
    if unknown:
        raise ValueError(
            f"Unknown analysis config keys: {sorted(unknown)}. "
            f"Valid keys: {sorted(DEFAULT_ANALYSIS_CONFIG)}"
        )
    merged.update(config)

    rank_tol = merged["rank_tolerance"]
    if rank_tol is not None and not (math.isfinite(rank_tol) and rank_tol >= 0):
        raise ValueError(f"rank_tolerance must be None or a finite value >= 0, got {rank_tol}")

    threshold = merged["infinity_threshold"]
    if not threshold > 0:
        raise ValueError(f"infinity_threshold must be positive, got {threshold}")

    stab_tol = merged["stability_tolerance"]
    if not (math.isfinite(stab_tol) and stab_tol >= 0):
        raise ValueError(f"stability_tolerance must be a finite value >= 0, got {stab_tol}")

    merged["backend"] = validate_backend(merged["backend"])
    return merged


# ============================================================================
# Export All
# ============================================================================

__all__ = [
    # Backend types
    "Backend",
    # Configuration
    "AnalysisConfig",
    # Constants
    "VALID_BACKENDS",
    "DEFAULT_BACKEND",
    "DEFAULT_DTYPE",
    "DEFAULT_INFINITY_THRESHOLD",
    "DEFAULT_STABILITY_TOLERANCE",
    "DEFAULT_ANALYSIS_CONFIG",
    # Utilities
    "validate_backend",
    "validate_analysis_config",
]

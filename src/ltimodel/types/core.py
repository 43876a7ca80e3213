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
Core Types - Fundamental Building Blocks

Defines the most basic types used throughout the package:
- Multi-backend array types (NumPy, PyTorch, JAX)
- State-space matrix types (A, B, C, D)
- Pole/zero arrays and sampling-domain tags
- System dimensions

Design Philosophy
----------------
- **Backend Agnostic**: Inputs may come from NumPy, PyTorch or JAX
- **Semantic Clarity**: Names convey mathematical meaning
- **Type Safety**: Enable static type checking

Usage
-----
>>> from ltimodel.types.core import StateMatrix, InputMatrix, PoleArray
>>>
>>> def spectral_abscissa(A: StateMatrix) -> float:
...     return float(np.max(np.linalg.eigvals(A).real))
"""

from typing import TYPE_CHECKING, Literal, Optional, Sequence, Tuple, Union

import numpy as np
from typing_extensions import TypedDict

if TYPE_CHECKING:
    import jax.numpy as jnp
    import torch


# ============================================================================
# Basic Array Types - Multi-Backend Support
# ============================================================================

ArrayLike = Union[np.ndarray, "torch.Tensor", "jnp.ndarray", Sequence]
"""
Array-like type accepted on input.

Can be a NumPy array, PyTorch tensor, JAX array or a nested Python
sequence of numbers. Everything is converted to a float64 NumPy array
before analysis.

Examples
--------
>>> A: ArrayLike = [[0, 1], [-2, -3]]
>>> A_np: ArrayLike = np.array([[0.0, 1.0], [-2.0, -3.0]])
"""

NumpyArray = np.ndarray
"""Pure NumPy array (what the model stores internally)."""


# ============================================================================
# State-Space Matrix Types
# ============================================================================

StateMatrix = ArrayLike
"""
State matrix A (nx, nx).

    Continuous: ẋ = Ax + Bu
    Discrete:   x[k+1] = Ax[k] + Bu[k]

Absent (None) for static gain models.
"""

InputMatrix = ArrayLike
"""
Input matrix B (nx, nu).

Maps the input vector into the state equation.

Examples
--------
>>> # Double integrator, only velocity actuated
>>> B: InputMatrix = np.array([[0.0], [1.0]])
"""

OutputMatrix = ArrayLike
"""
Output matrix C (ny, nx).

Maps state to output: y = Cx + Du.
"""

FeedthroughMatrix = ArrayLike
"""
Feedthrough/direct transmission matrix D (ny, nu).

Required for static gain models, where it fully describes the system:
y = Du.
"""

StateSpaceMatrices = Tuple[
    Optional[ArrayLike],
    Optional[ArrayLike],
    Optional[ArrayLike],
    Optional[ArrayLike],
]
"""(A, B, C, D) as returned by StateSpaceModel.matrices(), any of which may be None."""


# ============================================================================
# Structural Analysis Arrays
# ============================================================================

PoleArray = np.ndarray
"""
Complex array of system poles (eigenvalues of A), shape (nx,).

Ordered by descending real part, then descending imaginary part.
"""

ZeroArray = np.ndarray
"""
Complex array of finite transmission zeros, shape (nz,) with nz <= nx.

Same ordering convention as PoleArray.
"""


# ============================================================================
# Sampling Domain
# ============================================================================

SamplingDomain = Literal["continuous", "discrete"]
"""
Time domain implied by the sampling period.

- 'continuous': dt == 0, stability region is the open left half-plane
- 'discrete':   dt > 0, stability region is the open unit disk
"""

SamplingSet = Literal["R", "Z"]
"""Index set of the time axis: reals (continuous) or integers (discrete)."""


# ============================================================================
# System Dimension Types
# ============================================================================


class SystemDimensions(TypedDict, total=False):
    """
    System dimensions as dictionary.

    Attributes
    ----------
    nx : int
        State dimension (0 for static gains)
    nu : int
        Input dimension
    ny : int
        Output dimension

    Examples
    --------
    >>> dims: SystemDimensions = {'nx': 2, 'nu': 1, 'ny': 1}
    """

    nx: int
    nu: int
    ny: int


__all__ = [
    "ArrayLike",
    "NumpyArray",
    "StateMatrix",
    "InputMatrix",
    "OutputMatrix",
    "FeedthroughMatrix",
    "StateSpaceMatrices",
    "PoleArray",
    "ZeroArray",
    "SamplingDomain",
    "SamplingSet",
    "SystemDimensions",
]

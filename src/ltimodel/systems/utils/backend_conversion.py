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
Backend Conversion Utilities

Moves matrices between NumPy, PyTorch and JAX. All structural analysis runs
on NumPy/SciPy, so model inputs are converted on the way in and, if asked,
converted back on the way out.

PyTorch and JAX are optional; they are imported only when a conversion to
that backend is requested.
"""

from typing import Optional

import numpy as np

from ltimodel.exceptions import DimensionMismatch
from ltimodel.types.backends import DEFAULT_DTYPE, Backend, validate_backend
from ltimodel.types.core import ArrayLike


def to_numpy(arr: ArrayLike) -> np.ndarray:
    """
    Convert array to NumPy for scipy operations.

    Args:
        arr: NumPy array, PyTorch tensor, JAX array or nested sequence

    Returns:
        NumPy array (no copy when arr already is one)
    """
    if isinstance(arr, np.ndarray):
        return arr

    if hasattr(arr, "detach") and hasattr(arr, "cpu"):
        # PyTorch tensor
        return arr.detach().cpu().numpy()
    if hasattr(arr, "__array__"):
        # JAX array
        return np.array(arr)
    return np.asarray(arr)


def from_numpy(arr: Optional[np.ndarray], backend: Backend = "numpy"):
    """
    Convert NumPy array to the target backend.

    Args:
        arr: NumPy array, or None (passed through)
        backend: Target backend

    Returns:
        Array in target backend (always a fresh, writeable copy)
    """
    if arr is None:
        return None
    backend = validate_backend(backend)

    if backend == "numpy":
        return np.array(arr, copy=True)
    if backend == "torch":
        import torch

        return torch.from_numpy(np.array(arr, copy=True))
    import jax.numpy as jnp

    return jnp.asarray(arr)


def as_matrix(arr: Optional[ArrayLike], name: str) -> Optional[np.ndarray]:
    """
    Coerce one state-space matrix to a read-only float64 2-D copy.

    A 0-d value (e.g. D given as a plain scalar) becomes a 1x1 matrix.

    Args:
        arr: Matrix in any backend, or None
        name: Matrix name used in error messages ('A', 'B', 'C' or 'D')

    Returns:
        Read-only 2-D NumPy array, or None if arr is None

    Raises:
        DimensionMismatch: If the value is not two-dimensional
        TypeError: If the value has complex entries
    """
    if arr is None:
        return None

    raw = to_numpy(arr)
    if np.iscomplexobj(raw):
        raise TypeError(f"{name} must be real-valued, got dtype {raw.dtype}")

    mat = np.array(raw, dtype=DEFAULT_DTYPE, copy=True)
    if mat.ndim == 0:
        mat = mat.reshape(1, 1)
    if mat.ndim != 2:
        raise DimensionMismatch(f"{name} must be a 2-D matrix, got shape {mat.shape}")

    mat.flags.writeable = False
    return mat


__all__ = [
    "to_numpy",
    "from_numpy",
    "as_matrix",
]

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
State-Space Model

Immutable representation of a linear time-invariant system

    Continuous (dt == 0):  ẋ = Ax + Bu,         y = Cx + Du
    Discrete   (dt > 0):   x[k+1] = Ax[k] + Bu[k], y[k] = Cx[k] + Du[k]

or of a static gain y = Du when A is None.

Construction is atomic: validate → poles → zeros → stability. Either a
fully analyzed model is returned or a typed StateSpaceError is raised.
Derived fields are computed once; to change anything build a new model
(see StateSpaceModel.replace).

Usage
-----
>>> from ltimodel import build
>>> import numpy as np
>>>
>>> model = build(
...     A=[[0, 1], [-4, -5]],
...     B=[[0], [1]],
...     C=[[1, 0]],
...     D=[[1]],
...     dt=0.1,
... )
>>> model.shape
(1, 1)
>>> model.domain
'discrete'
>>> print(model)
State representation with sampling time: 0.100
2 states, 1 inputs, and 1 outputs
<BLANKLINE>
"""

from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np

from ltimodel.control.structural_analysis_functions import (
    analyze_stability,
    compute_poles,
    sampling_domain,
    sampling_set,
)
from ltimodel.control.system_analysis import SystemAnalysis
from ltimodel.control.transmission_zeros import transmission_zeros
from ltimodel.exceptions import InvalidOperation
from ltimodel.systems.utils.backend_conversion import as_matrix, from_numpy
from ltimodel.systems.utils.state_space_validator import StateSpaceValidator
from ltimodel.types.backends import AnalysisConfig, Backend, validate_analysis_config
from ltimodel.types.core import (
    FeedthroughMatrix,
    InputMatrix,
    NumpyArray,
    OutputMatrix,
    PoleArray,
    SamplingDomain,
    SamplingSet,
    StateMatrix,
    StateSpaceMatrices,
    SystemDimensions,
    ZeroArray,
)
from ltimodel.types.structural import StabilityInfo

_REPLACEABLE = ("A", "B", "C", "D", "dt", "config")


def _read_only(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


class StateSpaceModel:
    """
    Linear time-invariant system in state-space form.

    Parameters
    ----------
    A : Optional[StateMatrix]
        State matrix (nx, nx); None for a static gain
    B : Optional[InputMatrix]
        Input matrix (nx, nu)
    C : Optional[OutputMatrix]
        Output matrix (ny, nx)
    D : Optional[FeedthroughMatrix]
        Feedthrough matrix (ny, nu); required when A is None
    dt : float
        Sampling period; 0 for continuous time
    config : Optional[AnalysisConfig]
        Overrides for rank/infinity/stability tolerances and output backend

    Raises
    ------
    DimensionMismatch
        Incompatible matrix shapes
    MissingMatrix
        Neither A nor D given
    InvalidSamplingPeriod
        Negative or non-finite dt
    AnalysisFailure
        Non-finite entries or a decomposition that fails to converge

    Examples
    --------
    >>> model = StateSpaceModel([[0, 1], [-2, -3]], [[0], [1]], [[3, 1]], [[0]])
    >>> model.poles
    array([-1.+0.j, -2.+0.j])
    >>> model.zeros
    array([-3.+0.j])
    >>> model.is_stable
    True
    >>>
    >>> gain = StateSpaceModel(D=[[2.0, 0.5]])
    >>> gain.is_gain, gain.shape
    (True, (1, 2))
    """

    def __init__(
        self,
        A: Optional[StateMatrix] = None,
        B: Optional[InputMatrix] = None,
        C: Optional[OutputMatrix] = None,
        D: Optional[FeedthroughMatrix] = None,
        dt: float = 0.0,
        config: Optional[Mapping[str, Any]] = None,
    ):
        config = validate_analysis_config(config)

        A = as_matrix(A, "A")
        B = as_matrix(B, "B")
        C = as_matrix(C, "C")
        D = as_matrix(D, "D")

        info = StateSpaceValidator(A, B, C, D, dt).validate(raise_on_error=True).info
        dt = float(dt)

        poles = compute_poles(A)
        if info["is_gain"]:
            zeros = np.empty(0, dtype=complex)
        else:
            zeros = transmission_zeros(
                A,
                B,
                C,
                D,
                tol=config["rank_tolerance"],
                infinity_threshold=config["infinity_threshold"],
            )
        stability = analyze_stability(poles, dt, config["stability_tolerance"])
        _read_only(stability["eigenvalues"])
        _read_only(stability["magnitudes"])

        self._A = A
        self._B = B
        self._C = C
        self._D = D
        self._dt = dt
        self._config = config
        self._dims: SystemDimensions = {"nx": info["nx"], "nu": info["nu"], "ny": info["ny"]}
        self._is_gain = info["is_gain"]
        self._is_siso = info["is_siso"]
        self._poles = _read_only(poles)
        self._zeros = _read_only(zeros)
        self._stability = stability
        self.analysis = SystemAnalysis(backend=config["backend"])

    # ========================================================================
    # Matrices
    # ========================================================================

    @property
    def A(self) -> Optional[NumpyArray]:
        """State matrix (read-only), None for a static gain."""
        return self._A

    @property
    def B(self) -> Optional[NumpyArray]:
        """Input matrix (read-only) or None."""
        return self._B

    @property
    def C(self) -> Optional[NumpyArray]:
        """Output matrix (read-only) or None."""
        return self._C

    @property
    def D(self) -> Optional[NumpyArray]:
        """Feedthrough matrix (read-only) or None."""
        return self._D

    def matrices(self, backend: Optional[Backend] = None) -> StateSpaceMatrices:
        """
        Copies of (A, B, C, D), absent matrices as None.

        Args:
            backend: Array type to return; defaults to the configured backend

        Examples
        --------
        >>> A, B, C, D = model.matrices()
        >>> A_t, B_t, C_t, D_t = model.matrices(backend='torch')
        """
        backend = backend or self._config["backend"]
        return tuple(from_numpy(M, backend) for M in (self._A, self._B, self._C, self._D))

    def to_array(self) -> NumpyArray:
        """
        Gain array of a static-gain model (a copy of D).

        Raises
        ------
        InvalidOperation
            If the model has dynamics (A is not None)
        """
        if not self._is_gain:
            raise InvalidOperation("Only static gain models can be converted to arrays")
        return np.array(self._D, copy=True)

    # ========================================================================
    # Dimensions and Sampling
    # ========================================================================

    @property
    def nx(self) -> int:
        """Number of states (0 for a static gain)."""
        return self._dims["nx"]

    @property
    def nu(self) -> int:
        """Number of inputs."""
        return self._dims["nu"]

    @property
    def ny(self) -> int:
        """Number of outputs."""
        return self._dims["ny"]

    number_of_states = nx
    number_of_inputs = nu
    number_of_outputs = ny

    @property
    def shape(self) -> Tuple[int, int]:
        """(outputs, inputs)"""
        return self.ny, self.nu

    @property
    def dimensions(self) -> SystemDimensions:
        return dict(self._dims)

    @property
    def dt(self) -> float:
        """Sampling period (0.0 for continuous time)."""
        return self._dt

    sampling_period = dt

    @property
    def domain(self) -> SamplingDomain:
        """'continuous' or 'discrete'."""
        return sampling_domain(self._dt)

    @property
    def sampling_set(self) -> SamplingSet:
        """'R' for continuous time, 'Z' for discrete time."""
        return sampling_set(self._dt)

    @property
    def is_continuous(self) -> bool:
        return self._dt == 0

    @property
    def is_discrete(self) -> bool:
        return self._dt > 0

    # ========================================================================
    # Structural Properties
    # ========================================================================

    @property
    def is_gain(self) -> bool:
        """True if the model has no states (A is None)."""
        return self._is_gain

    @property
    def is_siso(self) -> bool:
        """True for a single-input single-output model."""
        return self._is_siso

    @property
    def poles(self) -> PoleArray:
        """Eigenvalues of A (read-only), sorted; empty for a static gain."""
        return self._poles

    @property
    def zeros(self) -> ZeroArray:
        """Finite transmission zeros (read-only), sorted."""
        return self._zeros

    @property
    def is_stable(self) -> bool:
        """True if every pole lies strictly inside the stability region."""
        return self._stability["is_stable"]

    def stability_info(self) -> StabilityInfo:
        """Full stability report computed at construction (arrays are copies)."""
        info = dict(self._stability)
        info["eigenvalues"] = np.array(info["eigenvalues"], copy=True)
        info["magnitudes"] = np.array(info["magnitudes"], copy=True)
        return info

    @property
    def config(self) -> AnalysisConfig:
        """Analysis configuration in effect (a copy)."""
        return dict(self._config)

    # ========================================================================
    # Reconstruction
    # ========================================================================

    def replace(self, **changes) -> "StateSpaceModel":
        """
        Build a new model with some fields replaced.

        Everything is validated and analyzed from scratch; this model is
        left untouched.

        Args:
            **changes: Any of A, B, C, D, dt, config

        Examples
        --------
        >>> discrete = model.replace(dt=0.05)
        >>> gain = model.replace(A=None, B=None, C=None)
        """
        unknown = set(changes) - set(_REPLACEABLE)
        if unknown:
            raise TypeError(f"Cannot replace {sorted(unknown)}; valid fields: {_REPLACEABLE}")

        fields: Dict[str, Any] = {
            "A": self._A,
            "B": self._B,
            "C": self._C,
            "D": self._D,
            "dt": self._dt,
            "config": self._config,
        }
        fields.update(changes)
        return StateSpaceModel(**fields)

    # ========================================================================
    # Comparison and Display
    # ========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StateSpaceModel):
            return NotImplemented
        if self._dt != other._dt:
            return False
        for mine, theirs in zip(
            (self._A, self._B, self._C, self._D),
            (other._A, other._B, other._C, other._D),
        ):
            if (mine is None) != (theirs is None):
                return False
            if mine is not None and not np.array_equal(mine, theirs):
                return False
        return True

    __hash__ = None

    def __str__(self) -> str:
        desc = f"State representation with sampling time: {self._dt:.3f}\n"
        if self._is_gain:
            desc += f"{self.ny}x{self.nu} Static Gain\n"
        else:
            desc += f"{self.nx} states, {self.nu} inputs, and {self.ny} outputs\n"
        return desc

    def __repr__(self) -> str:
        kind = "gain" if self._is_gain else "dynamic"
        return (
            f"StateSpaceModel({kind}, nx={self.nx}, nu={self.nu}, ny={self.ny}, "
            f"dt={self._dt})"
        )


def build(
    A: Optional[StateMatrix] = None,
    B: Optional[InputMatrix] = None,
    C: Optional[OutputMatrix] = None,
    D: Optional[FeedthroughMatrix] = None,
    dt: float = 0.0,
    config: Optional[Mapping[str, Any]] = None,
) -> StateSpaceModel:
    """
    Validate (A, B, C, D, dt) and return a fully analyzed StateSpaceModel.

    Raises a StateSpaceError subclass on failure; see StateSpaceModel.
    """
    return StateSpaceModel(A, B, C, D, dt, config=config)


__all__ = [
    "StateSpaceModel",
    "build",
]

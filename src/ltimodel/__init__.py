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
ltimodel
========

Immutable state-space models of linear time-invariant systems with their
structural properties (poles, transmission zeros, stability) computed at
construction.

Quick Start
-----------
>>> import numpy as np
>>> from ltimodel import build
>>>
>>> model = build(
...     A=np.array([[0, 1], [-2, -3]]),
...     B=np.array([[0], [1]]),
...     C=np.array([[3, 1]]),
...     D=np.zeros((1, 1)),
... )
>>> model.poles
array([-1.+0.j, -2.+0.j])
>>> model.zeros
array([-3.+0.j])
>>> model.is_stable
True

Errors
------
Every failure is a subclass of StateSpaceError (itself a ValueError):
DimensionMismatch, MissingMatrix, InvalidOperation, AnalysisFailure and
InvalidSamplingPeriod.
"""

__version__ = "0.1.0"

# Import order matters: control.system_analysis depends on systems.utils
from .systems import StateSpaceModel, build  # isort: skip

from .control import (
    SystemAnalysis,
    analyze_stability,
    compute_poles,
    transmission_zeros,
    transmission_zeros_info,
)
from .exceptions import (
    AnalysisFailure,
    DegenerateSystemWarning,
    DimensionMismatch,
    InvalidOperation,
    InvalidSamplingPeriod,
    MissingMatrix,
    StateSpaceError,
)
from .types import AnalysisConfig, StabilityInfo, StructuralSummary, ZerosInfo

__all__ = [
    "__version__",
    # Models
    "StateSpaceModel",
    "build",
    "SystemAnalysis",
    # Analysis functions
    "compute_poles",
    "transmission_zeros",
    "transmission_zeros_info",
    "analyze_stability",
    # Errors and warnings
    "StateSpaceError",
    "DimensionMismatch",
    "MissingMatrix",
    "InvalidOperation",
    "AnalysisFailure",
    "InvalidSamplingPeriod",
    "DegenerateSystemWarning",
    # Types
    "AnalysisConfig",
    "StabilityInfo",
    "ZerosInfo",
    "StructuralSummary",
]

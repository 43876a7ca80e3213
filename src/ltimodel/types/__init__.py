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
Type definitions for ltimodel.

>>> from ltimodel.types import StateMatrix, StabilityInfo, AnalysisConfig
"""

from .backends import (
    DEFAULT_ANALYSIS_CONFIG,
    DEFAULT_BACKEND,
    DEFAULT_DTYPE,
    DEFAULT_INFINITY_THRESHOLD,
    DEFAULT_STABILITY_TOLERANCE,
    VALID_BACKENDS,
    AnalysisConfig,
    Backend,
    validate_analysis_config,
    validate_backend,
)
from .core import (
    ArrayLike,
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
from .structural import StabilityInfo, StructuralSummary, ZerosInfo

__all__ = [
    # Core
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
    # Backends and configuration
    "Backend",
    "AnalysisConfig",
    "VALID_BACKENDS",
    "DEFAULT_BACKEND",
    "DEFAULT_DTYPE",
    "DEFAULT_INFINITY_THRESHOLD",
    "DEFAULT_STABILITY_TOLERANCE",
    "DEFAULT_ANALYSIS_CONFIG",
    "validate_backend",
    "validate_analysis_config",
    # Structural results
    "StabilityInfo",
    "ZerosInfo",
    "StructuralSummary",
]

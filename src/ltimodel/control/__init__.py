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
Structural Analysis
===================

Poles, transmission zeros and stability of state-space models.

Functional interface
--------------------
>>> from ltimodel.control import compute_poles, transmission_zeros, analyze_stability
>>>
>>> poles = compute_poles(A)
>>> zeros = transmission_zeros(A, B, C, D)
>>> info = analyze_stability(poles, dt=0.0)

Object-oriented interface
-------------------------
>>> from ltimodel.control import SystemAnalysis
>>>
>>> analysis = SystemAnalysis(backend='torch')
>>> poles = analysis.poles(A)        # torch.Tensor

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

# Functional interface
from .structural_analysis_functions import (
    analyze_stability,
    classify_stability,
    compute_poles,
    sampling_domain,
    sampling_set,
    sort_eigenvalues,
)
from .transmission_zeros import (
    default_tolerance,
    normal_rank,
    reduce_dual,
    reduce_system,
    system_pencil,
    transmission_zeros,
    transmission_zeros_info,
    zero_pencil,
)

# Classes
from .system_analysis import SystemAnalysis

# Export public API
__all__ = [
    # Classes
    "SystemAnalysis",
    # Poles and stability
    "compute_poles",
    "sort_eigenvalues",
    "classify_stability",
    "analyze_stability",
    "sampling_domain",
    "sampling_set",
    # Transmission zeros
    "transmission_zeros",
    "transmission_zeros_info",
    "system_pencil",
    "normal_rank",
    "reduce_system",
    "reduce_dual",
    "zero_pencil",
    "default_tolerance",
]

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
State-Space Exceptions

Typed failures raised while building or querying a state-space model.

All errors derive from StateSpaceError, which is itself a ValueError, so
callers can either branch on the specific kind or catch everything at once:

>>> from ltimodel import build
>>> from ltimodel.exceptions import DimensionMismatch, StateSpaceError
>>>
>>> try:
...     model = build(A, B, C_bad, D, dt=0.1)
... except DimensionMismatch as e:
...     print(f"Fix the matrices: {e}")
... except StateSpaceError as e:
...     print(f"Other failure: {e}")
"""


# ============================================================================
# Errors
# ============================================================================


class StateSpaceError(ValueError):
    """Base class for all state-space model failures"""
    pass


class DimensionMismatch(StateSpaceError):
    """Raised when matrix shapes are incompatible with each other"""
    pass


class MissingMatrix(StateSpaceError):
    """Raised when a required matrix is absent (e.g. D for a static gain)"""
    pass


class InvalidOperation(StateSpaceError):
    """Raised when a query is not defined for this kind of model"""
    pass


class AnalysisFailure(StateSpaceError):
    """Raised when a numerical decomposition fails or receives non-finite data"""
    pass


class InvalidSamplingPeriod(StateSpaceError):
    """Raised when the sampling period is negative or not finite"""
    pass


# ============================================================================
# Warnings
# ============================================================================


class DegenerateSystemWarning(RuntimeWarning):
    """
    Issued when the system matrix loses rank for every value of z.

    For such systems (e.g. B = 0 and D = 0) every complex number is an
    invariant zero, so no finite zero set can be reported.
    """
    pass


__all__ = [
    "StateSpaceError",
    "DimensionMismatch",
    "MissingMatrix",
    "InvalidOperation",
    "AnalysisFailure",
    "InvalidSamplingPeriod",
    "DegenerateSystemWarning",
]

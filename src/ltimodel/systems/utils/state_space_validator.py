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
State-Space Validator

Checks the dimensional consistency of (A, B, C, D, dt) before a model is
built, and classifies the model (static gain vs. dynamic, SISO vs. MIMO).

Rules, checked in order:
1. A present: A square; rows(B) == rows(A); cols(C) == cols(A); and D, if
   given, must match the output count of C and the input count of B.
2. A absent: D is required (a static gain is described by D alone).
3. The sampling period is finite and non-negative.

This class is standalone: it works on plain NumPy arrays (or None) and
does no numerical analysis.
"""

import math
import numbers
import warnings
from dataclasses import dataclass
from typing import Dict, List, Optional, Type

import numpy as np

from ltimodel.exceptions import (
    DimensionMismatch,
    InvalidSamplingPeriod,
    MissingMatrix,
    StateSpaceError,
)


# ============================================================================
# Validation Result Container
# ============================================================================


@dataclass
class ValidationResult:
    """
    Container for validation results.

    Attributes
    ----------
    is_valid : bool
        True if the matrices passed all checks
    errors : List[str]
        Validation errors in the order they were found (empty if valid)
    warnings : List[str]
        Non-fatal observations
    info : Dict
        nx, nu, ny, is_gain, is_siso and domain (when they can be derived)
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]
    info: Dict


# ============================================================================
# State-Space Validator
# ============================================================================


class StateSpaceValidator:
    """
    Validates a state-space quadruple and sampling period.

    Examples
    --------
    >>> validator = StateSpaceValidator(A, B, C, D, dt=0.1)
    >>> result = validator.validate(raise_on_error=False)
    >>> if not result.is_valid:
    ...     print(result.errors)
    >>>
    >>> # Raise the typed error for the first violated rule
    >>> try:
    ...     StateSpaceValidator(A, B, C_bad, D).validate()
    ... except DimensionMismatch as e:
    ...     print(e)
    """

    def __init__(
        self,
        A: Optional[np.ndarray],
        B: Optional[np.ndarray],
        C: Optional[np.ndarray],
        D: Optional[np.ndarray],
        dt: float = 0.0,
    ):
        self.A = A
        self.B = B
        self.C = C
        self.D = D
        self.dt = dt
        self._errors: List[str] = []
        self._error_types: List[Type[StateSpaceError]] = []
        self._warnings: List[str] = []

    # ========================================================================
    # Public API
    # ========================================================================

    def validate(self, raise_on_error: bool = True) -> ValidationResult:
        """
        Validate the quadruple.

        Parameters
        ----------
        raise_on_error : bool
            If True, raise the error type of the first violated rule
            If False, return ValidationResult with errors

        Returns
        -------
        ValidationResult
            Validation results with errors, warnings, and info

        Raises
        ------
        DimensionMismatch
            Incompatible shapes (first violated rule)
        MissingMatrix
            A and D both absent
        InvalidSamplingPeriod
            Negative or non-finite dt
        """
        self._errors = []
        self._error_types = []
        self._warnings = []

        if self.A is not None:
            self._validate_dynamic()
        else:
            self._validate_gain()
        self._validate_sampling_period()

        is_valid = len(self._errors) == 0
        result = ValidationResult(
            is_valid=is_valid,
            errors=self._errors.copy(),
            warnings=self._warnings.copy(),
            info=self._build_info() if is_valid else {},
        )

        if result.warnings:
            self._issue_warnings(result.warnings)

        if not is_valid and raise_on_error:
            raise self._error_types[0](self._format_error_message())

        return result

    # ========================================================================
    # Validation Checks
    # ========================================================================

    def _add_error(self, kind: Type[StateSpaceError], message: str):
        self._errors.append(message)
        self._error_types.append(kind)

    def _validate_dynamic(self):
        """Rule 1: shapes of B, C and D against A"""
        ar, ac = self.A.shape
        if ar != ac:
            self._add_error(DimensionMismatch, f"A must be square, got {ar}x{ac}")

        if self.B is not None and self.B.shape[0] != ar:
            self._add_error(
                DimensionMismatch,
                f"A/B row mismatch: A has {ar} rows but B has {self.B.shape[0]}",
            )
        if self.C is not None and self.C.shape[1] != ac:
            self._add_error(
                DimensionMismatch,
                f"A/C column mismatch: A has {ac} columns but C has {self.C.shape[1]}",
            )

        if self.D is not None:
            dr, dc = self.D.shape
            if self.C is not None and self.C.shape[0] != dr:
                self._add_error(
                    DimensionMismatch,
                    f"C/D row mismatch: C has {self.C.shape[0]} rows but D has {dr}",
                )
            if self.B is not None and self.B.shape[1] != dc:
                self._add_error(
                    DimensionMismatch,
                    f"B/D column mismatch: B has {self.B.shape[1]} columns but D has {dc}",
                )

        if self.B is None and self.C is None:
            self._warnings.append(
                "Dynamic model has neither B nor C; it has no transmission zeros"
            )

    def _validate_gain(self):
        """Rule 2: a static gain needs D"""
        if self.D is None:
            self._add_error(MissingMatrix, "D required for static-gain model")
            return
        if self.B is not None or self.C is not None:
            self._warnings.append("B and C are ignored for a static-gain model (A is None)")

    def _validate_sampling_period(self):
        """Rule 3: 0 for continuous time, positive for discrete time"""
        dt = self.dt
        if isinstance(dt, np.ndarray) and dt.ndim == 0:
            dt = dt.item()
        if not isinstance(dt, numbers.Real) or isinstance(dt, (bool, np.bool_)):
            self._add_error(
                InvalidSamplingPeriod,
                f"Sampling period must be a real number, got {type(dt).__name__}",
            )
        elif not math.isfinite(dt) or dt < 0:
            self._add_error(
                InvalidSamplingPeriod,
                f"Sampling period must be finite and >= 0, got {dt}",
            )

    # ========================================================================
    # Classification
    # ========================================================================

    def _build_info(self) -> Dict:
        """Dimensions and classification flags of a valid quadruple."""
        is_gain = self.A is None

        if is_gain:
            nx = 0
            ny, nu = self.D.shape
            is_siso = self.D.shape == (1, 1)
        else:
            nx = self.A.shape[0]
            nu = self.B.shape[1] if self.B is not None else (
                self.D.shape[1] if self.D is not None else 0
            )
            ny = self.C.shape[0] if self.C is not None else (
                self.D.shape[0] if self.D is not None else 0
            )
            is_siso = (
                self.B is not None
                and self.C is not None
                and self.B.shape[1] == 1
                and self.C.shape[0] == 1
            )

        return {
            "nx": nx,
            "nu": nu,
            "ny": ny,
            "is_gain": is_gain,
            "is_siso": bool(is_siso),
            "domain": "continuous" if self.dt == 0 else "discrete",
        }

    # ========================================================================
    # Reporting
    # ========================================================================

    def _issue_warnings(self, warnings_list: List[str]):
        """Issue Python warnings for validation warnings"""
        for warning in warnings_list:
            warnings.warn(f"State-space validation warning: {warning}", UserWarning, stacklevel=4)

    def _format_error_message(self) -> str:
        """First error on its own line, any others listed below it"""
        msg = self._errors[0]
        if len(self._errors) > 1:
            msg += "\n\nAdditional errors:\n"
            msg += "\n".join(f"  • {error}" for error in self._errors[1:])
        return msg


__all__ = [
    "ValidationResult",
    "StateSpaceValidator",
]

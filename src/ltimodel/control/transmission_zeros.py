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
Transmission Zeros

Pure stateless functions computing the transmission (invariant) zeros of a
state-space system (A, B, C, D): the values z where the system pencil

    M(z) = [[z·I - A, B],
            [C,       D]]

drops below its normal rank. The same pencil is used for continuous time
(z = s) and discrete time (z is the z-domain variable).

Algorithm
---------
Staircase reduction (Emami-Naeini & Van Dooren, 1982):

1. reduce_system(): row-compress D with an SVD. If D has full row rank,
   stop. Otherwise the rows of C that are not coupled to D pin down some
   states; compress them, drop rows that vanish, and eliminate those
   states. This gives a smaller system with the same zeros. Repeat.
2. Apply the same reduction to the dual system (Aᵀ, Cᵀ, Bᵀ, Dᵀ) so the
   feed-through also has full column rank.
3. zero_pencil(): column-compress [C D] with an orthogonal W. The leading
   columns of [A B]·W and [I 0]·W form a square, regular pencil (Af, Ef).
4. Finite generalized eigenvalues of (Af, Ef) are the transmission zeros.
   Eigenvalues whose modulus exceeds the infinity threshold (relative to
   the system norm) are zeros at infinity and are discarded.

Only orthogonal transformations are used, so non-square (m != p) systems
need no special casing.

Usage
-----
>>> from ltimodel.control.transmission_zeros import transmission_zeros
>>> import numpy as np
>>>
>>> A = np.array([[0, 1], [-2, -3]])
>>> B = np.array([[0], [1]])
>>> C = np.array([[3, 1]])
>>> D = np.zeros((1, 1))
>>> transmission_zeros(A, B, C, D)      # G(s) = (s + 3) / (s² + 3s + 2)
array([-3.+0.j])
"""

import warnings
from typing import Optional, Tuple

import numpy as np
from scipy import linalg

from ltimodel.control.structural_analysis_functions import sort_eigenvalues
from ltimodel.exceptions import AnalysisFailure, DegenerateSystemWarning, DimensionMismatch
from ltimodel.types.backends import DEFAULT_INFINITY_THRESHOLD
from ltimodel.types.core import (
    FeedthroughMatrix,
    InputMatrix,
    OutputMatrix,
    StateMatrix,
    ZeroArray,
)
from ltimodel.types.structural import ZerosInfo

SystemBlocks = Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]

# Fixed seed for the normal-rank probe point; keeps results reproducible.
_PROBE_SEED = 20250101


# ============================================================================
# Internal Helpers
# ============================================================================


def _svd(M: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Full SVD that also accepts matrices with a zero dimension."""
    rows, cols = M.shape
    if rows == 0 or cols == 0:
        return np.eye(rows), np.empty(0), np.eye(cols)
    try:
        return linalg.svd(M, full_matrices=True, check_finite=False)
    except linalg.LinAlgError as err:
        raise AnalysisFailure(f"SVD did not converge during zero computation: {err}") from err


def _rank(s: np.ndarray, tol: float) -> int:
    return int(np.sum(s > tol))


def _system_matrix(A, B, C, D) -> np.ndarray:
    return np.block([[A, B], [C, D]])


def default_tolerance(A: StateMatrix, B: InputMatrix, C: OutputMatrix, D: FeedthroughMatrix) -> float:
    """
    Rank tolerance used when none is configured.

    max(shape) * eps * ||[[A, B], [C, D]]||, so every compression during the
    reduction is judged against the scale of the whole system, not of the
    (possibly tiny) block being compressed.
    """
    S = _system_matrix(A, B, C, D)
    if S.size == 0:
        return 0.0
    return max(S.shape) * np.finfo(float).eps * float(np.linalg.norm(S, 2))


def _prepare(A, B, C, D) -> SystemBlocks:
    A = np.array(A, dtype=float)
    B = np.array(B, dtype=float)
    C = np.array(C, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise DimensionMismatch(f"A must be square, got shape {A.shape}")
    n = A.shape[0]
    if B.ndim != 2 or B.shape[0] != n:
        raise DimensionMismatch(f"B must have {n} rows, got shape {B.shape}")
    if C.ndim != 2 or C.shape[1] != n:
        raise DimensionMismatch(f"C must have {n} columns, got shape {C.shape}")

    p, m = C.shape[0], B.shape[1]
    if D is None:
        D = np.zeros((p, m))
    D = np.array(D, dtype=float)
    if D.shape != (p, m):
        raise DimensionMismatch(f"D must have shape {(p, m)}, got {D.shape}")

    for name, M in (("A", A), ("B", B), ("C", C), ("D", D)):
        if not np.all(np.isfinite(M)):
            raise AnalysisFailure(f"Cannot compute zeros: {name} contains non-finite entries")
    return A, B, C, D


# ============================================================================
# Extended System Pencil
# ============================================================================


def system_pencil(
    A: StateMatrix,
    B: InputMatrix,
    C: OutputMatrix,
    D: FeedthroughMatrix,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the extended pencil blocks L = [[A, B], [C, D]], N = [[I, 0], [0, 0]].

    The transmission zeros are the finite z where L - z·N loses rank.
    Both blocks are (n + p) x (n + m); they are square only when m == p.

    Examples
    --------
    >>> L, N = system_pencil(np.eye(2), np.ones((2, 1)), np.ones((1, 2)), np.zeros((1, 1)))
    >>> L.shape, N.shape
    ((3, 3), (3, 3))
    """
    A, B, C, D = _prepare(A, B, C, D)
    n = A.shape[0]
    p, m = D.shape
    L = _system_matrix(A, B, C, D)
    N = np.zeros((n + p, n + m))
    N[:n, :n] = np.eye(n)
    return L, N


def normal_rank(
    A: StateMatrix,
    B: InputMatrix,
    C: OutputMatrix,
    D: FeedthroughMatrix,
    tol: Optional[float] = None,
) -> int:
    """
    Normal (generic) rank of M(z) = [[z·I - A, B], [C, D]].

    Evaluated at a pseudo-random complex point scaled to the system norm,
    which almost surely is not a zero.
    """
    L, N = system_pencil(A, B, C, D)
    if L.size == 0:
        return 0
    scale = max(1.0, float(np.linalg.norm(L, 2)))
    rng = np.random.default_rng(_PROBE_SEED)
    z0 = scale * complex(rng.uniform(0.5, 1.5), rng.uniform(0.5, 1.5))
    s = np.linalg.svd(L - z0 * N, compute_uv=False)
    if tol is None:
        tol = max(L.shape) * np.finfo(float).eps * s[0]
    return _rank(s, tol)


# ============================================================================
# Staircase Reduction
# ============================================================================


def reduce_system(
    A: StateMatrix,
    B: InputMatrix,
    C: OutputMatrix,
    D: FeedthroughMatrix,
    tol: Optional[float] = None,
) -> SystemBlocks:
    """
    Reduce (A, B, C, D) to a system with the same zeros and D of full row rank.

    Each pass:
        1. SVD-compress the rows of D: Uᵀ[C D] = [[C_top, D_top], [C_1, ~0]]
           with D_top of full row rank ρ.
        2. If ρ equals the number of outputs, stop.
        3. SVD-compress C_1. Its row space (dimension μ) fixes μ states;
           rows that vanish are dropped. If μ == 0 the uncoupled rows are
           identically zero and are simply removed.
        4. With the state basis split as [x_keep, x_elim], the reduced
           system is (A11, B1, [[A21], [C_top·V_keep]], [[B2], [D_top]]).

    Args:
        A, B, C, D: System blocks (n x n, n x m, p x n, p x m)
        tol: Rank tolerance; None uses default_tolerance()

    Returns:
        (Ar, Br, Cr, Dr) with Dr of full row rank

    Examples
    --------
    >>> # Strictly proper SISO system: one state is eliminated per pass
    >>> A = np.array([[0.0, 1.0], [-2.0, -3.0]])
    >>> Ar, Br, Cr, Dr = reduce_system(A, [[0], [1]], [[3, 1]], [[0]])
    >>> Ar.shape, Dr.shape
    ((1, 1), (1, 1))
    """
    A, B, C, D = _prepare(A, B, C, D)
    if tol is None:
        tol = default_tolerance(A, B, C, D)

    while True:
        n = A.shape[0]
        p = D.shape[0]
        if p == 0:
            break

        U, s, _ = _svd(D)
        rho = _rank(s, tol)
        if rho == p:
            break

        # Rows 0..rho-1 carry D's row space, the rest are decoupled from u.
        Ct = U.T @ C
        Dt = U.T @ D
        C_top, D_top = Ct[:rho], Dt[:rho]
        C_1 = Ct[rho:]

        if n == 0:
            C, D = C_top, D_top
            break

        _, s1, V1t = _svd(C_1)
        mu = _rank(s1, tol)
        if mu == 0:
            # Uncoupled rows are identically zero; D_top already has full row rank.
            C, D = C_top, D_top
            break

        V = np.hstack([V1t[mu:].T, V1t[:mu].T])
        k = n - mu
        At = V.T @ A @ V
        Bt = V.T @ B
        Cv = C_top @ V

        A, B = At[:k, :k], Bt[:k]
        C = np.vstack([At[k:, :k], Cv[:, :k]])
        D = np.vstack([Bt[k:], D_top])

    return A, B, C, D


def reduce_dual(
    A: StateMatrix,
    B: InputMatrix,
    C: OutputMatrix,
    D: FeedthroughMatrix,
    tol: Optional[float] = None,
) -> SystemBlocks:
    """
    Reduce the dual system so that D ends up with full column rank.

    Runs reduce_system() on (Aᵀ, Cᵀ, Bᵀ, Dᵀ) and transposes back.
    """
    At, Bt, Ct, Dt = reduce_system(
        np.transpose(A), np.transpose(C), np.transpose(B), np.transpose(D), tol
    )
    return At.T, Ct.T, Bt.T, Dt.T


def zero_pencil(
    A: StateMatrix,
    B: InputMatrix,
    C: OutputMatrix,
    D: FeedthroughMatrix,
    tol: Optional[float] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Final step: pencil (Af, Ef) whose finite eigenvalues are the zeros.

    With [C D]·W = [0, X] (X of full column rank r), the first n + m - r
    columns of [A B]·W and [I 0]·W form the pencil. For a reduced system
    whose D is square and invertible this is n x n.

    Args:
        A, B, C, D: Reduced system blocks
        tol: Rank tolerance; None uses default_tolerance()

    Returns:
        (Af, Ef), each n x (n + m - r)
    """
    A, B, C, D = _prepare(A, B, C, D)
    n = A.shape[0]
    m = B.shape[1]
    if tol is None:
        tol = default_tolerance(A, B, C, D)

    CD = np.hstack([C, D])
    _, s, Vt = _svd(CD)
    r = _rank(s, tol)
    W = np.hstack([Vt[r:].T, Vt[:r].T])
    ncols = n + m - r

    AB = np.hstack([A, B]) @ W
    E = np.hstack([np.eye(n), np.zeros((n, m))]) @ W
    return AB[:, :ncols], E[:, :ncols]


# ============================================================================
# Transmission Zeros
# ============================================================================


def transmission_zeros_info(
    A: Optional[StateMatrix],
    B: Optional[InputMatrix],
    C: Optional[OutputMatrix],
    D: Optional[FeedthroughMatrix] = None,
    tol: Optional[float] = None,
    infinity_threshold: float = DEFAULT_INFINITY_THRESHOLD,
) -> ZerosInfo:
    """
    Compute transmission zeros together with diagnostics.

    Args:
        A: State matrix (n, n); None for a static gain
        B: Input matrix (n, m); None means no input path
        C: Output matrix (p, n); None means no output path
        D: Feedthrough (p, m); None is treated as zero
        tol: Rank tolerance for the reduction; None selects default_tolerance()
        infinity_threshold: Zeros with |z| > infinity_threshold * max(1, ||S||)
            count as infinite, S being the system matrix [[A, B], [C, D]]

    Returns:
        ZerosInfo containing:
            - zeros: finite transmission zeros, sorted like poles
            - num_infinite: generalized eigenvalues discarded as infinite
            - reduced_order: size of the final pencil
            - is_degenerate: True if M(z) is rank deficient for every z

    Raises:
        AnalysisFailure: Non-finite data, or a decomposition that fails
        DimensionMismatch: Incompatible block shapes

    Warns:
        DegenerateSystemWarning: If the system matrix has deficient normal rank
    """
    empty: ZerosInfo = {
        "zeros": np.empty(0, dtype=complex),
        "num_infinite": 0,
        "reduced_order": 0,
        "is_degenerate": False,
    }
    if A is None or B is None or C is None:
        return empty

    A, B, C, D = _prepare(A, B, C, D)
    n = A.shape[0]
    p, m = D.shape
    if n == 0 or m == 0 or p == 0:
        return empty

    if tol is None:
        tol = default_tolerance(A, B, C, D)

    full_rank = min(n + p, n + m)
    if normal_rank(A, B, C, D) < full_rank:
        warnings.warn(
            "System matrix [[zI - A, B], [C, D]] is rank deficient for every z; "
            "transmission zeros are not isolated and none are reported.",
            DegenerateSystemWarning,
            stacklevel=2,
        )
        result = dict(empty)
        result["is_degenerate"] = True
        return result

    Ar, Br, Cr, Dr = reduce_system(A, B, C, D, tol)
    Ar, Br, Cr, Dr = reduce_dual(Ar, Br, Cr, Dr, tol)
    Af, Ef = zero_pencil(Ar, Br, Cr, Dr, tol)

    nr = Af.shape[0]
    if Af.shape[1] != nr:
        raise AnalysisFailure(
            f"Staircase reduction left a non-square pencil {Af.shape}; "
            "the system is numerically close to degenerate"
        )
    if nr == 0:
        return empty

    try:
        alpha, beta = linalg.eigvals(Af, Ef, homogeneous_eigvals=True, check_finite=False)
    except linalg.LinAlgError as err:
        raise AnalysisFailure(f"QZ iteration for transmission zeros did not converge: {err}") from err

    scale = max(1.0, float(np.linalg.norm(_system_matrix(A, B, C, D), 2)))
    with np.errstate(divide="ignore", invalid="ignore"):
        candidates = alpha / beta
    finite = np.isfinite(candidates) & (np.abs(candidates) <= infinity_threshold * scale)

    return {
        "zeros": sort_eigenvalues(candidates[finite]),
        "num_infinite": int(np.sum(~finite)),
        "reduced_order": nr,
        "is_degenerate": False,
    }


def transmission_zeros(
    A: Optional[StateMatrix],
    B: Optional[InputMatrix],
    C: Optional[OutputMatrix],
    D: Optional[FeedthroughMatrix] = None,
    tol: Optional[float] = None,
    infinity_threshold: float = DEFAULT_INFINITY_THRESHOLD,
) -> ZeroArray:
    """
    Transmission zeros of (A, B, C, D).

    See transmission_zeros_info() for arguments. Returns an empty array for
    static gains, for systems without an input or output path, when all
    zeros lie at infinity, and (with a DegenerateSystemWarning) for
    degenerate systems.

    Examples
    --------
    >>> # G(s) = 1 + 1/(s² + 5s + 4) = (s² + 5s + 5) / (s² + 5s + 4)
    >>> A = np.array([[0, 1], [-4, -5]])
    >>> transmission_zeros(A, [[0], [1]], [[1, 0]], [[1]])
    array([-1.38196601+0.j, -3.61803399+0.j])
    """
    return transmission_zeros_info(A, B, C, D, tol, infinity_threshold)["zeros"]


# ============================================================================
# Export
# ============================================================================

__all__ = [
    "default_tolerance",
    "system_pencil",
    "normal_rank",
    "reduce_system",
    "reduce_dual",
    "zero_pencil",
    "transmission_zeros_info",
    "transmission_zeros",
]

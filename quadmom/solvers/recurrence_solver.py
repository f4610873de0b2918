# -*- coding: utf-8 -*-
"""
Quadrature from the three-term recurrence of the orthogonal polynomials of a
moment sequence (QMOM).

The moments are turned into recurrence coefficients (alpha_i, beta_i) by the
Wheeler algorithm, the coefficients into a symmetric tridiagonal Jacobi matrix,
and the Jacobi matrix into a Gauss rule by its eigendecomposition
(Golub-Welsch): eigenvalues are the points, squared first components of the
unit eigenvectors are the weights.
"""
import numpy as np
from scipy.linalg import eigh_tridiagonal
from quadmom.base.base_solver import BaseSolver
from quadmom.errors import ConfigError
from quadmom.solvers.results import Converged, Failed, FailureReason, relative_moment_error
import quadmom.utils.func.jit_qmom as qmom

RECURRENCE_MESSAGES = {
    qmom.RECURRENCE_NEGATIVE_BETA: "negative recurrence coefficient beta_{k}",
    qmom.RECURRENCE_ZERO_PIVOT: "near-zero pivot while computing beta_{k}",
    qmom.RECURRENCE_NONFINITE: "non-finite recurrence coefficient at order {k}",
}


def jacobi_matrix(alpha, beta):
    """
    Dense symmetric tridiagonal Jacobi matrix with diagonal ``alpha`` and
    off-diagonal ``sqrt(beta[1:])``.
    """
    alpha = np.asarray(alpha, dtype=float)
    sqrt_b = np.sqrt(np.asarray(beta, dtype=float)[1:])
    return np.diag(alpha) + np.diag(sqrt_b, -1) + np.diag(sqrt_b, 1)


def gauss_rule_from_recurrence(alpha, beta, mu0=1.0):
    """
    Gauss quadrature rule of a recurrence (Golub-Welsch).

    Parameters
    ----------
    alpha : array-like
        Diagonal recurrence coefficients alpha_0 ... alpha_{p-1}.
    beta : array-like
        Recurrence coefficients beta_0 ... beta_{p-1}; beta_0 is ignored and
        beta_1 ... beta_{p-1} must be non-negative.
    mu0 : float, optional
        Zeroth moment (total mass) of the measure.

    Returns
    -------
    tuple
        ``(x, w)`` points sorted ascending and the corresponding weights.
    """
    alpha = np.asarray(alpha, dtype=float)
    beta = np.asarray(beta, dtype=float)
    if len(alpha) == 1:
        return alpha.copy(), np.array([mu0], dtype=float)
    x, v = eigh_tridiagonal(alpha, np.sqrt(beta[1:]))
    # eigh_tridiagonal returns ascending eigenvalues with unit eigenvectors
    w = mu0 * v[0, :]**2
    return x, w


class RecurrenceQuadratureSolver(BaseSolver):
    """
    Recover a ``p``-point Gauss rule from ``2p-1`` moments via the recurrence
    coefficients of the associated orthogonal polynomials.

    Deterministic: identical moments always give identical output.

    Parameters
    ----------
    load_attr : bool, optional
        Whether to load attributes from a configuration file (default: False)
    config_path : str, optional
        Path to configuration file (default: the bundled harness_config.py)
    **params
        Direct overrides, e.g. ``use_central=True``.

    Attributes
    ----------
    pivot_tol : float
        Relative size below which a Wheeler pivot counts as zero.
    weight_tol : float
        Allowed deviation of the weight sum from one.
    use_central : bool
        Shift to central moments before the recurrence and back afterwards.
    """
    config_section = "recurrence_params"
    positive_params = ("weight_tol",)

    def __init__(self, load_attr=False, config_path=None, **params):
        self._init_base_parameters()

        self.pivot_tol = 1e-10                # Relative zero-pivot threshold in Wheeler algorithm [-]
        self.weight_tol = 1e-8                # Allowed deviation of sum(weights) from 1 [-]
        self.use_central = False              # Flag for using central moments

        if load_attr:
            self._load_attributes(config_path)
        self._set_params(params)
        self._check_params()

    def _check_params(self):
        super()._check_params()
        if not 0 <= self.pivot_tol < 1:
            raise ConfigError(f"pivot_tol must lie in [0, 1), got {self.pivot_tol}.")

    def recurrence(self, full_moments, p):
        """
        Recurrence coefficients of ``full_moments = [1, nu_1, ..., nu_{2p-1}]``.

        Returns
        -------
        tuple
            ``(alpha, beta, shift, status, n_valid)``; ``shift`` must be added
            to the Gauss points when central moments were used.
        """
        shift = 0.0
        mom = full_moments
        if self.use_central:
            shift = full_moments[1] / full_moments[0]
            mom = qmom.shift_moments(full_moments, shift)
        alpha, beta, status, n_valid = qmom.wheeler_recurrence(mom, p, self.pivot_tol)
        return alpha, beta, shift, status, n_valid

    def max_realizable_order(self, moments):
        """
        Largest quadrature order whose recurrence coefficients are all valid.

        Mirrors the achieved order reported by reference QMOM programs, which
        reduce the number of nodes until the moments become realizable.

        Parameters
        ----------
        moments : MomentVector

        Returns
        -------
        int
            Number of leading valid (alpha, beta) pairs, at most
            ``moments.max_order``; 0 if the first moment is already unusable.
        """
        n = moments.max_order
        full = np.concatenate(([1.0], moments.values[:2*n - 1]))
        if n == 0 or not np.all(np.isfinite(full)) or np.any(full <= 0):
            return 0
        _, _, _, _, n_valid = self.recurrence(full, n)
        return int(n_valid)

    def solve(self, moments, p):
        """
        Compute the ``p``-point quadrature rule of the moment vector.

        Parameters
        ----------
        moments : MomentVector
            At least ``2p-1`` positive moments.
        p : int
            Number of quadrature nodes.

        Returns
        -------
        Converged or Failed
            ``Failed`` carries ``ILL_CONDITIONED`` when a recurrence coefficient
            is negative or undefined, ``DEGENERATE_QUADRATURE`` when the Gauss
            rule has non-positive points or weights or its weights do not sum
            to one.

        Raises
        ------
        InvalidInputError
            Before any computation, if moments or ``p`` are invalid.
        """
        full = moments.full(p)
        with np.errstate(over='raise', invalid='raise', divide='raise'):
            try:
                alpha, beta, shift, status, n_valid = self.recurrence(full, p)
            except FloatingPointError as e:
                return Failed(FailureReason.ILL_CONDITIONED, f"Floating point error in recurrence: {e}")
        if status != qmom.RECURRENCE_OK:
            detail = RECURRENCE_MESSAGES[status].format(k=n_valid)
            return Failed(FailureReason.ILL_CONDITIONED,
                          f"Moments are not realizable with p={p}: {detail}.")

        try:
            x, w = gauss_rule_from_recurrence(alpha, beta, mu0=full[0])
        except np.linalg.LinAlgError as e:
            return Failed(FailureReason.DEGENERATE_QUADRATURE, f"Eigendecomposition failed: {e}")
        x = x + shift

        if not (np.all(np.isfinite(x)) and np.all(np.isfinite(w))):
            return Failed(FailureReason.DEGENERATE_QUADRATURE, "Non-finite points or weights.")
        if np.any(x <= 0):
            return Failed(FailureReason.DEGENERATE_QUADRATURE,
                          f"Non-positive quadrature point {x.min():.6g}.")
        if np.any(w <= 0):
            return Failed(FailureReason.DEGENERATE_QUADRATURE,
                          f"Non-positive quadrature weight {w.min():.6g}.")
        if abs(np.sum(w) - 1.0) > self.weight_tol:
            return Failed(FailureReason.DEGENERATE_QUADRATURE,
                          f"Weights sum to {np.sum(w):.12g} instead of 1.")

        return Converged.from_arrays(x, w, iterations=0,
                                     residual_norm=relative_moment_error(x, w, full))

# -*- coding: utf-8 -*-
"""
Direct solution of the moment equations

    sum_i w_i x_i^(k-1) = nu_(k-1),    k = 1 ... 2p,    nu_0 = 1,

for ``p`` positive weights and points. The unknowns are searched in log space,
``z = (log w, log x)``, so every iterate maps back to positive values and the
root finder works on an unconstrained problem.
"""
import numpy as np
from scipy import optimize
from quadmom.base.base_solver import BaseSolver
from quadmom.errors import ConfigError, InvalidInputError
from quadmom.solvers.results import Converged, Failed, FailureReason

# scipy.optimize.root methods that use the analytic Jacobian; their iteration cap is maxfev
JACOBIAN_METHODS = ("hybr", "lm")
# Jacobian-free (quasi-Newton) methods; their iteration cap is maxiter
QUASI_NEWTON_METHODS = ("broyden1", "broyden2", "anderson", "linearmixing",
                        "diagbroyden", "excitingmixing", "krylov")


def moment_terms(z, n_moments):
    """Matrix ``T[k, i] = exp(log w_i + k log x_i)`` for ``k = 0 ... n_moments-1``."""
    p = len(z) // 2
    log_w, log_x = z[:p], z[p:]
    k = np.arange(n_moments)
    return np.exp(log_w[None, :] + k[:, None] * log_x[None, :])


def moment_residual(z, moments):
    """
    Residual of the moment equations.

    Parameters
    ----------
    z : numpy.ndarray
        ``(log w_1, ..., log w_p, log x_1, ..., log x_p)``.
    moments : numpy.ndarray
        ``[1, nu_1, ..., nu_{2p-1}]``.

    Returns
    -------
    numpy.ndarray
        ``F_k = sum_i w_i x_i^(k-1) - nu_(k-1)`` for ``k = 1 ... 2p``.
    """
    return moment_terms(z, len(moments)).sum(axis=1) - moments


def moment_jacobian(z, moments):
    """Jacobian of ``moment_residual`` with respect to ``z``."""
    terms = moment_terms(z, len(moments))
    k = np.arange(len(moments))
    return np.hstack((terms, k[:, None] * terms))


def scaled_residual(z, moments):
    """``moment_residual`` divided row-wise by the target moments."""
    return moment_residual(z, moments) / moments


def scaled_jacobian(z, moments):
    return moment_jacobian(z, moments) / moments[:, None]


class NonlinearMomentSolver(BaseSolver):
    """
    Recover a ``p``-point quadrature rule by root finding on the moment equations.

    Parameters are instance attributes with the defaults below. They can be
    overridden by the ``nonlinear_params`` section of a config file
    (``load_attr=True``) and by keyword arguments, in that order.

    Parameters
    ----------
    load_attr : bool, optional
        Whether to load attributes from a configuration file (default: False)
    config_path : str, optional
        Path to configuration file (default: the bundled harness_config.py)
    **params
        Direct overrides, e.g. ``method="broyden1"``.

    Attributes
    ----------
    method : str
        ``scipy.optimize.root`` method (default ``"hybr"``).
    max_iterations : int
        Iteration / function evaluation cap of a single solve.
    tol : float
        Largest relative moment mismatch accepted as converged.
    xtol : float
        Step tolerance handed to the root finder.
    """
    config_section = "nonlinear_params"
    positive_params = ("tol", "xtol")

    def __init__(self, load_attr=False, config_path=None, **params):
        self._init_base_parameters()

        self.method = "hybr"                  # Root-finding method of scipy.optimize.root
        self.tol = 1e-10                      # Largest accepted relative moment mismatch [-]
        self.max_iterations = 200             # Iteration cap per solve [-]
        self.xtol = 1e-13                     # Relative step tolerance of the root finder [-]

        if load_attr:
            self._load_attributes(config_path)
        self._set_params(params)
        self._check_params()

    def _check_params(self):
        super()._check_params()
        if self.method not in JACOBIAN_METHODS + QUASI_NEWTON_METHODS:
            raise ConfigError(f"Unsupported root-finding method '{self.method}'. "
                              f"Supported methods are: {', '.join(JACOBIAN_METHODS + QUASI_NEWTON_METHODS)}.")
        if not _is_positive_int(self.max_iterations):
            raise ConfigError(f"max_iterations must be a positive integer, got {self.max_iterations!r}.")

    def _root_options(self, max_iterations):
        if self.method == "hybr":
            return {"maxfev": max_iterations, "xtol": self.xtol}
        if self.method == "lm":
            return {"maxiter": max_iterations, "xtol": self.xtol, "ftol": self.xtol}
        return {"maxiter": max_iterations, "fatol": self.tol}

    def solve(self, moments, p, initial_weights, initial_points, max_iterations=None):
        """
        Solve the moment equations from the given initial guess.

        Parameters
        ----------
        moments : MomentVector
            At least ``2p-1`` positive moments.
        p : int
            Number of quadrature nodes.
        initial_weights, initial_points : array-like
            ``p`` positive numbers each. The weights need not sum to one.
        max_iterations : int, optional
            Overrides the configured iteration cap for this call.

        Returns
        -------
        Converged or Failed
            ``Failed`` carries ``NON_CONVERGENCE`` or ``NUMERICAL_OVERFLOW``.

        Raises
        ------
        InvalidInputError
            Before any iteration, if moments, ``p`` or the guesses are invalid.
        """
        full = moments.full(p)
        w0 = _check_guess(initial_weights, p, "initial_weights")
        x0 = _check_guess(initial_points, p, "initial_points")
        if max_iterations is None:
            max_iterations = self.max_iterations
        elif not _is_positive_int(max_iterations):
            raise InvalidInputError(f"max_iterations must be a positive integer, got {max_iterations!r}.")

        z0 = np.concatenate((np.log(w0), np.log(x0)))
        jac = scaled_jacobian if self.method in JACOBIAN_METHODS else None

        with np.errstate(over='raise', invalid='raise'):
            try:
                sol = optimize.root(scaled_residual, z0, args=(full,), jac=jac,
                                    method=self.method,
                                    options=self._root_options(max_iterations))
                z = sol.x
                residual = scaled_residual(z, full)
            except (FloatingPointError, OverflowError) as e:
                return Failed(FailureReason.NUMERICAL_OVERFLOW, f"Floating point error during solve: {e}")
            except np.linalg.LinAlgError as e:
                return Failed(FailureReason.NON_CONVERGENCE, f"Linear algebra failure: {e}")
            except ValueError as e:
                return Failed(FailureReason.NON_CONVERGENCE, f"Root finder aborted: {e}")

        if not (np.all(np.isfinite(z)) and np.all(np.isfinite(residual))):
            return Failed(FailureReason.NUMERICAL_OVERFLOW, "Non-finite iterate or residual.")

        error = float(np.max(np.abs(residual)))
        iterations = int(sol.get("nfev", sol.get("nit", 0)))
        if error < self.tol:
            return Converged.from_arrays(np.exp(z[p:]), np.exp(z[:p]),
                                         iterations=iterations, residual_norm=error)
        return Failed(FailureReason.NON_CONVERGENCE,
                      f"Relative residual {error:.3e} above tolerance {self.tol:.1e} "
                      f"after {iterations} iterations ({sol.message}).")


def _is_positive_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool) and value > 0


def _check_guess(values, p, name):
    values = np.asarray(values, dtype=float)
    if values.shape != (p,):
        raise InvalidInputError(f"{name} must hold exactly p={p} values, got shape {values.shape}.")
    if not np.all(np.isfinite(values)) or np.any(values <= 0):
        raise InvalidInputError(f"{name} must be finite and positive.")
    return values

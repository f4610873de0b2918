# -*- coding: utf-8 -*-
"""
Moment sources: functions that turn a histogram, a known quadrature rule or an
analytic count distribution into a ``MomentVector``.

Empirical moments follow the count-data convention

    nu_k = k! * n_{k+1} / n_1,      k >= 1,

where ``n_j`` is the number of items observed exactly ``j`` times. With this
convention a Gamma-Poisson (negative binomial) count distribution of shape 1
produces the moments of an exponential distribution, whose orthogonal
polynomials (Laguerre) are known in closed form.
"""
import numpy as np
import scipy.stats as stats
from scipy.special import factorial, poch
from quadmom.moments.moment_vector import MomentVector
from quadmom.errors import InvalidInputError


def as_histogram(histogram):
    """
    Normalize a histogram to a dict ``{count: frequency}``.

    Accepts a mapping, a sequence of ``(count, frequency)`` pairs or a 2-column
    array. Counts must be positive integers, frequencies non-negative.
    """
    if isinstance(histogram, dict):
        pairs = histogram.items()
    else:
        pairs = np.asarray(histogram, dtype=float)
        if pairs.ndim != 2 or pairs.shape[1] != 2:
            raise InvalidInputError("Histogram must be (count, frequency) pairs.")
    hist = {}
    for count, freq in pairs:
        if count < 1 or int(count) != count:
            raise InvalidInputError(f"Histogram counts must be positive integers, got {count}.")
        if freq < 0 or not np.isfinite(freq):
            raise InvalidInputError(f"Histogram frequency for count {int(count)} must be non-negative.")
        hist[int(count)] = hist.get(int(count), 0.0) + float(freq)
    return hist


def empirical_moments(histogram, n_moments):
    """
    Moments ``nu_1 ... nu_{n_moments}`` of a count histogram.

    Parameters
    ----------
    histogram : dict or array-like
        ``(count, frequency)`` pairs, see ``as_histogram``.
    n_moments : int
        Number of moments to compute (``2p-1`` for ``p`` nodes).

    Returns
    -------
    MomentVector
        Moments together with the observed total (sum of frequencies), the
        number of singletons ``n_1`` and the histogram itself. Counts missing
        from the histogram give zero moments, which solvers reject as invalid.
    """
    hist = as_histogram(histogram)
    n1 = hist.get(1, 0.0)
    if n1 <= 0:
        raise InvalidInputError("Histogram has no singletons (n_1 = 0), moments are undefined.")
    k = np.arange(1, n_moments + 1)
    counts = np.array([hist.get(j + 1, 0.0) for j in k])
    values = factorial(k) * counts / n1
    return MomentVector(values,
                        observed_total=float(sum(hist.values())),
                        singletons=float(n1),
                        histogram=tuple(sorted(hist.items())))


def quadrature_moments(points, weights, n_moments):
    """
    Moments of the discrete measure ``sum_i w_i delta(x - x_i)``.

    Weights are normalized to sum to one, so the result is a valid moment
    vector with ``nu_0 = 1``. Used as exact ground truth for both solvers.
    """
    points = np.asarray(points, dtype=float)
    weights = np.asarray(weights, dtype=float)
    if points.shape != weights.shape or points.ndim != 1:
        raise InvalidInputError("Points and weights must be 1-D arrays of equal length.")
    if np.any(weights <= 0):
        raise InvalidInputError("Quadrature weights must be positive.")
    weights = weights / np.sum(weights)
    k = np.arange(1, n_moments + 1)
    values = np.sum(weights[None, :] * points[None, :] ** k[:, None], axis=1)
    return MomentVector(values)


def gamma_moments(shape, scale, n_moments):
    """Raw moments ``scale^k * Gamma(shape+k) / Gamma(shape)`` of a gamma distribution."""
    k = np.arange(1, n_moments + 1)
    return MomentVector(poch(shape, k) * scale**k)


def gamma_recurrence(shape, scale, p):
    """
    Analytic three-term recurrence of the monic orthogonal polynomials of a
    gamma distribution (scaled generalized Laguerre polynomials).

    Returns
    -------
    tuple
        ``(alpha, beta)`` arrays of length ``p`` with
        ``alpha_n = scale * (2n + shape)`` and
        ``beta_n = scale^2 * n * (n + shape - 1)``; ``beta_0`` is set to 0.
    """
    n = np.arange(p, dtype=float)
    alpha = scale * (2 * n + shape)
    beta = scale**2 * n * (n + shape - 1)
    return alpha, beta


def gamma_poisson_moments(shape, scale, n_moments):
    """
    Expected empirical moments of a Gamma-Poisson count distribution.

    With ``q = scale / (1 + scale)`` the moments are
    ``nu_k = (shape+1)_k / (k+1) * q^k``. For ``shape = 1`` this reduces to
    ``k! q^k``, the moments of an exponential distribution with scale ``q``.
    """
    q = scale / (1.0 + scale)
    k = np.arange(1, n_moments + 1)
    return MomentVector(poch(shape + 1.0, k) / (k + 1) * q**k)


def expected_gamma_poisson_histogram(shape, scale, max_count, n_species=1.0):
    """
    Expected (not sampled) frequencies ``n_j``, ``j = 1 ... max_count``, of a
    Gamma-Poisson population of ``n_species`` items.
    """
    j = np.arange(1, max_count + 1)
    freqs = n_species * stats.nbinom.pmf(j, shape, 1.0 / (1.0 + scale))
    return {int(c): float(f) for c, f in zip(j, freqs)}

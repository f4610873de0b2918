# -*- coding: utf-8 -*-
"""
Compiled kernels for the moment-to-recurrence step of the quadrature method
of moments (QMOM).
"""
import numpy as np
from numba import jit

# Status codes returned by wheeler_recurrence
RECURRENCE_OK = 0
RECURRENCE_NEGATIVE_BETA = 1
RECURRENCE_ZERO_PIVOT = 2
RECURRENCE_NONFINITE = 3


@jit(nopython=True)
def wheeler_recurrence(moments, n, pivot_tol):
    """
    Calculate recurrence coefficients from raw moments with the Wheeler
    (modified Chebyshev) algorithm.

    Parameters:
        moments (numpy.ndarray): Raw moments [M0, M1, ..., M2n-1].
        n (int): Number of quadrature nodes.
        pivot_tol (float): Relative size below which a diagonal entry of the
            modified-moment table counts as zero.

    Returns:
        tuple: (a, b, status, n_valid), the recurrence coefficients, a status
        code (RECURRENCE_*), and the number of leading coefficient pairs that
        were computed before a failure (n if status is RECURRENCE_OK).
    """
    a = np.zeros(n)
    b = np.zeros(n)
    # Row k holds the modified moments sigma_{k-1, l-1}; row 0 stays zero.
    sigma = np.zeros((2*n + 1, 2*n + 1))
    sigma[1, 1:] = moments[:2*n]

    a[0] = moments[1] / moments[0]
    if not np.isfinite(a[0]):
        return a, b, RECURRENCE_NONFINITE, 0

    for k in range(2, n + 1):
        for l in range(k, 2*n - k + 2):
            sigma[k, l] = sigma[k - 1, l + 1] - a[k - 2]*sigma[k - 1, l] - b[k - 2]*sigma[k - 2, l]
        # Size of the terms that cancelled into the new pivot
        magnitude = (abs(sigma[k - 1, k + 1]) + abs(a[k - 2]*sigma[k - 1, k])
                     + abs(b[k - 2]*sigma[k - 2, k]))
        if not np.isfinite(sigma[k, k]):
            return a, b, RECURRENCE_NONFINITE, k - 1
        if abs(sigma[k, k]) <= pivot_tol*magnitude:
            return a, b, RECURRENCE_ZERO_PIVOT, k - 1
        if sigma[k, k] < 0:
            return a, b, RECURRENCE_NEGATIVE_BETA, k - 1
        a[k - 1] = sigma[k, k + 1]/sigma[k, k] - sigma[k - 1, k]/sigma[k - 1, k - 1]
        b[k - 1] = sigma[k, k] / sigma[k - 1, k - 1]
        if not (np.isfinite(a[k - 1]) and np.isfinite(b[k - 1])):
            return a, b, RECURRENCE_NONFINITE, k - 1

    return a, b, RECURRENCE_OK, n


@jit(nopython=True)
def shift_moments(moments, shift):
    """
    Moments of the measure translated by ``-shift``:
    M'_k = sum_j C(k, j) M_j (-shift)^(k-j).

    With shift = M1/M0 this yields central moments.
    """
    n = len(moments)
    shifted = np.zeros(n)
    for k in range(n):
        binom = 1.0
        total = 0.0
        for j in range(k + 1):
            total += binom * moments[j] * (-shift)**(k - j)
            binom = binom * (k - j) / (j + 1)
        shifted[k] = total
    return shifted

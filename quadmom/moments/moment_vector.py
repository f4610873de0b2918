# -*- coding: utf-8 -*-
"""
Raw moment vector consumed by both quadrature solvers.
"""
from dataclasses import dataclass, field
import numpy as np
from quadmom.errors import InvalidInputError


@dataclass(frozen=True, eq=False)
class MomentVector:
    """
    Ordered raw moments ``nu_1 ... nu_m`` of a count distribution.

    The normalization moment ``nu_0 = 1`` is implicit and never stored. The
    vector is read-only: solvers only ever see copies produced by ``full``.

    Parameters
    ----------
    values : array-like
        Moments ``nu_1 ... nu_m``.
    observed_total : float, optional
        Number of distinct observed items, used for the extrapolated estimate.
    singletons : float, optional
        Number of items observed exactly once.
    histogram : tuple of (int, float), optional
        The ``(count, frequency)`` pairs the moments were derived from, if any.
    """
    values: np.ndarray
    observed_total: float = 0.0
    singletons: float = 1.0
    histogram: tuple = field(default=None)

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        if values.ndim != 1:
            raise InvalidInputError(f"Moment vector must be one-dimensional, got shape {values.shape}.")
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    def __len__(self):
        return len(self.values)

    @property
    def max_order(self):
        """Largest quadrature order ``p`` with at least ``2p-1`` stored moments."""
        return (len(self.values) + 1) // 2

    def validate(self, p):
        """
        Check that ``p`` nodes can be requested from these moments.

        Raises
        ------
        InvalidInputError
            If ``p`` is not a positive integer, the vector holds fewer than
            ``2p-1`` moments, or one of the first ``2p-1`` moments is not a
            finite positive number.
        """
        if isinstance(p, bool) or not isinstance(p, (int, np.integer)) or p <= 0:
            raise InvalidInputError(f"Number of quadrature nodes must be a positive integer, got {p!r}.")
        n_required = 2 * p - 1
        if len(self.values) < n_required:
            raise InvalidInputError(
                f"{n_required} moments are required for p={p}, only {len(self.values)} given.")
        used = self.values[:n_required]
        if not np.all(np.isfinite(used)):
            raise InvalidInputError("Moments must be finite.")
        if np.any(used <= 0):
            bad = int(np.argmax(used <= 0)) + 1
            raise InvalidInputError(f"Moments must be positive, nu_{bad} = {used[bad - 1]}.")

    def full(self, p):
        """Return ``[1, nu_1, ..., nu_{2p-1}]`` as a fresh array (length ``2p``)."""
        self.validate(p)
        return np.concatenate(([1.0], self.values[:2 * p - 1]))

    def __repr__(self):
        shown = ", ".join(f"{v:.6g}" for v in self.values[:5])
        tail = ", ..." if len(self.values) > 5 else ""
        return f"MomentVector([{shown}{tail}], n={len(self.values)})"


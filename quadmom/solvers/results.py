# -*- coding: utf-8 -*-
"""
Result containers shared by both moment solvers.

A solve never hands back a bare array: it returns either ``Converged`` with
the recovered quadrature nodes or ``Failed`` with a ``FailureReason``, so the
comparison harness can tell a non-converged run from a valid answer.
"""
from dataclasses import dataclass, field
from enum import Enum
import numpy as np


class FailureReason(str, Enum):
    NON_CONVERGENCE = "NonConvergence"
    NUMERICAL_OVERFLOW = "NumericalOverflow"
    ILL_CONDITIONED = "IllConditioned"
    DEGENERATE_QUADRATURE = "DegenerateQuadrature"


@dataclass(frozen=True)
class QuadratureNode:
    point: float
    weight: float


@dataclass(frozen=True)
class Converged:
    """
    Successful solve.

    Parameters
    ----------
    nodes : tuple of QuadratureNode
        Quadrature nodes sorted ascending by point.
    iterations : int
        Number of function evaluations / iterations used (0 for direct methods).
    residual_norm : float
        Largest relative moment mismatch of the returned rule.
    """
    nodes: tuple
    iterations: int = 0
    residual_norm: float = 0.0

    @property
    def ok(self):
        return True

    @property
    def p(self):
        return len(self.nodes)

    @property
    def points(self):
        return np.array([node.point for node in self.nodes])

    @property
    def weights(self):
        return np.array([node.weight for node in self.nodes])

    def moments(self, n):
        """Return the first ``n`` raw moments ``[m_0, ..., m_{n-1}]`` of the rule."""
        x = self.points
        w = self.weights
        return np.array([np.sum(w * x**k) for k in range(n)])

    def estimate_total(self, observed_total=0.0, singletons=1.0):
        """
        Extrapolated total count: ``observed_total + singletons * sum(w_i / x_i)``.
        """
        return observed_total + singletons * float(np.sum(self.weights / self.points))

    @classmethod
    def from_arrays(cls, points, weights, iterations=0, residual_norm=0.0):
        """Build a result from unsorted arrays, sorting nodes ascending by point."""
        points = np.asarray(points, dtype=float)
        weights = np.asarray(weights, dtype=float)
        idx = np.argsort(points, kind="stable")
        nodes = tuple(QuadratureNode(float(points[i]), float(weights[i])) for i in idx)
        return cls(nodes=nodes, iterations=iterations, residual_norm=float(residual_norm))


@dataclass(frozen=True)
class Failed:
    reason: FailureReason
    message: str = field(default="")

    @property
    def ok(self):
        return False


def relative_moment_error(points, weights, full_moments):
    """Largest ``|sum(w x^k) - m_k| / m_k`` over the supplied moments."""
    points = np.asarray(points, dtype=float)
    weights = np.asarray(weights, dtype=float)
    k = np.arange(len(full_moments))
    reproduced = np.sum(weights[None, :] * points[None, :] ** k[:, None], axis=1)
    return float(np.max(np.abs(reproduced - full_moments) / np.abs(full_moments)))

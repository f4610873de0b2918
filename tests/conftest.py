"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from quadmom.harness.comparison_harness import ComparisonHarness
from quadmom.moments.moment_sources import (empirical_moments, expected_gamma_poisson_histogram,
                                            quadrature_moments)


@pytest.fixture
def two_point_rule():
    """A well-separated 2-point rule and its first three moments."""
    points = np.array([1.0, 4.0])
    weights = np.array([0.3, 0.7])
    return points, weights, quadrature_moments(points, weights, 3)


@pytest.fixture
def three_point_rule():
    points = np.array([0.5, 2.0, 7.0])
    weights = np.array([0.2, 0.5, 0.3])
    return points, weights, quadrature_moments(points, weights, 5)


@pytest.fixture
def gamma_poisson_histogram():
    """Expected frequencies of a shape-1 Gamma-Poisson population (q = 0.8)."""
    return expected_gamma_poisson_histogram(1.0, 4.0, max_count=8, n_species=5000.0)


@pytest.fixture
def gamma_poisson_moments_p2(gamma_poisson_histogram):
    return empirical_moments(gamma_poisson_histogram, 3)


@pytest.fixture
def quiet_harness():
    """Harness with a fixed seed and console output switched off."""
    return ComparisonHarness(config={"harness_params": {"seed": 1234, "verbose": False}})

"""Tests for the Wheeler recurrence and Golub-Welsch quadrature solver."""

import numpy as np
import pytest
from numpy.polynomial.laguerre import laggauss

from quadmom.errors import ConfigError, InvalidInputError
from quadmom.moments.moment_sources import (empirical_moments, gamma_moments, gamma_poisson_moments,
                                            gamma_recurrence, quadrature_moments)
from quadmom.moments.moment_vector import MomentVector
from quadmom.solvers.recurrence_solver import (RecurrenceQuadratureSolver, gauss_rule_from_recurrence,
                                               jacobi_matrix)
from quadmom.solvers.results import FailureReason
from quadmom.utils.func.jit_qmom import shift_moments, wheeler_recurrence, RECURRENCE_OK


class TestGaussRule:

    def test_laguerre_rule(self):
        x, w = gauss_rule_from_recurrence(*gamma_recurrence(1.0, 1.0, 3))
        x_ref, w_ref = laggauss(3)
        np.testing.assert_allclose(x, x_ref, rtol=1e-12)
        np.testing.assert_allclose(w, w_ref, rtol=1e-10)
        np.testing.assert_allclose(x, [0.41577456, 2.29428036, 6.28994508], rtol=1e-7)

    def test_single_node(self):
        x, w = gauss_rule_from_recurrence([2.5], [0.0])
        np.testing.assert_array_equal(x, [2.5])
        np.testing.assert_array_equal(w, [1.0])

    def test_jacobi_matrix_eigenvalues(self):
        alpha, beta = gamma_recurrence(1.0, 1.0, 3)
        J = jacobi_matrix(alpha, beta)
        np.testing.assert_array_equal(J, J.T)
        np.testing.assert_allclose(np.linalg.eigvalsh(J), laggauss(3)[0], rtol=1e-12)


class TestWheelerKernel:

    def test_gamma_recurrence_recovered(self):
        full = np.concatenate(([1.0], gamma_moments(2.5, 0.7, 5).values))
        a, b, status, n_valid = wheeler_recurrence(full, 3, 1e-10)
        alpha, beta = gamma_recurrence(2.5, 0.7, 3)
        assert status == RECURRENCE_OK
        assert n_valid == 3
        np.testing.assert_allclose(a, alpha, rtol=1e-10)
        np.testing.assert_allclose(b[1:], beta[1:], rtol=1e-10)

    def test_shift_to_central_moments(self):
        shifted = shift_moments(np.array([1.0, 2.0, 5.0, 14.0]), 2.0)
        np.testing.assert_allclose(shifted, [1.0, 0.0, 1.0, 14.0 - 3 * 2.0 * 5.0 + 3 * 4.0 * 2.0 - 8.0])


class TestRecurrenceSolver:

    def test_round_trip(self, three_point_rule):
        points, weights, moments = three_point_rule
        result = RecurrenceQuadratureSolver().solve(moments, 3)
        assert result.ok
        assert result.iterations == 0
        np.testing.assert_allclose(result.points, points, rtol=1e-8)
        np.testing.assert_allclose(result.weights, weights, rtol=1e-8)
        assert result.residual_norm < 1e-10

    def test_gamma_poisson_matches_laguerre(self, gamma_poisson_histogram):
        moments = empirical_moments(gamma_poisson_histogram, 5)
        result = RecurrenceQuadratureSolver().solve(moments, 3)
        x_ref, w_ref = laggauss(3)
        assert result.ok
        np.testing.assert_allclose(result.points, 0.8 * x_ref, rtol=1e-6)
        np.testing.assert_allclose(result.weights, w_ref, rtol=1e-6)

    def test_weights_positive_and_normalized(self):
        result = RecurrenceQuadratureSolver().solve(gamma_poisson_moments(2.0, 1.5, 7), 4)
        assert result.ok
        assert np.all(result.weights > 0)
        assert np.all(result.points > 0)
        assert np.sum(result.weights) == pytest.approx(1.0, abs=1e-12)
        assert np.all(np.diff(result.points) > 0)

    def test_single_node_is_mean(self):
        result = RecurrenceQuadratureSolver().solve(MomentVector([3.0]), 1)
        assert result.ok
        assert result.points[0] == 3.0
        assert result.weights[0] == 1.0

    def test_deterministic(self, three_point_rule):
        _, _, moments = three_point_rule
        solver = RecurrenceQuadratureSolver()
        first, second = solver.solve(moments, 3), solver.solve(moments, 3)
        np.testing.assert_array_equal(first.points, second.points)
        np.testing.assert_array_equal(first.weights, second.weights)

    def test_central_moments_give_same_rule(self, three_point_rule):
        _, _, moments = three_point_rule
        raw = RecurrenceQuadratureSolver().solve(moments, 3)
        central = RecurrenceQuadratureSolver(use_central=True).solve(moments, 3)
        assert central.ok
        np.testing.assert_allclose(central.points, raw.points, rtol=1e-8)
        np.testing.assert_allclose(central.weights, raw.weights, rtol=1e-8)

    def test_negative_variance_is_ill_conditioned(self):
        # nu_2 < nu_1^2 cannot come from a positive measure
        result = RecurrenceQuadratureSolver().solve(MomentVector([2.0, 3.0, 5.0]), 2)
        assert not result.ok
        assert result.reason == FailureReason.ILL_CONDITIONED
        assert "beta_1" in result.message

    def test_too_many_nodes_is_ill_conditioned(self, two_point_rule):
        points, weights, _ = two_point_rule
        moments = quadrature_moments(points, weights, 5)
        result = RecurrenceQuadratureSolver().solve(moments, 3)
        assert result.reason == FailureReason.ILL_CONDITIONED

    def test_negative_point_is_degenerate(self):
        moments = quadrature_moments([-1.0, 2.0], [0.5, 0.5], 3)
        result = RecurrenceQuadratureSolver().solve(moments, 2)
        assert result.reason == FailureReason.DEGENERATE_QUADRATURE
        assert "Non-positive quadrature point" in result.message

    def test_invalid_input_raises(self):
        with pytest.raises(InvalidInputError):
            RecurrenceQuadratureSolver().solve(MomentVector([1.0, 0.0, 2.0]), 2)
        with pytest.raises(InvalidInputError):
            RecurrenceQuadratureSolver().solve(MomentVector([1.0, 2.0, 6.0]), 0)


class TestRealizableOrder:

    def test_full_order_for_valid_moments(self):
        assert RecurrenceQuadratureSolver().max_realizable_order(gamma_moments(1.0, 1.0, 7)) == 4

    def test_limited_by_support(self, two_point_rule):
        points, weights, _ = two_point_rule
        moments = quadrature_moments(points, weights, 7)
        assert RecurrenceQuadratureSolver().max_realizable_order(moments) == 2

    def test_unusable_moments(self):
        assert RecurrenceQuadratureSolver().max_realizable_order(MomentVector([-1.0, 2.0, 3.0])) == 0


class TestParameters:

    def test_defaults(self):
        solver = RecurrenceQuadratureSolver()
        assert solver.get_params() == {"pivot_tol": 1e-10, "weight_tol": 1e-8, "use_central": False}

    @pytest.mark.parametrize("params", [{"pivot_tol": 1.0}, {"pivot_tol": -1e-3}, {"weight_tol": 0.0},
                                        {"weight_tol": True}, {"unknown": 1}])
    def test_invalid_parameters(self, params):
        with pytest.raises(ConfigError):
            RecurrenceQuadratureSolver(**params)

"""Tests for the read-only moment vector and its validation."""

import numpy as np
import pytest

from quadmom.errors import InvalidInputError
from quadmom.moments.moment_vector import MomentVector


class TestConstruction:

    def test_values_are_read_only(self):
        source = [1.0, 2.0, 6.0]
        mv = MomentVector(source)
        with pytest.raises(ValueError):
            mv.values[0] = 5.0

    def test_copy_is_independent_of_input(self):
        source = np.array([1.0, 2.0, 6.0])
        mv = MomentVector(source)
        source[0] = 100.0
        assert mv.values[0] == 1.0

    def test_rejects_two_dimensional_input(self):
        with pytest.raises(InvalidInputError):
            MomentVector(np.ones((2, 2)))

    def test_max_order(self):
        assert MomentVector([1.0]).max_order == 1
        assert MomentVector([1.0, 2.0]).max_order == 1
        assert MomentVector([1.0, 2.0, 6.0]).max_order == 2
        assert MomentVector(np.ones(6)).max_order == 3
        assert len(MomentVector(np.ones(6))) == 6

    def test_metadata_defaults(self):
        mv = MomentVector([1.0])
        assert mv.observed_total == 0.0
        assert mv.singletons == 1.0
        assert mv.histogram is None


class TestValidation:

    def test_full_prepends_normalization(self):
        mv = MomentVector([1.0, 2.0, 6.0, 24.0])
        full = mv.full(2)
        np.testing.assert_array_equal(full, [1.0, 1.0, 2.0, 6.0])
        full[1] = -1.0
        assert mv.values[0] == 1.0

    @pytest.mark.parametrize("p", [0, -1, 1.5, True, "2", None])
    def test_invalid_order(self, p):
        with pytest.raises(InvalidInputError):
            MomentVector([1.0, 2.0, 6.0]).validate(p)

    def test_too_few_moments(self):
        with pytest.raises(InvalidInputError, match="5 moments are required"):
            MomentVector([1.0, 2.0, 6.0]).validate(3)

    @pytest.mark.parametrize("values", [[1.0, 0.0, 6.0], [1.0, -2.0, 6.0], [1.0, np.nan, 6.0],
                                        [1.0, np.inf, 6.0]])
    def test_non_positive_or_non_finite_moments(self, values):
        with pytest.raises(InvalidInputError):
            MomentVector(values).validate(2)

    def test_only_used_moments_are_checked(self):
        MomentVector([1.0, 2.0, 6.0, -1.0]).validate(2)

    def test_numpy_integer_order_accepted(self):
        MomentVector([1.0, 2.0, 6.0]).validate(np.int64(2))

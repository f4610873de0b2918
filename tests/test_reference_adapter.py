"""Tests for the exchange formats of the external quadrature program."""

import pytest

from quadmom.errors import InvalidInputError, ReferenceFormatError
from quadmom.moments.reference_adapter import (ReferenceQuadratureResult, format_histogram,
                                               parse_reference_output)


class TestFormatHistogram:

    def test_sorted_tab_separated_lines(self):
        text = format_histogram({3: 2, 1: 10, 2: 4.5})
        assert text == "1\t10\n2\t4.5\n3\t2\n"

    def test_rejects_invalid_histogram(self):
        with pytest.raises(InvalidInputError):
            format_histogram({0: 1})


class TestParseOutput:

    def test_required_fields_extracted(self):
        text = ("sample\tn_points\tquadrature_estimated_unobs\tother\n"
                "S1\t3\t1523.75\tx\n")
        result = parse_reference_output(text)
        assert result == ReferenceQuadratureResult(n_points=3, estimated_unobs=1523.75)

    def test_only_first_row_used(self):
        text = "n_points\tquadrature_estimated_unobs\n2\t10.0\n3\t20.0\n"
        assert parse_reference_output(text).n_points == 2

    def test_header_whitespace_ignored(self):
        text = " n_points \tquadrature_estimated_unobs\n2\t10.0\n"
        assert parse_reference_output(text).estimated_unobs == 10.0

    @pytest.mark.parametrize("text", [
        "",
        "n_points\n3\n",
        "n_points\tquadrature_estimated_unobs\n",
        "n_points\tquadrature_estimated_unobs\nthree\t1.0\n",
        "n_points\tquadrature_estimated_unobs\n3\t\n",
    ])
    def test_unreadable_output(self, text):
        with pytest.raises(ReferenceFormatError):
            parse_reference_output(text)


class TestResult:

    def test_achieved_order(self):
        result = ReferenceQuadratureResult(n_points=2, estimated_unobs=7.0)
        assert result.achieved(2)
        assert not result.achieved(3)

    def test_estimate_total(self):
        assert ReferenceQuadratureResult(3, 7.5).estimate_total(100.0) == 107.5

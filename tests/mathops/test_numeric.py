"""Tests for restricted evaluation and numeric equivalence."""

import math

import pytest

from mathgrade.math.numeric import (
    MIN_VALID_POINTS,
    SAMPLE_POINTS,
    TOLERANCE,
    evaluate,
    numerically_equivalent,
)


class TestEvaluate:
    """Test single-variable evaluation."""

    @pytest.mark.parametrize(
        "expr,x,expected",
        [
            ("2", 5, 2.0),
            ("x+1", 2, 3.0),
            ("X*3", 2, 6.0),
            ("2x", 3, 6.0),
            ("2(x+4)(x+3)", 1, 40.0),
            ("x(x+2)", 2, 8.0),
            ("(x+1)x", 2, 6.0),
            ("(x+1)2", 2, 6.0),
            ("x^2", 3, 9.0),
            ("x**2", 3, 9.0),
            ("x²-1", 3, 8.0),
            ("x³", 2, 8.0),
            ("2^3^2", 0, 512.0),
            ("-x^2", 3, -9.0),
            ("sqrt(x)", 4, 2.0),
            ("2sqrt(x)", 9, 6.0),
            ("1/2", 0, 0.5),
            ("-.5x", 2, -1.0),
            ("10-4-3", 0, 3.0),
        ],
    )
    def test_values(self, expr, x, expected):
        assert evaluate(expr, x) == pytest.approx(expected)

    @pytest.mark.parametrize("expr", ["y+1", "x=0", "2xy", "abs(x)", "x+", "(x+1", "", "x;1"])
    def test_unsupported_input_returns_none(self, expr):
        assert evaluate(expr, 1) is None

    def test_division_by_zero_returns_none(self):
        assert evaluate("1/x", 0) is None

    def test_sqrt_of_negative_returns_none(self):
        assert evaluate("sqrt(x)", -1) is None

    def test_complex_power_returns_none(self):
        assert evaluate("x^0.5", -1) is None

    def test_overflow_returns_none(self):
        assert evaluate("10^10^10", 0) is None

    def test_result_is_finite(self):
        value = evaluate("(x+1)(x-1)", 0.5)
        assert value is not None and math.isfinite(value)


class TestNumericallyEquivalent:
    """Test sampling-based equivalence."""

    def test_sampling_constants(self):
        assert SAMPLE_POINTS == (0, 1, -1, 2, -2, 3, 0.5, -0.5)
        assert MIN_VALID_POINTS == 5
        assert TOLERANCE == 1e-9

    def test_deeper_factoring_is_equivalent(self):
        assert numerically_equivalent("(x-2)(x+2)(x-1)(x+1)", "(x^2-1)(x^2-4)")

    def test_partially_expanded_factor(self):
        assert numerically_equivalent("(x²+9)(x-3)(x+3)", "(x²+9)(x²-9)")

    def test_sign_error_rejected(self):
        assert not numerically_equivalent("(x-1)(x+6)", "(x+1)(x+6)")

    def test_constant_error_rejected(self):
        assert not numerically_equivalent("x²+10x+15", "x²+10x+16")

    def test_too_few_valid_points(self):
        # Defined only for x > 0, which leaves four sample points
        assert not numerically_equivalent("sqrt(x)/sqrt(x)", "1")

    def test_enough_valid_points_despite_gaps(self):
        # Undefined only at x = 0
        assert numerically_equivalent("x/x", "1")

    def test_other_variables_never_equivalent(self):
        assert not numerically_equivalent("y+1", "y+1")

    def test_text_never_equivalent(self):
        assert not numerically_equivalent("binomial", "binomial")

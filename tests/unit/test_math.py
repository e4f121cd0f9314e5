# PATH: tests/unit/test_math.py
"""
Unit tests for core/math.py.
"""

import unittest
from decimal import Decimal

from core.exceptions import ErrorCode, InvalidInputError
from core.math import (
    ceil_div,
    from_base_units,
    percentile,
    percentile_index,
    safe_decimal,
    to_base_units,
)


class TestToBaseUnits(unittest.TestCase):
    """Human amount -> integer base units."""

    def test_exact_amount(self):
        self.assertEqual(to_base_units("1.5", 6), 1_500_000)
        self.assertEqual(to_base_units(Decimal("1.5"), 9), 1_500_000_000)

    def test_truncates_never_rounds_up(self):
        """Extra precision is dropped, not rounded."""
        self.assertEqual(to_base_units("1.999999999", 6), 1_999_999)

    def test_float_goes_through_str(self):
        self.assertEqual(to_base_units(0.1, 6), 100_000)

    def test_zero_decimals(self):
        self.assertEqual(to_base_units("42.9", 0), 42)

    def test_below_one_unit_is_zero(self):
        self.assertEqual(to_base_units("0.0000001", 6), 0)

    def test_negative_decimals_rejected(self):
        with self.assertRaises(InvalidInputError) as ctx:
            to_base_units("1", -1)
        self.assertEqual(ctx.exception.code, ErrorCode.INVALID_INPUT)

    def test_not_a_number_rejected(self):
        with self.assertRaises(InvalidInputError):
            to_base_units("abc", 6)

    def test_infinity_rejected(self):
        with self.assertRaises(InvalidInputError):
            to_base_units("Infinity", 6)


class TestFromBaseUnits(unittest.TestCase):

    def test_round_trip_value(self):
        self.assertEqual(from_base_units(1_500_000, 6), Decimal("1.5"))

    def test_string_input(self):
        self.assertEqual(from_base_units("149850000", 6), Decimal("149.85"))


class TestSafeDecimal(unittest.TestCase):

    def test_none_returns_default(self):
        self.assertEqual(safe_decimal(None), Decimal("0"))
        self.assertEqual(safe_decimal(None, Decimal("7")), Decimal("7"))

    def test_invalid_returns_default(self):
        self.assertEqual(safe_decimal("n/a"), Decimal("0"))

    def test_bool_is_not_a_number(self):
        self.assertEqual(safe_decimal(True), Decimal("0"))

    def test_float_uses_str(self):
        self.assertEqual(safe_decimal(0.1), Decimal("0.1"))


class TestCeilDiv(unittest.TestCase):

    def test_exact(self):
        self.assertEqual(ceil_div(10, 5), 2)

    def test_rounds_up(self):
        self.assertEqual(ceil_div(10_000, 80_000), 1)
        self.assertEqual(ceil_div(11, 5), 3)

    def test_zero_numerator(self):
        self.assertEqual(ceil_div(0, 5), 0)

    def test_non_positive_denominator(self):
        with self.assertRaises(ValueError):
            ceil_div(1, 0)


class TestPercentile(unittest.TestCase):

    def test_index_floor(self):
        self.assertEqual(percentile_index(Decimal("0.25"), 100), 25)
        self.assertEqual(percentile_index(Decimal("0.95"), 100), 95)

    def test_index_clamped(self):
        self.assertEqual(percentile_index(Decimal("0.95"), 1), 0)
        self.assertEqual(percentile_index(Decimal("1"), 4), 3)

    def test_empty_sample(self):
        with self.assertRaises(ValueError):
            percentile_index(Decimal("0.5"), 0)

    def test_value(self):
        samples = [10, 20, 30, 40]
        self.assertEqual(percentile(samples, Decimal("0.5")), 30)
        self.assertEqual(percentile(samples, Decimal("0.25")), 20)


if __name__ == "__main__":
    unittest.main()

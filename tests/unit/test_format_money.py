# PATH: tests/unit/test_format_money.py
"""
Unit tests for format_money module.
"""

import unittest
from decimal import Decimal

from core.format_money import (
    format_lamports_as_sol,
    format_money,
    format_pct,
    format_usd,
)


class TestFormatMoney(unittest.TestCase):
    """Tests for format_money function."""

    def test_format_string_input(self):
        self.assertEqual(format_money("123.456789"), "123.456789")
        self.assertEqual(format_money("0"), "0.000000")

    def test_format_decimal_input(self):
        self.assertEqual(format_money(Decimal("123.456789")), "123.456789")

    def test_format_int_input(self):
        self.assertEqual(format_money(100), "100.000000")

    def test_format_none_input(self):
        self.assertEqual(format_money(None), "0.000000")

    def test_format_empty_string(self):
        self.assertEqual(format_money(""), "0.000000")
        self.assertEqual(format_money("   "), "0.000000")

    def test_format_invalid_string(self):
        self.assertEqual(format_money("not_a_number"), "0.000000")

    def test_format_custom_decimals(self):
        self.assertEqual(format_money("123.456", decimals=2), "123.46")
        self.assertEqual(format_money("123.456", decimals=0), "123")

    def test_round_half_up(self):
        self.assertEqual(format_money("0.005", decimals=2), "0.01")

    def test_bool_input(self):
        self.assertEqual(format_money(True, decimals=0), "1")


class TestFormatLamports(unittest.TestCase):

    def test_base_fee(self):
        self.assertEqual(format_lamports_as_sol(5000), "0.000005000 SOL")

    def test_one_sol(self):
        self.assertEqual(format_lamports_as_sol(1_000_000_000), "1.000000000 SOL")

    def test_zero(self):
        self.assertEqual(format_lamports_as_sol(0), "0.000000000 SOL")


class TestFormatUsd(unittest.TestCase):

    def test_cents(self):
        self.assertEqual(format_usd(Decimal("0.13875")), "$0.14")

    def test_none(self):
        self.assertEqual(format_usd(None), "$0.00")


class TestFormatPct(unittest.TestCase):

    def test_three_decimals(self):
        self.assertEqual(format_pct("0.1049"), "0.105%")


if __name__ == "__main__":
    unittest.main()

# PATH: tests/unit/test_core_models.py
"""
Unit tests for core models and exceptions.
"""

import dataclasses
import unittest
from decimal import Decimal

from core.constants import SYNTHETIC_ROUTE_LABEL
from core.exceptions import (
    ErrorCode,
    InvalidInputError,
    MalformedResponseError,
    SwapSimError,
    UpstreamRejectedError,
)
from core.models import (
    Quote,
    RiskBreakdown,
    SimulationFailure,
    SimulationOutcome,
)


class TestQuote(unittest.TestCase):

    def test_default_route_is_synthetic(self):
        quote = Quote("in", "out", 1, 2, Decimal("0"))

        self.assertEqual(quote.route, (SYNTHETIC_ROUTE_LABEL,))
        self.assertEqual(quote.hop_count, 1)

    def test_frozen(self):
        quote = Quote("in", "out", 1, 2, Decimal("0"))
        with self.assertRaises(dataclasses.FrozenInstanceError):
            quote.raw_amount_out = 3

    def test_to_dict_stringifies_amounts(self):
        data = Quote("in", "out", 10**18, 5, Decimal("1.25")).to_dict()

        self.assertEqual(data["raw_amount_in"], "1000000000000000000")
        self.assertEqual(data["reported_price_impact_pct"], "1.25")
        self.assertNotIn("raw", data)


class TestRiskBreakdown(unittest.TestCase):

    def test_total(self):
        self.assertEqual(RiskBreakdown(40, 20, 10).total, 70)


class TestSimulationOutcome(unittest.TestCase):

    def _failure(self, code=ErrorCode.UPSTREAM_UNAVAILABLE):
        return SimulationFailure(code=code, message="m", user_message="u")

    def test_failure_outcome(self):
        outcome = SimulationOutcome(failure=self._failure())

        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.to_dict()["failure"]["code"], "UPSTREAM_UNAVAILABLE")

    def test_requires_exactly_one(self):
        with self.assertRaises(ValueError):
            SimulationOutcome()

    def test_failure_kinds(self):
        self.assertTrue(self._failure(ErrorCode.UPSTREAM_UNAVAILABLE).is_network_error)
        self.assertTrue(self._failure(ErrorCode.MALFORMED_RESPONSE).is_no_route)
        self.assertFalse(self._failure(ErrorCode.UPSTREAM_REJECTED).is_no_route)


class TestExceptions(unittest.TestCase):

    def test_class_codes(self):
        self.assertEqual(InvalidInputError("x").code, ErrorCode.INVALID_INPUT)
        self.assertEqual(MalformedResponseError("x").code, ErrorCode.MALFORMED_RESPONSE)
        self.assertEqual(SwapSimError("x").code, ErrorCode.UNKNOWN)

    def test_explicit_code_overrides(self):
        error = SwapSimError("x", code=ErrorCode.PROBE_UNAVAILABLE)
        self.assertEqual(error.code, ErrorCode.PROBE_UNAVAILABLE)

    def test_str_includes_code(self):
        self.assertEqual(str(InvalidInputError("bad amount")), "[INVALID_INPUT] bad amount")

    def test_rejected_carries_status_and_body(self):
        error = UpstreamRejectedError("failed", status_code=503, body="maintenance", details={"url": "u"})

        self.assertEqual(error.status_code, 503)
        self.assertEqual(error.body, "maintenance")
        self.assertEqual(error.details, {"url": "u", "status_code": 503, "body": "maintenance"})
        self.assertEqual(error.code, ErrorCode.UPSTREAM_REJECTED)

    def test_error_code_is_str(self):
        self.assertEqual(ErrorCode.INVALID_INPUT, "INVALID_INPUT")


if __name__ == "__main__":
    unittest.main()

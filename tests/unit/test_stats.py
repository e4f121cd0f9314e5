# PATH: tests/unit/test_stats.py
"""
Unit tests for strategy/stats.py (usage counters).
"""

import json
from decimal import Decimal

import pytest

from core.constants import CongestionLevel, ExecutionSource, RiskLevel
from core.models import (
    CostBreakdown,
    ExecutionOutcome,
    FeeDistribution,
    Quote,
    RiskAssessment,
    RiskBreakdown,
    SimulationResult,
)
from strategy.stats import SimulationRecord, StatsRecorder, aggregate


def _result(succeeded=True, units=100_000, priority=100_000, level=RiskLevel.LOW, sandwich=False):
    return SimulationResult(
        token_in="SOL",
        token_out="USDC",
        amount_in=Decimal("1"),
        expected_out=Decimal("150"),
        quote=Quote("in", "out", 1, 150, Decimal("0")),
        fees=FeeDistribution(1, 1, 1, 1, 1, 1, 1, CongestionLevel.LOW),
        risk=RiskAssessment(
            score=0,
            level=level,
            sandwich_risk=sandwich,
            frontrun_risk=False,
            estimated_loss=Decimal("0"),
            recommendations=(),
            breakdown=RiskBreakdown(0, 0, 0),
        ),
        execution=ExecutionOutcome(
            succeeded=succeeded,
            compute_units_used=units,
            source=ExecutionSource.LIVE_PROBE,
        ),
        cost=CostBreakdown(5000, priority, 5000 + priority, Decimal("0"), 1),
    )


class TestAggregate:

    def test_empty(self):
        stats = aggregate([])
        assert stats.total_simulations == 0
        assert stats.success_rate == 0.0

    def test_counts(self):
        records = [
            SimulationRecord.from_result(_result(units=100_000, priority=10_000)),
            SimulationRecord.from_result(_result(succeeded=False, units=50_000, priority=20_000)),
            SimulationRecord.from_result(_result(level=RiskLevel.HIGH)),
            SimulationRecord.from_result(None),
        ]

        stats = aggregate(records)

        assert stats.total_simulations == 4
        assert stats.success_rate == 50.0
        assert stats.avg_compute_units == 83_333
        assert stats.avg_priority_fee == 43_333
        assert stats.mev_detected == 1
        assert stats.saved_from_failure == 1

    def test_sandwich_flag_counts_as_mev(self):
        record = SimulationRecord.from_result(_result(sandwich=True))
        assert record.mev_flagged is True


class TestStatsRecorder:

    def test_in_memory(self):
        recorder = StatsRecorder()
        recorder.record_outcome(_result())
        recorder.record_outcome(None)

        stats = recorder.read_stats()
        assert stats.total_simulations == 2
        assert stats.success_rate == 50.0

    def test_jsonl_persistence(self, tmp_path):
        path = tmp_path / "stats" / "usage.jsonl"
        recorder = StatsRecorder(path)

        recorder.record_outcome(_result())
        recorder.record_outcome(_result(succeeded=False))

        lines = path.read_text(encoding="utf-8").strip().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["token_in"] == "SOL"

        reopened = StatsRecorder(path)
        assert reopened.read_stats().total_simulations == 2

    def test_missing_file_is_empty(self, tmp_path):
        recorder = StatsRecorder(tmp_path / "none.jsonl")
        assert recorder.load_records() == []

    @pytest.mark.parametrize("level", [RiskLevel.HIGH, RiskLevel.CRITICAL])
    def test_high_levels_flagged(self, level):
        assert SimulationRecord.from_result(_result(level=level)).mev_flagged is True

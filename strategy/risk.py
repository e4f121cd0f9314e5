"""
strategy/risk.py - MEV risk scoring.

RISK SCORE CONTRACT (pure, deterministic):
==========================================
score = price_impact (<=40) + liquidity (<=30) + size (<=30), so 0..100.

  price impact %   > 5 -> 40, > 3 -> 30, > 1 -> 20, > 0.5 -> 10
  route hops       > 3 -> 30, > 2 -> 20, > 1 -> 10
  trade size       > 100k -> 30, > 50k -> 20, > 10k -> 10

Levels: > 70 CRITICAL, > 45 HIGH, > 20 MEDIUM, else LOW.

Recommendations, independent and in this order:
  score > 45      -> private relay
  impact > 2      -> split the trade
  hops > 2        -> prefer a direct route
  score > 20      -> raise slippage by 0.5%
  none triggered  -> safe to execute

Trade size is compared in input-token face value, not fiat. 100k of a
cheap token scores the same as 100k of an expensive one.
==========================================
"""

from decimal import Decimal
from typing import Sequence, Union

from core.constants import (
    LIQUIDITY_COMPONENT_CAP,
    PRICE_IMPACT_COMPONENT_CAP,
    RECOMMEND_DIRECT_ROUTE,
    RECOMMEND_PRIVATE_RELAY,
    RECOMMEND_RAISE_SLIPPAGE,
    RECOMMEND_SAFE,
    RECOMMEND_SPLIT_TRADE,
    SIZE_COMPONENT_CAP,
    RiskLevel,
)
from core.math import safe_decimal
from core.models import RiskAssessment, RiskBreakdown
from strategy.config import RiskThresholds

Bound = Union[int, Decimal]


def _points_above(value: Bound, table: Sequence[tuple[Bound, int]], cap: int) -> int:
    """Points for the highest bound strictly below value, capped."""
    for bound, points in table:
        if value > bound:
            return min(points, cap)
    return 0


class RiskScorer:
    """
    Scores MEV exposure of a swap. No I/O.

    Usage:
        scorer = RiskScorer(config.risk)
        risk = scorer.score(Decimal("1.2"), Decimal("25000"), 2)
    """

    def __init__(self, thresholds: RiskThresholds | None = None):
        self.thresholds = thresholds or RiskThresholds()

    def breakdown(
        self,
        price_impact_pct: Decimal,
        trade_size: Decimal,
        route_hop_count: int,
    ) -> RiskBreakdown:
        t = self.thresholds
        return RiskBreakdown(
            price_impact=_points_above(price_impact_pct, t.price_impact_points, PRICE_IMPACT_COMPONENT_CAP),
            liquidity=_points_above(route_hop_count, t.hop_points, LIQUIDITY_COMPONENT_CAP),
            size=_points_above(trade_size, t.size_points, SIZE_COMPONENT_CAP),
        )

    def level_for(self, score: int) -> RiskLevel:
        t = self.thresholds
        if score > t.critical_above:
            return RiskLevel.CRITICAL
        if score > t.high_above:
            return RiskLevel.HIGH
        if score > t.medium_above:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def recommendations_for(
        self,
        score: int,
        price_impact_pct: Decimal,
        route_hop_count: int,
    ) -> tuple[str, ...]:
        t = self.thresholds
        recommendations = []
        if score > t.high_above:
            recommendations.append(RECOMMEND_PRIVATE_RELAY)
        if price_impact_pct > t.split_trade_impact_pct:
            recommendations.append(RECOMMEND_SPLIT_TRADE)
        if route_hop_count > t.direct_route_hops:
            recommendations.append(RECOMMEND_DIRECT_ROUTE)
        if score > t.medium_above:
            recommendations.append(RECOMMEND_RAISE_SLIPPAGE)
        if not recommendations:
            recommendations.append(RECOMMEND_SAFE)
        return tuple(recommendations)

    def score(
        self,
        price_impact_pct: Union[Decimal, str, int, float],
        trade_size: Union[Decimal, str, int, float],
        route_hop_count: int,
    ) -> RiskAssessment:
        """
        Score a swap.

        Args:
            price_impact_pct: Price impact in percent (1.5 = 1.5%)
            trade_size: Input amount in input-token units
            route_hop_count: Number of hops in the route

        Returns:
            RiskAssessment with score, level, flags and recommendations
        """
        impact = safe_decimal(price_impact_pct)
        size = safe_decimal(trade_size)
        t = self.thresholds

        breakdown = self.breakdown(impact, size, route_hop_count)
        total = breakdown.total

        return RiskAssessment(
            score=total,
            level=self.level_for(total),
            sandwich_risk=impact > t.sandwich_impact_pct,
            frontrun_risk=size > t.frontrun_size,
            estimated_loss=(impact / Decimal(100)) * size * t.mev_loss_factor,
            recommendations=self.recommendations_for(total, impact, route_hop_count),
            breakdown=breakdown,
        )

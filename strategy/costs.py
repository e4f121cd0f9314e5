"""
strategy/costs.py - Transaction cost estimation.

  compute_unit_price = ceil(priority_fee / max(units, 1))
  total_priority     = compute_unit_price * max(units, 1)
  total_fee          = base_fee * signatures + total_priority
  total_fee_fiat     = total_fee / 1e9 * sol_price_usd

With zero compute units the guard makes compute_unit_price and
total_priority both equal the requested priority fee.

The SOL price is a configured constant, not a live feed.
"""

from decimal import Decimal

from core.constants import LAMPORTS_PER_SOL
from core.format_money import format_lamports_as_sol, format_usd
from core.math import ceil_div
from core.models import CostBreakdown
from strategy.config import EngineConfig


class CostEstimator:
    """Fee breakdown in lamports and fiat."""

    def __init__(self, config: EngineConfig | None = None):
        config = config or EngineConfig()
        self.base_fee_lamports = config.fees.base_fee_lamports * config.fees.signatures
        self.sol_price_usd = config.sol_price_usd

    def estimate(self, compute_units_used: int, priority_fee_lamports: int) -> CostBreakdown:
        """
        Args:
            compute_units_used: Measured or estimated compute units
            priority_fee_lamports: Chosen priority fee (the recommended tier)

        Returns:
            CostBreakdown with raw numbers and display strings
        """
        units = max(compute_units_used, 1)
        priority = max(priority_fee_lamports, 0)

        compute_unit_price = ceil_div(priority, units)
        total_priority = compute_unit_price * units
        total_fee = self.base_fee_lamports + total_priority
        total_fiat = Decimal(total_fee) / Decimal(LAMPORTS_PER_SOL) * self.sol_price_usd

        return CostBreakdown(
            base_fee_lamports=self.base_fee_lamports,
            priority_fee_lamports=total_priority,
            total_fee_lamports=total_fee,
            total_fee_fiat=total_fiat,
            compute_unit_price=compute_unit_price,
            network_fee_display=format_lamports_as_sol(self.base_fee_lamports),
            priority_fee_display=format_lamports_as_sol(total_priority),
            total_display=format_lamports_as_sol(total_fee),
            total_fee_fiat_display=format_usd(total_fiat),
        )

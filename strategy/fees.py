"""
strategy/fees.py - Priority fee market sampling.

FEE DISTRIBUTION CONTRACT:
==========================
- Samples: recent per-slot prioritization fees; non-positive samples are
  discarded, the rest sorted ascending.
- Percentile p (0.25/0.5/0.75/0.95): sorted[floor(p * n)], index clamped.
- recommended == p75.
- No samples, or the RPC call fails: the configured fallback distribution
  is returned verbatim. sample_fees() never raises.
- Congestion: median > high -> HIGH, median > medium -> MEDIUM, else LOW.
- Landing tiers: Economy=p25, Standard=median, Fast=p75, Turbo=p95 with
  fixed illustrative probabilities and latency buckets.
==========================

The distribution is derived fresh on every call; nothing is cached.
"""

from typing import Iterable, Sequence

from chains.providers import SolanaRPCProvider
from core.constants import (
    LANDING_LATENCY_BUCKETS,
    LANDING_PROBABILITIES,
    PERCENTILE_MEDIAN,
    PERCENTILE_P25,
    PERCENTILE_P75,
    PERCENTILE_P95,
    CongestionLevel,
    LandingTierLabel,
)
from core.exceptions import SwapSimError
from core.logging import get_logger
from core.math import percentile
from core.models import FeeDistribution, LandingTier
from strategy.config import FeeConfig

logger = get_logger(__name__)


def classify_congestion(median: int, config: FeeConfig) -> CongestionLevel:
    """Congestion level from the median fee."""
    if median > config.congestion_high_median:
        return CongestionLevel.HIGH
    if median > config.congestion_medium_median:
        return CongestionLevel.MEDIUM
    return CongestionLevel.LOW


def build_landing_tiers(p25: int, median: int, p75: int, p95: int) -> tuple[LandingTier, ...]:
    """Fixed four-tier ladder, cheapest first."""
    fees = {
        LandingTierLabel.ECONOMY: p25,
        LandingTierLabel.STANDARD: median,
        LandingTierLabel.FAST: p75,
        LandingTierLabel.TURBO: p95,
    }
    return tuple(
        LandingTier(
            label=label.value,
            fee_amount=fee,
            landing_probability=LANDING_PROBABILITIES[label],
            estimated_latency=LANDING_LATENCY_BUCKETS[label],
        )
        for label, fee in fees.items()
    )


def fallback_distribution(config: FeeConfig) -> FeeDistribution:
    """The documented default distribution used when no samples exist."""
    fb = config.fallback
    return FeeDistribution(
        min=fb.min,
        p25=fb.p25,
        median=fb.median,
        p75=fb.p75,
        p95=fb.p95,
        max=fb.max,
        recommended=fb.p75,
        congestion_level=classify_congestion(fb.median, config),
        landing_tiers=build_landing_tiers(fb.p25, fb.median, fb.p75, fb.p95),
        sample_count=0,
        is_fallback=True,
    )


def clean_samples(samples: Iterable[int]) -> list[int]:
    """Drop non-positive samples and sort ascending."""
    return sorted(s for s in samples if s > 0)


def distribution_from_samples(samples: Sequence[int], config: FeeConfig) -> FeeDistribution:
    """
    Derive a fee distribution from raw samples.

    Args:
        samples: Raw fee samples in any order
        config: Fee configuration (congestion thresholds, fallback)

    Returns:
        FeeDistribution; the fallback when no positive samples remain
    """
    ordered = clean_samples(samples)
    if not ordered:
        return fallback_distribution(config)

    p25 = percentile(ordered, PERCENTILE_P25)
    median = percentile(ordered, PERCENTILE_MEDIAN)
    p75 = percentile(ordered, PERCENTILE_P75)
    p95 = percentile(ordered, PERCENTILE_P95)

    return FeeDistribution(
        min=ordered[0],
        p25=p25,
        median=median,
        p75=p75,
        p95=p95,
        max=ordered[-1],
        recommended=p75,
        congestion_level=classify_congestion(median, config),
        landing_tiers=build_landing_tiers(p25, median, p75, p95),
        sample_count=len(ordered),
        is_fallback=False,
    )


class FeeMarketSampler:
    """
    Samples the network fee market.

    Usage:
        sampler = FeeMarketSampler(provider, config.fees)
        fees = await sampler.sample_fees()
    """

    def __init__(self, provider: SolanaRPCProvider, config: FeeConfig | None = None):
        self.provider = provider
        self.config = config or FeeConfig()

    async def sample_fees(self) -> FeeDistribution:
        """Fetch recent fees and derive a distribution; never raises."""
        try:
            samples = await self.provider.get_recent_prioritization_fees(
                self.config.lock_accounts
            )
        except SwapSimError as e:
            logger.warning(
                "Fee sampling failed, using fallback distribution",
                extra={"context": {"error_code": e.code.value, "error": e.message}},
            )
            return fallback_distribution(self.config)

        distribution = distribution_from_samples(samples, self.config)

        logger.debug(
            "Fee market sampled",
            extra={"context": {
                "samples": distribution.sample_count,
                "median": distribution.median,
                "recommended": distribution.recommended,
                "congestion": distribution.congestion_level.value,
                "fallback": distribution.is_fallback,
            }},
        )
        return distribution

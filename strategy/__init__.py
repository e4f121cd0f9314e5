"""Strategy package for SWAPSIM: fees, risk, cost and usage stats."""

from strategy.config import EngineConfig, load_engine_config
from strategy.costs import CostEstimator
from strategy.fees import FeeMarketSampler
from strategy.risk import RiskScorer
from strategy.stats import StatsRecorder, UsageStats

__all__ = [
    "EngineConfig",
    "load_engine_config",
    "CostEstimator",
    "FeeMarketSampler",
    "RiskScorer",
    "StatsRecorder",
    "UsageStats",
]

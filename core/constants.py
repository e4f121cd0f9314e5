"""
Constants for SWAPSIM.

Contains enums, network constants and engine defaults. Every default here
can be overridden through EngineConfig (strategy/config.py); modules should
read the config they were constructed with, not these values directly.
"""

from decimal import Decimal
from enum import Enum
from typing import Final, List

# =============================================================================
# NETWORK CONSTANTS (Solana)
# =============================================================================

LAMPORTS_PER_SOL: Final[int] = 1_000_000_000
SOL_DECIMALS: Final[int] = 9

# Fixed network fee charged per signature
BASE_FEE_LAMPORTS_PER_SIGNATURE: Final[int] = 5000

# =============================================================================
# UPSTREAM DEFAULTS
# =============================================================================

DEFAULT_QUOTE_URL = "https://lite-api.jup.ag/swap/v1/quote"
DEFAULT_SWAP_URL = "https://lite-api.jup.ag/swap/v1/swap"
DEFAULT_RPC_URLS: List[str] = ["https://api.mainnet-beta.solana.com"]

DEFAULT_QUOTE_TIMEOUT_SECONDS = 10.0
DEFAULT_BUILD_TIMEOUT_SECONDS = 10.0
DEFAULT_RPC_TIMEOUT_SECONDS = 10.0

DEFAULT_SLIPPAGE_BPS = 50
MAX_SLIPPAGE_BPS = 10_000

# Route label used when the aggregator reports no labelled hops
SYNTHETIC_ROUTE_LABEL = "aggregator"

# =============================================================================
# HEURISTIC EXECUTION DEFAULTS
# =============================================================================

DEFAULT_BASE_COMPUTE_UNITS = 50_000
DEFAULT_PER_HOP_COMPUTE_UNITS = 30_000
DEFAULT_ACCOUNTS_PER_HOP = 3

# =============================================================================
# PRICING
# =============================================================================

# Fixed SOL/USD conversion; not fetched live
DEFAULT_SOL_PRICE_USD = Decimal("150")

# =============================================================================
# FEE MARKET DEFAULTS (micro-lamport units as reported by the RPC)
# =============================================================================

PERCENTILE_P25 = Decimal("0.25")
PERCENTILE_MEDIAN = Decimal("0.5")
PERCENTILE_P75 = Decimal("0.75")
PERCENTILE_P95 = Decimal("0.95")

DEFAULT_CONGESTION_HIGH_MEDIAN = 50_000
DEFAULT_CONGESTION_MEDIUM_MEDIAN = 10_000

FALLBACK_FEE_MIN = 1_000
FALLBACK_FEE_P25 = 1_000
FALLBACK_FEE_MEDIAN = 5_000
FALLBACK_FEE_P75 = 10_000
FALLBACK_FEE_P95 = 50_000
FALLBACK_FEE_MAX = 50_000


class CongestionLevel(str, Enum):
    """Network congestion derived from the median priority fee."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskLevel(str, Enum):
    """MEV risk level derived from the risk score."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ExecutionSource(str, Enum):
    """Which estimator produced an ExecutionOutcome."""
    LIVE_PROBE = "LIVE_PROBE"
    HEURISTIC = "HEURISTIC"


class LandingTierLabel(str, Enum):
    """Priority fee landing tiers, cheapest first."""
    ECONOMY = "Economy"
    STANDARD = "Standard"
    FAST = "Fast"
    TURBO = "Turbo"


# Illustrative landing probabilities per tier (presentation hints)
LANDING_PROBABILITIES = {
    LandingTierLabel.ECONOMY: Decimal("0.25"),
    LandingTierLabel.STANDARD: Decimal("0.50"),
    LandingTierLabel.FAST: Decimal("0.75"),
    LandingTierLabel.TURBO: Decimal("0.95"),
}

# Illustrative latency buckets per tier (not measured)
LANDING_LATENCY_BUCKETS = {
    LandingTierLabel.ECONOMY: "30-60s",
    LandingTierLabel.STANDARD: "10-30s",
    LandingTierLabel.FAST: "5-10s",
    LandingTierLabel.TURBO: "<5s",
}

# =============================================================================
# RISK SCORER DEFAULTS
# =============================================================================

# Component caps sum to 100
PRICE_IMPACT_COMPONENT_CAP = 40
LIQUIDITY_COMPONENT_CAP = 30
SIZE_COMPONENT_CAP = 30

# Share of the price impact assumed extractable by a sandwich
MEV_LOSS_FACTOR = Decimal("0.3")

RECOMMEND_PRIVATE_RELAY = "use a private relay"
RECOMMEND_SPLIT_TRADE = "split the trade"
RECOMMEND_DIRECT_ROUTE = "prefer a direct route"
RECOMMEND_RAISE_SLIPPAGE = "raise slippage tolerance by 0.5%"
RECOMMEND_SAFE = "trade looks safe to execute"

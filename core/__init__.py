"""
core - Core utilities and models for SWAPSIM.

This package contains:
- models.py: Data models (Quote, FeeDistribution, RiskAssessment, SimulationResult)
- constants.py: Enums and network/engine defaults
- exceptions.py: Typed exceptions with error codes
- math.py: Decimal conversions and percentile helpers
- format_money.py: Display formatting for SOL and fiat
- time.py: Timestamps and latency helpers
- logging.py: Structured JSON logging
"""

from core.constants import (
    CongestionLevel,
    ExecutionSource,
    LandingTierLabel,
    RiskLevel,
)
from core.exceptions import (
    ErrorCode,
    InvalidInputError,
    MalformedResponseError,
    ProbeUnavailableError,
    SwapSimError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    CostBreakdown,
    ExecutionOutcome,
    FeeDistribution,
    LandingTier,
    Quote,
    RiskAssessment,
    RiskBreakdown,
    RouteHop,
    SimulationFailure,
    SimulationOutcome,
    SimulationResult,
    Token,
)

__all__ = [
    # Constants
    "CongestionLevel",
    "ExecutionSource",
    "LandingTierLabel",
    "RiskLevel",
    # Exceptions
    "ErrorCode",
    "InvalidInputError",
    "MalformedResponseError",
    "ProbeUnavailableError",
    "SwapSimError",
    "UpstreamRejectedError",
    "UpstreamUnavailableError",
    # Models
    "CostBreakdown",
    "ExecutionOutcome",
    "FeeDistribution",
    "LandingTier",
    "Quote",
    "RiskAssessment",
    "RiskBreakdown",
    "RouteHop",
    "SimulationFailure",
    "SimulationOutcome",
    "SimulationResult",
    "Token",
    # Logging
    "get_logger",
    "setup_logging",
]

"""
Core data models for SWAPSIM.

Every record produced by a simulation is a frozen dataclass: it is created
once per invocation and never mutated afterwards, so results can be handed
to renderers, exporters and stats collectors without defensive copies.

SERIALIZATION CONTRACT:
=======================
to_dict() renders Decimal values as strings and enums by value. Consumers
must treat every numeric field as already computed; nothing downstream
recomputes derived values (fees, scores, display strings).
=======================
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from core.constants import (
    SYNTHETIC_ROUTE_LABEL,
    CongestionLevel,
    ExecutionSource,
    RiskLevel,
)
from core.exceptions import ErrorCode
from core.format_money import format_pct
from core.math import from_base_units


@dataclass(frozen=True)
class Token:
    """SPL token known to the CLI token list."""
    mint: str
    symbol: str
    decimals: int
    name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mint": self.mint,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "name": self.name,
        }


# ============================================================================
# QUOTE
# ============================================================================

@dataclass(frozen=True)
class RouteHop:
    """One hop of an aggregator route."""
    dex_label: str


@dataclass(frozen=True)
class Quote:
    """
    Aggregator quote for a token pair.

    route_plan is never empty: when the aggregator reports no labelled hops
    a single synthetic hop is used instead.
    """
    input_mint: str
    output_mint: str
    raw_amount_in: int
    raw_amount_out: int
    reported_price_impact_pct: Decimal
    route_plan: Tuple[RouteHop, ...] = (RouteHop(SYNTHETIC_ROUTE_LABEL),)
    slippage_bps: int = 0
    latency_ms: int = 0
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def route(self) -> Tuple[str, ...]:
        return tuple(hop.dex_label for hop in self.route_plan)

    @property
    def hop_count(self) -> int:
        return len(self.route_plan)

    def expected_out(self, output_decimals: int) -> Decimal:
        """Output amount in human units."""
        return from_base_units(self.raw_amount_out, output_decimals)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_mint": self.input_mint,
            "output_mint": self.output_mint,
            "raw_amount_in": str(self.raw_amount_in),
            "raw_amount_out": str(self.raw_amount_out),
            "reported_price_impact_pct": str(self.reported_price_impact_pct),
            "route": list(self.route),
            "slippage_bps": self.slippage_bps,
            "latency_ms": self.latency_ms,
        }


# ============================================================================
# FEE MARKET
# ============================================================================

@dataclass(frozen=True)
class LandingTier:
    """Priority fee tier with an illustrative landing probability."""
    label: str
    fee_amount: int
    landing_probability: Decimal
    estimated_latency: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "fee_amount": self.fee_amount,
            "landing_probability": str(self.landing_probability),
            "estimated_latency": self.estimated_latency,
        }


@dataclass(frozen=True)
class FeeDistribution:
    """Distribution of recent priority fees; recommended is always p75."""
    min: int
    p25: int
    median: int
    p75: int
    p95: int
    max: int
    recommended: int
    congestion_level: CongestionLevel
    landing_tiers: Tuple[LandingTier, ...] = ()
    sample_count: int = 0
    is_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "p25": self.p25,
            "median": self.median,
            "p75": self.p75,
            "p95": self.p95,
            "max": self.max,
            "recommended": self.recommended,
            "congestion_level": self.congestion_level.value,
            "landing_tiers": [t.to_dict() for t in self.landing_tiers],
            "sample_count": self.sample_count,
            "is_fallback": self.is_fallback,
        }


# ============================================================================
# RISK
# ============================================================================

@dataclass(frozen=True)
class RiskBreakdown:
    """Per-component risk points (caps 40/30/30)."""
    price_impact: int
    liquidity: int
    size: int

    @property
    def total(self) -> int:
        return self.price_impact + self.liquidity + self.size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "price_impact": self.price_impact,
            "liquidity": self.liquidity,
            "size": self.size,
        }


@dataclass(frozen=True)
class RiskAssessment:
    """MEV exposure estimate for a single swap."""
    score: int
    level: RiskLevel
    sandwich_risk: bool
    frontrun_risk: bool
    estimated_loss: Decimal
    recommendations: Tuple[str, ...]
    breakdown: RiskBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level.value,
            "sandwich_risk": self.sandwich_risk,
            "frontrun_risk": self.frontrun_risk,
            "estimated_loss": str(self.estimated_loss),
            "recommendations": list(self.recommendations),
            "breakdown": self.breakdown.to_dict(),
        }


# ============================================================================
# EXECUTION
# ============================================================================

@dataclass(frozen=True)
class ExecutionOutcome:
    """Measured (live probe) or estimated (heuristic) execution footprint."""
    succeeded: bool
    compute_units_used: int
    execution_logs: Tuple[str, ...] = ()
    accounts_touched: int = 0
    failure_cause: Optional[str] = None
    source: ExecutionSource = ExecutionSource.HEURISTIC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "compute_units_used": self.compute_units_used,
            "execution_logs": list(self.execution_logs),
            "accounts_touched": self.accounts_touched,
            "failure_cause": self.failure_cause,
            "source": self.source.value,
        }


@dataclass(frozen=True)
class CostBreakdown:
    """Network fee breakdown in lamports and fiat."""
    base_fee_lamports: int
    priority_fee_lamports: int
    total_fee_lamports: int
    total_fee_fiat: Decimal
    compute_unit_price: int
    network_fee_display: str = ""
    priority_fee_display: str = ""
    total_display: str = ""
    total_fee_fiat_display: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_fee_lamports": self.base_fee_lamports,
            "priority_fee_lamports": self.priority_fee_lamports,
            "total_fee_lamports": self.total_fee_lamports,
            "total_fee_fiat": str(self.total_fee_fiat),
            "compute_unit_price": self.compute_unit_price,
            "breakdown": {
                "network_fee": self.network_fee_display,
                "priority_fee": self.priority_fee_display,
                "total": self.total_display,
                "total_fiat": self.total_fee_fiat_display,
            },
        }


# ============================================================================
# SIMULATION
# ============================================================================

@dataclass(frozen=True)
class SimulationResult:
    """Composite result of one simulate() call."""
    token_in: str
    token_out: str
    amount_in: Decimal
    expected_out: Decimal
    quote: Quote
    fees: FeeDistribution
    risk: RiskAssessment
    execution: ExecutionOutcome
    cost: CostBreakdown

    @property
    def price_impact_pct(self) -> Decimal:
        return self.quote.reported_price_impact_pct

    @property
    def route(self) -> Tuple[str, ...]:
        return self.quote.route

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_in": self.token_in,
            "token_out": self.token_out,
            "amount_in": str(self.amount_in),
            "expected_out": str(self.expected_out),
            "price_impact_pct": str(self.price_impact_pct),
            "price_impact_display": format_pct(self.price_impact_pct),
            "route": list(self.route),
            "quote": self.quote.to_dict(),
            "priority_fees": self.fees.to_dict(),
            "mev_risk": self.risk.to_dict(),
            "execution": self.execution.to_dict(),
            "cost": self.cost.to_dict(),
        }


@dataclass(frozen=True)
class SimulationFailure:
    """Why a simulation produced no result."""
    code: ErrorCode
    message: str
    user_message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_network_error(self) -> bool:
        return self.code == ErrorCode.UPSTREAM_UNAVAILABLE

    @property
    def is_no_route(self) -> bool:
        return self.code == ErrorCode.MALFORMED_RESPONSE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
        }


@dataclass(frozen=True)
class SimulationOutcome:
    """Either a result or a failure, never both."""
    result: Optional[SimulationResult] = None
    failure: Optional[SimulationFailure] = None

    def __post_init__(self):
        if (self.result is None) == (self.failure is None):
            raise ValueError("SimulationOutcome needs exactly one of result/failure")

    @property
    def ok(self) -> bool:
        return self.result is not None

    def to_dict(self) -> Dict[str, Any]:
        if self.result is not None:
            return {"ok": True, "result": self.result.to_dict()}
        return {"ok": False, "failure": self.failure.to_dict()}

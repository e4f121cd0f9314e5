"""
strategy/config.py - Engine configuration.

All tunable constants of the engine (fees, compute heuristics, risk
thresholds, fiat price, endpoints, timeouts) live in one EngineConfig that
is passed into the components at construction.

Precedence: dataclass defaults < YAML file < environment variables.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from core.constants import (
    BASE_FEE_LAMPORTS_PER_SIGNATURE,
    DEFAULT_ACCOUNTS_PER_HOP,
    DEFAULT_BASE_COMPUTE_UNITS,
    DEFAULT_BUILD_TIMEOUT_SECONDS,
    DEFAULT_CONGESTION_HIGH_MEDIAN,
    DEFAULT_CONGESTION_MEDIUM_MEDIAN,
    DEFAULT_PER_HOP_COMPUTE_UNITS,
    DEFAULT_QUOTE_TIMEOUT_SECONDS,
    DEFAULT_QUOTE_URL,
    DEFAULT_RPC_TIMEOUT_SECONDS,
    DEFAULT_RPC_URLS,
    DEFAULT_SOL_PRICE_USD,
    DEFAULT_SWAP_URL,
    FALLBACK_FEE_MAX,
    FALLBACK_FEE_MEDIAN,
    FALLBACK_FEE_MIN,
    FALLBACK_FEE_P25,
    FALLBACK_FEE_P75,
    FALLBACK_FEE_P95,
    MEV_LOSS_FACTOR,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "engine.yaml"


@dataclass
class EndpointConfig:
    """Upstream service locations."""
    quote_url: str = DEFAULT_QUOTE_URL
    swap_url: str = DEFAULT_SWAP_URL
    rpc_urls: list[str] = field(default_factory=lambda: list(DEFAULT_RPC_URLS))


@dataclass
class TimeoutConfig:
    """Per-call timeouts in seconds. Every external call is bounded."""
    quote_seconds: float = DEFAULT_QUOTE_TIMEOUT_SECONDS
    build_seconds: float = DEFAULT_BUILD_TIMEOUT_SECONDS
    rpc_seconds: float = DEFAULT_RPC_TIMEOUT_SECONDS


@dataclass
class FallbackFees:
    """Fee distribution used when no positive samples are available."""
    min: int = FALLBACK_FEE_MIN
    p25: int = FALLBACK_FEE_P25
    median: int = FALLBACK_FEE_MEDIAN
    p75: int = FALLBACK_FEE_P75
    p95: int = FALLBACK_FEE_P95
    max: int = FALLBACK_FEE_MAX


@dataclass
class FeeConfig:
    """Network fee settings."""
    base_fee_lamports: int = BASE_FEE_LAMPORTS_PER_SIGNATURE
    signatures: int = 1
    congestion_high_median: int = DEFAULT_CONGESTION_HIGH_MEDIAN
    congestion_medium_median: int = DEFAULT_CONGESTION_MEDIUM_MEDIAN
    # Accounts passed to getRecentPrioritizationFees; empty = global fee market
    lock_accounts: list[str] = field(default_factory=list)
    fallback: FallbackFees = field(default_factory=FallbackFees)


@dataclass
class ComputeConfig:
    """Heuristic compute footprint when no live probe is available."""
    base_units: int = DEFAULT_BASE_COMPUTE_UNITS
    per_hop_units: int = DEFAULT_PER_HOP_COMPUTE_UNITS
    accounts_per_hop: int = DEFAULT_ACCOUNTS_PER_HOP


@dataclass
class RiskThresholds:
    """
    RiskScorer thresholds.

    Each list pairs a strict lower bound with the points awarded above it,
    checked from the highest bound down. Trade size is in input-token face
    value (not normalized by price or decimals).
    """
    price_impact_points: list[tuple[Decimal, int]] = field(default_factory=lambda: [
        (Decimal("5"), 40),
        (Decimal("3"), 30),
        (Decimal("1"), 20),
        (Decimal("0.5"), 10),
    ])
    hop_points: list[tuple[int, int]] = field(default_factory=lambda: [
        (3, 30),
        (2, 20),
        (1, 10),
    ])
    size_points: list[tuple[Decimal, int]] = field(default_factory=lambda: [
        (Decimal("100000"), 30),
        (Decimal("50000"), 20),
        (Decimal("10000"), 10),
    ])
    critical_above: int = 70
    high_above: int = 45
    medium_above: int = 20
    sandwich_impact_pct: Decimal = Decimal("1")
    frontrun_size: Decimal = Decimal("10000")
    split_trade_impact_pct: Decimal = Decimal("2")
    direct_route_hops: int = 2
    mev_loss_factor: Decimal = MEV_LOSS_FACTOR


@dataclass
class EngineConfig:
    """Full engine configuration."""
    endpoints: EndpointConfig = field(default_factory=EndpointConfig)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)
    fees: FeeConfig = field(default_factory=FeeConfig)
    compute: ComputeConfig = field(default_factory=ComputeConfig)
    risk: RiskThresholds = field(default_factory=RiskThresholds)
    sol_price_usd: Decimal = DEFAULT_SOL_PRICE_USD


def _points(raw: Any, cast: Any, default: list) -> list:
    """Parse a [[bound, points], ...] list; keeps highest bound first."""
    if not raw:
        return default
    pairs = [(cast(str(bound)), int(points)) for bound, points in raw]
    return sorted(pairs, key=lambda p: p[0], reverse=True)


def _resolve_rpc_urls(urls: list[str]) -> list[str]:
    """Resolve ${HELIUS_API_KEY} placeholders; drop URLs missing their key."""
    api_key = os.getenv("HELIUS_API_KEY", "")
    resolved = []
    for url in urls:
        if "${HELIUS_API_KEY}" in url:
            if not api_key:
                continue
            url = url.replace("${HELIUS_API_KEY}", api_key)
        resolved.append(url)
    return resolved


def _apply_env(config: EngineConfig) -> None:
    """Apply environment overrides (.env supported)."""
    rpc_url = os.getenv("SOLANA_RPC_URL")
    if rpc_url:
        config.endpoints.rpc_urls = [rpc_url] + [
            u for u in config.endpoints.rpc_urls if u != rpc_url
        ]

    jupiter_url = os.getenv("JUPITER_API_URL")
    if jupiter_url:
        base = jupiter_url.rstrip("/")
        config.endpoints.quote_url = f"{base}/quote"
        config.endpoints.swap_url = f"{base}/swap"

    sol_price = os.getenv("SOL_PRICE_USD")
    if sol_price:
        config.sol_price_usd = Decimal(sol_price)

    config.endpoints.rpc_urls = _resolve_rpc_urls(config.endpoints.rpc_urls)


def load_engine_config(
    config_path: Path | None = None,
    use_env: bool = True,
) -> EngineConfig:
    """
    Load engine configuration from YAML file.

    Args:
        config_path: Path to engine.yaml (default: config/engine.yaml)
        use_env: Apply environment variable overrides

    Returns:
        EngineConfig with defaults, file values and overrides applied
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    endpoints_data = data.get("endpoints", {})
    endpoints = EndpointConfig(
        quote_url=endpoints_data.get("quote_url", DEFAULT_QUOTE_URL),
        swap_url=endpoints_data.get("swap_url", DEFAULT_SWAP_URL),
        rpc_urls=list(endpoints_data.get("rpc_urls", DEFAULT_RPC_URLS)),
    )

    timeouts_data = data.get("timeouts", {})
    timeouts = TimeoutConfig(
        quote_seconds=float(timeouts_data.get("quote_seconds", DEFAULT_QUOTE_TIMEOUT_SECONDS)),
        build_seconds=float(timeouts_data.get("build_seconds", DEFAULT_BUILD_TIMEOUT_SECONDS)),
        rpc_seconds=float(timeouts_data.get("rpc_seconds", DEFAULT_RPC_TIMEOUT_SECONDS)),
    )

    fees_data = data.get("fees", {})
    fallback_data = fees_data.get("fallback", {})
    fees = FeeConfig(
        base_fee_lamports=int(fees_data.get("base_fee_lamports", BASE_FEE_LAMPORTS_PER_SIGNATURE)),
        signatures=int(fees_data.get("signatures", 1)),
        congestion_high_median=int(fees_data.get("congestion_high_median", DEFAULT_CONGESTION_HIGH_MEDIAN)),
        congestion_medium_median=int(fees_data.get("congestion_medium_median", DEFAULT_CONGESTION_MEDIUM_MEDIAN)),
        lock_accounts=list(fees_data.get("lock_accounts", [])),
        fallback=FallbackFees(
            min=int(fallback_data.get("min", FALLBACK_FEE_MIN)),
            p25=int(fallback_data.get("p25", FALLBACK_FEE_P25)),
            median=int(fallback_data.get("median", FALLBACK_FEE_MEDIAN)),
            p75=int(fallback_data.get("p75", FALLBACK_FEE_P75)),
            p95=int(fallback_data.get("p95", FALLBACK_FEE_P95)),
            max=int(fallback_data.get("max", FALLBACK_FEE_MAX)),
        ),
    )

    compute_data = data.get("compute", {})
    compute = ComputeConfig(
        base_units=int(compute_data.get("base_units", DEFAULT_BASE_COMPUTE_UNITS)),
        per_hop_units=int(compute_data.get("per_hop_units", DEFAULT_PER_HOP_COMPUTE_UNITS)),
        accounts_per_hop=int(compute_data.get("accounts_per_hop", DEFAULT_ACCOUNTS_PER_HOP)),
    )

    risk_data = data.get("risk", {})
    defaults = RiskThresholds()
    risk = RiskThresholds(
        price_impact_points=_points(risk_data.get("price_impact_points"), Decimal, defaults.price_impact_points),
        hop_points=_points(risk_data.get("hop_points"), int, defaults.hop_points),
        size_points=_points(risk_data.get("size_points"), Decimal, defaults.size_points),
        critical_above=int(risk_data.get("critical_above", defaults.critical_above)),
        high_above=int(risk_data.get("high_above", defaults.high_above)),
        medium_above=int(risk_data.get("medium_above", defaults.medium_above)),
        sandwich_impact_pct=Decimal(str(risk_data.get("sandwich_impact_pct", defaults.sandwich_impact_pct))),
        frontrun_size=Decimal(str(risk_data.get("frontrun_size", defaults.frontrun_size))),
        split_trade_impact_pct=Decimal(str(risk_data.get("split_trade_impact_pct", defaults.split_trade_impact_pct))),
        direct_route_hops=int(risk_data.get("direct_route_hops", defaults.direct_route_hops)),
        mev_loss_factor=Decimal(str(risk_data.get("mev_loss_factor", defaults.mev_loss_factor))),
    )

    config = EngineConfig(
        endpoints=endpoints,
        timeouts=timeouts,
        fees=fees,
        compute=compute,
        risk=risk,
        sol_price_usd=Decimal(str(data.get("pricing", {}).get("sol_price_usd", DEFAULT_SOL_PRICE_USD))),
    )

    if use_env:
        load_dotenv()
        _apply_env(config)

    return config

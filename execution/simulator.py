"""
execution/simulator.py - Swap simulation orchestrator.

SIMULATION CONTRACT:
====================

Interface:
  simulate(input_mint, output_mint, amount_in, input_decimals,
           output_decimals, wallet_address=None, slippage_bps=50)
      -> SimulationResult | None
  simulate_detailed(...) -> SimulationOutcome (result or failure reason)

Sequence:
  1. validate inputs (INVALID_INPUT, before any network call)
  2. quote and fee sampling, concurrently
  3. risk score from reported impact and route length
  4. live probe when a wallet is given, else (or on probe failure) heuristic
  5. cost from compute units and the recommended fee
  6. assemble SimulationResult

Failure policy:
  - Quote-step failures end the simulation: no partial result, a
    SimulationFailure whose code tells network outages
    (UPSTREAM_UNAVAILABLE) apart from "no route" (MALFORMED_RESPONSE)
    and upstream rejections (UPSTREAM_REJECTED).
  - Fee sampling and probe failures are recovered with fallbacks.

Each call is independent: no cache, no lock, no shared counters.
====================
"""

import asyncio
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from chains.providers import SolanaRPCProvider
from core.constants import MAX_SLIPPAGE_BPS
from core.exceptions import ErrorCode, InvalidInputError, SwapSimError
from core.logging import get_logger, log_error, log_simulation
from core.models import (
    ExecutionOutcome,
    Quote,
    SimulationFailure,
    SimulationOutcome,
    SimulationResult,
)
from dex.adapters.jupiter import JupiterQuoteClient
from execution.estimators import HeuristicEstimator, LiveProbe
from strategy.config import EngineConfig
from strategy.costs import CostEstimator
from strategy.fees import FeeMarketSampler
from strategy.risk import RiskScorer

logger = get_logger(__name__)

AmountLike = Union[Decimal, str, int, float]

USER_MESSAGES = {
    ErrorCode.INVALID_INPUT: "Check the selected tokens and the amount.",
    ErrorCode.UPSTREAM_UNAVAILABLE: (
        "Could not reach the quote service. Check your connection and try again."
    ),
    ErrorCode.UPSTREAM_REJECTED: "The quote service rejected the request. Try again later.",
    ErrorCode.MALFORMED_RESPONSE: "No route found for this pair and amount.",
}

GENERIC_USER_MESSAGE = "Simulation unavailable."


def failure_from_error(error: SwapSimError) -> SimulationFailure:
    """Map an engine error to a user-facing failure record."""
    return SimulationFailure(
        code=error.code,
        message=str(error),
        user_message=USER_MESSAGES.get(error.code, GENERIC_USER_MESSAGE),
        details=dict(error.details),
    )


def validate_request(
    input_mint: str,
    output_mint: str,
    amount_in: AmountLike,
    input_decimals: int,
    output_decimals: int,
    slippage_bps: int,
) -> Decimal:
    """
    Validate a simulation request.

    Returns:
        amount_in as Decimal

    Raises:
        InvalidInputError: on any invalid field
    """
    if not isinstance(input_mint, str) or not input_mint.strip():
        raise InvalidInputError("Missing input token mint")
    if not isinstance(output_mint, str) or not output_mint.strip():
        raise InvalidInputError("Missing output token mint")

    try:
        amount = amount_in if isinstance(amount_in, Decimal) else Decimal(str(amount_in))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError(f"Amount is not a number: {amount_in!r}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidInputError(
            f"Amount must be positive, got {amount_in}",
            details={"amount_in": str(amount_in)},
        )

    for name, decimals in (("input", input_decimals), ("output", output_decimals)):
        if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
            raise InvalidInputError(
                f"Invalid {name} token decimals: {decimals!r}",
                details={f"{name}_decimals": decimals},
            )

    if not 0 <= slippage_bps <= MAX_SLIPPAGE_BPS:
        raise InvalidInputError(
            f"Slippage must be within 0..{MAX_SLIPPAGE_BPS} bps, got {slippage_bps}",
            details={"slippage_bps": slippage_bps},
        )

    return amount


class SwapSimulator:
    """
    Public entry point of the engine.

    Usage:
        async with SwapSimulator(load_engine_config()) as simulator:
            result = await simulator.simulate(sol_mint, usdc_mint, "1.5", 9, 6)
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        quote_client: Optional[JupiterQuoteClient] = None,
        provider: Optional[SolanaRPCProvider] = None,
    ):
        self.config = config or EngineConfig()

        self.quote_client = quote_client or JupiterQuoteClient(
            quote_url=self.config.endpoints.quote_url,
            swap_url=self.config.endpoints.swap_url,
            quote_timeout_seconds=self.config.timeouts.quote_seconds,
            build_timeout_seconds=self.config.timeouts.build_seconds,
        )
        self.provider = provider or SolanaRPCProvider(
            rpc_urls=self.config.endpoints.rpc_urls,
            timeout_seconds=self.config.timeouts.rpc_seconds,
        )

        self.fee_sampler = FeeMarketSampler(self.provider, self.config.fees)
        self.risk_scorer = RiskScorer(self.config.risk)
        self.live_probe = LiveProbe(self.quote_client, self.provider)
        self.heuristic = HeuristicEstimator(self.config.compute)
        self.cost_estimator = CostEstimator(self.config)

    async def __aenter__(self) -> "SwapSimulator":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close HTTP clients."""
        await self.quote_client.close()
        await self.provider.close()

    async def _estimate_execution(
        self,
        quote: Quote,
        wallet_address: Optional[str],
    ) -> ExecutionOutcome:
        if wallet_address:
            outcome = await self.live_probe.estimate(quote, wallet_address)
            if outcome is not None:
                return outcome
        return await self.heuristic.estimate(quote)

    async def simulate_detailed(
        self,
        input_mint: str,
        output_mint: str,
        amount_in: AmountLike,
        input_decimals: int,
        output_decimals: int,
        wallet_address: Optional[str] = None,
        slippage_bps: int = 50,
        token_in_symbol: Optional[str] = None,
        token_out_symbol: Optional[str] = None,
    ) -> SimulationOutcome:
        """
        Run one simulation.

        Returns:
            SimulationOutcome holding either the result or the failure reason
        """
        try:
            amount = validate_request(
                input_mint, output_mint, amount_in,
                input_decimals, output_decimals, slippage_bps,
            )
        except InvalidInputError as e:
            log_error(logger, e.code.value, e.message)
            return SimulationOutcome(failure=failure_from_error(e))

        quote_result, fees = await asyncio.gather(
            self.quote_client.get_quote(
                input_mint, output_mint, amount, input_decimals, slippage_bps
            ),
            self.fee_sampler.sample_fees(),
            return_exceptions=True,
        )

        if isinstance(fees, BaseException):
            raise fees
        if isinstance(quote_result, SwapSimError):
            log_error(
                logger,
                quote_result.code.value,
                quote_result.message,
                input_mint=input_mint,
                output_mint=output_mint,
            )
            return SimulationOutcome(failure=failure_from_error(quote_result))
        if isinstance(quote_result, BaseException):
            raise quote_result

        quote: Quote = quote_result

        risk = self.risk_scorer.score(
            quote.reported_price_impact_pct,
            amount,
            quote.hop_count,
        )

        execution = await self._estimate_execution(quote, wallet_address)

        cost = self.cost_estimator.estimate(execution.compute_units_used, fees.recommended)

        result = SimulationResult(
            token_in=token_in_symbol or input_mint,
            token_out=token_out_symbol or output_mint,
            amount_in=amount,
            expected_out=quote.expected_out(output_decimals),
            quote=quote,
            fees=fees,
            risk=risk,
            execution=execution,
            cost=cost,
        )

        log_simulation(
            logger,
            token_in=result.token_in,
            token_out=result.token_out,
            risk_level=risk.level.value,
            execution_source=execution.source.value,
            total_fee_lamports=cost.total_fee_lamports,
            risk_score=risk.score,
            congestion=fees.congestion_level.value,
        )

        return SimulationOutcome(result=result)

    async def simulate(
        self,
        input_mint: str,
        output_mint: str,
        amount_in: AmountLike,
        input_decimals: int,
        output_decimals: int,
        wallet_address: Optional[str] = None,
        slippage_bps: int = 50,
        token_in_symbol: Optional[str] = None,
        token_out_symbol: Optional[str] = None,
    ) -> Optional[SimulationResult]:
        """Run one simulation; None when it could not be completed."""
        outcome = await self.simulate_detailed(
            input_mint,
            output_mint,
            amount_in,
            input_decimals,
            output_decimals,
            wallet_address=wallet_address,
            slippage_bps=slippage_bps,
            token_in_symbol=token_in_symbol,
            token_out_symbol=token_out_symbol,
        )
        return outcome.result

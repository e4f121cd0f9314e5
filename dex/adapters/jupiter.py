"""
dex/adapters/jupiter.py - Jupiter aggregator adapter.

Jupiter routes a swap across Solana DEXes and reports:
- outAmount: expected output in base units
- priceImpactPct: reported price impact
- routePlan: hops, each with swapInfo.label naming the DEX

The same quote payload is posted back to the swap endpoint to obtain a
fully-formed (unsigned) transaction for the live probe.

No retries happen here; retry policy belongs to the caller.
"""

from decimal import Decimal
from typing import Any

import httpx

from core.constants import SYNTHETIC_ROUTE_LABEL
from core.exceptions import (
    InvalidInputError,
    MalformedResponseError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from core.logging import get_logger, log_quote
from core.math import safe_decimal, to_base_units
from core.models import Quote, RouteHop
from core.time import elapsed_ms, monotonic_ms

logger = get_logger(__name__)


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def extract_route(data: dict[str, Any]) -> tuple[RouteHop, ...]:
    """
    Extract ordered DEX labels from a quote response.

    Reads routePlan[*].swapInfo.label (or routePlan[*].label), falling back
    to the legacy routes[0].marketInfos layout. Unlabelled hops are skipped.
    Never returns an empty route.
    """
    labels: list[str] = []

    route_plan = data.get("routePlan")
    if isinstance(route_plan, list):
        for hop in route_plan:
            if not isinstance(hop, dict):
                continue
            swap_info = hop.get("swapInfo")
            label = swap_info.get("label") if isinstance(swap_info, dict) else None
            label = label or hop.get("label")
            if label:
                labels.append(str(label))
    elif isinstance(data.get("routes"), list) and data["routes"]:
        best = data["routes"][0]
        market_infos = best.get("marketInfos") if isinstance(best, dict) else None
        for market in market_infos or []:
            if not isinstance(market, dict):
                continue
            labels.append(str(market.get("label") or market.get("marketName") or "market"))

    if not labels:
        labels = [SYNTHETIC_ROUTE_LABEL]

    return tuple(RouteHop(dex_label=label) for label in labels)


def parse_quote_response(
    data: Any,
    input_mint: str,
    output_mint: str,
    raw_amount_in: int,
    slippage_bps: int,
    latency_ms: int = 0,
) -> Quote:
    """
    Build a Quote from a decoded quote response.

    Raises:
        MalformedResponseError: outAmount is missing or not an integer
    """
    if not isinstance(data, dict):
        raise MalformedResponseError(
            "Quote response is not a JSON object",
            details={"type": type(data).__name__},
        )

    out_raw = data.get("outAmount", data.get("out_amount"))
    if out_raw in (None, ""):
        raise MalformedResponseError(
            "Quote response has no outAmount (no route found)",
            details={"input_mint": input_mint, "output_mint": output_mint, "keys": sorted(data)},
        )
    try:
        raw_amount_out = int(str(out_raw))
    except ValueError:
        raise MalformedResponseError(
            f"Quote outAmount is not an integer: {out_raw!r}",
            details={"out_amount": str(out_raw)},
        )

    impact = data.get("priceImpactPct", data.get("priceImpact"))
    price_impact = safe_decimal(impact)
    if not price_impact.is_finite():
        raise MalformedResponseError(
            f"Quote priceImpactPct is not a finite number: {impact!r}",
            details={"price_impact": str(impact)},
        )

    return Quote(
        input_mint=input_mint,
        output_mint=output_mint,
        raw_amount_in=raw_amount_in,
        raw_amount_out=raw_amount_out,
        reported_price_impact_pct=price_impact,
        route_plan=extract_route(data),
        slippage_bps=slippage_bps,
        latency_ms=latency_ms,
        raw=data,
    )


# =============================================================================
# CLIENT
# =============================================================================

class JupiterQuoteClient:
    """
    Client for the Jupiter quote and swap-build endpoints.

    Usage:
        client = JupiterQuoteClient(quote_url, swap_url)
        quote = await client.get_quote(sol_mint, usdc_mint, Decimal("1.5"), 9, 50)
        tx_b64 = await client.build_swap_transaction(quote, wallet)
    """

    def __init__(
        self,
        quote_url: str,
        swap_url: str,
        quote_timeout_seconds: float = 10.0,
        build_timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.quote_url = quote_url
        self.swap_url = swap_url
        self.quote_timeout_seconds = quote_timeout_seconds
        self.build_timeout_seconds = build_timeout_seconds
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(max(self.quote_timeout_seconds, self.build_timeout_seconds)),
                limits=httpx.Limits(max_connections=10),
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        timeout_seconds: float,
        what: str,
        **kwargs: Any,
    ) -> Any:
        """Send a request and decode JSON, mapping failures to error codes."""
        client = await self._get_client()
        try:
            resp = await client.request(
                method, url, timeout=httpx.Timeout(timeout_seconds), **kwargs
            )
        except httpx.TimeoutException as e:
            raise UpstreamUnavailableError(
                f"Jupiter {what} timed out after {timeout_seconds}s",
                details={"url": url, "error_type": type(e).__name__},
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(
                f"Jupiter {what} request failed: {e}",
                details={"url": url, "error_type": type(e).__name__},
            )

        if not resp.is_success:
            body = resp.text
            raise UpstreamRejectedError(
                f"Jupiter {what} failed: {resp.status_code} {resp.reason_phrase} {body}".strip(),
                status_code=resp.status_code,
                body=body,
                details={"url": url},
            )

        try:
            return resp.json()
        except ValueError:
            raise MalformedResponseError(
                f"Jupiter {what} returned a non-JSON body",
                details={"url": url, "body": resp.text[:200]},
            )

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount_in: Decimal | str | int,
        input_decimals: int,
        slippage_bps: int = 50,
    ) -> Quote:
        """
        Fetch a swap quote.

        Args:
            input_mint: Input token mint
            output_mint: Output token mint
            amount_in: Human-readable input amount (e.g. 1.5 USDC)
            input_decimals: Decimals of the input token
            slippage_bps: Slippage tolerance in basis points

        Returns:
            Quote with route and reported impact

        Raises:
            InvalidInputError: amount truncates to zero base units
            UpstreamUnavailableError: network failure or timeout
            UpstreamRejectedError: non-success status (message has status and body)
            MalformedResponseError: outAmount missing (no route found)
        """
        raw_amount = to_base_units(amount_in, input_decimals)
        if raw_amount <= 0:
            raise InvalidInputError(
                f"Amount {amount_in} is below one base unit at {input_decimals} decimals",
                details={"amount_in": str(amount_in), "decimals": input_decimals},
            )

        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(raw_amount),
            "slippageBps": str(slippage_bps),
            "restrictIntermediateTokens": "true",
        }

        start_ms = monotonic_ms()
        data = await self._request(
            "GET", self.quote_url, self.quote_timeout_seconds, "quote", params=params
        )
        latency_ms = elapsed_ms(start_ms)

        quote = parse_quote_response(
            data,
            input_mint=input_mint,
            output_mint=output_mint,
            raw_amount_in=raw_amount,
            slippage_bps=slippage_bps,
            latency_ms=latency_ms,
        )

        log_quote(
            logger,
            input_mint=input_mint,
            output_mint=output_mint,
            amount_in=raw_amount,
            amount_out=quote.raw_amount_out,
            route=list(quote.route),
            latency_ms=latency_ms,
            price_impact_pct=str(quote.reported_price_impact_pct),
        )

        return quote

    async def build_swap_transaction(self, quote: Quote, user_public_key: str) -> str:
        """
        Request a serialized swap transaction for a quote.

        Returns:
            Base64-encoded unsigned transaction

        Raises:
            Same taxonomy as get_quote; MalformedResponseError when the
            response carries no swapTransaction.
        """
        payload = {
            "quoteResponse": quote.raw,
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": True,
            "dynamicComputeUnitLimit": True,
            "prioritizationFeeLamports": "auto",
        }

        data = await self._request(
            "POST", self.swap_url, self.build_timeout_seconds, "swap build", json=payload
        )

        tx_b64 = data.get("swapTransaction") if isinstance(data, dict) else None
        if not tx_b64:
            raise MalformedResponseError(
                "Swap build response has no swapTransaction",
                details={"keys": sorted(data) if isinstance(data, dict) else []},
            )
        return tx_b64

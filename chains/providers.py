"""
chains/providers.py - Solana JSON-RPC provider with failover.

Provides read-only RPC access with:
- Multiple endpoint failover
- Bounded request timeout
- Connection pooling
- Latency tracking per call

Only two methods are needed by the engine: recent prioritization fees and
transaction simulation. Neither requires a signature or commits state.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from core.exceptions import (
    MalformedResponseError,
    SwapSimError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from core.logging import get_logger
from core.time import elapsed_ms, monotonic_ms

logger = get_logger(__name__)


@dataclass
class RPCResponse:
    """Response from an RPC call."""
    result: Any
    latency_ms: int
    endpoint_used: str


class SolanaRPCProvider:
    """
    Solana RPC provider with failover support.

    Tries endpoints in order until one succeeds. A transport failure or
    timeout on every endpoint raises UpstreamUnavailableError; an endpoint
    that answered with an error raises UpstreamRejectedError.
    """

    def __init__(
        self,
        rpc_urls: list[str],
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.rpc_urls = list(rpc_urls)
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None
        self._request_id = 0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                limits=httpx.Limits(max_connections=10),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def _next_request_id(self) -> int:
        self._request_id += 1
        return self._request_id

    async def call(
        self,
        method: str,
        params: list | None = None,
    ) -> RPCResponse:
        """
        Make an RPC call with failover.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            RPCResponse with result and metadata

        Raises:
            UpstreamUnavailableError: no endpoint could be reached
            UpstreamRejectedError: an endpoint answered with an error
        """
        if not self.rpc_urls:
            raise UpstreamUnavailableError(
                "No RPC endpoints configured",
                details={"method": method},
            )

        client = await self._get_client()
        last_error: SwapSimError | None = None

        for url in self.rpc_urls:
            payload = {
                "jsonrpc": "2.0",
                "id": self._next_request_id(),
                "method": method,
                "params": params or [],
            }

            start_ms = monotonic_ms()

            try:
                resp = await client.post(url, json=payload)
            except httpx.TimeoutException:
                latency_ms = elapsed_ms(start_ms)
                last_error = UpstreamUnavailableError(
                    f"RPC timeout after {latency_ms}ms",
                    details={"url": url, "method": method},
                )
                logger.debug(f"RPC timeout for {url}: {latency_ms}ms")
                continue
            except httpx.HTTPError as e:
                last_error = UpstreamUnavailableError(
                    f"RPC request failed: {e}",
                    details={"url": url, "method": method, "error_type": type(e).__name__},
                )
                logger.debug(f"RPC failed for {url}: {e}")
                continue

            latency_ms = elapsed_ms(start_ms)

            if resp.status_code >= 400:
                last_error = UpstreamRejectedError(
                    f"RPC {method} returned HTTP {resp.status_code}: {resp.text[:200]}",
                    status_code=resp.status_code,
                    body=resp.text,
                    details={"url": url, "method": method},
                )
                logger.debug(f"RPC HTTP {resp.status_code} from {url}")
                continue

            try:
                body = resp.json()
            except ValueError:
                last_error = UpstreamRejectedError(
                    f"RPC {method} returned a non-JSON body",
                    status_code=resp.status_code,
                    body=resp.text,
                    details={"url": url, "method": method},
                )
                continue

            if not isinstance(body, dict):
                last_error = UpstreamRejectedError(
                    f"RPC {method} returned a non-object body",
                    status_code=resp.status_code,
                    body=resp.text,
                    details={"url": url, "method": method},
                )
                continue

            if "error" in body:
                error = body["error"]
                error_msg = error.get("message", str(error)) if isinstance(error, dict) else str(error)
                last_error = UpstreamRejectedError(
                    f"RPC error: {error_msg}",
                    status_code=resp.status_code,
                    body=str(error),
                    details={"url": url, "method": method},
                )
                logger.debug(f"RPC error from {url}: {error_msg}")
                continue

            return RPCResponse(
                result=body.get("result"),
                latency_ms=latency_ms,
                endpoint_used=url,
            )

        logger.warning(
            f"All RPC endpoints failed for {method}",
            extra={"context": {
                "method": method,
                "endpoints_tried": len(self.rpc_urls),
                "last_error": str(last_error),
            }},
        )
        raise last_error

    async def get_recent_prioritization_fees(
        self,
        lock_accounts: list[str] | None = None,
    ) -> list[int]:
        """
        Recent per-slot prioritization fees (micro-lamports per CU).

        Args:
            lock_accounts: Writable accounts to scope the fee market to

        Returns:
            Raw fee samples in the order the RPC returned them
        """
        response = await self.call(
            "getRecentPrioritizationFees",
            [list(lock_accounts or [])],
        )
        result = response.result
        if result is None:
            return []
        if not isinstance(result, list):
            raise MalformedResponseError(
                "getRecentPrioritizationFees returned a non-list result",
                details={"endpoint": response.endpoint_used, "type": type(result).__name__},
            )

        samples = []
        for item in result:
            if not isinstance(item, dict):
                continue
            fee = item.get("prioritizationFee")
            if isinstance(fee, int):
                samples.append(fee)
        return samples

    async def simulate_transaction(
        self,
        transaction_base64: str,
        sig_verify: bool = False,
        replace_recent_blockhash: bool = True,
        commitment: str = "processed",
    ) -> dict[str, Any]:
        """
        Dry-run a serialized transaction.

        Signature verification is disabled and the blockhash replaced, so an
        unsigned transaction built for any wallet can be simulated.

        Returns:
            The `value` object of the simulation response
        """
        response = await self.call(
            "simulateTransaction",
            [
                transaction_base64,
                {
                    "encoding": "base64",
                    "sigVerify": sig_verify,
                    "replaceRecentBlockhash": replace_recent_blockhash,
                    "commitment": commitment,
                },
            ],
        )
        result = response.result
        if not isinstance(result, dict) or not isinstance(result.get("value"), dict):
            raise UpstreamRejectedError(
                "simulateTransaction returned no value",
                status_code=200,
                body=str(result)[:500],
            )
        return result["value"]

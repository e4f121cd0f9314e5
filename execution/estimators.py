"""
execution/estimators.py - Execution footprint estimators.

Two implementations of one capability:

  LiveProbe           builds the real swap transaction, deserializes it and
                      dry-runs it (no signature, no state committed).
                      Best-effort: any failure returns None.
  HeuristicEstimator  base_units + hops * per_hop_units, hops * 3 accounts.

The orchestrator picks LiveProbe when a wallet address is given and falls
back to the heuristic when it returns None. Both produce the same
ExecutionOutcome shape.
"""

import base64
import binascii
from abc import ABC, abstractmethod
from typing import Any, Optional

from solders.transaction import VersionedTransaction

from chains.providers import SolanaRPCProvider
from core.constants import ExecutionSource
from core.exceptions import ProbeUnavailableError, SwapSimError
from core.logging import get_logger
from core.models import ExecutionOutcome, Quote
from dex.adapters.jupiter import JupiterQuoteClient
from strategy.config import ComputeConfig

logger = get_logger(__name__)


class ExecutionEstimator(ABC):
    """Estimates compute usage and success of a quoted swap."""

    source: ExecutionSource

    @abstractmethod
    async def estimate(
        self,
        quote: Quote,
        wallet_address: Optional[str] = None,
    ) -> Optional[ExecutionOutcome]:
        """Return an outcome, or None when no estimate is available."""


class HeuristicEstimator(ExecutionEstimator):
    """Route-length based estimate; always available."""

    source = ExecutionSource.HEURISTIC

    def __init__(self, config: ComputeConfig | None = None):
        self.config = config or ComputeConfig()

    def estimate_for_hops(self, hop_count: int) -> ExecutionOutcome:
        return ExecutionOutcome(
            succeeded=True,
            compute_units_used=self.config.base_units + hop_count * self.config.per_hop_units,
            execution_logs=(),
            accounts_touched=hop_count * self.config.accounts_per_hop,
            failure_cause=None,
            source=self.source,
        )

    async def estimate(
        self,
        quote: Quote,
        wallet_address: Optional[str] = None,
    ) -> ExecutionOutcome:
        return self.estimate_for_hops(quote.hop_count)


def decode_transaction(tx_base64: str) -> VersionedTransaction:
    """
    Decode a base64 wire transaction.

    Raises:
        ProbeUnavailableError: not base64 or not a valid transaction
    """
    try:
        raw = base64.b64decode(tx_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProbeUnavailableError(f"Swap transaction is not valid base64: {e}")
    try:
        return VersionedTransaction.from_bytes(raw)
    except Exception as e:
        # solders raises its own error types for malformed wire data
        raise ProbeUnavailableError(
            f"Swap transaction could not be deserialized: {e}",
            details={"error_type": type(e).__name__, "size": len(raw)},
        )


def outcome_from_simulation(
    value: dict[str, Any],
    transaction: VersionedTransaction,
) -> ExecutionOutcome:
    """
    Map a simulateTransaction `value` to an ExecutionOutcome.

    accounts_touched is the length of the returned accounts list when the
    RPC includes one, otherwise the message's static account keys.
    """
    err = value.get("err")
    accounts = value.get("accounts")
    if isinstance(accounts, list):
        accounts_touched = len(accounts)
    else:
        accounts_touched = len(transaction.message.account_keys)

    return ExecutionOutcome(
        succeeded=err is None,
        compute_units_used=int(value.get("unitsConsumed") or 0),
        execution_logs=tuple(value.get("logs") or ()),
        accounts_touched=accounts_touched,
        failure_cause=None if err is None else str(err),
        source=ExecutionSource.LIVE_PROBE,
    )


class LiveProbe(ExecutionEstimator):
    """
    Dry-runs the actual swap transaction against the network.

    Usage:
        probe = LiveProbe(jupiter_client, rpc_provider)
        outcome = await probe.estimate(quote, wallet)   # None on any failure
    """

    source = ExecutionSource.LIVE_PROBE

    def __init__(self, quote_client: JupiterQuoteClient, provider: SolanaRPCProvider):
        self.quote_client = quote_client
        self.provider = provider

    async def probe(self, quote: Quote, wallet_address: str) -> ExecutionOutcome:
        """
        Build, decode and simulate. Raises on failure.

        Raises:
            ProbeUnavailableError: wrapping any build/decode/simulate error
        """
        try:
            tx_base64 = await self.quote_client.build_swap_transaction(quote, wallet_address)
            transaction = decode_transaction(tx_base64)
            wire = base64.b64encode(bytes(transaction)).decode("ascii")
            value = await self.provider.simulate_transaction(wire)
        except ProbeUnavailableError:
            raise
        except SwapSimError as e:
            raise ProbeUnavailableError(
                f"Probe failed: {e.message}",
                details={"cause_code": e.code.value, **e.details},
            )
        return outcome_from_simulation(value, transaction)

    async def estimate(
        self,
        quote: Quote,
        wallet_address: Optional[str] = None,
    ) -> Optional[ExecutionOutcome]:
        """Best-effort probe; None means fall back to the heuristic."""
        if not wallet_address:
            return None
        try:
            outcome = await self.probe(quote, wallet_address)
        except ProbeUnavailableError as e:
            logger.warning(
                "Live probe unavailable, falling back to heuristic",
                extra={"context": {"error_code": e.code.value, "error": e.message}},
            )
            return None
        except Exception as e:
            # Best-effort path: nothing may escape this boundary
            logger.warning(
                "Live probe crashed, falling back to heuristic",
                extra={"context": {"error_type": type(e).__name__, "error": str(e)}},
            )
            return None

        logger.debug(
            "Live probe completed",
            extra={"context": {
                "succeeded": outcome.succeeded,
                "compute_units": outcome.compute_units_used,
                "accounts": outcome.accounts_touched,
            }},
        )
        return outcome

"""
chains/ - Blockchain interaction layer.

Modules:
- providers: Solana JSON-RPC provider with failover
"""

from chains.providers import (
    RPCResponse,
    SolanaRPCProvider,
)

__all__ = [
    "RPCResponse",
    "SolanaRPCProvider",
]

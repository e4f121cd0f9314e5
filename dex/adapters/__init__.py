"""
dex/adapters/ - Aggregator quoting adapters.

Adapters:
- jupiter: Jupiter quote and swap-build client
"""

from dex.adapters.jupiter import (
    JupiterQuoteClient,
    extract_route,
    parse_quote_response,
)

__all__ = [
    "JupiterQuoteClient",
    "extract_route",
    "parse_quote_response",
]

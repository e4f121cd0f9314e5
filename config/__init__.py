"""
Configuration loading utilities for SWAPSIM.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.models import Token


CONFIG_DIR = Path(__file__).parent


def load_yaml(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory

    Returns:
        Parsed YAML as dict
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_tokens() -> Dict[str, Token]:
    """Load the well-known token list, keyed by upper-case symbol."""
    raw = load_yaml("tokens.yaml")
    return {
        symbol.upper(): Token(
            mint=entry["mint"],
            symbol=symbol.upper(),
            decimals=int(entry["decimals"]),
            name=entry.get("name", ""),
        )
        for symbol, entry in raw.items()
    }


def get_token(symbol_or_mint: str) -> Optional[Token]:
    """
    Look up a token by symbol (case-insensitive) or mint address.

    Returns:
        Token or None if not in the list
    """
    tokens = load_tokens()
    token = tokens.get(symbol_or_mint.upper())
    if token is not None:
        return token
    for candidate in tokens.values():
        if candidate.mint == symbol_or_mint:
            return candidate
    return None

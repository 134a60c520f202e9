"""Token registry: the only translation between tickers and addresses.

Built once at process start and read-only afterwards, so concurrent readers
need no locking.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Iterator
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import structlog

from nlswap.constants import DEFAULT_TOKEN_DECIMALS
from nlswap.models.tokens import Token
from nlswap.models.types import is_valid_address, normalize_address
from nlswap.tokens.defaults import DEFAULT_TOKENS

logger = structlog.get_logger()


class TokenRegistry:
    """Immutable bidirectional mapping between symbols and token addresses.

    Symbol lookup is case-sensitive and exact; address lookup ignores hex
    case.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        """Build the registry.

        Args:
            tokens: Tokens to register

        Raises:
            ValueError: On a duplicate symbol or duplicate address
        """
        by_symbol: dict[str, Token] = {}
        by_address: dict[str, Token] = {}
        for token in tokens:
            address = normalize_address(token.address)
            if token.symbol in by_symbol:
                raise ValueError(f"Duplicate token symbol: {token.symbol}")
            if address in by_address:
                raise ValueError(
                    f"Duplicate token address {address} for {token.symbol} "
                    f"and {by_address[address].symbol}"
                )
            by_symbol[token.symbol] = token
            by_address[address] = token

        self._by_symbol = MappingProxyType(by_symbol)
        self._by_address = MappingProxyType(by_address)

    def resolve(self, symbol: str) -> Token | None:
        """Find a token by its exact ticker symbol."""
        return self._by_symbol.get(symbol)

    def lookup_address(self, address: str) -> Token | None:
        """Find a token by address (any hex case)."""
        if not isinstance(address, str):
            return None
        return self._by_address.get(normalize_address(address))

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(self._by_symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._by_symbol

    def __iter__(self) -> Iterator[Token]:
        return iter(self._by_symbol.values())

    def __len__(self) -> int:
        return len(self._by_symbol)

    @classmethod
    def from_pairs(cls, entries: Iterable[tuple[str, str]], decimals: int = DEFAULT_TOKEN_DECIMALS) -> TokenRegistry:
        """Build from (symbol, address) pairs sharing one decimals value."""
        return cls(Token(symbol=s, address=a, decimals=decimals) for s, a in entries)

    @classmethod
    def from_file(cls, path: str | Path) -> TokenRegistry:
        """Load a JSON list of {"symbol", "address", "decimals"?} objects.

        Raises:
            ValueError: If the file is not a list of valid token entries
        """
        with open(path) as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise ValueError(f"Token file must contain a JSON list: {path}")

        tokens = []
        for i, entry in enumerate(data):
            if not isinstance(entry, dict) or not is_valid_address(entry.get("address", "")):
                raise ValueError(f"Invalid token entry at index {i} in {path}")
            tokens.append(Token.model_validate(entry))
        return cls(tokens)


@lru_cache(maxsize=1)
def get_default_registry() -> TokenRegistry:
    """Registry for this process, built on first use.

    Reads NLSWAP_TOKENS_FILE if set, otherwise the built-in devnet table.
    """
    tokens_file = os.environ.get("NLSWAP_TOKENS_FILE")
    if tokens_file:
        registry = TokenRegistry.from_file(tokens_file)
        logger.info("token_registry_loaded", source=tokens_file, tokens=len(registry))
    else:
        registry = TokenRegistry.from_pairs(DEFAULT_TOKENS)
        logger.info("token_registry_loaded", source="builtin", tokens=len(registry))
    return registry

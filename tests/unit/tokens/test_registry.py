"""Tests for the token registry."""

import json

import pytest

from nlswap.models import Token
from nlswap.tokens import TokenRegistry, get_default_registry
from nlswap.tokens.defaults import DEFAULT_TOKENS
from tests.helpers import TOKEN_A, TOKEN_AX


class TestTokenRegistry:
    """Tests for lookups in both directions."""

    def test_resolve_symbol(self, registry):
        """Symbols resolve to their tokens."""
        token = registry.resolve("A")
        assert token is not None
        assert token.address == TOKEN_A

    def test_resolve_is_exact(self, registry):
        """Symbol lookup is case-sensitive."""
        assert registry.resolve("ax") is None
        assert registry.resolve("AX").address == TOKEN_AX

    def test_unknown_symbol(self, registry):
        """Unregistered symbols resolve to None."""
        assert registry.resolve("BTC") is None

    def test_lookup_address_any_case(self, registry):
        """Address lookup ignores hex case."""
        assert registry.lookup_address(TOKEN_A.upper().replace("0X", "0x")).symbol == "A"

    def test_lookup_unknown_address(self, registry):
        """Unknown addresses give None."""
        assert registry.lookup_address("0x" + "00" * 20) is None

    def test_container_protocol(self, registry):
        """Registry supports len, in and iteration."""
        assert len(registry) == len(DEFAULT_TOKENS)
        assert "A" in registry
        assert "BTC" not in registry
        assert [t.symbol for t in registry] == list(registry.symbols)

    def test_duplicate_symbol_rejected(self):
        """A symbol may be registered once."""
        with pytest.raises(ValueError, match="Duplicate token symbol"):
            TokenRegistry.from_pairs([("A", TOKEN_A), ("A", TOKEN_AX)])

    def test_duplicate_address_rejected(self):
        """An address may be registered once, whatever its case."""
        with pytest.raises(ValueError, match="Duplicate token address"):
            TokenRegistry(
                [
                    Token(symbol="A", address=TOKEN_A),
                    Token(symbol="A2", address=TOKEN_A.upper().replace("0X", "0x")),
                ]
            )


class TestRegistryLoading:
    """Tests for building registries from files and defaults."""

    def test_from_file(self, tmp_path):
        """Token files are JSON lists with optional decimals."""
        path = tmp_path / "tokens.json"
        path.write_text(
            json.dumps(
                [
                    {"symbol": "WETH", "address": "0x" + "11" * 20},
                    {"symbol": "USDC", "address": "0x" + "22" * 20, "decimals": 6},
                ]
            )
        )
        registry = TokenRegistry.from_file(path)
        assert registry.resolve("WETH").decimals == 18
        assert registry.resolve("USDC").decimals == 6

    def test_from_file_not_a_list(self, tmp_path):
        """Anything but a list is rejected."""
        path = tmp_path / "tokens.json"
        path.write_text(json.dumps({"WETH": "0x" + "11" * 20}))
        with pytest.raises(ValueError, match="JSON list"):
            TokenRegistry.from_file(path)

    def test_from_file_bad_address(self, tmp_path):
        """Entries need valid addresses."""
        path = tmp_path / "tokens.json"
        path.write_text(json.dumps([{"symbol": "X", "address": "0x1234"}]))
        with pytest.raises(ValueError, match="index 0"):
            TokenRegistry.from_file(path)

    def test_default_registry(self, monkeypatch):
        """Without a token file the built-in table is used."""
        monkeypatch.delenv("NLSWAP_TOKENS_FILE", raising=False)
        get_default_registry.cache_clear()
        try:
            registry = get_default_registry()
            assert set(registry.symbols) == {symbol for symbol, _ in DEFAULT_TOKENS}
            assert registry.resolve("A").decimals == 18
        finally:
            get_default_registry.cache_clear()

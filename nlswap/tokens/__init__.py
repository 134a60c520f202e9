"""Token registry."""

from nlswap.tokens.registry import TokenRegistry, get_default_registry

__all__ = ["TokenRegistry", "get_default_registry"]

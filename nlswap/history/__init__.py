"""Swap history reconstruction."""

from nlswap.history.reconstruct import PriceHistory, reconstruct, summarize_swaps

__all__ = ["PriceHistory", "reconstruct", "summarize_swaps"]

"""Swap log events and the chart points derived from them."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SwapEvent:
    """Amounts of a pair's Swap event, as decoded from a log."""

    amount0_in: int
    amount1_in: int
    amount0_out: int
    amount1_out: int

    @property
    def is_well_formed(self) -> bool:
        """Exactly one input side and exactly one output side are nonzero."""
        one_input = (self.amount0_in > 0) != (self.amount1_in > 0)
        one_output = (self.amount0_out > 0) != (self.amount1_out > 0)
        return one_input and one_output


@dataclass(frozen=True)
class PricePoint:
    """Execution price of the index-th swap (1-based, arrival order)."""

    index: int
    price: float


@dataclass(frozen=True)
class CurvePoint:
    """One sample of the y = k / x reserve curve."""

    x: int
    y: float


@dataclass(frozen=True)
class SwapSummary:
    """Count and per-token volume over a batch of swap events."""

    count: int
    volume0: int
    volume1: int

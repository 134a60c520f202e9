"""Rebuild a pair's price history from its Swap events.

Events arrive in the order the log source returns them and that order is
authoritative: nothing is re-sorted. Nothing is cached either; every
iteration recomputes from the events.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

import structlog

from nlswap.amm.quote import derive_price
from nlswap.models.events import PricePoint, SwapEvent, SwapSummary

logger = structlog.get_logger()


class PriceHistory:
    """Lazy, restartable sequence of PricePoints over a batch of events.

    Malformed events (both input sides zero or both nonzero, same for
    outputs) are skipped so a single corrupt log cannot blank the chart. A
    skipped event still consumes its index.
    """

    def __init__(self, events: Sequence[SwapEvent]) -> None:
        self._events = tuple(events)

    def __iter__(self) -> Iterator[PricePoint]:
        for index, event in enumerate(self._events, start=1):
            if not event.is_well_formed:
                logger.debug(
                    "swap_event_skipped",
                    index=index,
                    amount0_in=event.amount0_in,
                    amount1_in=event.amount1_in,
                    amount0_out=event.amount0_out,
                    amount1_out=event.amount1_out,
                )
                continue
            amount_in = event.amount0_in if event.amount0_in > 0 else event.amount1_in
            amount_out = event.amount0_out if event.amount0_out > 0 else event.amount1_out
            yield PricePoint(index=index, price=derive_price(amount_in, amount_out))

    def __len__(self) -> int:
        """Number of events (not points); skipped events are included."""
        return len(self._events)


def reconstruct(events: Sequence[SwapEvent]) -> PriceHistory:
    """Price points for a sequence of swap events, in arrival order."""
    return PriceHistory(events)


def summarize_swaps(events: Sequence[SwapEvent]) -> SwapSummary:
    """Count events and sum each token's volume (in + out) across them."""
    volume0 = 0
    volume1 = 0
    for event in events:
        volume0 += event.amount0_in + event.amount0_out
        volume1 += event.amount1_in + event.amount1_out
    return SwapSummary(count=len(events), volume0=volume0, volume1=volume1)

"""Chain client protocol consumed by the dispatcher.

The dispatcher never talks to a node directly. Anything that can resolve
and list pairs, read reserves and balances, execute a single call step and
return Swap events can drive it: Web3ChainClient in production, in-memory
fakes in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from nlswap.models.events import SwapEvent
from nlswap.models.steps import AnyStep
from nlswap.models.tokens import PairHandle


class ChainClientError(Exception):
    """A chain read or write failed (RPC error, reverted transaction)."""


@runtime_checkable
class ChainClient(Protocol):
    """Operations the core needs from the chain.

    Implementations own timeouts, connection handling, log pagination and
    any retry policy; the core issues each call once.
    """

    def resolve_pair(self, token_a: str, token_b: str) -> PairHandle | None:
        """Find the pair for two token addresses (either order).

        Returns:
            PairHandle with canonical token0/token1, or None if no pair exists
        """
        ...

    def list_pairs(self) -> list[PairHandle]:
        """Every pair the factory has created, in creation order."""
        ...

    def get_reserves(self, pair: PairHandle) -> tuple[int, int]:
        """Current (reserve0, reserve1) snapshot of the pair."""
        ...

    def get_balance(self, pair: PairHandle, account: str) -> int:
        """Pool-share balance of account in the pair."""
        ...

    def execute_call_step(self, step: AnyStep) -> str:
        """Execute one step and wait for it to be mined.

        Returns:
            Transaction hash

        Raises:
            ChainClientError: If the transaction could not be sent or reverted
        """
        ...

    def get_swap_events(
        self,
        pair: PairHandle,
        from_block: int | str,
        to_block: int | str,
    ) -> list[SwapEvent]:
        """Swap events of the pair in the block range, in log order."""
        ...

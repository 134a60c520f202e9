"""In-memory ChainClient for tests."""

from nlswap.chain.client import ChainClientError
from nlswap.models.events import SwapEvent
from nlswap.models.steps import AnyStep
from nlswap.models.tokens import PairHandle
from nlswap.models.types import normalize_address


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two token addresses the way pair contracts do (by address bytes)."""
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    if a == b:
        raise ValueError(f"Identical addresses: {token_a}")
    return (a, b) if bytes.fromhex(a[2:]) < bytes.fromhex(b[2:]) else (b, a)


class FakeChainClient:
    """Chain client backed by dictionaries.

    Attributes:
        executed: Steps accepted by execute_call_step, in order
        fail_at: Index of the execute_call_step call to reject, if any
        read_error: Raised by every read when set
        event_requests: (pair, from_block, to_block) of each event query
    """

    def __init__(self) -> None:
        self.pairs: dict[frozenset[str], PairHandle] = {}
        self.reserves: dict[str, tuple[int, int]] = {}
        self.balances: dict[tuple[str, str], int] = {}
        self.events: dict[str, list[SwapEvent]] = {}
        self.executed: list[AnyStep] = []
        self.fail_at: int | None = None
        self.read_error: ChainClientError | None = None
        self.event_requests: list[tuple[str, int | str, int | str]] = []
        self._calls = 0

    def add_pair(
        self,
        token_a: str,
        token_b: str,
        address: str,
        reserves: tuple[int, int] = (0, 0),
    ) -> PairHandle:
        token0, token1 = sort_tokens(token_a, token_b)
        pair = PairHandle(address=address, token0=token0, token1=token1)
        self.pairs[frozenset({token0, token1})] = pair
        self.reserves[address] = reserves
        return pair

    def _check_read(self) -> None:
        if self.read_error is not None:
            raise self.read_error

    def resolve_pair(self, token_a: str, token_b: str) -> PairHandle | None:
        self._check_read()
        return self.pairs.get(frozenset({normalize_address(token_a), normalize_address(token_b)}))

    def list_pairs(self) -> list[PairHandle]:
        self._check_read()
        return list(self.pairs.values())

    def get_reserves(self, pair: PairHandle) -> tuple[int, int]:
        self._check_read()
        return self.reserves[pair.address]

    def get_balance(self, pair: PairHandle, account: str) -> int:
        self._check_read()
        return self.balances.get((pair.address, normalize_address(account)), 0)

    def execute_call_step(self, step: AnyStep) -> str:
        call = self._calls
        self._calls += 1
        if self.fail_at == call:
            raise ChainClientError("execution reverted")
        self.executed.append(step)
        return f"0x{call + 1:064x}"

    def get_swap_events(
        self,
        pair: PairHandle,
        from_block: int | str,
        to_block: int | str,
    ) -> list[SwapEvent]:
        self._check_read()
        self.event_requests.append((pair.address, from_block, to_block))
        return list(self.events.get(pair.address, []))

"""Token and pair identity models."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from nlswap.models.types import Address, normalize_address


class Token(BaseModel):
    """A registered token: ticker symbol plus on-chain address."""

    symbol: str = Field(min_length=1)
    address: Address
    # Most tokens use 18 decimals; uint256 caps meaningful values at 77
    decimals: int = Field(default=18, ge=0, le=77)

    model_config = {"frozen": True}


@dataclass(frozen=True)
class PairHandle:
    """A pair contract as seen by the chain client.

    token0/token1 follow the contract's canonical ordering, which is
    by address bytes and unrelated to symbol order.
    """

    address: str
    token0: str
    token1: str

    def has_token(self, address: str) -> bool:
        addr = normalize_address(address)
        return addr in (normalize_address(self.token0), normalize_address(self.token1))

    def is_token0(self, address: str) -> bool:
        """True if the address is this pair's token0."""
        return normalize_address(address) == normalize_address(self.token0)


@dataclass(frozen=True)
class PoolListing:
    """A deployed pair named by its tokens' symbols.

    Tokens missing from the registry are shown by address.
    """

    address: str
    token0: str
    token1: str

    @property
    def name(self) -> str:
        return f"{self.token0} / {self.token1}"

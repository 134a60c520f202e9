"""Commands: the closed set of operations a validated intent can request.

A Command only exists once every token it mentions has been resolved in the
token registry; the intent validator is the sole producer.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from nlswap.models.tokens import Token


class QueryKind(str, Enum):
    """Read-only analyses supported for a single pool."""

    RESERVES = "reserves"
    SWAPS = "swaps"
    VOLUME = "volume"


class TokenAmount(BaseModel):
    """A token and an amount in human units (not base units)."""

    token: Token
    amount: Decimal = Field(gt=0)

    model_config = {"frozen": True}


class SwapCommand(BaseModel):
    """Sell an exact amount of token_in for token_out."""

    action: Literal["swap"] = "swap"
    token_in: Token = Field(alias="tokenIn")
    token_out: Token = Field(alias="tokenOut")
    amount_in: Decimal = Field(alias="amountIn", gt=0)
    # Estimate the output without executing anything
    quote_only: bool = Field(default=False, alias="quoteOnly")

    model_config = {"frozen": True, "populate_by_name": True}

    def describe(self) -> str:
        verb = "estimate swap" if self.quote_only else "swap"
        return f"{verb} {self.amount_in} {self.token_in.symbol} → {self.token_out.symbol}"


class DepositCommand(BaseModel):
    """Add liquidity with exactly two token amounts."""

    action: Literal["deposit"] = "deposit"
    amounts: tuple[TokenAmount, TokenAmount]

    model_config = {"frozen": True}

    @property
    def tokens(self) -> tuple[Token, Token]:
        return self.amounts[0].token, self.amounts[1].token

    def describe(self) -> str:
        first, second = self.amounts
        return (
            f"add {first.amount} {first.token.symbol} + {second.amount} {second.token.symbol} "
            "to liquidity pool"
        )


class RedeemCommand(BaseModel):
    """Remove all of the caller's liquidity from a pool."""

    action: Literal["redeem"] = "redeem"
    pool: tuple[Token, Token]

    model_config = {"frozen": True}

    def describe(self) -> str:
        return f"remove liquidity from {self.pool[0].symbol}/{self.pool[1].symbol} pair"


class QueryCommand(BaseModel):
    """Read-only question about one pool."""

    action: Literal["query"] = "query"
    kind: QueryKind
    pool: tuple[Token, Token]

    model_config = {"frozen": True}

    def describe(self) -> str:
        return f"query {self.kind.value} for {self.pool[0].symbol}/{self.pool[1].symbol}"


def _get_command_action(v: dict[str, Any] | BaseModel) -> str:
    """Discriminator function for the Command union."""
    if isinstance(v, dict):
        return str(v.get("action", ""))
    return str(getattr(v, "action", ""))


Command = Annotated[
    Annotated[SwapCommand, Tag("swap")]
    | Annotated[DepositCommand, Tag("deposit")]
    | Annotated[RedeemCommand, Tag("redeem")]
    | Annotated[QueryCommand, Tag("query")],
    Discriminator(_get_command_action),
]

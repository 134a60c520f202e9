"""Call steps: planned on-chain actions, pure data until executed."""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag

from nlswap.models.types import Address, Uint256


class ApproveStep(BaseModel):
    """ERC20 approve(spender, amount) on token."""

    kind: Literal["approve"] = "approve"
    token: Address
    spender: Address
    amount: Uint256

    model_config = {"frozen": True}


class TransferStep(BaseModel):
    """ERC20 transfer(to, amount) on token."""

    kind: Literal["transfer"] = "transfer"
    token: Address
    to: Address
    amount: Uint256

    model_config = {"frozen": True}


class SwapStep(BaseModel):
    """Pair swap(amount0Out, amount1Out, to, data) with empty data."""

    kind: Literal["swap"] = "swap"
    pair: Address
    amount0_out: Uint256 = Field(alias="amount0Out")
    amount1_out: Uint256 = Field(alias="amount1Out")
    to: Address

    model_config = {"frozen": True, "populate_by_name": True}


class MintStep(BaseModel):
    """Pair mint(to): issue pool shares for tokens already transferred in."""

    kind: Literal["mint"] = "mint"
    pair: Address
    to: Address

    model_config = {"frozen": True}


class BurnStep(BaseModel):
    """Pair burn(to): redeem pool shares already transferred in."""

    kind: Literal["burn"] = "burn"
    pair: Address
    to: Address

    model_config = {"frozen": True}


def _get_step_kind(v: dict[str, Any] | BaseModel) -> str:
    """Discriminator function for the CallStep union."""
    if isinstance(v, dict):
        return str(v.get("kind", ""))
    return str(getattr(v, "kind", ""))


CallStep = Annotated[
    Annotated[ApproveStep, Tag("approve")]
    | Annotated[TransferStep, Tag("transfer")]
    | Annotated[SwapStep, Tag("swap")]
    | Annotated[MintStep, Tag("mint")]
    | Annotated[BurnStep, Tag("burn")],
    Discriminator(_get_step_kind),
]

AnyStep = ApproveStep | TransferStep | SwapStep | MintStep | BurnStep

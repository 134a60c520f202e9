"""Dispatch outcomes: what a command did (or would do), or why it could not.

Every dispatcher call returns a DispatchOutcome; failures are typed values,
not exceptions, so the caller always learns which step (if any) failed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Literal

from pydantic import BaseModel

from nlswap.models.events import PricePoint
from nlswap.models.steps import AnyStep


class DispatchError(Enum):
    """Reasons a validated command could not be carried out."""

    PAIR_NOT_FOUND = "pair_not_found"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INSUFFICIENT_OUTPUT_AMOUNT = "insufficient_output_amount"
    CHAIN_READ_FAILED = "chain_read_failed"
    CHAIN_EXECUTION_FAILED = "chain_execution_failed"
    ARITHMETIC = "arithmetic"


class SwapEffect(BaseModel):
    kind: Literal["swap"] = "swap"
    pair: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    quote_only: bool = False


class DepositEffect(BaseModel):
    """Tokens moved into the pair; pool shares are not minted yet."""

    kind: Literal["deposit"] = "deposit"
    pair: str
    deposits: dict[str, int]
    # The caller must issue the mint as a separate follow-up
    follow_up: Literal["mint"] = "mint"


class MintEffect(BaseModel):
    kind: Literal["mint"] = "mint"
    pair: str


class RedeemEffect(BaseModel):
    kind: Literal["redeem"] = "redeem"
    pair: str
    liquidity: int


class ReservesEffect(BaseModel):
    kind: Literal["reserves"] = "reserves"
    pair: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int


class SwapsEffect(BaseModel):
    kind: Literal["swaps"] = "swaps"
    pair: str
    count: int
    points: list[PricePoint]


class VolumeEffect(BaseModel):
    kind: Literal["volume"] = "volume"
    pair: str
    token0: str
    token1: str
    count: int
    volume0: int
    volume1: int


AnyEffect = (
    SwapEffect
    | DepositEffect
    | MintEffect
    | RedeemEffect
    | ReservesEffect
    | SwapsEffect
    | VolumeEffect
)


@dataclass(frozen=True)
class DispatchOutcome:
    """Result of planning and possibly executing one command.

    Attributes:
        action: The command's action ("swap", "deposit", ...)
        steps: Planned call steps, in execution order
        effect: What the command achieved (or would achieve if not yet
            executed); None on error
        error: Why the command failed, None on success
        error_detail: Human-readable detail for the error
        failed_step: Index into steps of the step the chain rejected
        completed_steps: Steps that were executed successfully; on a
            partial failure these stay applied on-chain
        tx_hashes: Hashes of the completed steps
        executed: True once execution was attempted
    """

    action: str
    steps: tuple[AnyStep, ...] = ()
    effect: AnyEffect | None = None
    error: DispatchError | None = None
    error_detail: str | None = None
    failed_step: int | None = None
    completed_steps: int = 0
    tx_hashes: tuple[str, ...] = ()
    executed: bool = False

    @property
    def is_ok(self) -> bool:
        return self.error is None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def planned(cls, action: str, steps: tuple[AnyStep, ...], effect: AnyEffect) -> DispatchOutcome:
        return cls(action=action, steps=steps, effect=effect)

    @classmethod
    def failed(cls, action: str, error: DispatchError, detail: str | None = None) -> DispatchOutcome:
        return cls(action=action, error=error, error_detail=detail)

    def with_execution_failure(
        self,
        step_index: int,
        detail: str,
        tx_hashes: tuple[str, ...],
    ) -> DispatchOutcome:
        """Copy marking step_index as rejected after the earlier steps succeeded."""
        return replace(
            self,
            effect=None,
            error=DispatchError.CHAIN_EXECUTION_FAILED,
            error_detail=detail,
            failed_step=step_index,
            completed_steps=step_index,
            tx_hashes=tx_hashes,
            executed=True,
        )

    def with_execution_success(self, tx_hashes: tuple[str, ...]) -> DispatchOutcome:
        return replace(
            self,
            completed_steps=len(self.steps),
            tx_hashes=tx_hashes,
            executed=True,
        )

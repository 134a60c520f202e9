"""Command dispatcher: validated Commands to ordered on-chain call steps.

Each invocation is independent. The dispatcher reads a fresh snapshot from
the chain client, computes every amount with integer math, and either
returns the plan or executes it step by step. Steps run strictly in order
because later steps depend on the state earlier ones leave behind; the first
rejected step stops execution and nothing is retried or rolled back.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from nlswap.amm.quote import orient_reserves, quote
from nlswap.amm.units import to_base_units
from nlswap.chain.client import ChainClient, ChainClientError
from nlswap.config import Settings
from nlswap.constants import DEFAULT_FEE_BPS
from nlswap.dispatch.outcome import (
    DepositEffect,
    DispatchError,
    DispatchOutcome,
    MintEffect,
    RedeemEffect,
    ReservesEffect,
    SwapEffect,
    SwapsEffect,
    VolumeEffect,
)
from nlswap.history.reconstruct import reconstruct, summarize_swaps
from nlswap.models.commands import (
    DepositCommand,
    QueryCommand,
    QueryKind,
    RedeemCommand,
    SwapCommand,
)
from nlswap.models.failures import AnyCommand
from nlswap.models.steps import (
    AnyStep,
    ApproveStep,
    BurnStep,
    MintStep,
    SwapStep,
    TransferStep,
)
from nlswap.models.tokens import PairHandle, Token
from nlswap.models.types import normalize_address
from nlswap.safe_int import SafeIntError
from nlswap.tokens.registry import TokenRegistry

logger = structlog.get_logger()


class _PlanFailure(Exception):
    """Internal short-circuit for a command that cannot be planned."""

    def __init__(self, error: DispatchError, detail: str | None = None) -> None:
        super().__init__(detail or error.value)
        self.error = error
        self.detail = detail


class CommandDispatcher:
    """Plans and executes Commands against a chain client.

    Args:
        chain: Chain client used for reads and step execution
        account: Caller address; recipient of swaps and burns, owner of
            pool shares
        registry: Used to name a pair's token0/token1 in query results
        fee_bps: Pair fee used for quotes
        history_from_block: First block scanned for Swap events
        history_to_block: Last block scanned for Swap events
    """

    def __init__(
        self,
        chain: ChainClient,
        account: str,
        registry: TokenRegistry | None = None,
        fee_bps: int = DEFAULT_FEE_BPS,
        history_from_block: int | str = 0,
        history_to_block: int | str = "latest",
    ) -> None:
        self.chain = chain
        self.account = normalize_address(account, validate=True)
        self.registry = registry
        self.fee_bps = fee_bps
        self.history_from_block = history_from_block
        self.history_to_block = history_to_block
        self._planners: dict[type, Callable[[Any], DispatchOutcome]] = {
            SwapCommand: self._plan_swap,
            DepositCommand: self._plan_deposit,
            RedeemCommand: self._plan_redeem,
            QueryCommand: self._plan_query,
        }

    @classmethod
    def from_settings(
        cls,
        chain: ChainClient,
        account: str,
        registry: TokenRegistry | None,
        settings: Settings,
    ) -> CommandDispatcher:
        return cls(
            chain,
            account,
            registry=registry,
            fee_bps=settings.fee_bps,
            history_from_block=settings.history_from_block,
        )

    # --- Public API ---

    def dispatch(self, command: AnyCommand) -> DispatchOutcome:
        """Plan a command and execute it.

        Queries and quote-only swaps have nothing to execute and return the
        plan as is.
        """
        outcome = self.plan(command)
        if outcome.is_error or not outcome.steps:
            return outcome
        if isinstance(command, SwapCommand) and command.quote_only:
            return outcome
        return self.execute(outcome)

    def plan(self, command: AnyCommand) -> DispatchOutcome:
        """Build the call steps and expected effect without executing anything."""
        planner = self._planners.get(type(command))
        if planner is None:
            raise TypeError(f"Unknown command type: {type(command).__name__}")
        return self._guarded(command.action, lambda: planner(command))

    def plan_mint(self, token_a: Token, token_b: Token) -> DispatchOutcome:
        """Plan the mint that completes an earlier deposit into a pair.

        Deposits only move tokens into the pair; pool shares for them are
        issued by this separate follow-up.
        """

        def build() -> DispatchOutcome:
            pair = self._require_pair(token_a, token_b)
            steps: tuple[AnyStep, ...] = (MintStep(pair=pair.address, to=self.account),)
            return DispatchOutcome.planned("mint", steps, MintEffect(pair=pair.address))

        return self._guarded("mint", build)

    def execute(self, outcome: DispatchOutcome) -> DispatchOutcome:
        """Execute planned steps in order, stopping at the first rejection.

        Steps that completed before a rejection stay applied on-chain; the
        returned outcome records how far execution got.
        """
        if outcome.is_error or outcome.executed:
            return outcome

        tx_hashes: list[str] = []
        for index, step in enumerate(outcome.steps):
            try:
                tx_hashes.append(self.chain.execute_call_step(step))
            except ChainClientError as e:
                logger.error(
                    "call_step_failed",
                    action=outcome.action,
                    step_index=index,
                    step_kind=step.kind,
                    completed_steps=index,
                    error=str(e),
                )
                return outcome.with_execution_failure(index, str(e), tuple(tx_hashes))

        logger.info(
            "command_executed",
            action=outcome.action,
            steps=len(outcome.steps),
        )
        return outcome.with_execution_success(tuple(tx_hashes))

    # --- Planning ---

    def _guarded(self, action: str, build: Callable[[], DispatchOutcome]) -> DispatchOutcome:
        """Run a planner, converting failures into typed outcomes."""
        try:
            return build()
        except _PlanFailure as e:
            logger.info("command_rejected", action=action, error=e.error.value, detail=e.detail)
            return DispatchOutcome.failed(action, e.error, e.detail)
        except ChainClientError as e:
            logger.warning("chain_read_failed", action=action, error=str(e))
            return DispatchOutcome.failed(action, DispatchError.CHAIN_READ_FAILED, str(e))
        except SafeIntError as e:
            logger.warning("arithmetic_failed", action=action, error=str(e))
            return DispatchOutcome.failed(action, DispatchError.ARITHMETIC, str(e))

    def _require_pair(self, token_a: Token, token_b: Token) -> PairHandle:
        pair = self.chain.resolve_pair(token_a.address, token_b.address)
        if pair is None:
            raise _PlanFailure(
                DispatchError.PAIR_NOT_FOUND,
                f"No pair for {token_a.symbol}/{token_b.symbol}",
            )
        return pair

    def _symbol(self, address: str) -> str:
        """Registry symbol for an address, or the address itself."""
        if self.registry is not None:
            token = self.registry.lookup_address(address)
            if token is not None:
                return token.symbol
        return address

    def _plan_swap(self, command: SwapCommand) -> DispatchOutcome:
        token_in, token_out = command.token_in, command.token_out
        pair = self._require_pair(token_in, token_out)

        amount_in = to_base_units(command.amount_in, token_in.decimals)
        reserves = self.chain.get_reserves(pair)
        reserve_in, reserve_out, in_is_token0 = orient_reserves(pair, reserves, token_in.address)
        amount_out = quote(amount_in, reserve_in, reserve_out, self.fee_bps)

        if amount_out == 0:
            raise _PlanFailure(
                DispatchError.INSUFFICIENT_OUTPUT_AMOUNT,
                f"{command.amount_in} {token_in.symbol} buys nothing from this pair",
            )

        # Output leaves on the side opposite the input
        amount0_out, amount1_out = (0, amount_out) if in_is_token0 else (amount_out, 0)
        steps: tuple[AnyStep, ...] = (
            ApproveStep(token=token_in.address, spender=pair.address, amount=amount_in),
            TransferStep(token=token_in.address, to=pair.address, amount=amount_in),
            SwapStep(
                pair=pair.address,
                amount0_out=amount0_out,
                amount1_out=amount1_out,
                to=self.account,
            ),
        )

        logger.info(
            "swap_planned",
            pair=pair.address,
            token_in=token_in.symbol,
            token_out=token_out.symbol,
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )
        effect = SwapEffect(
            pair=pair.address,
            token_in=token_in.symbol,
            token_out=token_out.symbol,
            amount_in=amount_in,
            amount_out=amount_out,
            quote_only=command.quote_only,
        )
        return DispatchOutcome.planned(command.action, steps, effect)

    def _plan_deposit(self, command: DepositCommand) -> DispatchOutcome:
        token_a, token_b = command.tokens
        pair = self._require_pair(token_a, token_b)

        steps: list[AnyStep] = []
        deposits: dict[str, int] = {}
        for entry in command.amounts:
            amount = to_base_units(entry.amount, entry.token.decimals)
            steps.append(ApproveStep(token=entry.token.address, spender=pair.address, amount=amount))
            steps.append(TransferStep(token=entry.token.address, to=pair.address, amount=amount))
            deposits[entry.token.symbol] = amount

        logger.info("deposit_planned", pair=pair.address, deposits=deposits, follow_up="mint")
        effect = DepositEffect(pair=pair.address, deposits=deposits)
        return DispatchOutcome.planned(command.action, tuple(steps), effect)

    def _plan_redeem(self, command: RedeemCommand) -> DispatchOutcome:
        pair = self._require_pair(*command.pool)

        balance = self.chain.get_balance(pair, self.account)
        if balance == 0:
            raise _PlanFailure(
                DispatchError.INSUFFICIENT_BALANCE,
                f"No pool shares in {command.pool[0].symbol}/{command.pool[1].symbol}",
            )

        # The pair contract is its own pool-share token
        steps: tuple[AnyStep, ...] = (
            ApproveStep(token=pair.address, spender=pair.address, amount=balance),
            TransferStep(token=pair.address, to=pair.address, amount=balance),
            BurnStep(pair=pair.address, to=self.account),
        )
        logger.info("redeem_planned", pair=pair.address, liquidity=balance)
        return DispatchOutcome.planned(
            command.action, steps, RedeemEffect(pair=pair.address, liquidity=balance)
        )

    def _plan_query(self, command: QueryCommand) -> DispatchOutcome:
        pair = self._require_pair(*command.pool)
        token0 = self._symbol(pair.token0)
        token1 = self._symbol(pair.token1)

        if command.kind is QueryKind.RESERVES:
            reserve0, reserve1 = self.chain.get_reserves(pair)
            effect: ReservesEffect | SwapsEffect | VolumeEffect = ReservesEffect(
                pair=pair.address,
                token0=token0,
                token1=token1,
                reserve0=reserve0,
                reserve1=reserve1,
            )
        else:
            events = self.chain.get_swap_events(
                pair, self.history_from_block, self.history_to_block
            )
            if command.kind is QueryKind.SWAPS:
                effect = SwapsEffect(
                    pair=pair.address,
                    count=len(events),
                    points=list(reconstruct(events)),
                )
            else:
                summary = summarize_swaps(events)
                effect = VolumeEffect(
                    pair=pair.address,
                    token0=token0,
                    token1=token1,
                    count=summary.count,
                    volume0=summary.volume0,
                    volume1=summary.volume1,
                )

        logger.info("query_answered", kind=command.kind.value, pair=pair.address)
        return DispatchOutcome.planned(command.action, (), effect)

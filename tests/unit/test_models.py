"""Tests for command, call step and event models."""

from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from nlswap.models import (
    ApproveStep,
    CallStep,
    Command,
    DepositCommand,
    FailureKind,
    MintStep,
    QueryCommand,
    QueryKind,
    RedeemCommand,
    SwapCommand,
    SwapEvent,
    SwapStep,
    Token,
    TokenAmount,
    ValidationFailure,
    ValidationResult,
)
from tests.helpers import ACCOUNT, PAIR_A_AX, TOKEN_A, TOKEN_AX

A = Token(symbol="A", address=TOKEN_A)
AX = Token(symbol="AX", address=TOKEN_AX)


class TestCommandUnion:
    """Tests for selecting a Command variant by action."""

    def test_swap_from_aliases(self):
        """camelCase keys populate a SwapCommand."""
        command = TypeAdapter(Command).validate_python(
            {
                "action": "swap",
                "tokenIn": A.model_dump(),
                "tokenOut": AX.model_dump(),
                "amountIn": "5",
            }
        )
        assert isinstance(command, SwapCommand)
        assert command.amount_in == Decimal("5")
        assert command.quote_only is False

    def test_query(self):
        command = TypeAdapter(Command).validate_python(
            {"action": "query", "kind": "volume", "pool": [A.model_dump(), AX.model_dump()]}
        )
        assert isinstance(command, QueryCommand)
        assert command.kind is QueryKind.VOLUME

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(Command).validate_python({"action": "stake"})

    def test_non_positive_amount_rejected(self):
        with pytest.raises(ValidationError):
            SwapCommand(token_in=A, token_out=AX, amount_in=Decimal(0))


class TestDescribe:
    """Tests for the one-line command summaries."""

    def test_swap(self):
        command = SwapCommand(token_in=A, token_out=AX, amount_in=Decimal("10"))
        assert command.describe() == "swap 10 A → AX"

    def test_quote_only_swap(self):
        command = SwapCommand(token_in=A, token_out=AX, amount_in=Decimal("2"), quote_only=True)
        assert command.describe() == "estimate swap 2 A → AX"

    def test_deposit(self):
        command = DepositCommand(
            amounts=(
                TokenAmount(token=A, amount=Decimal("1")),
                TokenAmount(token=AX, amount=Decimal("3")),
            )
        )
        assert command.describe() == "add 1 A + 3 AX to liquidity pool"
        assert command.tokens == (A, AX)

    def test_redeem(self):
        assert RedeemCommand(pool=(A, AX)).describe() == "remove liquidity from A/AX pair"

    def test_query(self):
        command = QueryCommand(kind=QueryKind.RESERVES, pool=(A, AX))
        assert command.describe() == "query reserves for A/AX"


class TestCallStepUnion:
    """Tests for parsing dumped call steps back by kind."""

    def test_swap_step_by_alias(self):
        """Dumped swap steps use the contract's argument names."""
        step = SwapStep(pair=PAIR_A_AX, amount0_out=0, amount1_out=493, to=ACCOUNT)
        dumped = step.model_dump(by_alias=True)
        assert dumped["amount1Out"] == 493

        parsed = TypeAdapter(CallStep).validate_python(dumped)
        assert parsed == step

    def test_kind_selects_variant(self):
        adapter = TypeAdapter(CallStep)
        approve = adapter.validate_python(
            {"kind": "approve", "token": TOKEN_A, "spender": PAIR_A_AX, "amount": 10}
        )
        mint = adapter.validate_python({"kind": "mint", "pair": PAIR_A_AX, "to": ACCOUNT})
        assert isinstance(approve, ApproveStep)
        assert isinstance(mint, MintStep)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            ApproveStep(token=TOKEN_A, spender=PAIR_A_AX, amount=-1)


class TestValidationResult:
    """Tests for the command-or-failure result."""

    def test_neither_rejected(self):
        with pytest.raises(ValueError, match="exactly one"):
            ValidationResult()

    def test_both_rejected(self):
        command = RedeemCommand(pool=(A, AX))
        with pytest.raises(ValueError, match="exactly one"):
            ValidationResult(command=command, failure=ValidationFailure.malformed())

    def test_failure_message_carries_detail(self):
        result = ValidationResult.fail(ValidationFailure.unknown_token("Q"))
        assert not result.is_valid
        assert result.failure.kind is FailureKind.UNKNOWN_TOKEN
        assert result.failure.message == "unknown token: Q"

    def test_failure_message_without_detail(self):
        assert ValidationFailure.batch_query().message == "batch query not implemented"


class TestSwapEvent:
    """Tests for SwapEvent.is_well_formed."""

    def test_one_side_in_one_side_out(self):
        assert SwapEvent(amount0_in=100, amount1_in=0, amount0_out=0, amount1_out=49).is_well_formed

    def test_no_input(self):
        assert not SwapEvent(amount0_in=0, amount1_in=0, amount0_out=0, amount1_out=49).is_well_formed

    def test_both_outputs(self):
        assert not SwapEvent(amount0_in=100, amount1_in=0, amount0_out=1, amount1_out=49).is_well_formed

"""Tests for intent validation."""

from decimal import Decimal

import pytest

from nlswap.intent import IntentValidator
from nlswap.models import (
    DepositCommand,
    FailureKind,
    QueryCommand,
    QueryKind,
    RedeemCommand,
    SwapCommand,
)
from nlswap.tokens import TokenRegistry
from tests.helpers import TOKEN_A, TOKEN_AX, deposit_intent, query_intent, swap_intent


@pytest.fixture
def validator(registry: TokenRegistry) -> IntentValidator:
    return IntentValidator(registry)


def failure_kind(validator: IntentValidator, raw) -> FailureKind:
    result = validator.validate(raw)
    assert not result.is_valid
    return result.failure.kind


class TestValidatorTotality:
    """Every input maps to exactly one command or failure."""

    @pytest.mark.parametrize(
        "raw",
        [None, 42, "swap", [], [swap_intent()], {}, {"action": None}, {"action": ""}, {"action": 7}],
    )
    def test_shapeless_input_is_malformed(self, validator, raw):
        """Non-objects and objects without an action are malformed."""
        assert failure_kind(validator, raw) is FailureKind.MALFORMED_INPUT

    def test_unknown_action_unauthorized(self, validator):
        """Actions outside the supported set are refused."""
        result = validator.validate({"action": "transfer", "to": "0xabc", "amount": 1})
        assert result.failure.kind is FailureKind.UNAUTHORIZED_OPERATION
        assert result.failure.message == "unauthorized operation"

    def test_deterministic(self, validator):
        """The same input always gives the same result."""
        raw = swap_intent()
        assert validator.validate(raw) == validator.validate(raw)

    def test_action_case_insensitive(self, validator):
        """Action names are matched case-insensitively."""
        assert validator.validate(swap_intent() | {"action": " SWAP "}).is_valid


class TestSwapValidation:
    """Tests for swap intents."""

    def test_symbols_resolve_to_swap_command(self):
        """Registered symbols resolve to a SwapCommand with the given amount."""
        registry = TokenRegistry.from_pairs(
            [("BTC", "0x" + "0b" * 20), ("ETH", "0x" + "0e" * 20)]
        )
        result = IntentValidator(registry).validate(
            {"action": "swap", "tokenIn": "BTC", "tokenOut": "ETH", "amount": 10}
        )
        assert result.is_valid
        command = result.command
        assert isinstance(command, SwapCommand)
        assert command.token_in.symbol == "BTC"
        assert command.token_out.symbol == "ETH"
        assert command.amount_in == Decimal(10)
        assert command.quote_only is False

    def test_resolves_addresses(self, validator):
        """Tokens carry their registered addresses."""
        command = validator.validate(swap_intent()).command
        assert command.token_in.address == TOKEN_A
        assert command.token_out.address == TOKEN_AX

    def test_float_amount_kept_exact(self, validator):
        """Float amounts do not pick up binary noise."""
        command = validator.validate(swap_intent(amount=0.1)).command
        assert command.amount_in == Decimal("0.1")

    def test_numeric_string_amount(self, validator):
        """Amounts given as strings are accepted."""
        assert validator.validate(swap_intent(amount="12.5")).command.amount_in == Decimal("12.5")

    def test_single_element_lists_unwrapped(self, validator):
        """A one-token list is the same as the token."""
        assert validator.validate(swap_intent(token_in=["A"], token_out=["AX"])).is_valid

    def test_quote_only(self, validator):
        """quoteOnly is carried on the command."""
        command = validator.validate(swap_intent(quoteOnly=True)).command
        assert command.quote_only is True

    @pytest.mark.parametrize("amount", [0, -5, "abc", None, True, float("nan"), float("inf"), "Infinity"])
    def test_bad_amount_malformed(self, validator, amount):
        """Amounts must be finite and strictly positive numbers."""
        assert failure_kind(validator, swap_intent(amount=amount)) is FailureKind.MALFORMED_INPUT

    def test_same_token_malformed(self, validator):
        """Swapping a token for itself is malformed."""
        assert failure_kind(validator, swap_intent(token_out="A")) is FailureKind.MALFORMED_INPUT

    def test_missing_token_malformed(self, validator):
        """Both sides must be named."""
        raw = swap_intent()
        del raw["tokenOut"]
        assert failure_kind(validator, raw) is FailureKind.MALFORMED_INPUT

    def test_non_bool_quote_only_malformed(self, validator):
        """quoteOnly must be a boolean."""
        assert failure_kind(validator, swap_intent(quoteOnly="yes")) is FailureKind.MALFORMED_INPUT

    def test_multi_token_input(self, validator):
        """Several input tokens are refused."""
        kind = failure_kind(validator, swap_intent(token_in=["A", "B"]))
        assert kind is FailureKind.MULTI_TOKEN_SWAP_UNSUPPORTED

    def test_multi_token_checked_before_shape(self, validator):
        """A multi-token swap is reported even when the amount is also bad."""
        kind = failure_kind(validator, swap_intent(token_out=["AX", "BX"], amount=-1))
        assert kind is FailureKind.MULTI_TOKEN_SWAP_UNSUPPORTED

    def test_unknown_token(self, validator):
        """Unregistered symbols are reported by name."""
        result = validator.validate(swap_intent(token_in="FOO"))
        assert result.failure.kind is FailureKind.UNKNOWN_TOKEN
        assert result.failure.detail == "FOO"
        assert result.failure.message == "unknown token: FOO"

    def test_symbol_lookup_case_sensitive(self, validator):
        """Symbols match exactly."""
        assert failure_kind(validator, swap_intent(token_in="a")) is FailureKind.UNKNOWN_TOKEN


class TestDepositValidation:
    """Tests for deposit intents."""

    def test_two_entries(self, validator):
        """Two registered tokens with positive amounts."""
        command = validator.validate(deposit_intent(("A", 10), ("AX", "5.5"))).command
        assert isinstance(command, DepositCommand)
        assert [entry.token.symbol for entry in command.amounts] == ["A", "AX"]
        assert [entry.amount for entry in command.amounts] == [Decimal(10), Decimal("5.5")]

    def test_three_entries_unsupported_count(self, validator):
        """Three-token deposits report the count."""
        result = validator.validate(deposit_intent(("A", 1), ("AX", 1), ("B", 1)))
        assert result.failure.kind is FailureKind.UNSUPPORTED_TOKEN_COUNT
        assert result.failure.detail == 3

    def test_one_entry_unsupported_count(self, validator):
        """Single-token deposits report the count."""
        result = validator.validate(deposit_intent(("A", 1)))
        assert result.failure.kind is FailureKind.UNSUPPORTED_TOKEN_COUNT
        assert result.failure.detail == 1

    def test_amounts_not_list_malformed(self, validator):
        """amounts must be a list."""
        raw = {"action": "deposit", "amounts": {"token": "A", "amount": 1}}
        assert failure_kind(validator, raw) is FailureKind.MALFORMED_INPUT

    def test_bad_entry_malformed(self, validator):
        """Every entry needs a symbol and a positive amount."""
        assert failure_kind(validator, deposit_intent(("A", 1), ("AX", 0))) is FailureKind.MALFORMED_INPUT
        raw = {"action": "deposit", "amounts": [{"token": "A", "amount": 1}, "AX"]}
        assert failure_kind(validator, raw) is FailureKind.MALFORMED_INPUT

    def test_duplicate_token_malformed(self, validator):
        """Both entries must be different tokens."""
        assert failure_kind(validator, deposit_intent(("A", 1), ("A", 2))) is FailureKind.MALFORMED_INPUT

    def test_unknown_token(self, validator):
        """Unregistered symbols are reported by name."""
        result = validator.validate(deposit_intent(("A", 1), ("QQ", 2)))
        assert result.failure.kind is FailureKind.UNKNOWN_TOKEN
        assert result.failure.detail == "QQ"


class TestRedeemValidation:
    """Tests for redeem intents."""

    def test_pool_list(self, validator):
        """A two-symbol pool resolves."""
        command = validator.validate({"action": "redeem", "pool": ["B", "BX"]}).command
        assert isinstance(command, RedeemCommand)
        assert [token.symbol for token in command.pool] == ["B", "BX"]

    def test_pool_string(self, validator):
        """"A/AX" is accepted as a pool."""
        assert validator.validate({"action": "redeem", "pool": "A/AX"}).is_valid

    def test_wrong_count(self, validator):
        """Pools other than two tokens report the count."""
        result = validator.validate({"action": "redeem", "pool": ["A", "AX", "B"]})
        assert result.failure.kind is FailureKind.UNSUPPORTED_TOKEN_COUNT
        assert result.failure.detail == 3

    def test_missing_pool_malformed(self, validator):
        """A redeem without a pool is malformed."""
        assert failure_kind(validator, {"action": "redeem"}) is FailureKind.MALFORMED_INPUT

    def test_unknown_token(self, validator):
        """Unregistered symbols are reported."""
        assert failure_kind(validator, {"action": "redeem", "pool": ["A", "NOPE"]}) is FailureKind.UNKNOWN_TOKEN


class TestQueryValidation:
    """Tests for query intents."""

    @pytest.mark.parametrize("kind", ["reserves", "swaps", "volume", "Volume"])
    def test_supported_kinds(self, validator, kind):
        """The three analyses are accepted, case-insensitively."""
        command = validator.validate(query_intent(kind)).command
        assert isinstance(command, QueryCommand)
        assert command.kind is QueryKind(kind.lower())

    def test_unsupported_analysis(self, validator):
        """Other analyses are reported by name."""
        result = validator.validate({"action": "query", "type": "impact", "pool": ["B", "BX"]})
        assert result.failure.kind is FailureKind.UNSUPPORTED_ANALYSIS
        assert result.failure.detail == "impact"

    def test_missing_type_malformed(self, validator):
        """A query must say what it asks."""
        assert failure_kind(validator, {"action": "query", "pool": ["A", "AX"]}) is FailureKind.MALFORMED_INPUT

    @pytest.mark.parametrize(
        "raw",
        [
            query_intent(pool="all"),
            query_intent(pool="*"),
            query_intent(pool="A/AX/B"),
            query_intent(pool=[["A", "AX"], ["B", "BX"]]),
            query_intent(pool=["A", "AX", "B", "BX"]),
            query_intent(pools=[["A", "AX"]]),
            {"action": "query", "type": "volume"},
        ],
    )
    def test_batch_queries(self, validator, raw):
        """Anything spanning more than one pool is refused."""
        assert failure_kind(validator, raw) is FailureKind.BATCH_QUERY_UNSUPPORTED

    def test_unknown_token(self, validator):
        """Unregistered symbols are reported."""
        assert failure_kind(validator, query_intent(pool=["A", "XYZ"])) is FailureKind.UNKNOWN_TOKEN

"""Validation of model-generated intents into Commands.

Model output is untrusted, shapeless JSON. IntentValidator is the only way
into the closed Command union: every input maps to exactly one Command or
exactly one ValidationFailure, and the first violated rule wins.

Rule order:
1. not an object, or no usable "action"        -> MALFORMED_INPUT
2. swap: more than one input or output token    -> MULTI_TOKEN_SWAP_UNSUPPORTED
         bad shape / amount                     -> MALFORMED_INPUT
         unregistered symbol                    -> UNKNOWN_TOKEN
3. deposit: amounts not a list                  -> MALFORMED_INPUT
            not exactly two entries             -> UNSUPPORTED_TOKEN_COUNT
            bad entry / unregistered symbol     -> MALFORMED_INPUT / UNKNOWN_TOKEN
4. redeem: pool not two symbols                 -> MALFORMED_INPUT / UNSUPPORTED_TOKEN_COUNT
           unregistered symbol                  -> UNKNOWN_TOKEN
5. query: analysis outside the known kinds      -> UNSUPPORTED_ANALYSIS
          more than one pool                    -> BATCH_QUERY_UNSUPPORTED
6. any other action                             -> UNAUTHORIZED_OPERATION

Whether a pair exists is a chain read and is left to the dispatcher.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from nlswap.constants import WILDCARD_POOL_NAMES
from nlswap.models.commands import (
    DepositCommand,
    QueryCommand,
    QueryKind,
    RedeemCommand,
    SwapCommand,
    TokenAmount,
)
from nlswap.models.failures import ValidationFailure, ValidationResult
from nlswap.models.tokens import Token
from nlswap.tokens.registry import TokenRegistry

logger = structlog.get_logger()

_QUERY_KINDS = {kind.value: kind for kind in QueryKind}


class _Rejected(Exception):
    """Internal short-circuit carrying the first violated rule."""

    def __init__(self, failure: ValidationFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


def _parse_amount(value: Any) -> Decimal | None:
    """Parse a strictly positive, finite amount.

    Accepts ints, floats and numeric strings; booleans are not numbers here.
    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        amount = Decimal(str(value))
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return None
        if not amount.is_finite():
            return None
    else:
        return None

    if amount <= 0:
        return None
    return amount


def _is_symbol(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_multi(value: Any) -> bool:
    """True if a token slot names more than one token."""
    return isinstance(value, list) and len(value) > 1


def _single_symbol(value: Any) -> str | None:
    """A token slot holding exactly one symbol (a one-element list is unwrapped)."""
    if isinstance(value, list) and len(value) == 1:
        value = value[0]
    return value if _is_symbol(value) else None


def _pool_symbols(pool: Any) -> list[str] | None:
    """Symbols of a pool given as ["A", "B"] or "A/B"; None if neither."""
    if isinstance(pool, str) and "/" in pool:
        return [part.strip() for part in pool.split("/")]
    if isinstance(pool, list) and all(_is_symbol(s) for s in pool):
        return list(pool)
    return None


def _spans_many_pools(raw: dict[str, Any]) -> bool:
    """True if a query asks about more than a single pool."""
    if "pools" in raw:
        return True
    pool = raw.get("pool")
    if pool is None:
        return True
    if isinstance(pool, str):
        return pool.strip().lower() in WILDCARD_POOL_NAMES or pool.count("/") > 1
    if isinstance(pool, list):
        return len(pool) > 2 or any(isinstance(item, list | dict) for item in pool)
    return False


class IntentValidator:
    """Turns raw intent JSON into a Command using a token registry.

    Pure and deterministic: no I/O beyond in-memory registry lookups.
    """

    def __init__(self, registry: TokenRegistry) -> None:
        self.registry = registry
        self._handlers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "swap": self._validate_swap,
            "deposit": self._validate_deposit,
            "redeem": self._validate_redeem,
            "query": self._validate_query,
        }

    def validate(self, raw: Any) -> ValidationResult:
        """Validate one raw intent.

        Args:
            raw: Decoded JSON of unknown shape

        Returns:
            ValidationResult holding a Command or the first ValidationFailure
        """
        try:
            command = self._validate(raw)
        except _Rejected as rejected:
            logger.info(
                "intent_rejected",
                failure=rejected.failure.kind.value,
                detail=rejected.failure.detail,
            )
            return ValidationResult.fail(rejected.failure)

        logger.info("intent_accepted", action=command.action, command=command.describe())
        return ValidationResult.ok(command)

    def _validate(self, raw: Any) -> Any:
        if not isinstance(raw, dict):
            raise _Rejected(ValidationFailure.malformed())

        action = raw.get("action")
        if not isinstance(action, str) or not action.strip():
            raise _Rejected(ValidationFailure.malformed())

        handler = self._handlers.get(action.strip().lower())
        if handler is None:
            raise _Rejected(ValidationFailure.unauthorized())
        return handler(raw)

    def _resolve(self, symbol: str) -> Token:
        token = self.registry.resolve(symbol)
        if token is None:
            raise _Rejected(ValidationFailure.unknown_token(symbol))
        return token

    def _validate_swap(self, raw: dict[str, Any]) -> SwapCommand:
        token_in_raw = raw.get("tokenIn")
        token_out_raw = raw.get("tokenOut")
        if _is_multi(token_in_raw) or _is_multi(token_out_raw):
            raise _Rejected(ValidationFailure.multi_token_swap())

        symbol_in = _single_symbol(token_in_raw)
        symbol_out = _single_symbol(token_out_raw)
        amount = _parse_amount(raw.get("amount"))
        quote_only = raw.get("quoteOnly", False)
        if (
            symbol_in is None
            or symbol_out is None
            or amount is None
            or symbol_in == symbol_out
            or not isinstance(quote_only, bool)
        ):
            raise _Rejected(ValidationFailure.malformed())

        return SwapCommand(
            token_in=self._resolve(symbol_in),
            token_out=self._resolve(symbol_out),
            amount_in=amount,
            quote_only=quote_only,
        )

    def _validate_deposit(self, raw: dict[str, Any]) -> DepositCommand:
        entries = raw.get("amounts")
        if not isinstance(entries, list):
            raise _Rejected(ValidationFailure.malformed())
        if len(entries) != 2:
            raise _Rejected(ValidationFailure.unsupported_token_count(len(entries)))

        parsed: list[tuple[str, Decimal]] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise _Rejected(ValidationFailure.malformed())
            symbol = entry.get("token")
            amount = _parse_amount(entry.get("amount"))
            if not _is_symbol(symbol) or amount is None:
                raise _Rejected(ValidationFailure.malformed())
            parsed.append((symbol, amount))

        if parsed[0][0] == parsed[1][0]:
            raise _Rejected(ValidationFailure.malformed())

        first, second = (
            TokenAmount(token=self._resolve(symbol), amount=amount) for symbol, amount in parsed
        )
        return DepositCommand(amounts=(first, second))

    def _validate_redeem(self, raw: dict[str, Any]) -> RedeemCommand:
        symbols = _pool_symbols(raw.get("pool"))
        if symbols is None:
            raise _Rejected(ValidationFailure.malformed())
        if len(symbols) != 2:
            raise _Rejected(ValidationFailure.unsupported_token_count(len(symbols)))
        if symbols[0] == symbols[1] or not all(symbols):
            raise _Rejected(ValidationFailure.malformed())

        return RedeemCommand(pool=(self._resolve(symbols[0]), self._resolve(symbols[1])))

    def _validate_query(self, raw: dict[str, Any]) -> QueryCommand:
        kind_raw = raw.get("type")
        if not isinstance(kind_raw, str) or not kind_raw.strip():
            raise _Rejected(ValidationFailure.malformed())

        kind = _QUERY_KINDS.get(kind_raw.strip().lower())
        if kind is None:
            raise _Rejected(ValidationFailure.unsupported_analysis(kind_raw.strip()))

        if _spans_many_pools(raw):
            raise _Rejected(ValidationFailure.batch_query())

        symbols = _pool_symbols(raw.get("pool"))
        if symbols is None or len(symbols) != 2:
            raise _Rejected(ValidationFailure.malformed())
        if symbols[0] == symbols[1] or not all(symbols):
            raise _Rejected(ValidationFailure.malformed())

        return QueryCommand(
            kind=kind,
            pool=(self._resolve(symbols[0]), self._resolve(symbols[1])),
        )

"""Validation failures for model-generated intents.

Failures are values, never exceptions: the validator returns exactly one
ValidationResult per input, holding either a Command or a ValidationFailure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from nlswap.models.commands import (
    DepositCommand,
    QueryCommand,
    RedeemCommand,
    SwapCommand,
)

AnyCommand = SwapCommand | DepositCommand | RedeemCommand | QueryCommand


class FailureKind(Enum):
    """Reasons an intent cannot become a Command."""

    MALFORMED_INPUT = "malformed_input"
    UNKNOWN_TOKEN = "unknown_token"
    UNSUPPORTED_TOKEN_COUNT = "unsupported_token_count"
    MULTI_TOKEN_SWAP_UNSUPPORTED = "multi_token_swap_unsupported"
    UNSUPPORTED_ANALYSIS = "unsupported_analysis"
    PAIR_NOT_FOUND = "pair_not_found"
    UNAUTHORIZED_OPERATION = "unauthorized_operation"
    BATCH_QUERY_UNSUPPORTED = "batch_query_unsupported"


_MESSAGES = {
    FailureKind.MALFORMED_INPUT: "malformed prompt",
    FailureKind.UNKNOWN_TOKEN: "unknown token",
    FailureKind.UNSUPPORTED_TOKEN_COUNT: "only 2-token pools supported",
    FailureKind.MULTI_TOKEN_SWAP_UNSUPPORTED: "invalid multi-token swap",
    FailureKind.UNSUPPORTED_ANALYSIS: "unsupported analysis",
    FailureKind.PAIR_NOT_FOUND: "no pair found",
    FailureKind.UNAUTHORIZED_OPERATION: "unauthorized operation",
    FailureKind.BATCH_QUERY_UNSUPPORTED: "batch query not implemented",
}


@dataclass(frozen=True)
class ValidationFailure:
    """A single violated rule.

    Attributes:
        kind: Which rule was violated.
        detail: The offending value where the kind carries one: the symbol
            for UNKNOWN_TOKEN, the count for UNSUPPORTED_TOKEN_COUNT, the
            requested analysis for UNSUPPORTED_ANALYSIS.
    """

    kind: FailureKind
    detail: str | int | None = None

    @property
    def message(self) -> str:
        """User-facing description, surfaced verbatim."""
        base = _MESSAGES[self.kind]
        if self.detail is None:
            return base
        return f"{base}: {self.detail}"

    @classmethod
    def malformed(cls) -> ValidationFailure:
        return cls(FailureKind.MALFORMED_INPUT)

    @classmethod
    def unknown_token(cls, symbol: str) -> ValidationFailure:
        return cls(FailureKind.UNKNOWN_TOKEN, symbol)

    @classmethod
    def unsupported_token_count(cls, count: int) -> ValidationFailure:
        return cls(FailureKind.UNSUPPORTED_TOKEN_COUNT, count)

    @classmethod
    def multi_token_swap(cls) -> ValidationFailure:
        return cls(FailureKind.MULTI_TOKEN_SWAP_UNSUPPORTED)

    @classmethod
    def unsupported_analysis(cls, kind: str) -> ValidationFailure:
        return cls(FailureKind.UNSUPPORTED_ANALYSIS, kind)

    @classmethod
    def pair_not_found(cls) -> ValidationFailure:
        return cls(FailureKind.PAIR_NOT_FOUND)

    @classmethod
    def unauthorized(cls) -> ValidationFailure:
        return cls(FailureKind.UNAUTHORIZED_OPERATION)

    @classmethod
    def batch_query(cls) -> ValidationFailure:
        return cls(FailureKind.BATCH_QUERY_UNSUPPORTED)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one raw intent.

    Exactly one of command / failure is set.

    Examples:
        result = validator.validate({"action": "swap", ...})
        if result.is_valid:
            dispatcher.dispatch(result.command)
        else:
            show(result.failure.message)
    """

    command: AnyCommand | None = None
    failure: ValidationFailure | None = None

    def __post_init__(self) -> None:
        if (self.command is None) == (self.failure is None):
            raise ValueError("ValidationResult needs exactly one of command or failure")

    @property
    def is_valid(self) -> bool:
        return self.command is not None

    @classmethod
    def ok(cls, command: AnyCommand) -> ValidationResult:
        return cls(command=command)

    @classmethod
    def fail(cls, failure: ValidationFailure) -> ValidationResult:
        return cls(failure=failure)

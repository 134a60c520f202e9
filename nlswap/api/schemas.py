"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from nlswap.dispatch.outcome import DispatchOutcome
from nlswap.models.failures import ValidationFailure, ValidationResult
from nlswap.models.tokens import PoolListing


class IntentTextRequest(BaseModel):
    """A sentence to interpret and carry out."""

    prompt: str = Field(min_length=1)
    model: Literal["primary", "secondary"] = "primary"
    endpoint: str | None = None
    # False plans the command without sending any transaction
    execute: bool = True


class FailureBody(BaseModel):
    kind: str
    detail: str | int | None = None
    message: str

    @classmethod
    def from_failure(cls, failure: ValidationFailure) -> FailureBody:
        return cls(kind=failure.kind.value, detail=failure.detail, message=failure.message)


class ValidationBody(BaseModel):
    valid: bool
    command: dict[str, Any] | None = None
    description: str | None = None
    failure: FailureBody | None = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> ValidationBody:
        if result.command is not None:
            return cls(
                valid=True,
                command=result.command.model_dump(mode="json", by_alias=True),
                description=result.command.describe(),
            )
        assert result.failure is not None
        return cls(valid=False, failure=FailureBody.from_failure(result.failure))


class OutcomeBody(BaseModel):
    action: str
    steps: list[dict[str, Any]]
    effect: dict[str, Any] | None = None
    error: str | None = None
    error_detail: str | None = None
    failed_step: int | None = None
    completed_steps: int = 0
    tx_hashes: list[str] = Field(default_factory=list)
    executed: bool = False

    @classmethod
    def from_outcome(cls, outcome: DispatchOutcome) -> OutcomeBody:
        return cls(
            action=outcome.action,
            steps=[step.model_dump(mode="json", by_alias=True) for step in outcome.steps],
            effect=outcome.effect.model_dump(mode="json") if outcome.effect is not None else None,
            error=outcome.error.value if outcome.error is not None else None,
            error_detail=outcome.error_detail,
            failed_step=outcome.failed_step,
            completed_steps=outcome.completed_steps,
            tx_hashes=list(outcome.tx_hashes),
            executed=outcome.executed,
        )


class IntentResponse(BaseModel):
    """Result of one pass through the pipeline.

    `error` is set when the pipeline itself failed (model unreachable, chain
    not configured, unexpected error); rule violations and dispatch failures
    are reported in `validation` and `outcome`.
    """

    ok: bool
    prompt: str | None = None
    model_output: str | None = None
    intent: dict[str, Any] | None = None
    validation: ValidationBody | None = None
    outcome: OutcomeBody | None = None
    error: str | None = None
    error_detail: str | None = None


class ErrorBody(BaseModel):
    error: str
    detail: str | None = None
    failure: FailureBody | None = None


class PoolBody(BaseModel):
    address: str
    token0: str
    token1: str
    name: str

    @classmethod
    def from_listing(cls, listing: PoolListing) -> PoolBody:
        return cls(
            address=listing.address,
            token0=listing.token0,
            token1=listing.token1,
            name=listing.name,
        )

"""Intent service: the end-to-end pipeline behind the HTTP API.

text -> LLM -> structured intent -> IntentValidator -> CommandDispatcher

The service owns no chain state; every call reads a fresh snapshot through
the dispatcher's chain client.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Literal

import structlog

from nlswap.amm.quote import curve_for_reserves
from nlswap.chain.client import ChainClient, ChainClientError
from nlswap.config import Settings
from nlswap.constants import DEFAULT_TOKEN_DECIMALS
from nlswap.dispatch.dispatcher import CommandDispatcher
from nlswap.dispatch.outcome import (
    DispatchError,
    DispatchOutcome,
    ReservesEffect,
    SwapsEffect,
)
from nlswap.intent.validator import IntentValidator
from nlswap.llm.client import LLMClient, LLMRequest
from nlswap.models.events import CurvePoint, PricePoint
from nlswap.models.failures import ValidationFailure, ValidationResult
from nlswap.models.tokens import PoolListing
from nlswap.tokens.registry import TokenRegistry, get_default_registry

logger = structlog.get_logger()


class ServiceError(Exception):
    """Base class for pipeline errors surfaced to the API."""


class ChainNotConfigured(ServiceError):
    """A command needs the chain but no chain client is configured."""


class PoolQueryFailed(ServiceError):
    """A pool lookup was rejected by validation or dispatch."""

    def __init__(
        self,
        failure: ValidationFailure | None = None,
        error: DispatchError | None = None,
        detail: str | None = None,
    ) -> None:
        message = failure.message if failure is not None else (detail or str(error))
        super().__init__(message)
        self.failure = failure
        self.error = error
        self.detail = detail


@dataclass(frozen=True)
class IntentResult:
    """Everything one pass through the pipeline produced.

    Attributes:
        prompt: The user's text, if the pipeline started from text
        model_output: Raw model answer
        intent: Structured intent extracted from the answer
        validation: Command or first violated rule
        outcome: Dispatch result; None if validation failed
    """

    validation: ValidationResult
    prompt: str | None = None
    model_output: str | None = None
    intent: dict[str, Any] | None = None
    outcome: DispatchOutcome | None = None

    @property
    def is_ok(self) -> bool:
        return self.validation.is_valid and (self.outcome is None or self.outcome.is_ok)


class IntentService:
    """Runs text and raw intents through validation and dispatch.

    Args:
        registry: Token registry used for validation
        llm: Model client for natural-language input
        dispatcher: Command dispatcher; chain features are unavailable without one
    """

    def __init__(
        self,
        registry: TokenRegistry,
        llm: LLMClient | None = None,
        dispatcher: CommandDispatcher | None = None,
    ) -> None:
        self.registry = registry
        self.validator = IntentValidator(registry)
        self.llm = llm
        self.dispatcher = dispatcher

    @property
    def chain_enabled(self) -> bool:
        return self.dispatcher is not None

    def _require_dispatcher(self) -> CommandDispatcher:
        if self.dispatcher is None:
            raise ChainNotConfigured("No chain client configured (set RPC_URL and NLSWAP_ACCOUNT)")
        return self.dispatcher

    def validate(self, raw: Any) -> ValidationResult:
        return self.validator.validate(raw)

    def handle_text(
        self,
        prompt: str,
        model: Literal["primary", "secondary"] = "primary",
        endpoint: str | None = None,
        execute: bool = True,
    ) -> IntentResult:
        """Interpret a sentence and carry out the resulting command.

        A model answer without a JSON object is reported as malformed input.

        Raises:
            LLMClientError: If the model request fails
            ChainNotConfigured: If the command is valid but no chain is configured
        """
        if self.llm is None:
            raise ServiceError("No language model configured")

        response = self.llm.complete(LLMRequest(prompt=prompt, model=model, endpoint=endpoint))
        if response.structured is None:
            logger.info("intent_not_found", model=model, output_chars=len(response.output))
            return IntentResult(
                validation=ValidationResult.fail(ValidationFailure.malformed()),
                prompt=prompt,
                model_output=response.output,
            )

        result = self.handle_intent(response.structured, execute=execute)
        return IntentResult(
            validation=result.validation,
            prompt=prompt,
            model_output=response.output,
            intent=response.structured,
            outcome=result.outcome,
        )

    def handle_intent(self, raw: Any, execute: bool = True) -> IntentResult:
        """Validate a raw intent and plan or execute it.

        Raises:
            ChainNotConfigured: If the intent is valid but no chain is configured
        """
        validation = self.validate(raw)
        intent = raw if isinstance(raw, dict) else None
        if not validation.is_valid:
            return IntentResult(validation=validation, intent=intent)

        dispatcher = self._require_dispatcher()
        command = validation.command
        outcome = dispatcher.dispatch(command) if execute else dispatcher.plan(command)
        return IntentResult(validation=validation, intent=intent, outcome=outcome)

    def _query_pool(self, symbol_a: str, symbol_b: str, kind: str) -> DispatchOutcome:
        dispatcher = self._require_dispatcher()
        validation = self.validate({"action": "query", "type": kind, "pool": [symbol_a, symbol_b]})
        if not validation.is_valid:
            raise PoolQueryFailed(failure=validation.failure)

        outcome = dispatcher.plan(validation.command)
        if outcome.is_error:
            raise PoolQueryFailed(error=outcome.error, detail=outcome.error_detail)
        return outcome

    def price_history(self, symbol_a: str, symbol_b: str) -> list[PricePoint]:
        """Execution price of every Swap on the pair, in event order.

        Raises:
            PoolQueryFailed: Unknown token, missing pair or chain read failure
            ChainNotConfigured: If no chain is configured
        """
        outcome = self._query_pool(symbol_a, symbol_b, "swaps")
        effect = outcome.effect
        if not isinstance(effect, SwapsEffect):
            raise ServiceError(f"Unexpected swaps query result: {type(effect).__name__}")
        return effect.points

    def reserve_curve(self, symbol_a: str, symbol_b: str) -> list[CurvePoint]:
        """Sampled x * y = k curve of the pair at its current reserves.

        Raises:
            PoolQueryFailed: Unknown token, missing pair or chain read failure
            ChainNotConfigured: If no chain is configured
        """
        outcome = self._query_pool(symbol_a, symbol_b, "reserves")
        effect = outcome.effect
        if not isinstance(effect, ReservesEffect):
            raise ServiceError(f"Unexpected reserves query result: {type(effect).__name__}")

        token0 = self.registry.resolve(effect.token0)
        token1 = self.registry.resolve(effect.token1)
        return curve_for_reserves(
            effect.reserve0,
            effect.reserve1,
            decimals0=token0.decimals if token0 else DEFAULT_TOKEN_DECIMALS,
            decimals1=token1.decimals if token1 else DEFAULT_TOKEN_DECIMALS,
        )

    def list_pools(self) -> list[PoolListing]:
        """Every pair the factory has deployed, named by registry symbols.

        Raises:
            PoolQueryFailed: If the pairs cannot be read
            ChainNotConfigured: If no chain is configured
        """
        dispatcher = self._require_dispatcher()
        try:
            pairs = dispatcher.chain.list_pairs()
        except ChainClientError as e:
            logger.warning("pool_listing_failed", error=str(e))
            raise PoolQueryFailed(error=DispatchError.CHAIN_READ_FAILED, detail=str(e)) from e

        return [
            PoolListing(
                address=pair.address,
                token0=self._symbol(pair.token0),
                token1=self._symbol(pair.token1),
            )
            for pair in pairs
        ]

    def _symbol(self, address: str) -> str:
        token = self.registry.lookup_address(address)
        return token.symbol if token is not None else address


def create_service(
    settings: Settings,
    registry: TokenRegistry | None = None,
    chain: ChainClient | None = None,
) -> IntentService:
    """Build a service from settings.

    The chain is enabled when a client is passed in, or when both RPC_URL and
    an account are configured.
    """
    if registry is None:
        registry = (
            TokenRegistry.from_file(settings.tokens_file)
            if settings.tokens_file
            else get_default_registry()
        )

    llm = LLMClient(
        api_key=settings.openai_api_key,
        primary_model=settings.openai_model,
        secondary_model=settings.oss_model,
        timeout=settings.llm_timeout,
    )

    dispatcher = None
    if chain is None and settings.rpc_url and settings.account:
        from nlswap.chain.web3_client import Web3ChainClient

        logger.info("chain_enabled", rpc_url=settings.rpc_url[:50] + "...")
        chain = Web3ChainClient(
            settings.rpc_url,
            settings.factory_address,
            settings.account,
            private_key=settings.private_key,
        )
    if chain is not None and settings.account:
        dispatcher = CommandDispatcher.from_settings(chain, settings.account, registry, settings)
    else:
        logger.info("chain_disabled", reason="RPC_URL or NLSWAP_ACCOUNT not set")

    return IntentService(registry, llm=llm, dispatcher=dispatcher)


@lru_cache(maxsize=1)
def get_default_service() -> IntentService:
    """Service for this process, configured from the environment on first use."""
    return create_service(Settings.from_env())

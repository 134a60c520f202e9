"""API endpoints for the intent pipeline."""

import asyncio
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from nlswap.api.schemas import (
    ErrorBody,
    FailureBody,
    IntentResponse,
    IntentTextRequest,
    OutcomeBody,
    PoolBody,
    ValidationBody,
)
from nlswap.dispatch.outcome import DispatchError
from nlswap.llm.client import LLMClientError
from nlswap.models.events import CurvePoint, PricePoint
from nlswap.service import (
    ChainNotConfigured,
    IntentResult,
    IntentService,
    PoolQueryFailed,
    ServiceError,
    get_default_service,
)

logger = structlog.get_logger()

router = APIRouter()


def get_service() -> IntentService:
    """Dependency provider for the service instance.

    Override this in tests to inject a service with fake collaborators:
        app.dependency_overrides[get_service] = lambda: service

    Returns:
        The service used to handle requests.
    """
    return get_default_service()


def _intent_response(result: IntentResult) -> IntentResponse:
    return IntentResponse(
        ok=result.is_ok,
        prompt=result.prompt,
        model_output=result.model_output,
        intent=result.intent,
        validation=ValidationBody.from_result(result.validation),
        outcome=OutcomeBody.from_outcome(result.outcome) if result.outcome is not None else None,
    )


def _error(status_code: int, error: str, detail: str | None = None, **extra: Any) -> JSONResponse:
    body = ErrorBody(error=error, detail=detail, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post("/intent", response_model_exclude_none=True)
async def handle_intent(
    request: IntentTextRequest,
    service: IntentService = Depends(get_service),
) -> IntentResponse:
    """Interpret a sentence and carry out the command it describes.

    Error Handling:
        - Model request failure: error "llm_unavailable"
        - Valid command but no chain configured: error "chain_not_configured"
        - Unexpected exception: logged, error "internal_error"
    Rule violations and dispatch failures are reported in the body, not as
    errors.
    """
    logger.info("received_intent", model=request.model, prompt_chars=len(request.prompt))

    try:
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(
            None,
            lambda: service.handle_text(
                request.prompt,
                model=request.model,
                endpoint=request.endpoint,
                execute=request.execute,
            ),
        )
    except LLMClientError as e:
        logger.warning("llm_unavailable", error=str(e))
        return IntentResponse(ok=False, prompt=request.prompt, error="llm_unavailable", error_detail=str(e))
    except ChainNotConfigured as e:
        return IntentResponse(
            ok=False, prompt=request.prompt, error="chain_not_configured", error_detail=str(e)
        )
    except Exception:
        logger.exception("intent_pipeline_error", prompt_chars=len(request.prompt))
        return IntentResponse(ok=False, prompt=request.prompt, error="internal_error")

    logger.info(
        "returning_intent_result",
        ok=result.is_ok,
        valid=result.validation.is_valid,
        executed=result.outcome.executed if result.outcome else False,
    )
    return _intent_response(result)


@router.post("/intent/validate", response_model_exclude_none=True)
async def validate_intent(
    raw: Any = Body(...),
    service: IntentService = Depends(get_service),
) -> ValidationBody:
    """Validate a structured intent without touching the chain."""
    return ValidationBody.from_result(service.validate(raw))


@router.post("/commands/plan", response_model_exclude_none=True)
async def plan_command(
    raw: Any = Body(...),
    service: IntentService = Depends(get_service),
) -> IntentResponse:
    """Validate a structured intent and return its call steps without executing them."""
    try:
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(None, lambda: service.handle_intent(raw, execute=False))
    except ChainNotConfigured as e:
        return IntentResponse(ok=False, error="chain_not_configured", error_detail=str(e))
    except Exception:
        logger.exception("plan_error")
        return IntentResponse(ok=False, error="internal_error")

    return _intent_response(result)


async def _pool_query(run: Any) -> Any:
    try:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, run)
    except PoolQueryFailed as e:
        if e.failure is not None:
            return _error(
                400, e.failure.kind.value, e.failure.message, failure=FailureBody.from_failure(e.failure)
            )
        status = 404 if e.error is DispatchError.PAIR_NOT_FOUND else 502
        return _error(status, e.error.value if e.error else "query_failed", e.detail)
    except ChainNotConfigured as e:
        return _error(503, "chain_not_configured", str(e))
    except ServiceError as e:
        return _error(503, "service_unavailable", str(e))


@router.get("/pools")
async def list_pools(service: IntentService = Depends(get_service)) -> list[PoolBody]:
    """Every deployed pair, named by token symbols."""

    def run() -> list[PoolBody]:
        return [PoolBody.from_listing(listing) for listing in service.list_pools()]

    return await _pool_query(run)


@router.get("/pools/{token_a}/{token_b}/history")
async def pool_history(
    token_a: str,
    token_b: str,
    service: IntentService = Depends(get_service),
) -> list[PricePoint]:
    """Execution price of every swap on the pair, in event order."""
    return await _pool_query(lambda: service.price_history(token_a, token_b))


@router.get("/pools/{token_a}/{token_b}/curve")
async def pool_curve(
    token_a: str,
    token_b: str,
    service: IntentService = Depends(get_service),
) -> list[CurvePoint]:
    """The pair's x * y = k curve at its current reserves."""
    return await _pool_query(lambda: service.reserve_curve(token_a, token_b))

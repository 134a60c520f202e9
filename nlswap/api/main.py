"""FastAPI application for the intent pipeline.

Note: Authentication and rate limiting are not implemented at the application
level. They belong in the infrastructure layer (reverse proxy / gateway).
"""

import logging

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nlswap import __version__
from nlswap.api.endpoints import router
from nlswap.config import Settings

# Maximum request body size (1 MB); intents are a sentence or a small object
MAX_REQUEST_SIZE = 1024 * 1024

settings = Settings.from_env()


def configure_logging(level: str = "info") -> None:
    """Configure structlog with a console renderer at the given level."""
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


app = FastAPI(
    title="nlswap",
    description="Natural-language commands for a constant-product pair exchange",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "chain_configured": bool(settings.rpc_url and settings.account)}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - NLSWAP_HOST: Host to bind to (default: 0.0.0.0)
    - NLSWAP_PORT: Port to bind to (default: 8000)
    - NLSWAP_DEBUG: Enable debug/reload mode (default: false)
    - NLSWAP_LOG_LEVEL: Minimum log level (default: info)
    """
    configure_logging(settings.log_level)
    uvicorn.run(
        "nlswap.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()

"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from nlswap.constants import DEFAULT_FACTORY_ADDRESS, DEFAULT_FEE_BPS


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the service.

    Attributes:
        host: Host the HTTP API binds to
        port: Port the HTTP API binds to
        debug: Enable reload mode for the API server
        log_level: Minimum structlog level name (e.g. "info")
        rpc_url: Node RPC URL; chain features are disabled when unset
        factory_address: Pair factory contract
        account: Address that signs and receives every command's effects
        private_key: Optional key for local signing
        tokens_file: Optional JSON token table replacing the built-in one
        fee_bps: Pair fee in basis points used for quotes
        history_from_block: First block scanned for Swap events
        openai_api_key: Key for the primary model
        openai_model: Primary model name
        oss_model: Model name sent to the secondary (self-hosted) endpoint
        llm_timeout: Seconds before an LLM request is abandoned
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"
    rpc_url: str | None = None
    factory_address: str = DEFAULT_FACTORY_ADDRESS
    account: str | None = None
    private_key: str | None = None
    tokens_file: str | None = None
    fee_bps: int = DEFAULT_FEE_BPS
    history_from_block: int = 0
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    oss_model: str = "mistral"
    llm_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from NLSWAP_* and provider environment variables."""
        return cls(
            host=os.environ.get("NLSWAP_HOST", "0.0.0.0"),
            port=int(os.environ.get("NLSWAP_PORT", "8000")),
            debug=_env_bool("NLSWAP_DEBUG"),
            log_level=os.environ.get("NLSWAP_LOG_LEVEL", "info").lower(),
            rpc_url=os.environ.get("RPC_URL") or None,
            factory_address=os.environ.get("NLSWAP_FACTORY_ADDRESS", DEFAULT_FACTORY_ADDRESS),
            account=os.environ.get("NLSWAP_ACCOUNT") or None,
            private_key=os.environ.get("NLSWAP_PRIVATE_KEY") or None,
            tokens_file=os.environ.get("NLSWAP_TOKENS_FILE") or None,
            fee_bps=int(os.environ.get("NLSWAP_FEE_BPS", str(DEFAULT_FEE_BPS))),
            history_from_block=int(os.environ.get("NLSWAP_HISTORY_FROM_BLOCK", "0")),
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            openai_model=os.environ.get("NLSWAP_OPENAI_MODEL", "gpt-4o"),
            oss_model=os.environ.get("NLSWAP_OSS_MODEL", "mistral"),
            llm_timeout=float(os.environ.get("NLSWAP_LLM_TIMEOUT", "30")),
        )


# Default configuration instance
DEFAULT_SETTINGS = Settings()

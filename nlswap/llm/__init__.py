"""Language-model collaborator."""

from nlswap.llm.client import (
    LLMClient,
    LLMClientError,
    LLMRequest,
    LLMResponse,
    merge_ndjson_fragments,
)

__all__ = [
    "LLMClient",
    "LLMClientError",
    "LLMRequest",
    "LLMResponse",
    "merge_ndjson_fragments",
]

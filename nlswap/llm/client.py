"""Language-model collaborator that turns a sentence into intent JSON.

Two backends:
- primary: an OpenAI-compatible chat completions API
- secondary: a self-hosted model endpoint that streams NDJSON lines, each
  carrying a fragment of the answer in its "response" field

The structured result is untrusted and only ever reaches the core through
IntentValidator.
"""

from __future__ import annotations

import json
from typing import Any, Literal

import httpx
import structlog
from pydantic import BaseModel, Field

from nlswap.intent.parsing import extract_intent

logger = structlog.get_logger()

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

INTENT_INSTRUCTIONS = (
    "Translate the user's request about a token exchange into one JSON object. "
    'Use {"action": "swap", "tokenIn": S, "tokenOut": S, "amount": N, "quoteOnly": B}, '
    '{"action": "deposit", "amounts": [{"token": S, "amount": N}, ...]}, '
    '{"action": "redeem", "pool": [S, S]} or '
    '{"action": "query", "type": "reserves"|"swaps"|"volume", "pool": [S, S]}. '
    "Copy token symbols exactly as written. Reply with JSON only."
)


class LLMClientError(Exception):
    """The model request could not be completed."""


class LLMRequest(BaseModel):
    """A prompt for one of the configured models."""

    prompt: str = Field(min_length=1)
    model: Literal["primary", "secondary"] = "primary"
    # Required for the secondary model
    endpoint: str | None = None


class LLMResponse(BaseModel):
    """Model answer: raw text plus the intent object found in it, if any."""

    output: str
    structured: dict[str, Any] | None = None


def merge_ndjson_fragments(raw: str) -> str:
    """Concatenate the "response" fields of a streamed NDJSON body.

    Lines that are not JSON objects contribute nothing.
    """
    fragments = []
    for line in raw.strip().splitlines():
        try:
            parsed = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            fragments.append(str(parsed.get("response") or ""))
    return "".join(fragments)


class LLMClient:
    """Synchronous client for the primary and secondary models."""

    def __init__(
        self,
        api_key: str | None = None,
        primary_model: str = "gpt-4o",
        secondary_model: str = "mistral",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Create the client.

        Args:
            api_key: Key for the primary model API
            primary_model: Model name for the primary backend
            secondary_model: Model name sent to the secondary endpoint
            timeout: Request timeout in seconds
            http_client: Optional preconfigured httpx client (tests inject a
                MockTransport here)
        """
        self.api_key = api_key
        self.primary_model = primary_model
        self.secondary_model = secondary_model
        self._http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def complete(self, request: LLMRequest) -> LLMResponse:
        """Send the prompt to the requested model.

        Raises:
            LLMClientError: On missing configuration, transport or HTTP errors
        """
        if request.model == "primary":
            output = self._complete_primary(request.prompt)
        else:
            if not request.endpoint:
                raise LLMClientError("Secondary model requires an endpoint URL")
            output = self._complete_secondary(request.prompt, request.endpoint)

        structured = extract_intent(output)
        logger.info(
            "llm_completed",
            model=request.model,
            output_chars=len(output),
            structured=structured is not None,
        )
        return LLMResponse(output=output, structured=structured)

    def _post(self, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.post(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("llm_http_error", url=url, status=e.response.status_code)
            raise LLMClientError(f"Model request failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("llm_transport_error", url=url, error=str(e))
            raise LLMClientError(f"Model request failed: {e}") from e
        return response

    def _complete_primary(self, prompt: str) -> str:
        if not self.api_key:
            raise LLMClientError("Primary model requires an API key")

        response = self._post(
            OPENAI_CHAT_URL,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.primary_model,
                "temperature": 0,
                "response_format": {"type": "json_object"},
                "messages": [
                    {"role": "system", "content": INTENT_INSTRUCTIONS},
                    {"role": "user", "content": prompt},
                ],
            },
        )
        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMClientError("Primary model returned an unexpected response") from e
        return (content or "").strip()

    def _complete_secondary(self, prompt: str, endpoint: str) -> str:
        response = self._post(
            endpoint,
            json={"model": self.secondary_model, "prompt": f"{INTENT_INSTRUCTIONS}\n\n{prompt}"},
        )
        return merge_ndjson_fragments(response.text).strip()

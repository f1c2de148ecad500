"""Client for OpenAI-compatible chat completion endpoints."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..workspace.interfaces import (
    ModelHTTPError,
    ModelInvocationError,
    ModelInvoker,
    ModelResponseError,
    ModelUnavailableError,
)

logger = logging.getLogger(__name__)


def extract_completion_text(data: Any) -> str:
    """Pull ``choices[0].message.content`` out of a completion payload."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ModelResponseError("Completion payload has no choices[0].message.content") from exc
    if not isinstance(content, str):
        raise ModelResponseError("Completion content is not a string")
    return content


class ModelClient(ModelInvoker):
    """Invoke a chat completion with a system prompt and user content."""

    def __init__(self, timeout: float = 60.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout = timeout
        self._client = client

    async def invoke(
        self,
        base_url: str,
        api_key: str,
        model: str,
        system_prompt: str,
        user_content: str,
    ) -> str:
        """
        Run one completion and return the assistant text.

        Raises:
            ModelHTTPError: non-2xx response
            ModelResponseError: malformed JSON or missing content
            ModelUnavailableError: network failure or timeout
        """
        url = f"{base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
        }

        try:
            if self._client is not None:
                response = await self._client.post(url, headers=headers, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            logger.warning(f"Model request to {base_url} timed out")
            raise ModelUnavailableError(f"Model request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning(f"Model request to {base_url} failed: {exc}")
            raise ModelUnavailableError(f"Model endpoint unreachable: {exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            logger.warning(f"Model endpoint {base_url} returned HTTP {response.status_code}")
            raise ModelHTTPError(response.status_code, response.text[:500])

        try:
            data = response.json()
        except ValueError as exc:
            raise ModelResponseError("Model endpoint returned invalid JSON") from exc
        return extract_completion_text(data)


__all__ = [
    "ModelClient",
    "ModelInvocationError",
    "ModelHTTPError",
    "ModelResponseError",
    "ModelUnavailableError",
    "extract_completion_text",
]

"""OpenAI transport using the official SDK."""

import logging
import os
from typing import Any

import openai

from .protocol import ChatTransport

logger = logging.getLogger(__name__)


class OpenAITransport(ChatTransport):
    """
    Chat completion transport for the OpenAI API.

    Sends the payload as-is, so ``n`` candidates and the ``functions`` list
    are handled natively by the API.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        organization: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the OpenAI transport.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            base_url: Optional API base URL (proxies, compatible servers).
            organization: Optional organization id.
            timeout: Request timeout in seconds, enforced by the SDK.
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError(
                "API key required. Pass api_key or set OPENAI_API_KEY env var."
            )

        client_kwargs: dict[str, Any] = {"api_key": self._api_key}
        if base_url:
            client_kwargs["base_url"] = base_url
        if organization:
            client_kwargs["organization"] = organization
        if timeout is not None:
            client_kwargs["timeout"] = timeout

        self._client = openai.AsyncOpenAI(**client_kwargs)

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Call chat.completions.create and return the response as a dict."""
        response = await self._client.chat.completions.create(**payload)
        data = response.model_dump()
        logger.debug(f"OpenAI completion returned {len(data.get('choices') or [])} choices")
        return data

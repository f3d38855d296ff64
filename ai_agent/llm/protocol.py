"""Protocol definition for chat completion transports."""

from abc import ABC, abstractmethod
from typing import Any


class ChatTransport(ABC):
    """Abstract base class for chat completion transports."""

    @abstractmethod
    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Issue one chat completion request.

        Args:
            payload: Request body with keys:
                - model, temperature, top_p, max_tokens
                - n: Number of candidate completions
                - messages: List of message dicts ('role', 'content', 'name',
                  'function_call')
                - functions: Optional list of function definitions
                  ('name', 'description', 'parameters')

        Returns:
            Dict with:
                - "choices": List of {"message": {"content": ...,
                  "function_call": {"name": ..., "arguments": <JSON str>}}}

        Raises whatever the underlying client raises; the agent wraps it.
        """
        pass

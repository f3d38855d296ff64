"""Mock transport for deterministic testing."""

import copy
import json
from typing import Any

from .protocol import ChatTransport


class MockTransport(ChatTransport):
    """
    Mock transport that returns predetermined completion responses.

    Useful for testing without actual API calls.
    """

    def __init__(self, responses: list[Any] | None = None) -> None:
        """
        Initialize with predetermined responses.

        Args:
            responses: List of responses to return in order. Each entry is one of:
                - a full response dict with a "choices" key
                - a list of choice dicts
                - a string (a single text choice)
                - an exception instance, raised instead of responding
                Cycles through responses if more calls are made than responses provided.
        """
        self._responses = responses if responses is not None else ["Mock response"]
        self._call_index = 0
        self._call_history: list[dict] = []

    @staticmethod
    def text_choice(content: str) -> dict[str, Any]:
        """Build a plain text choice."""
        return {"message": {"role": "assistant", "content": content}}

    @staticmethod
    def function_choice(name: str, arguments: dict | str) -> dict[str, Any]:
        """Build a function call choice; dict arguments are JSON-encoded."""
        if not isinstance(arguments, str):
            arguments = json.dumps(arguments)
        return {
            "message": {
                "role": "assistant",
                "content": None,
                "function_call": {"name": name, "arguments": arguments},
            }
        }

    def add_response(self, response: Any) -> None:
        """Add a response to the queue."""
        self._responses.append(response)

    def set_responses(self, responses: list[Any]) -> None:
        """Set the response queue."""
        self._responses = responses
        self._call_index = 0

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Return the next predetermined response."""
        self._call_history.append({"payload": copy.deepcopy(payload)})

        response = self._get_next_response()

        if isinstance(response, BaseException):
            raise response
        if isinstance(response, dict):
            return response
        if isinstance(response, list):
            return {"choices": response}
        return {"choices": [self.text_choice(str(response))]}

    def _get_next_response(self) -> Any:
        """Get the next response, cycling if needed."""
        if not self._responses:
            return "Mock response"

        response = self._responses[self._call_index % len(self._responses)]
        self._call_index += 1
        return response

    def get_call_history(self) -> list[dict]:
        """Get the history of all calls made."""
        return self._call_history.copy()

    def get_last_payload(self) -> dict[str, Any] | None:
        """Get the payload of the most recent call."""
        if not self._call_history:
            return None
        return self._call_history[-1]["payload"]

    def get_call_count(self) -> int:
        """Get the total number of calls made."""
        return len(self._call_history)

    def reset(self) -> None:
        """Reset call index and history."""
        self._call_index = 0
        self._call_history.clear()

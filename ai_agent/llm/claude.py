"""Claude transport implementation using the Anthropic SDK."""

import asyncio
import json
import logging
import os
from typing import Any

import anthropic

from .protocol import ChatTransport

logger = logging.getLogger(__name__)


class ClaudeTransport(ChatTransport):
    """
    Chat completion transport for Claude via the Anthropic API.

    Translates the function-calling request shape into the messages API:
    functions become tools, and ``n`` candidates are produced by issuing
    ``n`` message requests and returning one choice per response.
    """

    DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize the Claude transport.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            model: Model to use. Overrides the model named in the payload
                unless that one is already a Claude model.
            timeout: Request timeout in seconds, enforced by the SDK.
        """
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError(
                "API key required. Pass api_key or set ANTHROPIC_API_KEY env var."
            )

        client_kwargs: dict[str, Any] = {"api_key": self._api_key}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = anthropic.AsyncAnthropic(**client_kwargs)
        self._model = model

    def get_model(self, payload: dict[str, Any]) -> str:
        """Resolve the model for a payload."""
        requested = payload.get("model") or ""
        if requested.startswith("claude"):
            return requested
        return self._model or self.DEFAULT_MODEL

    async def create_chat_completion(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Issue ``n`` message requests and assemble them as choices."""
        create_kwargs = self._build_kwargs(payload)
        n = int(payload.get("n") or 1)

        responses = await asyncio.gather(
            *(self._client.messages.create(**create_kwargs) for _ in range(n))
        )
        choices = [self._parse_response(index, r) for index, r in enumerate(responses)]
        logger.debug(f"Claude completion returned {len(choices)} choices")
        return {"choices": choices}

    def _build_kwargs(self, payload: dict[str, Any]) -> dict[str, Any]:
        system, messages = self._normalize_messages(payload.get("messages", []))

        create_kwargs: dict[str, Any] = {
            "model": self.get_model(payload),
            "max_tokens": payload.get("max_tokens") or 4096,
            "messages": messages,
        }
        if system:
            create_kwargs["system"] = system
        # Newer Claude models reject temperature and top_p together
        if payload.get("temperature") is not None:
            create_kwargs["temperature"] = payload["temperature"]

        functions = payload.get("functions")
        if functions:
            create_kwargs["tools"] = self._normalize_tools(functions)
            create_kwargs["tool_choice"] = {"type": "any"}

        return create_kwargs

    def _normalize_messages(self, messages: list[dict]) -> tuple[str, list[dict]]:
        """Normalize messages to Anthropic format, collecting system prompts."""
        system_parts: list[str] = []
        normalized: list[dict] = []
        for msg in messages:
            role = msg.get("role", "user")
            content = msg.get("content")

            # Anthropic handles system separately
            if role == "system":
                if content:
                    system_parts.append(content)
                continue

            if role == "assistant" and msg.get("function_call"):
                call = msg["function_call"]
                text = f"Called function {call.get('name')} with arguments {call.get('arguments')}"
                self._append(normalized, "assistant", text)
                continue

            if role == "function":
                text = f"Function {msg.get('name')} returned: {content or ''}"
                self._append(normalized, "user", text)
                continue

            self._append(normalized, role, content or "")

        if not normalized or normalized[0]["role"] != "user":
            normalized.insert(0, {"role": "user", "content": "Begin."})
        return "\n\n".join(system_parts), normalized

    @staticmethod
    def _append(normalized: list[dict], role: str, text: str) -> None:
        """Append a turn, merging consecutive turns of the same role."""
        if normalized and normalized[-1]["role"] == role:
            normalized[-1]["content"] = f"{normalized[-1]['content']}\n\n{text}"
        else:
            normalized.append({"role": role, "content": text})

    def _normalize_tools(self, functions: list[dict]) -> list[dict]:
        """Normalize function definitions to Anthropic tools."""
        normalized = []
        for function in functions:
            normalized.append(
                {
                    "name": function["name"],
                    "description": function.get("description", ""),
                    "input_schema": function.get(
                        "parameters",
                        {
                            "type": "object",
                            "properties": {},
                        },
                    ),
                }
            )
        return normalized

    def _parse_response(self, index: int, response: Any) -> dict[str, Any]:
        """Parse one API response into a choice."""
        content = ""
        function_call = None

        for block in response.content:
            if block.type == "text":
                content += block.text
            elif block.type == "tool_use" and function_call is None:
                function_call = {
                    "name": block.name,
                    "arguments": json.dumps(block.input),
                }

        message: dict[str, Any] = {"role": "assistant", "content": content or None}
        if function_call is not None:
            message["function_call"] = function_call
        return {
            "index": index,
            "message": message,
            "finish_reason": response.stop_reason,
        }

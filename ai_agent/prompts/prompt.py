"""Prompt with conversation messages and ``{{placeholder}}`` substitution."""

import json
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Sequence

from ai_agent.core.types import AgentMessage, FunctionCall, Role

PLACEHOLDER_PATTERN = re.compile(r"\{\{(.*?)\}\}")

FUNCTION_TERMINAL_PROMPT = "The next message should exclusively invoke the function."


@dataclass(frozen=True)
class AgentPrompt:
    """
    System prompt plus additional conversation messages.

    Prompts are immutable: every mutator returns a new prompt, so a request
    can extend the agent's prompt without touching it. Subclasses customize
    message preparation by overriding the ``prepare_*`` hooks.
    """

    prompt: str
    messages: tuple[AgentMessage, ...] = ()

    def get_prompt(self) -> str:
        return self.prompt

    def get_messages(self) -> list[AgentMessage]:
        return list(self.messages)

    def prepare_input(self, input: Any, for_functions: Sequence[str]) -> str | list[str] | None:
        """
        Turn the request input into user message text.

        None becomes an empty message, dicts and lists are JSON-encoded,
        anything else is converted with ``str``. Return a list to emit
        several user messages, or None to emit none.
        """
        if input is None:
            return ""
        if isinstance(input, (dict, list, tuple)):
            return json.dumps(input, default=str)
        return str(input)

    def prepare_prompt(self, prompt: str, input: Any, for_functions: Sequence[str]) -> str | None:
        """Return the system prompt text."""
        return prompt

    def prepare_terminal_prompt(self, input: Any, for_functions: Sequence[str]) -> str | None:
        """Return a closing system message, if any."""
        if for_functions:
            return FUNCTION_TERMINAL_PROMPT
        return None

    def prepare_messages(self, input: Any, for_functions: Sequence[str]) -> list[dict[str, Any]]:
        """
        Build the message list sent to the model.

        Order: system prompt, user input message(s), stored messages,
        terminal system prompt. The default hooks always emit the system
        prompt; a ``prepare_prompt`` override returning None leaves it out.
        """
        messages: list[dict[str, Any]] = []

        system = self.prepare_prompt(self.prompt, input, for_functions)
        if system is not None:
            messages.append(AgentMessage(role=Role.SYSTEM, content=system).to_dict())

        prepared_input = self.prepare_input(input, for_functions)
        if isinstance(prepared_input, list):
            for text in prepared_input:
                messages.append(AgentMessage(role=Role.USER, content=text).to_dict())
        elif prepared_input is not None:
            messages.append(AgentMessage(role=Role.USER, content=prepared_input).to_dict())

        for message in self.messages:
            messages.append(message.to_dict())

        terminal = self.prepare_terminal_prompt(input, for_functions)
        if terminal is not None:
            messages.append(AgentMessage(role=Role.SYSTEM, content=terminal).to_dict())

        return messages

    def add_message(self, message: AgentMessage) -> "AgentPrompt":
        return replace(self, messages=self.messages + (message,))

    def add_user_message(self, message: str) -> "AgentPrompt":
        return self.add_message(AgentMessage(role=Role.USER, content=message))

    def add_system_message(self, message: str) -> "AgentPrompt":
        return self.add_message(AgentMessage(role=Role.SYSTEM, content=message))

    def add_agent_message(self, message: str) -> "AgentPrompt":
        return self.add_message(AgentMessage(role=Role.ASSISTANT, content=message))

    def add_agent_function_result(self, result: FunctionCall) -> "AgentPrompt":
        """Record a function call previously made by the model."""
        return self.add_message(AgentMessage(role=Role.ASSISTANT, function_call=result))

    def add_function_message(self, name: str, message: str) -> "AgentPrompt":
        """Record the output of a function for the model to read."""
        return self.add_message(AgentMessage(role=Role.FUNCTION, content=message, name=name))

    def clear_messages(self) -> "AgentPrompt":
        return replace(self, messages=())

    def set(self, placeholders: dict[str, Any]) -> "AgentPrompt":
        """Return a prompt with ``{{key}}`` placeholders replaced."""
        return replace(self, prompt=self.set_placeholders(self.prompt, placeholders))

    def list_placeholders(self) -> list[str]:
        """Unique placeholder names in order of first appearance."""
        return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(self.prompt)))

    def copy(self) -> "AgentPrompt":
        return replace(self)

    @staticmethod
    def set_placeholders(prompt: str, placeholders: dict[str, Any]) -> str:
        for key, value in placeholders.items():
            prompt = prompt.replace("{{" + key + "}}", str(value))
        return prompt

    @classmethod
    def from_string(cls, prompt: str) -> "AgentPrompt":
        return cls(prompt)

    @classmethod
    def from_file(cls, path: str | Path, encoding: str = "utf-8") -> "AgentPrompt":
        return cls(Path(path).read_text(encoding=encoding))

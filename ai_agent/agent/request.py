"""Immutable builder for agent requests."""

import asyncio
from dataclasses import dataclass, replace
from typing import Any, AsyncIterator, Generic, Sequence, TypeVar

from ai_agent.agent.engine import Agent
from ai_agent.core.types import AgentRequest, AgentResult, FunctionCall
from ai_agent.prompts.prompt import AgentPrompt

T = TypeVar("T")


@dataclass(frozen=True)
class AgentRequestBuilder(Generic[T]):
    """
    Accumulates the settings of a request to an agent.

    Every setter returns a new builder, so a partially configured builder
    can be reused as a template. The prompt starts as the agent's prompt and
    is extended per request; the agent's own prompt is never modified.

    Usage:
        results = await (
            AgentRequestBuilder.create(agent)
            .n(4)
            .min(2)
            .function("rate")
            .request("Hello World")
        )
    """

    agent: Agent
    base_prompt: AgentPrompt
    function_names: tuple[str, ...] = ()
    count: int = 1
    min_accepted: int | None = None
    required_accepted: int | None = None
    max_tokens_override: int | None = None

    @classmethod
    def create(cls, agent: Agent, all_functions: bool = True) -> "AgentRequestBuilder[T]":
        """
        Start a builder for ``agent``.

        Args:
            agent: The agent that will execute the request.
            all_functions: Allow every registered function (the default).
                Pass False for a plain text request.
        """
        functions = tuple(agent.get_function_names()) if all_functions else ()
        return cls(agent=agent, base_prompt=agent.get_prompt().copy(), function_names=functions)

    def prompt(self, prompt: AgentPrompt) -> "AgentRequestBuilder[T]":
        return replace(self, base_prompt=prompt.copy())

    def n(self, n: int) -> "AgentRequestBuilder[T]":
        """Number of candidates to request."""
        return replace(self, count=n)

    def min(self, min: int) -> "AgentRequestBuilder[T]":
        """Stop processing candidates once this many were accepted."""
        return replace(self, min_accepted=min)

    def required(self, required: int) -> "AgentRequestBuilder[T]":
        """Number of accepted candidates needed for the request to succeed."""
        return replace(self, required_accepted=required)

    def max_tokens(self, max_tokens: int) -> "AgentRequestBuilder[T]":
        return replace(self, max_tokens_override=max_tokens)

    def with_tries(self, tries: int) -> "AgentRequestBuilder[T]":
        """Request ``tries`` candidates and keep the first accepted one."""
        return replace(self, count=tries, min_accepted=1, required_accepted=1)

    def functions(self, functions: Sequence[str]) -> "AgentRequestBuilder[T]":
        return replace(self, function_names=tuple(functions))

    def function(self, func: str) -> "AgentRequestBuilder[T]":
        return replace(self, function_names=(func,))

    def all_functions(self) -> "AgentRequestBuilder[T]":
        return replace(self, function_names=tuple(self.agent.get_function_names()))

    def no_functions(self) -> "AgentRequestBuilder[T]":
        return replace(self, function_names=())

    def add_user_message(self, message: str) -> "AgentRequestBuilder[T]":
        return replace(self, base_prompt=self.base_prompt.add_user_message(message))

    def add_agent_message(self, message: str) -> "AgentRequestBuilder[T]":
        return replace(self, base_prompt=self.base_prompt.add_agent_message(message))

    def add_function_message(self, name: str, message: str) -> "AgentRequestBuilder[T]":
        return replace(self, base_prompt=self.base_prompt.add_function_message(name, message))

    def add_agent_function_result(self, result: FunctionCall) -> "AgentRequestBuilder[T]":
        return replace(self, base_prompt=self.base_prompt.add_agent_function_result(result))

    def set(self, placeholders: dict[str, Any]) -> "AgentRequestBuilder[T]":
        """Replace ``{{key}}`` placeholders in the prompt."""
        return replace(self, base_prompt=self.base_prompt.set(placeholders))

    def build(self, input: Any) -> AgentRequest:
        """
        Assemble and validate the request.

        Raises:
            ConfigurationError: If the quotas are inconsistent.
        """
        request = AgentRequest(
            prompt=self.base_prompt,
            functions=self.function_names,
            input=input,
            n=self.count,
            min=self.min_accepted,
            required=self.required_accepted,
            max_tokens=self.max_tokens_override,
        )
        request.validate()
        return request

    async def request(self, input: Any) -> list[AgentResult[T]]:
        """Execute the request and return all accepted results."""
        return await self.agent.execute(self.build(input))

    async def stream(self, input: Any) -> AsyncIterator[AgentResult[T]]:
        """Execute the request and yield accepted results one by one."""
        for result in await self.request(input):
            yield result

    def request_sync(self, input: Any) -> list[AgentResult[T]]:
        """Blocking variant of ``request`` for scripts without an event loop."""
        return asyncio.run(self.request(input))

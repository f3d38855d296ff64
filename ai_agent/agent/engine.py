"""Agent: one completion request, then ordered dispatch of its candidates."""

import inspect
import json
import logging
from enum import Enum
from typing import Any, Callable, Iterable, Sequence, TypeVar

from ai_agent.agent.registry import FunctionRegistry
from ai_agent.core.errors import (
    ApiTransportError,
    ArgumentParseError,
    ConfigurationError,
    NoAcceptableCandidateError,
)
from ai_agent.core.types import AgentRequest, AgentResult, Candidate, FunctionSpec
from ai_agent.llm.options import AgentOptions
from ai_agent.llm.protocol import ChatTransport
from ai_agent.prompts.prompt import AgentPrompt
from ai_agent.schema.descriptors import Member

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestState(str, Enum):
    """Lifecycle of a single request."""

    CONFIGURING = "configuring"
    REQUESTING = "requesting"
    SCANNING = "scanning"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Agent:
    """
    An agent that asks a chat model for completions and dispatches the
    function calls it makes.

    One request works like this:
    1. Validate the quota triple (n, min, required)
    2. Ask the transport for ``n`` candidates in a single call
    3. Walk the candidates in order: dispatch function calls, accept text
       replies when no function was requested, skip failures
    4. Stop early once ``min`` candidates were accepted
    5. Succeed if at least ``required`` candidates were accepted

    A registered function can abort the whole request by raising
    FatalInterruptError. Candidates are processed one at a time, so a
    dispatch with side effects is never overlapped with another one, and
    nothing is rolled back if the caller abandons the request midway.

    Usage:
        class RecordAgent(Agent):
            def __init__(self, transport):
                super().__init__(transport, AgentPrompt.from_string("..."))
                self.register_function(self.select, "select", "Select records")

            def select(self, ids: list[int]) -> list[int]:
                return ids

        results = await RecordAgent(transport).request_function("select", records, n=3)
    """

    def __init__(
        self,
        transport: ChatTransport,
        prompt: AgentPrompt,
        options: AgentOptions | None = None,
        functions: Iterable[FunctionSpec] = (),
    ) -> None:
        self._transport = transport
        self._prompt = prompt
        self._options = options or AgentOptions.DEFAULT
        self._registry = FunctionRegistry(functions)

    def register_function(
        self,
        func: Callable[..., Any],
        name: str,
        description: str | None = None,
        parameters: Sequence[Member] | None = None,
    ) -> FunctionSpec:
        """Register a function for the model to call."""
        return self._registry.register(func, name, description, parameters)

    def get_function_specs(self) -> list[dict[str, Any]]:
        return self._registry.specs()

    def get_function_names(self) -> list[str]:
        return self._registry.names()

    def get_options(self) -> AgentOptions:
        return self._options

    def get_transport(self) -> ChatTransport:
        return self._transport

    def get_prompt(self) -> AgentPrompt:
        return self._prompt

    def call(self, name: str, *args: Any) -> Any:
        """Call a registered function by name with positional arguments."""
        return self._registry.dispatch(name, args)

    def process_text_result(self, text: str | None, for_functions: Sequence[str]) -> AgentResult | None:
        """
        Decide whether a text candidate is accepted.

        Text is only accepted when no function was requested. Override to
        post-process or validate text replies.
        """
        if for_functions:
            return None
        return AgentResult(value=text)

    async def execute(self, request: AgentRequest) -> list[AgentResult]:
        """
        Run a request through the candidate selection protocol.

        Returns:
            Accepted results in the order the API returned the candidates.

        Raises:
            ConfigurationError: Invalid quotas or no messages; no API call made.
            ApiTransportError: The completion call failed.
            FatalInterruptError: A dispatched function aborted the request.
            AgentError: The last recorded candidate error when too few
                candidates were accepted, else NoAcceptableCandidateError.
        """
        state = RequestState.CONFIGURING
        request.validate()
        for_functions = list(request.functions)

        payload = self._build_payload(request)
        state = self._transition(state, RequestState.REQUESTING)
        logger.info(
            f"Requesting {request.n} completions "
            f"(min={request.min}, required={request.required_count}, functions={for_functions})"
        )
        response = await self._complete(payload)

        state = self._transition(state, RequestState.SCANNING)
        results: list[AgentResult] = []
        error: Exception | None = None
        for index, choice in enumerate(response.get("choices") or []):
            candidate = Candidate.from_choice(index, choice)
            if candidate.is_function_call:
                try:
                    result = await self._dispatch_candidate(candidate)
                except Exception as e:
                    if getattr(e, "fatal", False):
                        self._transition(state, RequestState.FAILED)
                        logger.info(f"Request interrupted by candidate {index}: {e}")
                        raise
                    logger.warning(f"Skipping candidate {index}: {e}")
                    error = e
                    continue
            else:
                result = self.process_text_result(candidate.content, for_functions)
                if result is None:
                    logger.debug(f"Ignoring text candidate {index}")
                    continue

            results.append(result)
            if request.min is not None and len(results) >= request.min:
                logger.debug(f"Accepted {len(results)} candidates, stopping early")
                break

        if len(results) < request.required_count:
            self._transition(state, RequestState.FAILED)
            logger.info(
                f"Request failed: {len(results)} of {request.required_count} required candidates accepted"
            )
            if error is not None:
                raise error
            raise NoAcceptableCandidateError()

        self._transition(state, RequestState.SUCCEEDED)
        logger.info(f"Request succeeded with {len(results)} accepted candidates")
        return results

    def _build_payload(self, request: AgentRequest) -> dict[str, Any]:
        payload: dict[str, Any] = self._options.to_request_kwargs()
        payload["n"] = request.n
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        messages = request.prompt.prepare_messages(request.input, list(request.functions))
        if not messages:
            raise ConfigurationError("No messages")
        payload["messages"] = messages

        functions = self._registry.specs(request.functions)
        if functions:
            payload["functions"] = functions
        return payload

    async def _complete(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Issue the single transport call, wrapping any failure."""
        try:
            return await self._transport.create_chat_completion(payload)
        except Exception as e:
            logger.error(f"Completion request failed: {e}")
            raise ApiTransportError(_error_payload(e)) from e

    async def _dispatch_candidate(self, candidate: Candidate) -> AgentResult:
        function_call = candidate.function_call
        try:
            arguments = json.loads(function_call.arguments)
        except json.JSONDecodeError as e:
            raise ArgumentParseError(function_call.name, function_call.arguments, str(e)) from e
        if not isinstance(arguments, dict):
            raise ArgumentParseError(
                function_call.name, function_call.arguments, "expected a JSON object"
            )

        logger.debug(f"Calling {function_call.name}({function_call.arguments})")
        value = self._registry.dispatch_named(function_call.name, arguments)
        if inspect.isawaitable(value):
            value = await value
        return AgentResult(value=value, function_call=function_call)

    def _transition(self, current: RequestState, new: RequestState) -> RequestState:
        logger.debug(f"Request state {current.value} -> {new.value}")
        return new

    async def request_any_with(
        self,
        prompt: AgentPrompt,
        for_functions: Sequence[str],
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult]:
        """Request completions with an explicit prompt and function subset."""
        request = AgentRequest(
            prompt=prompt,
            functions=tuple(for_functions),
            input=input,
            n=n,
            min=min,
            required=required,
            max_tokens=max_tokens,
        )
        return await self.execute(request)

    async def request_any(
        self,
        for_functions: Sequence[str],
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult]:
        """Request completions with the agent's prompt and a function subset."""
        return await self.request_any_with(
            self._prompt, for_functions, input, n, min, required, max_tokens
        )

    async def request(
        self,
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult]:
        """Request completions allowing every registered function."""
        return await self.request_any(
            self.get_function_names(), input, n, min, required, max_tokens
        )

    async def request_with(
        self,
        prompt: AgentPrompt,
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult]:
        """Request completions with a custom prompt and every registered function."""
        return await self.request_any_with(
            prompt, self.get_function_names(), input, n, min, required, max_tokens
        )

    async def request_function(
        self,
        func: str,
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult]:
        """Request completions that must call ``func``."""
        return await self.request_any([func], input, n, min, required, max_tokens)

    async def request_function_with(
        self,
        prompt: AgentPrompt,
        func: str,
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult]:
        """Request completions with a custom prompt that must call ``func``."""
        return await self.request_any_with(prompt, [func], input, n, min, required, max_tokens)

    async def request_text_with(
        self,
        prompt: AgentPrompt,
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult[str]]:
        """Request plain text completions with a custom prompt."""
        return await self.request_any_with(prompt, [], input, n, min, required, max_tokens)

    async def request_text(
        self,
        input: Any,
        n: int = 1,
        min: int | None = None,
        required: int | None = None,
        max_tokens: int | None = None,
    ) -> list[AgentResult[str]]:
        """Request plain text completions."""
        return await self.request_any([], input, n, min, required, max_tokens)


def _error_payload(error: Exception) -> Any:
    """Extract the provider's error body from an SDK exception."""
    body = getattr(error, "body", None)
    if isinstance(body, dict):
        return body.get("error", body)
    if body is not None:
        return body
    return {"message": str(error)}

"""Tests for AgentRequestBuilder."""

import asyncio

import pytest

from ai_agent.agent.engine import Agent
from ai_agent.agent.request import AgentRequestBuilder
from ai_agent.core.errors import ConfigurationError
from ai_agent.core.types import FunctionCall
from ai_agent.llm.mock import MockTransport
from ai_agent.prompts.prompt import AgentPrompt


class TestBuilderSettings:
    """Tests for accumulating settings."""

    def test_create_defaults(self, record_agent) -> None:
        """Test a new builder allows every function and one candidate."""
        builder = AgentRequestBuilder.create(record_agent)

        request = builder.build("input")

        assert request.functions == ("select_records", "async_select_records", "reject")
        assert request.n == 1
        assert request.min is None
        assert request.required_count == 1
        assert request.prompt == record_agent.get_prompt()

    def test_create_without_functions(self, record_agent) -> None:
        """Test all_functions=False starts a text request."""
        request = AgentRequestBuilder.create(record_agent, all_functions=False).build(None)

        assert request.functions == ()
        assert not request.is_function_call

    def test_setters_return_new_builders(self, record_agent) -> None:
        """Test configuring a builder leaves the original untouched."""
        base = AgentRequestBuilder.create(record_agent)

        configured = base.n(4).min(2).required(1).function("select_records").max_tokens(100)

        assert base.count == 1
        assert base.function_names == ("select_records", "async_select_records", "reject")
        request = configured.build([])
        assert (request.n, request.min, request.required, request.max_tokens) == (4, 2, 1, 100)
        assert request.functions == ("select_records",)

    def test_with_tries(self, record_agent) -> None:
        """Test with_tries asks for several candidates and keeps the first."""
        request = AgentRequestBuilder.create(record_agent).with_tries(3).build([])

        assert (request.n, request.min, request.required) == (3, 1, 1)

    def test_function_selection(self, record_agent) -> None:
        """Test the function subset setters."""
        builder = AgentRequestBuilder.create(record_agent)

        assert builder.no_functions().function_names == ()
        assert builder.functions(["reject", "select_records"]).function_names == (
            "reject",
            "select_records",
        )
        assert builder.no_functions().all_functions().function_names == builder.function_names

    def test_messages_do_not_touch_agent_prompt(self, record_agent) -> None:
        """Test request messages extend a copy of the agent's prompt."""
        call = FunctionCall("select_records", '{"truthful_ids": [1], "untruthful_ids": []}')

        request = (
            AgentRequestBuilder.create(record_agent)
            .add_user_message("Be strict")
            .add_agent_message("Understood")
            .add_agent_function_result(call)
            .add_function_message("select_records", "[1]")
            .build([])
        )

        assert record_agent.get_prompt().get_messages() == []
        assert [m.to_dict() for m in request.prompt.get_messages()] == [
            {"role": "user", "content": "Be strict"},
            {"role": "assistant", "content": "Understood"},
            {"role": "assistant", "function_call": call.to_dict()},
            {"role": "function", "content": "[1]", "name": "select_records"},
        ]

    def test_placeholders(self, mock_transport) -> None:
        """Test set() fills the prompt's placeholders."""
        agent = Agent(mock_transport, AgentPrompt("Translate into {{language}}"))

        request = AgentRequestBuilder.create(agent).set({"language": "French"}).build("Hi")

        assert request.prompt.get_prompt() == "Translate into French"
        assert agent.get_prompt().get_prompt() == "Translate into {{language}}"

    def test_prompt_override(self, record_agent) -> None:
        """Test prompt() replaces the base prompt."""
        request = AgentRequestBuilder.create(record_agent).prompt(AgentPrompt("Other")).build([])

        assert request.prompt.get_prompt() == "Other"

    def test_build_validates_quotas(self, record_agent, mock_transport) -> None:
        """Test invalid quotas fail at build time."""
        builder = AgentRequestBuilder.create(record_agent).n(2).required(3)

        with pytest.raises(ConfigurationError, match="required 3 > n 2"):
            builder.build([])

        with pytest.raises(ConfigurationError):
            asyncio.run(builder.request([]))

        assert mock_transport.get_call_count() == 0


class TestBuilderExecution:
    """Tests for running requests from a builder."""

    def test_request(self, record_agent, mock_transport, select_choice) -> None:
        """Test request() runs through the agent."""
        mock_transport.set_responses([[select_choice([1, 2]), select_choice([4])]])

        results = asyncio.run(
            AgentRequestBuilder.create(record_agent).n(2).function("select_records").request([])
        )

        assert [r.value for r in results] == [[1, 2], [4]]
        payload = mock_transport.get_last_payload()
        assert payload["n"] == 2
        assert [f["name"] for f in payload["functions"]] == ["select_records"]

    def test_request_carries_extra_messages(self, record_agent, mock_transport, select_choice) -> None:
        """Test builder messages follow the user input in the payload."""
        mock_transport.set_responses([[select_choice([1])]])

        asyncio.run(
            AgentRequestBuilder.create(record_agent)
            .add_user_message("Only ids below 3")
            .request(["record"])
        )

        messages = mock_transport.get_last_payload()["messages"]
        assert messages[1] == {"role": "user", "content": '["record"]'}
        assert messages[2] == {"role": "user", "content": "Only ids below 3"}

    def test_stream(self, text_agent, mock_transport) -> None:
        """Test stream() yields each accepted result."""
        mock_transport.set_responses(
            [[MockTransport.text_choice("a"), MockTransport.text_choice("b")]]
        )

        async def collect() -> list[str]:
            builder = AgentRequestBuilder.create(text_agent).n(2)
            return [result.value async for result in builder.stream("go")]

        assert asyncio.run(collect()) == ["a", "b"]

    def test_request_sync(self, text_agent, mock_transport) -> None:
        """Test the blocking variant."""
        mock_transport.set_responses(["done"])

        results = AgentRequestBuilder.create(text_agent).request_sync("go")

        assert results[0].value == "done"

    def test_builder_is_reusable(self, record_agent, mock_transport, select_choice) -> None:
        """Test one builder can run several requests."""
        mock_transport.set_responses([[select_choice([1])], [select_choice([2])]])
        builder = AgentRequestBuilder.create(record_agent).function("select_records")

        first = builder.request_sync([])
        second = builder.request_sync([])

        assert first[0].value == [1]
        assert second[0].value == [2]
        assert mock_transport.get_call_count() == 2

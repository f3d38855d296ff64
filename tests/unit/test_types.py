"""Tests for core types and errors."""

import pytest

from ai_agent.core.errors import (
    AgentError,
    ApiTransportError,
    ArgumentCountMismatchError,
    ConfigurationError,
    FatalInterruptError,
    NoAcceptableCandidateError,
    SchemaCompilationError,
)
from ai_agent.core.types import (
    AgentMessage,
    AgentRequest,
    AgentResult,
    Candidate,
    FunctionCall,
    FunctionSpec,
    Role,
)
from ai_agent.prompts.prompt import AgentPrompt


class TestFunctionCall:
    """Tests for FunctionCall."""

    def test_from_dict_defaults_arguments(self) -> None:
        """Test missing arguments become an empty object."""
        assert FunctionCall.from_dict({"name": "ping"}) == FunctionCall("ping", "{}")
        assert FunctionCall.from_dict({"name": "ping", "arguments": None}).arguments == "{}"

    def test_to_dict(self) -> None:
        """Test the wire form."""
        assert FunctionCall("rate", '{"x": 1}').to_dict() == {"name": "rate", "arguments": '{"x": 1}'}


class TestAgentMessage:
    """Tests for AgentMessage."""

    def test_unset_fields_are_omitted(self) -> None:
        """Test to_dict only includes set fields."""
        assert AgentMessage(Role.USER, "hi").to_dict() == {"role": "user", "content": "hi"}

    def test_function_result_message(self) -> None:
        """Test function messages carry their name."""
        message = AgentMessage(Role.FUNCTION, "42", name="answer")

        assert message.to_dict() == {"role": "function", "content": "42", "name": "answer"}


class TestCandidate:
    """Tests for Candidate."""

    def test_text_choice(self) -> None:
        """Test a text choice has no function call."""
        candidate = Candidate.from_choice(0, {"message": {"role": "assistant", "content": "Hi"}})

        assert candidate.content == "Hi"
        assert not candidate.is_function_call

    def test_function_choice(self) -> None:
        """Test a function call choice."""
        candidate = Candidate.from_choice(
            2,
            {
                "message": {
                    "content": None,
                    "function_call": {"name": "rate", "arguments": '{"score": 2}'},
                }
            },
        )

        assert candidate.index == 2
        assert candidate.is_function_call
        assert candidate.function_call == FunctionCall("rate", '{"score": 2}')

    def test_choice_without_message(self) -> None:
        """Test a malformed choice becomes an empty text candidate."""
        candidate = Candidate.from_choice(0, {})

        assert candidate.content is None
        assert not candidate.is_function_call


class TestFunctionSpec:
    """Tests for FunctionSpec."""

    def test_wire_projection_omits_empty_fields(self) -> None:
        """Test description and parameters are only sent when present."""
        assert FunctionSpec("ping", lambda: None).to_wire() == {"name": "ping"}

    def test_required_from_schema(self) -> None:
        """Test required names come from the compiled schema."""
        spec = FunctionSpec(
            "rate",
            lambda score, note=None: score,
            parameters={
                "type": "object",
                "properties": {"score": {"type": "number"}, "note": {"type": "string"}},
                "required": ["score"],
            },
        )

        assert spec.required == ["score"]
        assert spec.argument_names == ["score", "note"]


class TestAgentRequest:
    """Tests for AgentRequest quota validation."""

    def test_defaults(self) -> None:
        """Test a default request needs one accepted candidate."""
        request = AgentRequest(prompt=AgentPrompt("Task"))

        request.validate()

        assert request.required_count == 1
        assert not request.is_function_call

    @pytest.mark.parametrize(
        "n,min,required",
        [(3, 2, 1), (3, 3, 3), (5, None, 5), (1, 1, None)],
    )
    def test_valid_quotas(self, n, min, required) -> None:
        """Test consistent quotas pass."""
        AgentRequest(prompt=AgentPrompt("Task"), n=n, min=min, required=required).validate()

    @pytest.mark.parametrize(
        "n,min,required,message",
        [
            (1, None, 2, "required 2 > n 1"),
            (3, 1, 2, "required 2 > min 1"),
            (2, 3, None, "min 3 > n 2"),
            (0, None, 0, "n 0 < 1"),
        ],
    )
    def test_invalid_quotas(self, n, min, required, message) -> None:
        """Test inconsistent quotas raise ConfigurationError."""
        request = AgentRequest(prompt=AgentPrompt("Task"), n=n, min=min, required=required)

        with pytest.raises(ConfigurationError, match=message):
            request.validate()


class TestAgentResult:
    """Tests for AgentResult."""

    def test_text_result(self) -> None:
        """Test text results carry no function call."""
        result = AgentResult("hello")

        assert result.value == "hello"
        assert result.function_call is None


class TestErrors:
    """Tests for the error taxonomy."""

    def test_all_errors_are_agent_errors(self) -> None:
        """Test every error derives from AgentError."""
        for error in (
            SchemaCompilationError("x"),
            ArgumentCountMismatchError("f", "2", 1),
            FatalInterruptError("stop"),
            ApiTransportError({"message": "down"}),
            ConfigurationError("bad"),
            NoAcceptableCandidateError(),
        ):
            assert isinstance(error, AgentError)

    def test_only_interrupt_is_fatal(self) -> None:
        """Test the fatal flag."""
        assert FatalInterruptError("stop").fatal
        assert not ConfigurationError("bad").fatal
        assert not ApiTransportError("down").fatal

    def test_api_error_message(self) -> None:
        """Test the provider message is used as the error text."""
        error = ApiTransportError({"message": "Invalid API key", "code": "invalid_api_key"})

        assert str(error) == "Invalid API key"
        assert error.error["code"] == "invalid_api_key"

    def test_argument_count_message(self) -> None:
        """Test the mismatch message names the function."""
        error = ArgumentCountMismatchError("rate", "1..2", 3)

        assert str(error) == "Wrong number of arguments for rate, expected 1..2 got 3"

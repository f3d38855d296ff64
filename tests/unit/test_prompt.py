"""Tests for AgentPrompt."""

from pathlib import Path

from ai_agent.core.types import AgentMessage, FunctionCall, Role
from ai_agent.prompts.prompt import FUNCTION_TERMINAL_PROMPT, AgentPrompt


class TestPrepareMessages:
    """Tests for building the message list."""

    def test_text_request(self) -> None:
        """Test a text request has a system and a user message."""
        prompt = AgentPrompt("Agent: Perform a given task")

        messages = prompt.prepare_messages("Hello", [])

        assert messages == [
            {"role": "system", "content": "Agent: Perform a given task"},
            {"role": "user", "content": "Hello"},
        ]

    def test_function_request_adds_terminal_prompt(self) -> None:
        """Test function requests end with the terminal system message."""
        prompt = AgentPrompt("Select records").add_agent_message("Working on it")

        messages = prompt.prepare_messages("records", ["select_records"])

        assert [m["role"] for m in messages] == ["system", "user", "assistant", "system"]
        assert messages[-1]["content"] == FUNCTION_TERMINAL_PROMPT

    def test_structured_input_is_json(self) -> None:
        """Test dict and list input is JSON-encoded."""
        prompt = AgentPrompt("Task")

        assert prompt.prepare_messages({"id": 1}, [])[1]["content"] == '{"id": 1}'
        assert prompt.prepare_messages([1, 2], [])[1]["content"] == "[1, 2]"

    def test_none_input_is_empty_message(self) -> None:
        """Test a missing input still produces a user message."""
        messages = AgentPrompt("Task").prepare_messages(None, [])

        assert messages[1] == {"role": "user", "content": ""}

    def test_system_message_always_sent_by_default(self) -> None:
        """Test the system message is present even for an empty prompt."""
        messages = AgentPrompt("").prepare_messages("Hello", ["select_records"])

        assert messages[0] == {"role": "system", "content": ""}

    def test_prompt_hook_returning_none_drops_system_message(self) -> None:
        """Test a prepare_prompt override can leave the system message out."""

        class UserOnlyPrompt(AgentPrompt):
            def prepare_prompt(self, prompt, input, for_functions):
                return None

        messages = UserOnlyPrompt("unused").prepare_messages("Hello", [])

        assert messages == [{"role": "user", "content": "Hello"}]

    def test_hooks_can_be_overridden(self) -> None:
        """Test subclasses control how input becomes messages."""

        class BatchPrompt(AgentPrompt):
            def prepare_input(self, input, for_functions):
                return [f"Item: {item}" for item in input]

            def prepare_terminal_prompt(self, input, for_functions):
                return "Answer for every item."

        messages = BatchPrompt("Judge items").prepare_messages(["a", "b"], [])

        assert messages == [
            {"role": "system", "content": "Judge items"},
            {"role": "user", "content": "Item: a"},
            {"role": "user", "content": "Item: b"},
            {"role": "system", "content": "Answer for every item."},
        ]


class TestMessages:
    """Tests for adding conversation messages."""

    def test_add_messages_returns_copy(self) -> None:
        """Test mutators leave the original prompt unchanged."""
        original = AgentPrompt("Task")

        extended = original.add_user_message("more").add_system_message("rules")

        assert original.get_messages() == []
        assert extended.get_messages() == [
            AgentMessage(Role.USER, "more"),
            AgentMessage(Role.SYSTEM, "rules"),
        ]

    def test_function_messages(self) -> None:
        """Test function call and function result messages."""
        call = FunctionCall("rate", '{"score": 5}')

        prompt = AgentPrompt("Task").add_agent_function_result(call).add_function_message("rate", "ok")

        assert [m.to_dict() for m in prompt.get_messages()] == [
            {"role": "assistant", "function_call": {"name": "rate", "arguments": '{"score": 5}'}},
            {"role": "function", "content": "ok", "name": "rate"},
        ]

    def test_clear_messages(self) -> None:
        """Test clearing keeps the system prompt."""
        prompt = AgentPrompt("Task").add_user_message("x").clear_messages()

        assert prompt.get_messages() == []
        assert prompt.get_prompt() == "Task"


class TestPlaceholders:
    """Tests for {{placeholder}} handling."""

    def test_set_replaces_every_occurrence(self) -> None:
        """Test all occurrences of a placeholder are replaced."""
        prompt = AgentPrompt("{{name}} likes {{food}}. {{name}} eats daily.")

        result = prompt.set({"name": "Ada", "food": "pie"})

        assert result.get_prompt() == "Ada likes pie. Ada eats daily."
        assert prompt.get_prompt() == "{{name}} likes {{food}}. {{name}} eats daily."

    def test_unknown_placeholders_are_left(self) -> None:
        """Test placeholders without a value stay in place."""
        result = AgentPrompt("{{a}} and {{b}}").set({"a": 1})

        assert result.get_prompt() == "1 and {{b}}"

    def test_values_with_regex_characters(self) -> None:
        """Test values are inserted literally."""
        result = AgentPrompt("Pattern: {{p}}").set({"p": r"\d+ $1"})

        assert result.get_prompt() == r"Pattern: \d+ $1"

    def test_list_placeholders(self) -> None:
        """Test placeholder names are listed once in order."""
        prompt = AgentPrompt("{{b}} {{a}} {{b}} {c}")

        assert prompt.list_placeholders() == ["b", "a"]


class TestConstruction:
    """Tests for creating prompts."""

    def test_from_string(self) -> None:
        """Test building from a string."""
        assert AgentPrompt.from_string("Hi").get_prompt() == "Hi"

    def test_from_file(self, tmp_path: Path) -> None:
        """Test loading the system prompt from a file."""
        path = tmp_path / "prompt.txt"
        path.write_text("Summarize {{topic}}", encoding="utf-8")

        prompt = AgentPrompt.from_file(path)

        assert prompt.list_placeholders() == ["topic"]

    def test_copy_is_equal(self) -> None:
        """Test copies compare equal."""
        prompt = AgentPrompt("Task").add_user_message("x")

        assert prompt.copy() == prompt

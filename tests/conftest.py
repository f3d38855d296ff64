"""Shared test fixtures."""

import pytest

from ai_agent.agent.engine import Agent
from ai_agent.core.errors import FatalInterruptError
from ai_agent.llm.mock import MockTransport
from ai_agent.llm.options import AgentOptions
from ai_agent.prompts.prompt import AgentPrompt


class RecordAgent(Agent):
    """Agent selecting truthful records, as used across the tests."""

    PROMPT = (
        "Agent: You are presented with a list of records. Select the IDs of "
        "records that are truthful and make logical sense."
    )

    def __init__(self, transport: MockTransport, options: AgentOptions | None = None) -> None:
        super().__init__(transport, AgentPrompt.from_string(self.PROMPT), options)
        self.calls: list[tuple[str, tuple]] = []
        self.register_function(
            self.select_records,
            "select_records",
            "Call this function to select record IDs that are truthful",
        )
        self.register_function(
            self.async_select_records,
            "async_select_records",
            "Call this function to select record IDs that are truthful",
        )
        self.register_function(self.reject, "reject", "Call this function to refuse the task")

    def select_records(self, truthful_ids: list[int], untruthful_ids: list[int]) -> list[int]:
        self.calls.append(("select_records", (truthful_ids, untruthful_ids)))
        for record_id in [*truthful_ids, *untruthful_ids]:
            if record_id < 0 or record_id > 4:
                raise ValueError(f"Rejected {record_id}")
        for record_id in truthful_ids:
            if record_id in untruthful_ids:
                raise ValueError(f"Rejected {record_id}")
        return truthful_ids

    async def async_select_records(self, truthful: list[int], untruthful: list[int]) -> list[int]:
        return self.select_records(truthful, untruthful)

    def reject(self, reason: str) -> str:
        self.calls.append(("reject", (reason,)))
        raise FatalInterruptError(f"Rejected {reason}")


@pytest.fixture
def sample_records() -> list[dict]:
    """Records the model is asked to judge."""
    return [
        {"id": 1, "text": "The moon is made of cheese"},
        {"id": 2, "text": "The moon is made of rock"},
        {"id": 3, "text": "The moon is made of bacteria"},
        {"id": 4, "text": "The moon orbits the earth"},
    ]


@pytest.fixture
def mock_transport() -> MockTransport:
    """Transport without queued responses."""
    return MockTransport([])


@pytest.fixture
def record_agent(mock_transport: MockTransport) -> RecordAgent:
    """Record-selecting agent on the mock transport."""
    return RecordAgent(mock_transport)


@pytest.fixture
def text_agent(mock_transport: MockTransport) -> Agent:
    """Agent without registered functions."""
    return Agent(mock_transport, AgentPrompt.from_string("Agent: Perform a given task"))


@pytest.fixture
def select_choice():
    """Factory for select_records function call choices."""

    def build(truthful: list[int], untruthful: list[int] | None = None) -> dict:
        return MockTransport.function_choice(
            "select_records",
            {"truthful_ids": truthful, "untruthful_ids": untruthful or []},
        )

    return build

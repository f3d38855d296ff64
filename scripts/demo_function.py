#!/usr/bin/env python3
"""
Demo: selecting truthful records with a function-calling agent.

The model is shown four records and must call ``async_select_records``
with the ids it considers truthful. The function validates the ids and
the accepted ids are mapped back to the record texts.

Requires: OPENAI_API_KEY (or ANTHROPIC_API_KEY with --provider claude)

Usage:
    python scripts/demo_function.py
    python scripts/demo_function.py --provider claude --tries 3
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv
load_dotenv()

from ai_agent import (
    Agent,
    AgentOptions,
    AgentPrompt,
    AgentRequestBuilder,
    ChatTransport,
    ClaudeTransport,
    FatalInterruptError,
    OpenAITransport,
)

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

SAMPLE_RECORDS = [
    {"id": 1, "text": "The moon is made of cheese"},
    {"id": 2, "text": "The moon is made of rock"},
    {"id": 3, "text": "The moon is made of bacteria"},
    {"id": 4, "text": "The moon orbits the earth"},
]


class FunctionAgent(Agent):
    PROMPT = (
        "Agent: You are presented with a list of records. Your task is to analyze each "
        "record and select the IDs that correspond to records that are truthful and make "
        "logical sense."
    )

    def __init__(self, transport: ChatTransport, options: AgentOptions = AgentOptions.DEFAULT) -> None:
        super().__init__(transport, AgentPrompt.from_string(self.PROMPT), options)
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

    def select_records(self, truthful_ids: list[int], untruthful_ids: list[int]) -> list[int]:
        for record_id in [*truthful_ids, *untruthful_ids]:
            if record_id < 0 or record_id > 4:
                raise FatalInterruptError(f"Rejected {record_id}")
        # a record cannot be both
        for record_id in truthful_ids:
            if record_id in untruthful_ids:
                raise FatalInterruptError(f"Rejected {record_id}")
        return truthful_ids

    async def async_select_records(self, truthful: list[int], untruthful: list[int]) -> list[int]:
        return self.select_records(truthful, untruthful)


def create_transport(provider: str) -> ChatTransport:
    if provider == "claude":
        return ClaudeTransport()
    return OpenAITransport()


def check_api_key(provider: str) -> bool:
    """Check if the provider's API key is set."""
    key = "ANTHROPIC_API_KEY" if provider == "claude" else "OPENAI_API_KEY"
    if not os.environ.get(key):
        print(f"ERROR: {key} environment variable not set.")
        print("Set it in .env file or export it in your shell.")
        return False
    return True


async def run(provider: str, tries: int) -> list[str]:
    agent = FunctionAgent(create_transport(provider), AgentOptions.from_env())
    results = await (
        AgentRequestBuilder.create(agent)
        .function("async_select_records")
        .with_tries(tries)
        .request(SAMPLE_RECORDS)
    )
    ids = results[0].value
    return [record["text"] for record in SAMPLE_RECORDS if record["id"] in ids]


def main():
    parser = argparse.ArgumentParser(description="Select truthful records with a function-calling agent")
    parser.add_argument(
        "--provider",
        choices=["openai", "claude"],
        default="openai",
        help="Completion API to use (default: openai)",
    )
    parser.add_argument(
        "--tries",
        type=int,
        default=1,
        help="Number of candidates to request; the first valid one wins (default: 1)",
    )
    args = parser.parse_args()

    if not check_api_key(args.provider):
        sys.exit(1)

    try:
        texts = asyncio.run(run(args.provider, args.tries))
    except Exception as e:
        logger.error(f"Error occurred in pipeline: {e}")
        raise
    print(json.dumps(texts, indent=2))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Demo: chaining text requests.

Asks for two sentences about the moon and bacteria, then feeds every
sentence through an explanation step and a conclusion step.

Requires: OPENAI_API_KEY (or ANTHROPIC_API_KEY with --provider claude)

Usage:
    python scripts/demo_chain.py
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
    AgentResult,
    ChatTransport,
    ClaudeTransport,
    OpenAITransport,
)

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


class TaskAgent(Agent):
    PROMPT = "Agent: Perform a given task"

    def __init__(self, transport: ChatTransport, options: AgentOptions = AgentOptions.DEFAULT) -> None:
        super().__init__(transport, AgentPrompt.from_string(self.PROMPT), options)

    def process_text_result(self, text, for_functions) -> AgentResult | None:
        logger.info(f"Processing text result: {text}")
        return super().process_text_result(text, for_functions)


async def run(agent: TaskAgent, topic: str) -> list[str]:
    outputs = []
    async for step1 in AgentRequestBuilder.create(agent).n(2).stream(topic):
        logger.info(f"Step 1: {step1.value}")
        step2 = await AgentRequestBuilder.create(agent).request(f"Explain what it is about?: {step1.value}")
        logger.info(f"Step 2: {step2[0].value}")
        step3 = await AgentRequestBuilder.create(agent).request(f"Make a conclusion from: {step2[0].value}")
        logger.info(f"Step 3: {step3[0].value}")
        outputs.append(step3[0].value)
    return outputs


def main():
    parser = argparse.ArgumentParser(description="Chain text requests through an agent")
    parser.add_argument(
        "--provider",
        choices=["openai", "claude"],
        default="openai",
        help="Completion API to use (default: openai)",
    )
    parser.add_argument(
        "--topic",
        type=str,
        default="Write a sentence about the moon and bacteria",
        help="First task given to the agent",
    )
    args = parser.parse_args()

    key = "ANTHROPIC_API_KEY" if args.provider == "claude" else "OPENAI_API_KEY"
    if not os.environ.get(key):
        print(f"ERROR: {key} environment variable not set.")
        sys.exit(1)

    transport = ClaudeTransport() if args.provider == "claude" else OpenAITransport()
    agent = TaskAgent(transport, AgentOptions.VERBOSE_LONG)
    outputs = asyncio.run(run(agent, args.topic))
    print(json.dumps(outputs, indent=2))


if __name__ == "__main__":
    main()

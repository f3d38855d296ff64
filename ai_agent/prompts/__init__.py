"""Prompt templates for agents."""

from ai_agent.prompts.prompt import AgentPrompt, FUNCTION_TERMINAL_PROMPT

__all__ = ["AgentPrompt", "FUNCTION_TERMINAL_PROMPT"]

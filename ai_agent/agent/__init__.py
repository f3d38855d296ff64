"""Agent, function registry and request builder."""

from .registry import FunctionRegistry
from .engine import Agent, RequestState
from .request import AgentRequestBuilder

__all__ = [
    "FunctionRegistry",
    "Agent",
    "RequestState",
    "AgentRequestBuilder",
]

"""Function-calling agents on top of chat completion APIs."""

from ai_agent.core import (
    AgentMessage,
    AgentRequest,
    AgentResult,
    FunctionCall,
    FunctionSpec,
    Role,
    AgentError,
    SchemaCompilationError,
    UnknownFunctionError,
    ArgumentCountMismatchError,
    ArgumentParseError,
    FatalInterruptError,
    ApiTransportError,
    ConfigurationError,
    NoAcceptableCandidateError,
)
from ai_agent.schema import compile_descriptor, describe_callable
from ai_agent.llm import (
    AgentOptions,
    ChatTransport,
    ClaudeTransport,
    MockTransport,
    Models,
    OpenAITransport,
)
from ai_agent.prompts import AgentPrompt
from ai_agent.agent import Agent, AgentRequestBuilder, FunctionRegistry

__version__ = "0.2.0"

__all__ = [
    "Agent",
    "AgentRequestBuilder",
    "FunctionRegistry",
    "AgentPrompt",
    "AgentOptions",
    "Models",
    "ChatTransport",
    "OpenAITransport",
    "ClaudeTransport",
    "MockTransport",
    "AgentMessage",
    "AgentRequest",
    "AgentResult",
    "FunctionCall",
    "FunctionSpec",
    "Role",
    "compile_descriptor",
    "describe_callable",
    "AgentError",
    "SchemaCompilationError",
    "UnknownFunctionError",
    "ArgumentCountMismatchError",
    "ArgumentParseError",
    "FatalInterruptError",
    "ApiTransportError",
    "ConfigurationError",
    "NoAcceptableCandidateError",
]

"""Core types and errors for the agent framework."""

from .types import (
    Role,
    FunctionCall,
    AgentMessage,
    AgentResult,
    Candidate,
    FunctionSpec,
    AgentRequest,
)
from .errors import (
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

__all__ = [
    "Role",
    "FunctionCall",
    "AgentMessage",
    "AgentResult",
    "Candidate",
    "FunctionSpec",
    "AgentRequest",
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

"""Chat completion transports for various providers."""

from .protocol import ChatTransport
from .options import AgentOptions, Models
from .openai_transport import OpenAITransport
from .claude import ClaudeTransport
from .mock import MockTransport

__all__ = [
    "ChatTransport",
    "AgentOptions",
    "Models",
    "OpenAITransport",
    "ClaudeTransport",
    "MockTransport",
]

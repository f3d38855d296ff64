"""Error taxonomy for the agent framework."""

from typing import Any


class AgentError(Exception):
    """
    Base class for all agent errors.

    The ``fatal`` flag tells the engine whether an error raised while
    processing one candidate aborts the whole request.
    """

    fatal: bool = False

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SchemaCompilationError(AgentError):
    """A type descriptor could not be turned into a JSON schema."""

    def __init__(self, descriptor: Any, context_name: str = "", reason: str = "") -> None:
        self.descriptor = descriptor
        self.context_name = context_name
        message = f"Unknown type {descriptor!r}"
        if context_name:
            message += f" in function {context_name}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnknownFunctionError(AgentError):
    """Dispatch was attempted for a name that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown function {name}")


class ArgumentCountMismatchError(AgentError):
    """The number of supplied arguments does not fit the function."""

    def __init__(self, name: str, expected: str, got: int, detail: str = "") -> None:
        self.name = name
        self.expected = expected
        self.got = got
        message = f"Wrong number of arguments for {name}, expected {expected} got {got}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class ArgumentParseError(AgentError):
    """A function call carried arguments that are not a JSON object."""

    def __init__(self, name: str, raw_arguments: str | None, reason: str) -> None:
        self.name = name
        self.raw_arguments = raw_arguments
        super().__init__(f"Invalid arguments for {name}: {reason}")


class FatalInterruptError(AgentError):
    """
    Raised by a registered function to abort the entire request.

    Unlike every other error kind, this one is never recorded and skipped:
    remaining candidates are not inspected and the error reaches the caller.
    """

    fatal = True


class ApiTransportError(AgentError):
    """Wraps a failure of the completion API call."""

    def __init__(self, error: Any) -> None:
        self.error = error
        if isinstance(error, dict):
            message = str(error.get("message", error))
        else:
            message = str(error)
        super().__init__(message)


class ConfigurationError(AgentError):
    """A request was configured with inconsistent quotas or no messages."""


class NoAcceptableCandidateError(AgentError):
    """No candidate was accepted and no more specific error was recorded."""

    def __init__(self, message: str = "No function call found") -> None:
        super().__init__(message)

"""Core dataclasses for the agent framework."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from ..prompts.prompt import AgentPrompt
    from ..schema.descriptors import Member

T = TypeVar("T")


class Role(str, Enum):
    """Chat message roles understood by the completion API."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    FUNCTION = "function"


@dataclass(frozen=True)
class FunctionCall:
    """A function invocation emitted by the model."""

    name: str
    arguments: str = "{}"  # JSON-encoded object

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "arguments": self.arguments}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FunctionCall":
        return cls(name=data.get("name", ""), arguments=data.get("arguments") or "{}")


@dataclass(frozen=True)
class AgentMessage:
    """A single message of the chat sent to the model."""

    role: Role = Role.SYSTEM
    content: str | None = None
    name: str | None = None
    function_call: FunctionCall | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire form; unset fields are omitted."""
        data: dict[str, Any] = {"role": Role(self.role).value}
        if self.content is not None:
            data["content"] = self.content
        if self.name is not None:
            data["name"] = self.name
        if self.function_call is not None:
            data["function_call"] = self.function_call.to_dict()
        return data


@dataclass(frozen=True)
class AgentResult(Generic[T]):
    """
    An accepted completion.

    ``function_call`` is set only when the value was produced by
    dispatching a registered function.
    """

    value: T
    function_call: FunctionCall | None = None


@dataclass(frozen=True)
class Candidate:
    """One choice returned by the completion API."""

    index: int
    content: str | None = None
    function_call: FunctionCall | None = None

    @property
    def is_function_call(self) -> bool:
        return self.function_call is not None

    @classmethod
    def from_choice(cls, index: int, choice: dict[str, Any]) -> "Candidate":
        message = choice.get("message") or {}
        function_call = message.get("function_call")
        return cls(
            index=index,
            content=message.get("content"),
            function_call=FunctionCall.from_dict(function_call) if function_call else None,
        )


@dataclass(frozen=True)
class FunctionSpec:
    """A registered function with its compiled argument schema."""

    name: str
    func: Callable[..., Any]
    description: str | None = None
    parameters: dict[str, Any] | None = None  # compiled schema, None without params
    members: "tuple[Member, ...]" = ()
    # resolved parameter annotations, used to rebuild dataclass and enum values
    annotations: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
    # values for omitted parameters that have no Python default
    defaults: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def required(self) -> list[str]:
        if self.parameters is None:
            return []
        return list(self.parameters.get("required", []))

    @property
    def argument_names(self) -> list[str]:
        if self.members:
            return [m.name for m in self.members]
        if self.parameters is not None:
            return list(self.parameters.get("properties", {}))
        return []

    def to_wire(self) -> dict[str, Any]:
        """Projection sent in the request's ``functions`` list."""
        data: dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.parameters is not None:
            data["parameters"] = self.parameters
        return data


@dataclass(frozen=True)
class AgentRequest:
    """
    A fully assembled request for the orchestration engine.

    Quotas:
        n: Number of candidates requested from the API.
        min: Stop scanning once this many candidates were accepted.
        required: Number of accepted candidates needed for success (default 1).
    """

    prompt: "AgentPrompt"
    functions: tuple[str, ...] = ()
    input: Any = None
    n: int = 1
    min: int | None = None
    required: int | None = None
    max_tokens: int | None = None

    @property
    def required_count(self) -> int:
        return 1 if self.required is None else self.required

    @property
    def is_function_call(self) -> bool:
        return len(self.functions) > 0

    def validate(self) -> None:
        """
        Check quota invariants.

        Raises:
            ConfigurationError: If required > n, required > min or min > n.
        """
        if self.n < 1:
            raise ConfigurationError(f"n {self.n} < 1")
        required = self.required_count
        if required > self.n:
            raise ConfigurationError(f"required {required} > n {self.n}")
        if self.min is not None:
            if required > self.min:
                raise ConfigurationError(f"required {required} > min {self.min}")
            if self.min > self.n:
                raise ConfigurationError(f"min {self.min} > n {self.n}")

"""Model options for completion requests."""

import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar


class Models(str, Enum):
    """Chat models with function calling support."""

    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"
    GPT_4_1 = "gpt-4.1"
    CLAUDE_SONNET = "claude-sonnet-4-5-20250929"


MODEL_SIZES: dict[str, int] = {
    Models.GPT_4O_MINI.value: 128_000,
    Models.GPT_4O.value: 128_000,
    Models.GPT_4_1.value: 1_047_576,
    Models.CLAUDE_SONNET.value: 200_000,
}

ENV_PREFIX = "AI_AGENT_"


@dataclass(frozen=True)
class AgentOptions:
    """
    Generation options merged into every request of an agent.

    Instances are immutable; the ``adjust_*`` helpers return modified copies.
    """

    temperature: float = 0.8
    top_p: float = 0.9
    max_tokens: int = 2048
    model: str = Models.GPT_4O_MINI.value
    model_size: int | None = field(default=None, compare=False)

    DEFAULT: ClassVar["AgentOptions"]
    PREDICTABLE: ClassVar["AgentOptions"]
    CREATIVE: ClassVar["AgentOptions"]
    CONSERVATIVE: ClassVar["AgentOptions"]
    EXPLORATORY: ClassVar["AgentOptions"]
    VERBOSE: ClassVar["AgentOptions"]
    DEFAULT_STRONG: ClassVar["AgentOptions"]
    PREDICTABLE_STRONG: ClassVar["AgentOptions"]
    CREATIVE_STRONG: ClassVar["AgentOptions"]
    CONSERVATIVE_STRONG: ClassVar["AgentOptions"]
    EXPLORATORY_STRONG: ClassVar["AgentOptions"]
    VERBOSE_STRONG: ClassVar["AgentOptions"]
    DEFAULT_LONG: ClassVar["AgentOptions"]
    PREDICTABLE_LONG: ClassVar["AgentOptions"]
    CREATIVE_LONG: ClassVar["AgentOptions"]
    CONSERVATIVE_LONG: ClassVar["AgentOptions"]
    EXPLORATORY_LONG: ClassVar["AgentOptions"]
    VERBOSE_LONG: ClassVar["AgentOptions"]

    def __post_init__(self) -> None:
        model = self.model.value if isinstance(self.model, Models) else str(self.model)
        object.__setattr__(self, "model", model)
        object.__setattr__(self, "model_size", MODEL_SIZES.get(model))

    def adjust_temperature(self, temperature: float) -> "AgentOptions":
        return replace(self, temperature=temperature)

    def adjust_top_p(self, top_p: float) -> "AgentOptions":
        return replace(self, top_p=top_p)

    def adjust_max_tokens(self, max_tokens: int) -> "AgentOptions":
        return replace(self, max_tokens=max_tokens)

    def adjust_model(self, model: str) -> "AgentOptions":
        return replace(self, model=model)

    def copy(self) -> "AgentOptions":
        return replace(self)

    def to_request_kwargs(self) -> dict[str, Any]:
        """Convert to the option part of a completion request."""
        return {
            "model": self.model,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentOptions":
        """Create AgentOptions from dictionary."""
        data = {k: v for k, v in data.items() if k != "model_size"}
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens,
            "model": self.model,
            "model_size": self.model_size,
        }

    @classmethod
    def from_env(cls, base: "AgentOptions | None" = None) -> "AgentOptions":
        """
        Read overrides from AI_AGENT_MODEL, AI_AGENT_TEMPERATURE,
        AI_AGENT_TOP_P and AI_AGENT_MAX_TOKENS on top of ``base``.
        """
        options = base or cls()
        if model := os.environ.get(f"{ENV_PREFIX}MODEL"):
            options = options.adjust_model(model)
        if temperature := os.environ.get(f"{ENV_PREFIX}TEMPERATURE"):
            options = options.adjust_temperature(float(temperature))
        if top_p := os.environ.get(f"{ENV_PREFIX}TOP_P"):
            options = options.adjust_top_p(float(top_p))
        if max_tokens := os.environ.get(f"{ENV_PREFIX}MAX_TOKENS"):
            options = options.adjust_max_tokens(int(max_tokens))
        return options


AgentOptions.DEFAULT = AgentOptions()
AgentOptions.PREDICTABLE = AgentOptions(0, 1, 2048)
AgentOptions.CREATIVE = AgentOptions(0.8, 0.9, 2048)
AgentOptions.CONSERVATIVE = AgentOptions(0.2, 1, 2048)
AgentOptions.EXPLORATORY = AgentOptions(0.9, 0.5, 2048)
AgentOptions.VERBOSE = AgentOptions(0.5, 0.5, 4096)

AgentOptions.DEFAULT_STRONG = AgentOptions(0.8, 0.9, 2048, Models.GPT_4O.value)
AgentOptions.PREDICTABLE_STRONG = AgentOptions(0, 1, 2048, Models.GPT_4O.value)
AgentOptions.CREATIVE_STRONG = AgentOptions(0.8, 0.9, 2048, Models.GPT_4O.value)
AgentOptions.CONSERVATIVE_STRONG = AgentOptions(0.2, 1, 2048, Models.GPT_4O.value)
AgentOptions.EXPLORATORY_STRONG = AgentOptions(0.9, 0.5, 2048, Models.GPT_4O.value)
AgentOptions.VERBOSE_STRONG = AgentOptions(0.5, 0.5, 4096, Models.GPT_4O.value)

AgentOptions.DEFAULT_LONG = AgentOptions(0.8, 0.9, 4096, Models.GPT_4_1.value)
AgentOptions.PREDICTABLE_LONG = AgentOptions(0, 1, 2048, Models.GPT_4_1.value)
AgentOptions.CREATIVE_LONG = AgentOptions(0.8, 0.9, 2048, Models.GPT_4_1.value)
AgentOptions.CONSERVATIVE_LONG = AgentOptions(0.2, 1, 2048, Models.GPT_4_1.value)
AgentOptions.EXPLORATORY_LONG = AgentOptions(0.9, 0.5, 2048, Models.GPT_4_1.value)
AgentOptions.VERBOSE_LONG = AgentOptions(0.5, 0.5, 4096, Models.GPT_4_1.value)

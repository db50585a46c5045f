"""AgentSpec value object — which agent the fixture is benchmarked against."""

from typing import Literal

from pydantic import BaseModel, Field

type AgentType = Literal[
    "claude_code",
    "codex",
    "gemini",
    "copilot",
    "opencode",
    "command",
    "claude_agent_sdk",
    "litellm",
]


class AgentSpec(BaseModel, frozen=True):
    """Describes how to invoke the agent under test.

    `command` is only used by the generic `command` agent type: an argv
    template whose items may contain `{prompt}` and `{model}` placeholders.
    """

    type: str = Field(min_length=1)
    model: str | None = Field(default=None, min_length=1)
    args: list[str] = Field(default_factory=list)
    command: list[str] = Field(default_factory=list)
    system_prompt: str | None = None

    def with_model(self, model: str | None) -> "AgentSpec":
        """Return a copy whose model is replaced when `model` is given."""
        if model is None:
            return self
        return self.model_copy(update={"model": model})

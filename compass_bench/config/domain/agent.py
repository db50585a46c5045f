"""Agent invocation parameters supplied by the run configuration."""

from pathlib import Path

from pydantic import BaseModel, Field


class AgentParameters(BaseModel, frozen=True):
    """How the configured agent is invoked for this run.

    `model` overrides the model named by the fixture's agent spec.
    `repo_path`, when set, is copied into a fresh working directory for every
    iteration so that iterations never observe each other's changes.
    """

    model: str | None = Field(default=None, min_length=1)
    allow_full_access: bool = True
    repo_path: Path | None = None
    env: dict[str, str] = Field(default_factory=dict)

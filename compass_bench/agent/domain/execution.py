"""RawExecution value object — the raw outcome of one agent invocation."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ExecutionStatus(StrEnum):
    OK = "OK"
    ERROR = "ERROR"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"


class RawExecution(BaseModel, frozen=True):
    """Immutable value object produced by an AgentInvoker and consumed by the Scorer.

    `transcript` is the agent's textual output. `git_diff` is set by invokers
    that run inside a repository copy and is None otherwise.
    """

    model_config = ConfigDict(frozen=True)

    status: ExecutionStatus
    transcript: str = ""
    git_diff: str | None = None
    exit_code: int | None = None
    duration_ms: int = Field(default=0, ge=0)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is ExecutionStatus.OK

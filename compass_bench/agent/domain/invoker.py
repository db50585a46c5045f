"""AgentInvoker Protocol — structural interface for executing one prompt."""

from typing import Protocol

from compass_bench.agent.domain.execution import RawExecution
from compass_bench.fixture.domain.agent import AgentSpec
from compass_bench.fixture.domain.prompt import PromptSpec


class AgentInvoker(Protocol):
    """Executes one prompt against the agent and reports the raw outcome.

    Implementations never raise for spawn/transport failures or timeouts:
    those are reported as RawExecution(status=ERROR|TIMEOUT). Every process or
    connection opened by invoke() is released before it returns, including
    when the calling task is cancelled (the CancelledError is re-raised after
    cleanup).
    """

    async def invoke(
        self, prompt: PromptSpec, agent: AgentSpec, timeout_seconds: float
    ) -> RawExecution: ...

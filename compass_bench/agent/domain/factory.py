"""AgentInvokerFactory Protocol — structural interface for constructing invokers."""

from typing import Protocol

from compass_bench.agent.domain.invoker import AgentInvoker
from compass_bench.config.domain.agent import AgentParameters
from compass_bench.fixture.domain.agent import AgentSpec


class AgentInvokerFactory(Protocol):
    """Constructs the AgentInvoker for a run from the fixture's agent spec.

    Called once per run, before dispatch. Raises AgentTypeNotSupportedError for
    an unknown agent type.
    """

    def create(self, spec: AgentSpec, parameters: AgentParameters) -> AgentInvoker: ...

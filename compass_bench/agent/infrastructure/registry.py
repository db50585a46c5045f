"""AgentInvokerRegistry — maps AgentSpec.type to the correct AgentInvoker."""

from typing import get_args

import litellm

from compass_bench.agent.domain.invoker import AgentInvoker
from compass_bench.agent.domain.observer import AgentObserver
from compass_bench.agent.infrastructure.claude_sdk import ClaudeAgentSDKInvoker
from compass_bench.agent.infrastructure.cli_agent import ARGV_BUILDERS, CliAgentInvoker
from compass_bench.agent.infrastructure.errors import AgentTypeNotSupportedError
from compass_bench.agent.infrastructure.litellm import LiteLLMAgentInvoker
from compass_bench.config.domain.agent import AgentParameters
from compass_bench.config.infrastructure.errors import ConfigValidationError
from compass_bench.fixture.domain.agent import AgentSpec, AgentType

SUPPORTED_AGENT_TYPES: frozenset[str] = frozenset(get_args(AgentType.__value__))


class RegistryAgentInvokerFactory:
    """Creates the AgentInvoker registered for a fixture's agent type.

    Satisfies the AgentInvokerFactory protocol structurally.
    """

    def __init__(self, observer: AgentObserver) -> None:
        self._observer = observer

    def create(self, spec: AgentSpec, parameters: AgentParameters) -> AgentInvoker:
        """Return the invoker for spec.type.

        Raises:
            AgentTypeNotSupportedError: if spec.type is not a known agent type.
            ConfigValidationError: if the spec is missing a setting its type
                requires (a `command` template, or a model for litellm).
        """
        if spec.type not in SUPPORTED_AGENT_TYPES:
            raise AgentTypeNotSupportedError(agent_type=spec.type)

        if spec.type == "claude_agent_sdk":
            return ClaudeAgentSDKInvoker(parameters=parameters, observer=self._observer)

        if spec.type == "litellm":
            if spec.model is None:
                raise ConfigValidationError(
                    reason="agent type 'litellm' requires a model"
                )
            litellm.suppress_debug_info = True
            return LiteLLMAgentInvoker(observer=self._observer)

        if spec.type == "command" and not spec.command:
            raise ConfigValidationError(
                reason="agent type 'command' requires a non-empty command"
            )

        assert spec.type in ARGV_BUILDERS  # every remaining type is a CLI agent
        return CliAgentInvoker(parameters=parameters, observer=self._observer)

"""Error types raised by agent infrastructure."""

from compass_bench.config.infrastructure.errors import ConfigValidationError
from compass_bench.core.errors import CompassError


class AgentInvocationError(CompassError):
    """Raised inside an invoker when the agent cannot be run or reports an error.

    Never escapes AgentInvoker.invoke(): invokers convert it into a
    RawExecution with status ERROR.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to invoke agent: {reason}")


class AgentTypeNotSupportedError(ConfigValidationError):
    """Raised when the fixture names an agent type no invoker is registered for."""

    def __init__(self, agent_type: str) -> None:
        self.agent_type = agent_type
        super().__init__(reason=f"unsupported agent type '{agent_type}'")

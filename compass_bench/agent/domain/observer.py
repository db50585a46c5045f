"""AgentObserver port — domain events emitted during agent invocations."""

from typing import Protocol


class AgentObserver(Protocol):
    """Observer port for agent domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def agent_invocation_started(
        self, prompt_id: str, agent_type: str, model: str | None
    ) -> None: ...

    def agent_invocation_completed(
        self, prompt_id: str, duration_ms: int, exit_code: int | None
    ) -> None: ...

    def agent_invocation_timed_out(
        self, prompt_id: str, timeout_seconds: float
    ) -> None: ...

    def agent_invocation_failed(self, prompt_id: str, reason: str) -> None: ...

    def agent_invocation_cancelled(self, prompt_id: str) -> None: ...

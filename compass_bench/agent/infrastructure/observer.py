"""Structlog implementation of the AgentObserver port."""

import structlog


class StructlogAgentObserver:
    """Delegates agent domain events to structlog.

    Satisfies the AgentObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def agent_invocation_started(
        self, prompt_id: str, agent_type: str, model: str | None
    ) -> None:
        self._log.info(
            "agent.invocation_started",
            prompt_id=prompt_id,
            agent_type=agent_type,
            model=model,
        )

    def agent_invocation_completed(
        self, prompt_id: str, duration_ms: int, exit_code: int | None
    ) -> None:
        self._log.info(
            "agent.invocation_completed",
            prompt_id=prompt_id,
            duration_ms=duration_ms,
            exit_code=exit_code,
        )

    def agent_invocation_timed_out(
        self, prompt_id: str, timeout_seconds: float
    ) -> None:
        self._log.warning(
            "agent.invocation_timed_out",
            prompt_id=prompt_id,
            timeout_seconds=timeout_seconds,
        )

    def agent_invocation_failed(self, prompt_id: str, reason: str) -> None:
        self._log.error("agent.invocation_failed", prompt_id=prompt_id, reason=reason)

    def agent_invocation_cancelled(self, prompt_id: str) -> None:
        self._log.info("agent.invocation_cancelled", prompt_id=prompt_id)

"""Structlog implementation of the FixtureObserver port."""

import structlog


class StructlogFixtureObserver:
    """Delegates fixture domain events to structlog.

    Satisfies the FixtureObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def fixture_loading_started(self, path: str) -> None:
        self._log.info("fixture.loading_started", path=path)

    def fixture_loading_completed(
        self, path: str, total_prompts: int, agent_type: str
    ) -> None:
        self._log.info(
            "fixture.loading_completed",
            path=path,
            total_prompts=total_prompts,
            agent_type=agent_type,
        )

    def fixture_loading_failed(self, path: str, reason: str) -> None:
        self._log.error("fixture.loading_failed", path=path, reason=reason)

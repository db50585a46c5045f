"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, fixture: str, iterations: int, concurrency: int) -> None:
        self._log.info(
            "config.loaded",
            fixture=fixture,
            iterations=iterations,
            concurrency=concurrency,
        )

    def config_full_access_warning(self) -> None:
        self._log.warning(
            "config.full_access_warning",
            message="Agents run with full access to their working directory",
        )

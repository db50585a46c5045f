"""Observer port for the fixture domain — defines events in domain language."""

from typing import Protocol


class FixtureObserver(Protocol):
    def fixture_loading_started(self, path: str) -> None: ...

    def fixture_loading_completed(
        self, path: str, total_prompts: int, agent_type: str
    ) -> None: ...

    def fixture_loading_failed(self, path: str, reason: str) -> None: ...

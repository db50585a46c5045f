"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(
        self, fixture: str, iterations: int, concurrency: int
    ) -> None: ...

    def config_full_access_warning(self) -> None: ...

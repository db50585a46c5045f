"""Fake ConfigObserver for use in tests — records events without mocking."""


class FakeConfigObserver:
    def __init__(self) -> None:
        self.loaded: list[dict[str, str]] = []
        self.full_access_warnings = 0

    def config_loaded(self, fixture: str, iterations: int, concurrency: int) -> None:
        self.loaded.append(
            {
                "fixture": fixture,
                "iterations": str(iterations),
                "concurrency": str(concurrency),
            }
        )

    def config_full_access_warning(self) -> None:
        self.full_access_warnings += 1

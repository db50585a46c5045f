"""Error types raised by fixture infrastructure."""

from pathlib import Path

from compass_bench.core.errors import CompassError


class FixtureLoadError(CompassError):
    """Raised when a fixture cannot be loaded. Fatal, raised before dispatch."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load fixture: {reason}")


class FixtureNotFoundError(FixtureLoadError):
    """Raised when the fixture file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(path=path, reason=f"file not found: {path}")


class FixtureParseError(FixtureLoadError):
    """Raised when the fixture is not valid JSON/YAML or violates the schema."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(path=path, reason=f"invalid fixture {path}: {detail}")

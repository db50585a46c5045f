"""FixtureLoader Protocol — structural interface for loading a fixture."""

from pathlib import Path
from typing import Protocol

from compass_bench.fixture.domain.fixture import Fixture


class FixtureLoader(Protocol):
    """Loads the Fixture referenced by a run config.

    Implementations raise FixtureNotFoundError or FixtureParseError.
    """

    def load(self, ref: Path) -> Fixture: ...

"""Error types raised by scoring infrastructure."""

from compass_bench.core.errors import CompassError


class ScoringError(CompassError):
    """Raised when an execution cannot be scored against its criteria.

    Recovered per task by the scheduler: the iteration is recorded as FAIL.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to score execution: {reason}")

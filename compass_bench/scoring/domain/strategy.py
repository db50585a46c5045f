"""ScoringStrategy Protocol — one comparison per criteria kind."""

from typing import Any, Protocol

from compass_bench.agent.domain.execution import RawExecution


class ScoringStrategy(Protocol):
    """Computes raw points for one criteria kind.

    `kind` is the value of the criteria's `kind` discriminator this strategy
    handles. Implementations must be pure: the same criteria and execution
    always yield the same points. Values outside [0, 1] are clamped by the
    Scorer.
    """

    kind: str

    def points(self, criteria: Any, execution: RawExecution) -> float: ...

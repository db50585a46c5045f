"""Scorer — maps a RawExecution plus expected criteria to a Score."""

import math
from collections.abc import Iterable

from compass_bench.agent.domain.execution import ExecutionStatus, RawExecution
from compass_bench.config.domain.scoring import ScoringConfig
from compass_bench.fixture.domain.criteria import Criteria
from compass_bench.scoring.domain.score import Classification, Score
from compass_bench.scoring.domain.strategy import ScoringStrategy
from compass_bench.scoring.infrastructure.errors import ScoringError
from compass_bench.scoring.infrastructure.strategies import BUILTIN_STRATEGIES

_FORCED_FAIL = Score(classification=Classification.FAIL, points=0.0)


class Scorer:
    """Pure, synchronous classifier polymorphic over criteria kind.

    Strategies are looked up by the criteria's `kind` discriminator, so a new
    kind only needs a new criteria model and a strategy registered here.
    """

    def __init__(
        self,
        config: ScoringConfig | None = None,
        strategies: Iterable[ScoringStrategy] = BUILTIN_STRATEGIES,
    ) -> None:
        self._config = config or ScoringConfig()
        self._strategies: dict[str, ScoringStrategy] = {
            strategy.kind: strategy for strategy in strategies
        }

    def classify(self, criteria: Criteria, execution: RawExecution) -> Score:
        """Score one execution.

        Any status other than OK is a forced FAIL with zero points, whatever
        the transcript says.

        Raises:
            ScoringError: if no strategy handles the criteria kind, or the
                strategy cannot produce a numeric score.
        """
        if execution.status is not ExecutionStatus.OK:
            return _FORCED_FAIL

        strategy = self._strategies.get(criteria.kind)
        if strategy is None:
            raise ScoringError(reason=f"no strategy for criteria kind '{criteria.kind}'")

        raw = strategy.points(criteria, execution)
        if math.isnan(raw):
            raise ScoringError(reason=f"strategy '{criteria.kind}' returned NaN")

        points = min(1.0, max(0.0, raw))
        return Score(classification=self.classification_for(points), points=points)

    def classification_for(self, points: float) -> Classification:
        if points >= self._config.success_threshold:
            return Classification.SUCCESS
        if points > self._config.partial_threshold:
            return Classification.PARTIAL
        return Classification.FAIL

"""Result models — per-iteration results, per-prompt aggregates and the run result."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from compass_bench.scoring.domain.score import Classification, Score

CANCELLED_PREFIX = "cancelled: "

_PAYLOAD_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class IterationResult(BaseModel):
    """Outcome of one dispatched (or cancelled) iteration.

    `cancelled` marks entries that never produced a scored execution because
    the run was cancelled. It is not serialized; the marker in the payload is
    the `cancelled: ` prefix of `error`.
    """

    model_config = _PAYLOAD_CONFIG

    prompt_id: str
    iteration: int = Field(ge=1)
    classification: Classification
    points: float = Field(ge=0.0, le=1.0)
    error: str | None = None
    cancelled: bool = Field(default=False, exclude=True)

    @classmethod
    def scored(
        cls, prompt_id: str, iteration: int, score: Score, error: str | None = None
    ) -> "IterationResult":
        return cls(
            prompt_id=prompt_id,
            iteration=iteration,
            classification=score.classification,
            points=score.points,
            error=error,
        )

    @classmethod
    def failed(cls, prompt_id: str, iteration: int, reason: str) -> "IterationResult":
        return cls(
            prompt_id=prompt_id,
            iteration=iteration,
            classification=Classification.FAIL,
            points=0.0,
            error=reason,
        )

    @classmethod
    def cancelled_marker(
        cls, prompt_id: str, iteration: int, reason: str
    ) -> "IterationResult":
        return cls(
            prompt_id=prompt_id,
            iteration=iteration,
            classification=Classification.FAIL,
            points=0.0,
            error=f"{CANCELLED_PREFIX}{reason}",
            cancelled=True,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AggregatedResult(BaseModel):
    """Per-prompt reduction: number of folded results and their mean points."""

    model_config = _PAYLOAD_CONFIG

    prompt_id: str
    iterations: int = Field(ge=1)
    average_points: float = Field(ge=0.0, le=1.0)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class RunnerResult(BaseModel):
    """Everything a run produced, in fixture order then iteration order.

    `cancelled` is True when the run's cancellation token fired before every
    task had finished.
    """

    model_config = _PAYLOAD_CONFIG

    run_id: str = Field(min_length=1)
    iteration_results: list[IterationResult]
    aggregated_results: list[AggregatedResult]
    cancelled: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Serialized form consumed by presentation layers (camelCase keys)."""
        return {
            "iterationResults": [result.to_payload() for result in self.iteration_results],
            "aggregatedResults": [
                aggregate.to_payload() for aggregate in self.aggregated_results
            ],
        }

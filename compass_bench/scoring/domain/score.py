"""Classification and Score — the outcome of scoring one iteration."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Classification(StrEnum):
    """Closed three-valued outcome category. Serialized as the literal value."""

    SUCCESS = "SUCCESS"
    PARTIAL = "PARTIAL"
    FAIL = "FAIL"


class Score(BaseModel):
    """Immutable scoring outcome. `classification` is always derived from
    `points` (or a forced-FAIL status) by the Scorer, never chosen freely.
    """

    model_config = ConfigDict(frozen=True)

    classification: Classification
    points: float = Field(ge=0.0, le=1.0)

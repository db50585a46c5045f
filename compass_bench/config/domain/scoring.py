"""Scoring threshold configuration model."""

from pydantic import BaseModel


class ScoringConfig(BaseModel, frozen=True):
    """Thresholds that map clamped points in [0, 1] to a classification.

    points >= success_threshold                     -> SUCCESS
    partial_threshold < points < success_threshold  -> PARTIAL
    otherwise                                       -> FAIL

    The ordering constraint between the two thresholds is checked by
    `validate_run_config`, not here, so invalid values surface as a
    ConfigValidationError alongside every other config problem.
    """

    success_threshold: float = 1.0
    partial_threshold: float = 0.0

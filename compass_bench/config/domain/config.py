"""Top-level RunConfig aggregate — the root configuration object of a run."""

from pathlib import Path

from pydantic import BaseModel, Field

from compass_bench.config.domain.agent import AgentParameters
from compass_bench.config.domain.scoring import ScoringConfig

DEFAULT_ITERATIONS = 1
DEFAULT_CONCURRENCY = 4
DEFAULT_TIMEOUT_SECONDS = 600.0
DEFAULT_CANCEL_GRACE_SECONDS = 10.0


class RunConfig(BaseModel, frozen=True):
    """Root configuration aggregate for one benchmark run.

    Numeric bounds are checked by `validate_run_config` rather than by Field
    constraints, so the runner rejects a bad config with one
    ConfigValidationError before anything is dispatched.
    """

    fixture: Path
    iterations: int = DEFAULT_ITERATIONS
    concurrency: int = DEFAULT_CONCURRENCY
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    cancel_grace_seconds: float = DEFAULT_CANCEL_GRACE_SECONDS
    agent: AgentParameters = Field(default_factory=AgentParameters)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)

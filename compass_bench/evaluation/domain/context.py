"""RunContext — per-run collaborators passed explicitly into BenchmarkRunner.run()."""

from dataclasses import dataclass, field

from compass_bench.evaluation.domain.cancellation import CancellationToken
from compass_bench.evaluation.domain.observer import RunObserver


@dataclass(frozen=True)
class RunContext:
    observer: RunObserver
    cancellation: CancellationToken = field(default_factory=CancellationToken)

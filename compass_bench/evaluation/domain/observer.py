"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol


class RunObserver(Protocol):
    """Observer port emitting structured events during a benchmark run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def run_started(
        self,
        run_id: str,
        total_prompts: int,
        iterations: int,
        concurrency: int,
        total_tasks: int,
    ) -> None: ...

    def run_completed(
        self, run_id: str, total_results: int, elapsed_seconds: float
    ) -> None: ...

    def run_cancelled(self, run_id: str, pending: int) -> None: ...

    def run_progress(self, run_id: str, completed: int, total: int) -> None: ...

    def task_started(self, run_id: str, prompt_id: str, iteration: int) -> None: ...

    def task_completed(
        self,
        run_id: str,
        prompt_id: str,
        iteration: int,
        classification: str,
        points: float,
    ) -> None: ...

    def task_failed(
        self, run_id: str, prompt_id: str, iteration: int, reason: str
    ) -> None: ...

    def task_cancelled(self, run_id: str, prompt_id: str, iteration: int) -> None: ...

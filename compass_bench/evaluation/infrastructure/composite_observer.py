"""CompositeRunObserver — fans out all events to a list of observers."""

from compass_bench.evaluation.domain.observer import RunObserver


class CompositeRunObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from RunObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[RunObserver]) -> None:
        self._observers = observers

    def run_started(
        self,
        run_id: str,
        total_prompts: int,
        iterations: int,
        concurrency: int,
        total_tasks: int,
    ) -> None:
        for obs in self._observers:
            obs.run_started(
                run_id=run_id,
                total_prompts=total_prompts,
                iterations=iterations,
                concurrency=concurrency,
                total_tasks=total_tasks,
            )

    def run_completed(
        self, run_id: str, total_results: int, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.run_completed(
                run_id=run_id,
                total_results=total_results,
                elapsed_seconds=elapsed_seconds,
            )

    def run_cancelled(self, run_id: str, pending: int) -> None:
        for obs in self._observers:
            obs.run_cancelled(run_id=run_id, pending=pending)

    def run_progress(self, run_id: str, completed: int, total: int) -> None:
        for obs in self._observers:
            obs.run_progress(run_id=run_id, completed=completed, total=total)

    def task_started(self, run_id: str, prompt_id: str, iteration: int) -> None:
        for obs in self._observers:
            obs.task_started(run_id=run_id, prompt_id=prompt_id, iteration=iteration)

    def task_completed(
        self,
        run_id: str,
        prompt_id: str,
        iteration: int,
        classification: str,
        points: float,
    ) -> None:
        for obs in self._observers:
            obs.task_completed(
                run_id=run_id,
                prompt_id=prompt_id,
                iteration=iteration,
                classification=classification,
                points=points,
            )

    def task_failed(
        self, run_id: str, prompt_id: str, iteration: int, reason: str
    ) -> None:
        for obs in self._observers:
            obs.task_failed(
                run_id=run_id, prompt_id=prompt_id, iteration=iteration, reason=reason
            )

    def task_cancelled(self, run_id: str, prompt_id: str, iteration: int) -> None:
        for obs in self._observers:
            obs.task_cancelled(run_id=run_id, prompt_id=prompt_id, iteration=iteration)

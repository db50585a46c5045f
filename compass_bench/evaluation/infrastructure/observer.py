"""StructlogRunObserver — production observer that delegates to structlog."""

import structlog


class StructlogRunObserver:
    """Logs run domain events to structlog.

    Does NOT inherit from RunObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_started(
        self,
        run_id: str,
        total_prompts: int,
        iterations: int,
        concurrency: int,
        total_tasks: int,
    ) -> None:
        self._log.info(
            "evaluation.run.started",
            run_id=run_id,
            total_prompts=total_prompts,
            iterations=iterations,
            concurrency=concurrency,
            total_tasks=total_tasks,
        )

    def run_completed(
        self, run_id: str, total_results: int, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "evaluation.run.completed",
            run_id=run_id,
            total_results=total_results,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def run_cancelled(self, run_id: str, pending: int) -> None:
        self._log.warning("evaluation.run.cancelled", run_id=run_id, pending=pending)

    def run_progress(self, run_id: str, completed: int, total: int) -> None:
        self._log.info(
            "evaluation.run.progress",
            run_id=run_id,
            completed=completed,
            total=total,
            percent=round(100.0 * completed / total, 1) if total else 0.0,
        )

    def task_started(self, run_id: str, prompt_id: str, iteration: int) -> None:
        self._log.info(
            "evaluation.task.started",
            run_id=run_id,
            prompt_id=prompt_id,
            iteration=iteration,
        )

    def task_completed(
        self,
        run_id: str,
        prompt_id: str,
        iteration: int,
        classification: str,
        points: float,
    ) -> None:
        self._log.info(
            "evaluation.task.completed",
            run_id=run_id,
            prompt_id=prompt_id,
            iteration=iteration,
            classification=classification,
            points=points,
        )

    def task_failed(
        self, run_id: str, prompt_id: str, iteration: int, reason: str
    ) -> None:
        self._log.error(
            "evaluation.task.failed",
            run_id=run_id,
            prompt_id=prompt_id,
            iteration=iteration,
            reason=reason,
        )

    def task_cancelled(self, run_id: str, prompt_id: str, iteration: int) -> None:
        self._log.warning(
            "evaluation.task.cancelled",
            run_id=run_id,
            prompt_id=prompt_id,
            iteration=iteration,
        )

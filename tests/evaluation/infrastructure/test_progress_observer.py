"""Tests for ProgressRunObserver counters (rendering disabled)."""

from compass_bench.evaluation.infrastructure.progress_observer import (
    ProgressRunObserver,
)


def _start(observer: ProgressRunObserver, total_tasks: int = 4) -> None:
    observer.run_started(
        run_id="r",
        total_prompts=2,
        iterations=2,
        concurrency=2,
        total_tasks=total_tasks,
    )


class TestCounters:
    """Counters track in-flight work and outcome tallies."""

    def test_task_lifecycle_updates_counters(self) -> None:
        observer = ProgressRunObserver(disabled=True)
        _start(observer)

        observer.task_started(run_id="r", prompt_id="a", iteration=1)
        observer.task_started(run_id="r", prompt_id="a", iteration=2)
        assert observer.inflight == 2

        observer.task_completed(
            run_id="r", prompt_id="a", iteration=1, classification="SUCCESS", points=1.0
        )
        observer.task_completed(
            run_id="r", prompt_id="a", iteration=2, classification="PARTIAL", points=0.5
        )
        observer.task_started(run_id="r", prompt_id="b", iteration=1)
        observer.task_failed(run_id="r", prompt_id="b", iteration=1, reason="boom")
        observer.run_progress(run_id="r", completed=3, total=4)

        assert observer.inflight == 0
        assert observer.completed == 3
        assert observer.tallies == {"success": 1, "partial": 1, "fail": 1}

    def test_run_started_resets_counters(self) -> None:
        observer = ProgressRunObserver(disabled=True)
        _start(observer)
        observer.task_started(run_id="r", prompt_id="a", iteration=1)
        observer.task_failed(run_id="r", prompt_id="a", iteration=1, reason="x")

        _start(observer)

        assert observer.inflight == 0
        assert observer.tallies == {"success": 0, "partial": 0, "fail": 0}

    def test_disabled_observer_completes_without_rendering(self) -> None:
        observer = ProgressRunObserver(disabled=True)
        _start(observer)
        observer.run_cancelled(run_id="r", pending=2)
        observer.task_cancelled(run_id="r", prompt_id="a", iteration=1)

        observer.run_completed(run_id="r", total_results=4, elapsed_seconds=1.0)

        assert observer.completed == 0
